"""History walking and tree diffing services."""

from .commit import fetch_commit_and_parents, fetch_diff
from .diff import Change, DiffFetcher, DiffSnapshot, FileChange, get_changes
from .history import RecursiveCommitFetcher

__all__ = [
    "Change",
    "DiffFetcher",
    "DiffSnapshot",
    "FileChange",
    "RecursiveCommitFetcher",
    "fetch_commit_and_parents",
    "fetch_diff",
    "get_changes",
]

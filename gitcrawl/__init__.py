"""Cancellable commit-history and tree-diff fetchers over a git object store."""

from gitcrawl.config.constants import FETCH_ENTIRE_HISTORY
from gitcrawl.core.fetcher import Fetcher
from gitcrawl.services import (
    DiffFetcher,
    DiffSnapshot,
    FileChange,
    RecursiveCommitFetcher,
    fetch_commit_and_parents,
    fetch_diff,
)
from gitcrawl.store import (
    Blob,
    Commit,
    DulwichObjectStore,
    EntryKind,
    GitCrawlError,
    MalformedAddressError,
    ObjectStore,
    Signature,
    StoreResolutionError,
    Tree,
    TreeEntry,
)

__all__ = [
    "FETCH_ENTIRE_HISTORY",
    "Blob",
    "Commit",
    "DiffFetcher",
    "DiffSnapshot",
    "DulwichObjectStore",
    "EntryKind",
    "Fetcher",
    "FileChange",
    "GitCrawlError",
    "MalformedAddressError",
    "ObjectStore",
    "RecursiveCommitFetcher",
    "Signature",
    "StoreResolutionError",
    "Tree",
    "TreeEntry",
    "fetch_commit_and_parents",
    "fetch_diff",
]

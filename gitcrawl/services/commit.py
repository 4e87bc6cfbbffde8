"""Commit-level entry points for the history and diff fetchers."""

from __future__ import annotations

from gitcrawl.config.constants import COMMIT_PARENTS_SEGMENT, COMMIT_TREE_SEGMENT
from gitcrawl.config.settings import settings
from gitcrawl.services.diff import DiffFetcher, OnDiffUpdate
from gitcrawl.services.history import (
    OnCommitsUpdate,
    OnComplete,
    RecursiveCommitFetcher,
)
from gitcrawl.store.base import ObjectStore
from gitcrawl.store.objects import Commit


def fetch_commit_and_parents(
    store: ObjectStore,
    address: str,
    count_required: int | None,
    on_update: OnCommitsUpdate,
    on_complete: OnComplete | None = None,
) -> RecursiveCommitFetcher:
    """Start collecting the commit at address and its ancestors, newest first.

    count_required=None uses the configured history_count;
    FETCH_ENTIRE_HISTORY walks everything reachable.
    """
    if count_required is None:
        count_required = settings.history_count
    fetcher = RecursiveCommitFetcher(
        store, address, count_required, on_update, on_complete
    )
    fetcher.start()
    return fetcher


def fetch_diff(
    store: ObjectStore,
    commit: Commit,
    on_update: OnDiffUpdate,
    comp_commit: Commit | None = None,
) -> DiffFetcher:
    """Start diffing commit's tree.

    The comparison side is comp_commit's tree when given, otherwise the tree
    of the commit's first parent. A root commit is compared against nothing,
    so all of its files are reported as added.
    """
    base_tree = commit.tree
    comp_tree: str | None
    if comp_commit is not None:
        comp_tree = comp_commit.tree
    elif commit.parents:
        comp_tree = f"{commit.address}/{COMMIT_PARENTS_SEGMENT}/0/{COMMIT_TREE_SEGMENT}"
    else:
        comp_tree = None

    fetcher = DiffFetcher(store, base_tree, comp_tree, on_update)
    fetcher.start()
    return fetcher

"""Tests for fetch_commit_and_parents and fetch_diff."""

import pytest

from gitcrawl.config.constants import FETCH_ENTIRE_HISTORY
from gitcrawl.services.commit import fetch_commit_and_parents, fetch_diff
from gitcrawl.store.dulwich_store import DulwichObjectStore


@pytest.fixture
def history(git_graph):
    """Three linear commits: root -> middle -> head."""
    root = git_graph.commit(
        {"README.md": b"hello\n", "docs": {"intro.md": b"intro\n"}}, timestamp=1_000
    )
    middle = git_graph.commit(
        {"README.md": b"hello world\n", "docs": {"intro.md": b"intro\n"}},
        parents=[root],
        timestamp=2_000,
    )
    head = git_graph.commit(
        {"README.md": b"hello world\n", "docs": {"intro.md": b"intro v2\n"}},
        parents=[middle],
        timestamp=3_000,
    )
    return DulwichObjectStore(git_graph.object_store), root, middle, head


@pytest.mark.asyncio
async def test_fetch_commit_and_parents_is_started(history):
    store, root, middle, head = history
    updates = []
    completed = []

    fetcher = fetch_commit_and_parents(
        store, head, FETCH_ENTIRE_HISTORY, updates.append, lambda: completed.append(True)
    )
    assert fetcher.running is True
    await fetcher

    assert [c.address for c in updates[-1]] == [head, middle, root]
    assert completed == [True]


@pytest.mark.asyncio
async def test_fetch_commit_and_parents_uses_configured_count(history, monkeypatch):
    store, root, middle, head = history
    monkeypatch.setenv("GITCRAWL_HISTORY_COUNT", "2")
    updates = []

    fetcher = fetch_commit_and_parents(store, head, None, updates.append)
    await fetcher

    assert fetcher.count_required == 2
    assert [c.address for c in updates[-1]] == [head, middle]


@pytest.mark.asyncio
async def test_fetch_diff_against_first_parent(history):
    store, root, middle, head = history
    commit = await store.resolve(head)
    snapshots = []

    await fetch_diff(store, commit, snapshots.append)

    changes = snapshots[-1].changes
    assert [(c.full_path, c.status) for c in changes] == [("docs/intro.md", "modified")]
    assert changes[0].change == (b"intro v2\n", b"intro\n")


@pytest.mark.asyncio
async def test_fetch_diff_against_other_commit(history):
    store, root, middle, head = history
    commit = await store.resolve(head)
    comp_commit = await store.resolve(root)
    snapshots = []

    await fetch_diff(store, commit, snapshots.append, comp_commit)

    assert [c.full_path for c in snapshots[-1].changes] == [
        "README.md",
        "docs/intro.md",
    ]


@pytest.mark.asyncio
async def test_fetch_diff_of_root_commit_adds_everything(history):
    store, root, middle, head = history
    commit = await store.resolve(root)
    snapshots = []

    await fetch_diff(store, commit, snapshots.append)

    assert [(c.full_path, c.status) for c in snapshots[-1].changes] == [
        ("README.md", "added"),
        ("docs/intro.md", "added"),
    ]


@pytest.mark.asyncio
async def test_fetch_diff_can_be_cancelled(history):
    store, root, middle, head = history
    commit = await store.resolve(head)
    snapshots = []

    fetcher = fetch_diff(store, commit, snapshots.append)
    fetcher.cancel()
    await fetcher

    assert snapshots == []

"""Shared pytest fixtures for all tests."""

import asyncio
import stat

import pytest
from dulwich.object_store import MemoryObjectStore
from dulwich.objects import S_IFGITLINK
from dulwich.objects import Blob as GitBlob
from dulwich.objects import Commit as GitCommit
from dulwich.objects import Tree as GitTree

from gitcrawl.store.base import ObjectStore, StoreResolutionError
from gitcrawl.store.objects import Blob, Commit, Signature, Tree, TreeEntry


class FakeObjectStore(ObjectStore):
    """In-memory store with per-address delays and failures.

    Records every requested address so tests can check what was fetched.
    """

    def __init__(self) -> None:
        self.objects: dict[str, Commit | Tree | Blob] = {}
        self.delays: dict[str, float] = {}
        self.failures: set[str] = set()
        self.requests: list[str] = []

    async def get_object(self, address: str):
        self.requests.append(address)
        await asyncio.sleep(self.delays.get(address, 0))
        if address in self.failures:
            raise StoreResolutionError(address, "simulated failure")
        try:
            return self.objects[address]
        except KeyError as e:
            raise StoreResolutionError(address, "object not found") from e

    def add(self, obj):
        self.objects[obj.address] = obj
        return obj

    def add_commit(self, address, parents=(), timestamp=0, tree="tree", message=""):
        signature = Signature(
            name="Test User", email="test@example.com", timestamp=timestamp
        )
        return self.add(
            Commit(
                address=address,
                tree=tree,
                parents=tuple(parents),
                author=signature,
                committer=signature,
                message=message,
            )
        )

    def add_file(self, address, content: bytes):
        async def load() -> bytes:
            return content

        return self.add(Blob(address=address, loader=load))

    def add_tree(self, address, entries):
        """entries: list of (name, address, kind) tuples."""
        return self.add(
            Tree(
                address=address,
                entries=tuple(
                    TreeEntry(name=name, address=entry_address, kind=kind)
                    for name, entry_address, kind in entries
                ),
            )
        )


class GitGraphBuilder:
    """Builds real git objects in a dulwich MemoryObjectStore."""

    def __init__(self) -> None:
        self.object_store = MemoryObjectStore()

    def blob(self, content: bytes) -> bytes:
        blob = GitBlob.from_string(content)
        self.object_store.add_object(blob)
        return blob.id

    def tree(self, files: dict) -> bytes:
        """files maps names to bytes (file), dict (directory) or ("gitlink", sha)."""
        tree = GitTree()
        for name, value in files.items():
            if isinstance(value, dict):
                tree.add(name.encode(), stat.S_IFDIR, self.tree(value))
            elif isinstance(value, tuple):
                tree.add(name.encode(), S_IFGITLINK, value[1].encode())
            else:
                tree.add(name.encode(), 0o100644, self.blob(value))
        self.object_store.add_object(tree)
        return tree.id

    def commit(self, files: dict, parents=(), timestamp=1_700_000_000, message="Commit"):
        commit = GitCommit()
        commit.tree = self.tree(files)
        commit.parents = [p.encode() for p in parents]
        commit.author = commit.committer = b"Test User <test@example.com>"
        commit.author_time = commit.commit_time = timestamp
        commit.author_timezone = commit.commit_timezone = 3600
        commit.message = message.encode("utf-8")
        self.object_store.add_object(commit)
        return commit.id.decode()


@pytest.fixture
def fake_store():
    return FakeObjectStore()


@pytest.fixture
def git_graph():
    return GitGraphBuilder()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep GITCRAWL_* variables from the developer's shell out of tests."""
    for key in (
        "GITCRAWL_HISTORY_COUNT",
        "GITCRAWL_LOG_LEVEL",
        "GITCRAWL_LOG_FORMAT",
        "GITCRAWL_LOG_COLORS",
    ):
        monkeypatch.delenv(key, raising=False)

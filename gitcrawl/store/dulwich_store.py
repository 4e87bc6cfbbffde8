"""ObjectStore backed by dulwich, the pure Python git implementation."""

from __future__ import annotations

import asyncio
import stat
from functools import partial
from pathlib import Path
from typing import Any

from dulwich.errors import ObjectFormatException
from dulwich.object_store import BaseObjectStore
from dulwich.objects import S_ISGITLINK, ShaFile
from dulwich.objects import Blob as GitBlob
from dulwich.objects import Commit as GitCommit
from dulwich.objects import Tag as GitTag
from dulwich.objects import Tree as GitTree
from dulwich.repo import Repo

from gitcrawl.store.base import ObjectStore, StoreResolutionError
from gitcrawl.store.objects import (
    Blob,
    Commit,
    EntryKind,
    Signature,
    StoreObject,
    Tree,
    TreeEntry,
    normalize_parents,
    validate_address,
)
from gitcrawl.utils.logger import store_logger

# Lookups are blocking, so they run in worker threads via asyncio.to_thread.


def _entry_kind(mode: int) -> EntryKind:
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if S_ISGITLINK(mode):
        return EntryKind.SUBMODULE
    return EntryKind.FILE


class DulwichObjectStore(ObjectStore):
    """ObjectStore over a dulwich repository or object store.

    Accepts anything exposing dulwich's object store mapping: a ``Repo``,
    a ``MemoryObjectStore``, a ``DiskObjectStore``...
    """

    def __init__(self, source: Repo | BaseObjectStore | Any) -> None:
        self.object_store = getattr(source, "object_store", source)

    @classmethod
    def open(cls, path: str | Path) -> DulwichObjectStore:
        """Open the git repository at path (working tree or bare)."""
        return cls(Repo(str(path)))

    def _load(self, address: str) -> ShaFile:
        sha = validate_address(address).encode("ascii")
        try:
            return self.object_store[sha]
        except KeyError as e:
            raise StoreResolutionError(address, "object not found") from e
        except ObjectFormatException as e:
            raise StoreResolutionError(address, f"corrupt object: {e}") from e

    async def get_object(self, address: str) -> StoreObject:
        obj = await asyncio.to_thread(self._load, address)

        # Annotated tags resolve to the object they point at
        while isinstance(obj, GitTag):
            _type, target = obj.object
            store_logger.debug("Peeling tag", tag=address, target=target.decode())
            obj = await asyncio.to_thread(self._load, target.decode("ascii"))

        if isinstance(obj, GitCommit):
            return self._convert_commit(obj)
        if isinstance(obj, GitTree):
            return self._convert_tree(obj)
        if isinstance(obj, GitBlob):
            blob_id = obj.id.decode("ascii")
            return Blob(address=blob_id, loader=partial(self._fetch_content, blob_id))
        raise StoreResolutionError(
            address, f"unsupported object type {obj.type_name.decode()}"
        )

    async def _fetch_content(self, address: str) -> bytes:
        obj = await asyncio.to_thread(self._load, address)
        if not isinstance(obj, GitBlob):
            raise StoreResolutionError(address, "not a blob")
        return obj.as_raw_string()

    def _convert_commit(self, commit: GitCommit) -> Commit:
        return Commit(
            address=commit.id.decode("ascii"),
            tree=commit.tree.decode("ascii"),
            parents=normalize_parents(commit.parents),
            author=Signature.from_identity(
                commit.author, commit.author_time, commit.author_timezone
            ),
            committer=Signature.from_identity(
                commit.committer, commit.commit_time, commit.commit_timezone
            ),
            message=commit.message.decode("utf-8", errors="replace"),
        )

    def _convert_tree(self, tree: GitTree) -> Tree:
        entries = tuple(
            TreeEntry(
                name=item.path.decode("utf-8", errors="replace"),
                address=item.sha.decode("ascii"),
                kind=_entry_kind(item.mode),
                mode=item.mode,
            )
            for item in tree.items()
        )
        return Tree(address=tree.id.decode("ascii"), entries=entries)

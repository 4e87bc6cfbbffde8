"""Incremental tree diff.

Compares a base tree against an optional comparison tree, descends into
directories that changed and fetches the contents of changed files. Every
fetched change is inserted into a name-sorted list and the whole list is
reported, so a viewer can render the diff while it is still being fetched.

Sibling entries and subtrees are fetched concurrently. Intermediate updates
may therefore arrive in any order; the final list is always sorted by name.
"""

from __future__ import annotations

import asyncio
import bisect
from collections.abc import Callable
from dataclasses import dataclass
from operator import attrgetter

from gitcrawl.config.constants import SUBMODULE_CONTENT_TEMPLATE
from gitcrawl.core.fetcher import Fetcher
from gitcrawl.store.base import ObjectStore, StoreResolutionError
from gitcrawl.store.objects import Blob, EntryKind, Tree, TreeEntry
from gitcrawl.utils.logger import get_logger

logger = get_logger("gitcrawl.services.diff")


@dataclass(frozen=True)
class Change:
    """A name whose entry differs between the base and comparison tree."""

    name: str
    change: tuple[TreeEntry | None, TreeEntry | None]


@dataclass(frozen=True)
class FileChange:
    """Contents of one changed file: (base content, comparison content)."""

    path: str | None
    name: str
    change: tuple[bytes | None, bytes | None]

    @property
    def full_path(self) -> str:
        return f"{self.path}/{self.name}" if self.path else self.name

    @property
    def status(self) -> str:
        base, comp = self.change
        if comp is None:
            return "added"
        if base is None:
            return "deleted"
        return "modified"


@dataclass(frozen=True)
class DiffSnapshot:
    changes: tuple[FileChange, ...]


OnDiffUpdate = Callable[[DiffSnapshot], None]


def _join(path: str | None, name: str) -> str:
    return f"{path}/{name}" if path else name


def _by_name(tree: Tree | None) -> dict[str, TreeEntry]:
    entries: dict[str, TreeEntry] = {}
    if tree is None:
        return entries
    for entry in tree.entries:
        if entry.name in entries:
            logger.warning(
                "Duplicate tree entry name, keeping the last one",
                tree=tree.address,
                name=entry.name,
            )
        entries[entry.name] = entry
    return entries


def get_changes(base: Tree | None, comp: Tree | None) -> list[Change]:
    """Return the entries that were added, deleted or whose address changed.

    Entries are ordered base names first, then names only present in comp.
    """
    base_by_name = _by_name(base)
    comp_by_name = _by_name(comp)

    names: dict[str, None] = dict.fromkeys(base_by_name)
    names.update(dict.fromkeys(comp_by_name))

    changes: list[Change] = []
    for name in names:
        base_entry = base_by_name.get(name)
        comp_entry = comp_by_name.get(name)
        if (
            base_entry is None
            or comp_entry is None
            or base_entry.address != comp_entry.address
        ):
            changes.append(Change(name=name, change=(base_entry, comp_entry)))
    return changes


class DiffFetcher(Fetcher):
    """Fetch the file-level diff between two trees.

    Args:
        store: Object store to resolve trees and files from
        base_tree: Address of the base tree
        comp_tree: Address of the comparison tree; None compares against nothing,
            so every base entry is reported as added
        on_update: Called with the full sorted change list after each new change
    """

    name = "diff"

    def __init__(
        self,
        store: ObjectStore,
        base_tree: str,
        comp_tree: str | None,
        on_update: OnDiffUpdate,
    ) -> None:
        super().__init__()
        self.store = store
        self.base_tree = base_tree
        self.comp_tree = comp_tree
        self.on_update = on_update
        self._changes: list[FileChange] = []

    @property
    def changes(self) -> tuple[FileChange, ...]:
        return tuple(self._changes)

    async def run(self) -> None:
        await self.compare_trees(self.base_tree, self.comp_tree)
        if self.running:
            logger.info(
                "Diff complete",
                base=self.base_tree,
                comp=self.comp_tree,
                changes=len(self._changes),
            )

    async def compare_trees(
        self, base: str | None, comp: str | None, path: str | None = None
    ) -> None:
        if not self.running:
            return

        trees = await asyncio.gather(self._resolve_tree(base), self._resolve_tree(comp))
        changes = get_changes(*trees)
        await asyncio.gather(*(self._process_change(c, path) for c in changes))

    async def _process_change(self, change: Change, path: str | None) -> None:
        if not self.running:
            return

        base, comp = change.change
        base_is_dir = base is not None and base.is_dir()
        comp_is_dir = comp is not None and comp.is_dir()

        # Directory on both sides: drill down
        if base_is_dir and comp_is_dir:
            await self.compare_trees(
                base.address, comp.address, _join(path, change.name)
            )
            return

        if not (base_is_dir or comp_is_dir):
            await self._fetch_files(change.name, (base, comp), path)
            return

        # Directory on one side only: expand it against an empty tree so its
        # files are reported, and report the file (if any) it replaced
        work = [
            self.compare_trees(
                base.address if base_is_dir else None,
                comp.address if comp_is_dir else None,
                _join(path, change.name),
            )
        ]
        files = (None if base_is_dir else base, None if comp_is_dir else comp)
        if files != (None, None):
            work.append(self._fetch_files(change.name, files, path))
        await asyncio.gather(*work)

    async def _fetch_files(
        self,
        name: str,
        entries: tuple[TreeEntry | None, TreeEntry | None],
        path: str | None,
    ) -> None:
        base_content, comp_content = await asyncio.gather(
            *(self._fetch_content(entry) for entry in entries)
        )
        if not self.running:
            return

        bisect.insort(
            self._changes,
            FileChange(path=path, name=name, change=(base_content, comp_content)),
            key=attrgetter("name"),
        )
        self.on_update(DiffSnapshot(changes=tuple(self._changes)))

    async def _resolve_tree(self, address: str | None) -> Tree | None:
        if address is None:
            return None
        obj = await self.guarded(self.store.resolve(address))
        if not isinstance(obj, Tree):
            self.running = False
            raise StoreResolutionError(address, "not a tree")
        return obj

    async def _fetch_content(self, entry: TreeEntry | None) -> bytes | None:
        if entry is None:
            return None
        if entry.kind is EntryKind.SUBMODULE:
            # Gitlinks point into another repository; report the pinned commit
            return SUBMODULE_CONTENT_TEMPLATE.format(address=entry.address).encode()
        obj = await self.guarded(self.store.resolve(entry.address))
        if not isinstance(obj, Blob):
            self.running = False
            raise StoreResolutionError(entry.address, "not a file")
        return await self.guarded(obj.fetch_content())


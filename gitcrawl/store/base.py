"""Object store contract consumed by the fetchers.

Subclasses implement ``get_object`` for a single plain address. ``resolve``
also accepts path addresses and walks them one object at a time:

    <commit>/tree               tree of a commit
    <commit>/parents/0/tree     tree of its first parent
    <tree>/src/main.py          entry lookup by name
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING

from gitcrawl.config.constants import COMMIT_PARENTS_SEGMENT, COMMIT_TREE_SEGMENT

if TYPE_CHECKING:
    from gitcrawl.store.objects import StoreObject


class GitCrawlError(Exception):
    """Base class for gitcrawl errors."""


class StoreResolutionError(GitCrawlError):
    """The store could not resolve an address."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Could not resolve {address}: {reason}")


class MalformedAddressError(GitCrawlError, ValueError):
    """An address failed validation."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Malformed address {address!r}: {reason}")


class ObjectStore(ABC):
    """Asynchronous content-addressed object lookup."""

    @abstractmethod
    async def get_object(self, address: str) -> StoreObject:
        """Return the object stored under a plain address.

        Raises:
            StoreResolutionError: Unknown address or transport failure.
        """

    async def resolve(self, address: str) -> StoreObject:
        """Resolve a plain or path address to a Commit, Tree or Blob."""
        root, *segments = address.strip("/").split("/")
        if not root:
            raise MalformedAddressError(address, "empty address")

        obj = await self.get_object(root)
        walked = root
        remaining = iter(segments)
        for segment in remaining:
            next_address = self._step(obj, segment, remaining, walked)
            walked = f"{walked}/{segment}"
            obj = await self.get_object(next_address)
        return obj

    def _step(
        self,
        obj: StoreObject,
        segment: str,
        remaining: Iterator[str],
        walked: str,
    ) -> str:
        # Imported here: objects depends on this module for its errors
        from gitcrawl.store.objects import Commit, Tree

        if isinstance(obj, Commit):
            if segment == COMMIT_TREE_SEGMENT:
                return obj.tree
            if segment == COMMIT_PARENTS_SEGMENT:
                index = next(remaining, None)
                if index is None or not index.isdigit():
                    raise MalformedAddressError(
                        f"{walked}/{segment}", "parents needs a numeric index"
                    )
                if int(index) >= len(obj.parents):
                    raise StoreResolutionError(
                        f"{walked}/{segment}/{index}",
                        f"commit has {len(obj.parents)} parent(s)",
                    )
                return obj.parents[int(index)]
            raise StoreResolutionError(
                f"{walked}/{segment}", "unknown commit path segment"
            )

        if isinstance(obj, Tree):
            match = None
            for entry in obj.entries:
                if entry.name == segment:
                    match = entry
            if match is None:
                raise StoreResolutionError(f"{walked}/{segment}", "no such tree entry")
            return match.address

        raise StoreResolutionError(f"{walked}/{segment}", "files have no path segments")

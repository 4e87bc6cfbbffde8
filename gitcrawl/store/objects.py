"""Immutable objects handed out by an ObjectStore.

A store resolves a content address to exactly one of Commit, Tree or Blob.
Derived commit fields (summary, normalised parents) are computed here so
every store implementation exposes the same shape.
"""

from __future__ import annotations

import string
from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from gitcrawl.config.constants import COMMIT_SUMMARY_LEN
from gitcrawl.store.base import MalformedAddressError
from gitcrawl.utils.logger import store_logger

# Hex object ids: SHA-1 and SHA-256 repositories
HEXSHA_LENGTHS = (40, 64)


def validate_address(address: str | bytes) -> str:
    """Return address as a lowercase hex string or raise MalformedAddressError."""
    if isinstance(address, bytes):
        try:
            address = address.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedAddressError(repr(address), "not ASCII") from e
    normalized = address.strip().lower()
    if len(normalized) not in HEXSHA_LENGTHS:
        raise MalformedAddressError(address, f"length {len(normalized)}")
    if not all(c in string.hexdigits for c in normalized):
        raise MalformedAddressError(address, "not hexadecimal")
    return normalized


def normalize_parents(
    parents: Iterable[str | bytes],
    validate: Callable[[str | bytes], str] = validate_address,
) -> tuple[str, ...]:
    """Validate parent addresses, dropping the ones that fail.

    A commit with a malformed parent is still usable; the broken edge is
    simply never followed.
    """
    normalized: list[str] = []
    for parent in parents:
        try:
            normalized.append(validate(parent))
        except MalformedAddressError as e:
            store_logger.debug(
                "Dropping malformed parent address", address=e.address, reason=e.reason
            )
    return tuple(normalized)


class EntryKind(str, Enum):
    """What a tree entry points at."""

    DIRECTORY = "directory"
    FILE = "file"
    SUBMODULE = "submodule"


@dataclass(frozen=True)
class Signature:
    """Author or committer identity with its timestamp."""

    name: str
    email: str
    timestamp: int
    offset: int = 0  # seconds east of UTC

    @classmethod
    def from_identity(
        cls, identity: str | bytes, timestamp: int, offset: int = 0
    ) -> Signature:
        """Build from a git identity line such as ``Jane <jane@example.com>``."""
        if isinstance(identity, bytes):
            identity = identity.decode("utf-8", errors="replace")
        name, _, rest = identity.partition("<")
        email = rest.split(">", 1)[0] if rest else ""
        return cls(
            name=name.strip(), email=email.strip(), timestamp=timestamp, offset=offset
        )

    @property
    def date(self) -> datetime:
        tz = timezone(timedelta(seconds=self.offset))
        return datetime.fromtimestamp(self.timestamp, tz=tz)


@dataclass(frozen=True)
class Commit:
    address: str
    tree: str
    parents: tuple[str, ...]
    author: Signature
    committer: Signature
    message: str = ""

    @property
    def summary(self) -> str:
        """First line of the message, truncated to COMMIT_SUMMARY_LEN."""
        summary = self.message.split("\n", 1)[0]
        if len(summary) > COMMIT_SUMMARY_LEN:
            summary = summary[:COMMIT_SUMMARY_LEN] + "..."
        return summary

    @property
    def is_root(self) -> bool:
        return not self.parents


@dataclass(frozen=True)
class TreeEntry:
    name: str
    address: str
    kind: EntryKind
    mode: int = 0

    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class Tree:
    address: str
    entries: tuple[TreeEntry, ...] = ()

    def __iter__(self) -> Iterator[TreeEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Blob:
    """File object. Content is not held; it is fetched on demand."""

    address: str
    loader: Callable[[], Awaitable[bytes]] = field(repr=False, compare=False)

    async def fetch_content(self) -> bytes:
        return await self.loader()


StoreObject = Commit | Tree | Blob

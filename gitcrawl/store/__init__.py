"""Object store contract, object model and the dulwich adapter."""

from .base import (
    GitCrawlError,
    MalformedAddressError,
    ObjectStore,
    StoreResolutionError,
)
from .dulwich_store import DulwichObjectStore
from .objects import (
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

__all__ = [
    "Blob",
    "Commit",
    "DulwichObjectStore",
    "EntryKind",
    "GitCrawlError",
    "MalformedAddressError",
    "ObjectStore",
    "Signature",
    "StoreObject",
    "StoreResolutionError",
    "Tree",
    "TreeEntry",
    "normalize_parents",
    "validate_address",
]

"""Best-first commit history walker.

Starting from one commit, the walker keeps every resolved but unprocessed
commit in a queue ordered by committer timestamp and always advances into the
newest one. The collected sequence is therefore in reverse-chronological
order without sorting the whole graph, and the walk can stop as soon as
enough commits are collected.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable

from gitcrawl.config.constants import FETCH_ENTIRE_HISTORY
from gitcrawl.core.fetcher import Fetcher
from gitcrawl.store.base import ObjectStore, StoreResolutionError
from gitcrawl.store.objects import Commit
from gitcrawl.utils.logger import get_logger

logger = get_logger("gitcrawl.services.history")

OnCommitsUpdate = Callable[[list[Commit]], None]
OnComplete = Callable[[], None]


class RecursiveCommitFetcher(Fetcher):
    """Collect a commit and its ancestors, newest first.

    Args:
        store: Object store to resolve commits from
        address: Address of the starting commit
        count_required: Number of commits to collect, or FETCH_ENTIRE_HISTORY
        on_update: Called with the collected commits after each new commit
        on_complete: Called once when the count is reached or history is exhausted
    """

    name = "history"

    def __init__(
        self,
        store: ObjectStore,
        address: str,
        count_required: int,
        on_update: OnCommitsUpdate,
        on_complete: OnComplete | None = None,
    ) -> None:
        super().__init__()
        if count_required < 1 and count_required != FETCH_ENTIRE_HISTORY:
            raise ValueError(
                "count_required must be positive or FETCH_ENTIRE_HISTORY, "
                f"got {count_required}"
            )
        self.store = store
        self.address = address
        self.count_required = count_required
        self.on_update = on_update
        self.on_complete = on_complete

        self._fetched: set[str] = set()
        # Entries are (-commit_time, insertion order, commit): newest first, stable ties
        self._queue: list[tuple[int, int, Commit]] = []
        self._sequence = itertools.count()
        self._commits: list[Commit] = []

    @property
    def commits(self) -> list[Commit]:
        """Collected commits, truncated to count_required."""
        if self.count_required == FETCH_ENTIRE_HISTORY:
            return list(self._commits)
        return self._commits[: self.count_required]

    async def run(self) -> None:
        if not self.running:
            return

        self._fetched.add(self.address)
        commit: Commit | None = await self._resolve_commit(self.address)
        # address may be a path such as "<commit>/parents/0"
        self._fetched.add(commit.address)
        while commit is not None:
            commit = await self._process_commit(commit)

    async def _process_commit(self, commit: Commit) -> Commit | None:
        """Record commit, queue its parents and return the next commit to process."""
        if not self.running:
            return None

        self._commits.append(commit)
        self.on_update(self.commits)

        if (
            self.count_required != FETCH_ENTIRE_HISTORY
            and len(self._commits) >= self.count_required
        ):
            self._complete()
            return None

        # Mark parents as fetched before resolving so siblings sharing a parent
        # never schedule it twice
        parent_addresses = [p for p in commit.parents if p not in self._fetched]
        self._fetched.update(parent_addresses)
        parents = await asyncio.gather(
            *(self._resolve_commit(address) for address in parent_addresses)
        )

        if not self.running:
            return None

        for parent in parents:
            heapq.heappush(
                self._queue, (-parent.committer.timestamp, next(self._sequence), parent)
            )

        if not self._queue:
            self._complete()
            return None

        return heapq.heappop(self._queue)[2]

    async def _resolve_commit(self, address: str) -> Commit:
        obj = await self.guarded(self.store.resolve(address))
        if not isinstance(obj, Commit):
            self.running = False
            raise StoreResolutionError(address, "not a commit")
        return obj

    def _complete(self) -> None:
        self.cancel()
        logger.info(
            "History walk complete",
            address=self.address,
            count=len(self._commits),
            count_required=self.count_required,
        )
        if self.on_complete:
            self.on_complete()

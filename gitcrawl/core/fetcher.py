"""Cancellable fetch task base.

A Fetcher drives a chain of asynchronous store lookups on the running event
loop. Cancellation is cooperative:

- ``cancel()`` only clears the ``running`` flag, it never interrupts a lookup
- every continuation checks ``running`` before emitting updates or issuing
  further lookups
- lookups already in flight complete and their results are discarded

Awaiting a started fetcher waits until it stops running and re-raises the
error that aborted it, if any.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Generator
from typing import Any, TypeVar

from gitcrawl.utils.logger import fetch_log, get_logger

logger = get_logger("gitcrawl.fetch")

T = TypeVar("T")


class Fetcher(ABC):
    """Base class for cancellable fetch tasks; subclasses implement ``run``."""

    name = "fetcher"

    def __init__(self) -> None:
        self.running = False
        self._task: asyncio.Task[None] | None = None

    @abstractmethod
    async def run(self) -> None:
        """Drive the fetch; return when done or when ``running`` is cleared."""

    async def guarded(self, lookup: Awaitable[T]) -> T:
        """Await a store lookup, stopping the fetcher as soon as it fails.

        Sibling lookups still in flight then find ``running`` cleared and
        drop their results instead of emitting updates.
        """
        try:
            return await lookup
        except Exception:
            self.running = False
            raise

    def start(self) -> Fetcher:
        """Mark the fetcher running and schedule ``run`` on the event loop.

        Returns the fetcher itself, usable as a cancel / await handle.
        """
        if self._task is not None:
            raise RuntimeError(f"{self.name} already started")

        self.running = True
        task: asyncio.Task[None] = asyncio.ensure_future(self._run())
        task.set_name(self.name)
        self._task = task
        fetch_log(logger, self.name, "started")
        return self

    async def _run(self) -> None:
        try:
            await self.run()
        except Exception as e:
            logger.error(
                "Fetcher failed",
                fetcher=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            self.running = False
        fetch_log(logger, self.name, "stopped")

    def cancel(self) -> None:
        """Stop the fetcher. Safe to call any number of times."""
        if self.running:
            fetch_log(logger, self.name, "cancelled")
        self.running = False

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def wait(self) -> None:
        """Wait until the fetcher stops running; re-raises its failure."""
        if self._task is None:
            raise RuntimeError(f"{self.name} was never started")
        await self._task

    def __await__(self) -> Generator[Any, None, None]:
        return self.wait().__await__()

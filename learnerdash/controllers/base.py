"""
Base controller for dashboard screens.

Every screen section follows the same lifecycle:

    idle -> loading -> ready | failed
    failed --retry()--> loading
    ready --mutation--> loading (full re-fetch) or ready (in-place patch)

Failures are caught here, at the operation boundary, and handed to the
screen's SessionGuard. Once a controller is closed, results of fetches still
in flight are dropped instead of being applied.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, Optional, TypeVar

from loguru import logger

from learnerdash.core.errors import ApiFailure
from learnerdash.core.session_guard import SessionGuard

T = TypeVar("T")


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ListController(Generic[T]):
    """Fetch-on-mount controller with a loading/ready/failed state machine."""

    name = "list"

    def __init__(self, guard: SessionGuard):
        self.guard = guard
        self.state = LoadState.IDLE
        self.error: Optional[str] = None
        self._generation = 0
        self._closed = False

    async def _fetch(self) -> T:
        raise NotImplementedError

    def _apply(self, data: T) -> None:
        raise NotImplementedError

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def can_retry(self) -> bool:
        return self.state is LoadState.FAILED and not self.guard.redirect_scheduled

    async def load(self) -> bool:
        """Fetch and apply. Returns True when the data was applied."""
        if self._closed:
            return False

        self._generation += 1
        generation = self._generation
        self.state = LoadState.LOADING
        self.error = None

        try:
            data = await self._fetch()
        except ApiFailure as failure:
            if generation != self._generation:
                return False
            self.state = LoadState.FAILED
            self.error = failure.message
            self.guard.handle(failure)
            return False

        if generation != self._generation:
            logger.debug(f"Dropping stale {self.name} fetch (generation {generation})")
            return False

        self._apply(data)
        self.state = LoadState.READY
        return True

    async def retry(self) -> bool:
        """User-initiated re-fetch after a failure."""
        if self.state is not LoadState.FAILED:
            logger.debug(f"Ignoring retry of {self.name} in state {self.state.value}")
            return self.state is LoadState.READY
        logger.info(f"Retrying {self.name} fetch")
        return await self.load()

    def close(self) -> None:
        """Unmount: results of in-flight fetches are no longer applied."""
        self._closed = True
        self._generation += 1

"""
Optimistic mutation for dashboard writes.

A write (bookmark add/remove, mark notification read) is split in two:

  1. mutate() computes the optimistic state from the current local state. The
     view renders it immediately.
  2. Mutation.commit() sends the request. On success the caller reconciles
     (re-fetch or keep the optimistic result); on failure the mutation is left
     provisional so the caller can revert it and show an error.

Nothing here retries. Commits for the same entity key run one after another,
in click order, so a re-fetch from an earlier mutation cannot interleave with
a later request for the same course or notification.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

from loguru import logger

from learnerdash.core.api_client import ApiResult, expect_success
from learnerdash.core.errors import ApiFailure

S = TypeVar("S")
A = TypeVar("A")


class KeyedSerializer:
    """One FIFO lock per entity key; idle keys are dropped."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def pending(self, key: str) -> int:
        """Number of holders plus waiters for a key."""
        return self._waiters.get(key, 0)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]


class MutationStatus(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class Mutation(Generic[S]):
    """An optimistic change awaiting server confirmation."""

    key: str
    previous_state: S
    optimistic_state: S
    send: Callable[[], Awaitable[ApiResult]]
    serializer: KeyedSerializer
    failure_message: str = "Operation failed"
    status: MutationStatus = MutationStatus.PENDING
    error: Optional[ApiFailure] = field(default=None)

    @property
    def provisional(self) -> bool:
        return self.status is not MutationStatus.COMMITTED

    async def commit(
        self, reconcile: Callable[[], Awaitable[object]] | None = None
    ) -> ApiResult:
        """
        Send the request, then run `reconcile` while still holding the key.

        Raises:
            ApiFailure: The request failed. The mutation stays provisional.
        """
        if self.status is not MutationStatus.PENDING:
            raise RuntimeError(f"Mutation for {self.key} already {self.status.value}")

        async with self.serializer.hold(self.key):
            try:
                result = expect_success(await self.send(), self.failure_message)
            except ApiFailure as failure:
                self.status = MutationStatus.FAILED
                self.error = failure
                logger.warning(f"Mutation for {self.key} failed: {failure.message}")
                raise

            self.status = MutationStatus.COMMITTED
            if reconcile is not None:
                await reconcile()
            return result


class OptimisticMutator(Generic[S, A]):
    """
    Binds a pure state transition to the request that makes it real.

    Args:
        apply: (current_state, action) -> optimistic_state. Must not mutate
            current_state.
        send: action -> awaitable API result
        key: action -> entity key used to serialize commits
        failure_message: Shown when the server gives no message
    """

    def __init__(
        self,
        apply: Callable[[S, A], S],
        send: Callable[[A], Awaitable[ApiResult]],
        key: Callable[[A], str],
        serializer: KeyedSerializer | None = None,
        failure_message: str = "Operation failed",
    ):
        self._apply = apply
        self._send = send
        self._key = key
        self.serializer = serializer or KeyedSerializer()
        self.failure_message = failure_message

    def mutate(self, current_state: S, action: A) -> Mutation[S]:
        return Mutation(
            key=self._key(action),
            previous_state=current_state,
            optimistic_state=self._apply(current_state, action),
            send=lambda: self._send(action),
            serializer=self.serializer,
            failure_message=self.failure_message,
        )

    def in_flight(self, action: A) -> bool:
        return self.serializer.pending(self._key(action)) > 0

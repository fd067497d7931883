"""
Unit tests for optimistic mutation and per-key serialization.
"""

import asyncio

import pytest

from learnerdash.core.api_client import ApiResult
from learnerdash.core.errors import TransportFailure, ValidationOrBusinessFailure
from learnerdash.core.mutator import KeyedSerializer, MutationStatus, OptimisticMutator


def add_item(state: frozenset, item: str) -> frozenset:
    return state | {item}


class TestKeyedSerializer:
    """Tests for KeyedSerializer."""

    @pytest.mark.asyncio
    async def test_same_key_runs_in_order(self):
        serializer = KeyedSerializer()
        events = []

        async def worker(name: str, delay: float):
            async with serializer.hold("c1"):
                events.append(f"{name}:start")
                await asyncio.sleep(delay)
                events.append(f"{name}:end")

        await asyncio.gather(worker("first", 0.02), worker("second", 0))

        assert events == ["first:start", "first:end", "second:start", "second:end"]
        assert serializer.pending("c1") == 0

    @pytest.mark.asyncio
    async def test_different_keys_overlap(self):
        serializer = KeyedSerializer()
        events = []

        async def worker(key: str):
            async with serializer.hold(key):
                events.append(f"{key}:start")
                await asyncio.sleep(0.01)
                events.append(f"{key}:end")

        await asyncio.gather(worker("c1"), worker("c2"))

        assert events[:2] == ["c1:start", "c2:start"]

    @pytest.mark.asyncio
    async def test_pending_counts_waiters(self):
        serializer = KeyedSerializer()
        release = asyncio.Event()

        async def holder():
            async with serializer.hold("n1"):
                await release.wait()

        tasks = [asyncio.create_task(holder()) for _ in range(2)]
        await asyncio.sleep(0)
        assert serializer.pending("n1") == 2

        release.set()
        await asyncio.gather(*tasks)
        assert serializer.pending("n1") == 0


class TestMutation:
    """Tests for Mutation.commit()."""

    def test_mutate_leaves_current_state_untouched(self):
        mutator = OptimisticMutator(apply=add_item, send=None, key=lambda item: item)
        current = frozenset({"c1"})

        mutation = mutator.mutate(current, "c2")

        assert current == frozenset({"c1"})
        assert mutation.previous_state == frozenset({"c1"})
        assert mutation.optimistic_state == frozenset({"c1", "c2"})
        assert mutation.provisional

    @pytest.mark.asyncio
    async def test_commit_success_reconciles_under_key(self):
        serializer = KeyedSerializer()
        sent = []

        async def send(item):
            sent.append(item)
            return ApiResult(success=True, message="Course bookmarked")

        mutator = OptimisticMutator(add_item, send, key=lambda item: item, serializer=serializer)
        mutation = mutator.mutate(frozenset(), "c2")
        held = []

        async def reconcile():
            held.append(serializer.pending("c2"))

        result = await mutation.commit(reconcile=reconcile)

        assert sent == ["c2"]
        assert result.message == "Course bookmarked"
        assert mutation.status is MutationStatus.COMMITTED
        assert not mutation.provisional
        assert held == [1]

    @pytest.mark.asyncio
    async def test_commit_unsuccessful_envelope(self):
        async def send(item):
            return ApiResult(success=False)

        mutator = OptimisticMutator(
            add_item, send, key=lambda item: item, failure_message="Bookmark operation failed"
        )
        mutation = mutator.mutate(frozenset(), "c2")
        reconciled = []

        async def reconcile():
            reconciled.append(True)

        with pytest.raises(ValidationOrBusinessFailure, match="Bookmark operation failed"):
            await mutation.commit(reconcile=reconcile)

        assert mutation.status is MutationStatus.FAILED
        assert mutation.provisional
        assert reconciled == []

    @pytest.mark.asyncio
    async def test_commit_transport_failure(self):
        async def send(item):
            raise TransportFailure("Failed: request timed out")

        mutator = OptimisticMutator(add_item, send, key=lambda item: item)
        mutation = mutator.mutate(frozenset(), "c2")

        with pytest.raises(TransportFailure):
            await mutation.commit()

        assert isinstance(mutation.error, TransportFailure)
        assert not mutator.in_flight("c2")

    @pytest.mark.asyncio
    async def test_commit_only_once(self):
        async def send(item):
            return ApiResult(success=True)

        mutation = OptimisticMutator(add_item, send, key=lambda item: item).mutate(frozenset(), "c1")
        await mutation.commit()

        with pytest.raises(RuntimeError):
            await mutation.commit()

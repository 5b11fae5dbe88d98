from __future__ import annotations

import asyncio

import pytest

from talentsignal.adapters import StaticProfileTransport
from talentsignal.container import create_container
from talentsignal.service import ScoreSink

QUERY = "senior React developer with ML experience and startup background"


class RecordingSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.entries: list[tuple[str, float]] = []

    def record(self, candidate_id, composite, availability) -> None:
        if self.fail:
            raise OSError("disk full")
        self.entries.append((candidate_id, composite.overall))


def test_search_ranks_roster_and_writes_back_scores(transport, alice, bob):
    service = create_container(transport=transport).service()
    sink = RecordingSink()
    service.set_score_sink(sink)

    result = asyncio.run(service.interpret_and_search(QUERY, [bob, alice]))

    assert isinstance(sink, ScoreSink)
    assert [item.candidate_id for item in result.candidates] == ["alice", "bob"]
    assert [candidate_id for candidate_id, _ in sink.entries] == ["bob", "alice"]
    assert service.directory.get("alice") == alice


def test_write_back_failure_does_not_fail_search(transport, alice):
    service = create_container(transport=transport).service()
    service.set_score_sink(RecordingSink(fail=True))

    result = asyncio.run(service.interpret_and_search(QUERY, [alice]))

    assert result.total_found == 1


def test_search_with_every_provider_failing_still_returns(alice):
    failing = StaticProfileTransport(
        {provider: {handle: {"_error": "network"}} for provider, handle in alice.identities.items()}
    )
    service = create_container(transport=failing).service()

    result = asyncio.run(service.interpret_and_search(QUERY, [alice]))

    ranked = result.candidates[0]
    assert ranked.composite.insufficient_data
    assert ranked.composite.confidence == 0.0
    assert ranked.availability == []


def test_search_uses_directory_when_roster_omitted(transport, alice, bob):
    service = create_container(transport=transport).service()
    service.directory.add_many([alice, bob])

    result = asyncio.run(service.interpret_and_search(QUERY))

    assert result.total_found == 2


def test_snapshot_lookup(transport, alice):
    service = create_container(transport=transport).service()
    service.directory.add_many([alice])

    async def scenario():
        first = await service.get_snapshot("alice")
        second = await service.get_snapshot("alice")
        return first, second

    first, second = asyncio.run(scenario())

    assert first is second
    with pytest.raises(KeyError):
        asyncio.run(service.get_snapshot("nobody"))


def test_monitoring_lifecycle_is_idempotent(transport, alice):
    service = create_container(transport=transport).service()
    service.directory.add_many([alice])

    async def scenario():
        added = await service.start_monitoring(["alice"])
        again = await service.start_monitoring(["alice"])
        running = service.monitor.running
        removed = await service.stop_monitoring("alice")
        removed_again = await service.stop_monitoring("alice")
        await service.aclose()
        return added, again, running, removed, removed_again

    added, again, running, removed, removed_again = asyncio.run(scenario())

    assert added == ["alice"]
    assert again == []
    assert running
    assert removed is True
    assert removed_again is False
    assert not service.monitor.running


class BlockingTransport:
    def __init__(self):
        self.started: list[str] = []
        self.cancelled: list[str] = []
        self.completed: list[str] = []

    async def fetch_payload(self, provider, identity: str) -> dict:
        self.started.append(identity)
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled.append(identity)
            raise
        self.completed.append(identity)
        return {}

    async def aclose(self) -> None:
        return None


def test_cancelled_search_cancels_every_in_flight_fetch(alice, bob):
    transport = BlockingTransport()
    service = create_container(transport=transport).service()
    expected = len(alice.identities) + len(bob.identities)

    async def scenario():
        task = asyncio.ensure_future(service.interpret_and_search(QUERY, [alice, bob]))
        for _ in range(100):
            if len(transport.started) == expected:
                break
            await asyncio.sleep(0.001)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert len(transport.started) == expected
    assert sorted(transport.cancelled) == sorted(transport.started)
    assert transport.completed == []

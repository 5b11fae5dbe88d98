from __future__ import annotations

import asyncio

import pendulum

from talentsignal.core import AlertBroadcaster
from talentsignal.schemas import RiskAlert


def make_alert(index: int) -> RiskAlert:
    return RiskAlert(
        alert_id=f"a-{index}",
        candidate_id="c-1",
        severity="low",
        created_at=pendulum.datetime(2026, 3, 1, tz="UTC"),
    )


def test_full_queue_drops_oldest_without_blocking():
    broadcaster = AlertBroadcaster(queue_size=2)
    subscription = broadcaster.subscribe()

    delivered = [broadcaster.publish(make_alert(i)) for i in range(3)]

    assert delivered == [1, 1, 1]
    assert subscription.dropped == 1
    assert [alert.alert_id for alert in subscription.drain()] == ["a-1", "a-2"]


def test_every_subscriber_receives_each_alert():
    broadcaster = AlertBroadcaster()
    first = broadcaster.subscribe()
    second = broadcaster.subscribe(queue_size=1)

    broadcaster.publish(make_alert(1))

    assert first.get_nowait().alert_id == "a-1"
    assert second.get_nowait().alert_id == "a-1"
    assert broadcaster.subscriber_count == 2


def test_unsubscribed_queue_stops_receiving():
    broadcaster = AlertBroadcaster()
    subscription = broadcaster.subscribe()
    subscription.close()

    assert broadcaster.publish(make_alert(1)) == 0
    assert not subscription.active
    assert subscription.drain() == []


def test_callback_errors_do_not_stop_delivery():
    received: list[str] = []

    def callback(alert: RiskAlert) -> None:
        if alert.alert_id == "a-1":
            raise RuntimeError("subscriber bug")
        received.append(alert.alert_id)

    async def scenario():
        broadcaster = AlertBroadcaster()
        subscription = broadcaster.subscribe(callback)
        broadcaster.publish(make_alert(1))
        broadcaster.publish(make_alert(2))
        for _ in range(10):
            await asyncio.sleep(0)
        subscription.close()

    asyncio.run(scenario())

    assert received == ["a-2"]


def test_async_callbacks_are_awaited():
    received: list[str] = []

    async def callback(alert: RiskAlert) -> None:
        await asyncio.sleep(0)
        received.append(alert.alert_id)

    async def scenario():
        broadcaster = AlertBroadcaster()
        subscription = broadcaster.subscribe(callback)
        broadcaster.publish(make_alert(7))
        for _ in range(10):
            await asyncio.sleep(0)
        subscription.close()

    asyncio.run(scenario())

    assert received == ["a-7"]

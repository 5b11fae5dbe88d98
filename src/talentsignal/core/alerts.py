"\"\"\"Publish/subscribe channel for risk alerts.\"\"\""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Union

import structlog

from ..schemas.alerts import RiskAlert

AlertCallback = Callable[[RiskAlert], Union[None, Awaitable[None]]]


class AlertSubscription:
    """One subscriber's bounded inbox."""

    def __init__(self, broadcaster: "AlertBroadcaster", maxsize: int) -> None:
        self._broadcaster = broadcaster
        self.queue: asyncio.Queue[RiskAlert] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0
        self._pump: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._broadcaster.is_subscribed(self)

    async def get(self) -> RiskAlert:
        return await self.queue.get()

    def get_nowait(self) -> RiskAlert:
        return self.queue.get_nowait()

    def drain(self) -> list[RiskAlert]:
        alerts: list[RiskAlert] = []
        while not self.queue.empty():
            alerts.append(self.queue.get_nowait())
        return alerts

    def close(self) -> None:
        self._broadcaster.unsubscribe(self)
        if self._pump is not None:
            self._pump.cancel()
            self._pump = None


class AlertBroadcaster:
    """Fan alerts out to subscriber queues without ever blocking the publisher.

    When a subscriber's queue is full the oldest queued alert is dropped to
    make room for the new one.
    """

    def __init__(self, *, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._subscriptions: list[AlertSubscription] = []
        self._logger = structlog.get_logger(__name__)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def is_subscribed(self, subscription: AlertSubscription) -> bool:
        return subscription in self._subscriptions

    def subscribe(
        self,
        callback: AlertCallback | None = None,
        *,
        queue_size: int | None = None,
    ) -> AlertSubscription:
        """Register a subscriber.

        With a callback, a delivery task is started on the running event loop
        that feeds queued alerts to the callback; callback errors are logged
        and delivery continues.
        """
        subscription = AlertSubscription(self, queue_size or self._queue_size)
        self._subscriptions.append(subscription)
        if callback is not None:
            loop = asyncio.get_running_loop()
            subscription._pump = loop.create_task(self._deliver(subscription, callback))
        self._logger.debug("alerts.subscribed", subscribers=len(self._subscriptions))
        return subscription

    def unsubscribe(self, subscription: AlertSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            self._logger.debug("alerts.unsubscribed", subscribers=len(self._subscriptions))

    def publish(self, alert: RiskAlert) -> int:
        for subscription in list(self._subscriptions):
            if subscription.queue.full():
                dropped = subscription.queue.get_nowait()
                subscription.dropped += 1
                self._logger.warning(
                    "alerts.dropped_oldest",
                    dropped_alert_id=dropped.alert_id,
                    candidate_id=dropped.candidate_id,
                )
            subscription.queue.put_nowait(alert)
        return len(self._subscriptions)

    async def _deliver(self, subscription: AlertSubscription, callback: AlertCallback) -> None:
        while True:
            alert = await subscription.get()
            try:
                result: Any = callback(alert)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # noqa: BLE001
                self._logger.error(
                    "alerts.callback_failed",
                    alert_id=alert.alert_id,
                    error=str(exc),
                )

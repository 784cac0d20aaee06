"""Notifier service — dispatch node events to subscribed webhooks.

For every inbound event the service resolves the transform, renders one
message per subscribed target and posts them all concurrently. Failures
are logged per event and never propagate to the event bus.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import TYPE_CHECKING, Any

from delegate_notifier.errors.notifier_errors import NotifierError, TransformError
from delegate_notifier.metrics.collector import NotifierMetrics
from delegate_notifier.notifications.delegates import ActiveDelegateTracker
from delegate_notifier.notifications.events import (
    SYNTHETIC_TRIGGERS,
    EventName,
    RawEvent,
    bus_event_for,
)
from delegate_notifier.notifications.messages import render_message, validate_templates
from delegate_notifier.notifications.models import Transaction, payload_field
from delegate_notifier.notifications.registry import SubscriptionTable, build_subscriptions
from delegate_notifier.notifications.transforms import EventTransformer
from delegate_notifier.notifications.webhook import WebhookSender

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from delegate_notifier.config.settings import AppConfig
    from delegate_notifier.notifications.bus import EventListenerRegistry
    from delegate_notifier.notifications.models import DelegateQuery, WalletRepository
    from delegate_notifier.notifications.webhook import WebhookTarget

logger = logging.getLogger(__name__)


class NotifierService:
    """Event-to-notification dispatcher.

    Usage::

        service = NotifierService(config, wallets, delegates)
        await service.start()
        service.subscribe(bus)
        ...
        await service.stop()
    """

    def __init__(
        self,
        config: AppConfig,
        wallets: WalletRepository,
        delegates: DelegateQuery,
        *,
        hostname: Callable[[], str] = socket.gethostname,
        sender: WebhookSender | None = None,
        metrics: NotifierMetrics | None = None,
    ) -> None:
        validate_templates()
        self._config = config
        self._transformer = EventTransformer(
            wallets, hostname=hostname, currency_symbol=config.currency_symbol
        )
        self._tracker = ActiveDelegateTracker(delegates)
        self._sender = sender or WebhookSender(timeout=config.request_timeout)
        if metrics is None and config.metrics.enabled:
            metrics = NotifierMetrics()
        self._metrics = metrics
        self._handlers: dict[EventName, Callable[[Any], Awaitable[list[Any] | None]]] = {
            **self._transformer.handlers(),
            EventName.ACTIVE_DELEGATES_CHANGED: self._tracker.compute_diff,
        }
        self._subscriptions: SubscriptionTable = {}

    @property
    def subscriptions(self) -> SubscriptionTable:
        """Return the event -> targets table built at start."""
        return self._subscriptions

    @property
    def tracker(self) -> ActiveDelegateTracker:
        return self._tracker

    @property
    def metrics(self) -> NotifierMetrics | None:
        return self._metrics

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load the delegate baseline, build subscriptions and open the sender.

        Also serves metrics when ``metrics.port`` is configured.
        """
        await self._tracker.initialize()
        self._subscriptions = build_subscriptions(self._config.webhooks)
        await self._sender.start()
        if self._metrics and self._config.metrics.port:
            self._metrics.serve(self._config.metrics.port)
        logger.info(
            "Notifier started with %d subscribed events", len(self._subscriptions)
        )

    async def stop(self) -> None:
        """Close the HTTP sender and the metrics endpoint."""
        await self._sender.stop()
        if self._metrics:
            self._metrics.close()
        logger.info("Notifier stopped")

    def subscribe(self, bus: EventListenerRegistry) -> None:
        """Register a bus listener for every subscribed event."""
        for event in self._subscriptions:
            alias = event if event in SYNTHETIC_TRIGGERS else None
            bus.listen(bus_event_for(event), self._listener(alias))

    def _listener(self, alias: EventName | None) -> Callable[[RawEvent], Awaitable[None]]:
        async def _handle(event: RawEvent) -> None:
            await self.handle(event, alias=alias)

        return _handle

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def handle(self, event: RawEvent, *, alias: EventName | None = None) -> None:
        """Turn one node event into notifications for its subscribers.

        Args:
            event: The event as delivered by the bus.
            alias: Synthetic event name to report under instead of ``event.name``.
        """
        name = alias or EventName.parse(event.name)
        if name is None:
            logger.error("%s is not a known event", event.name)
            return
        if self._metrics:
            self._metrics.event_received(name)

        # A vote switch is reported once, by the vote handler.
        if name is EventName.WALLET_UNVOTE:
            transaction = Transaction.from_dict(payload_field(event.data, "transaction"))
            if transaction.is_vote_switch:
                self._suppress(name, "vote-switch")
                return

        handler = self._handlers.get(name)
        if handler is None:
            logger.error("%s does not have a handler yet", name)
            return

        try:
            args = await handler(event.data)
        except TransformError as exc:
            logger.error("Unable to build %s notification: %s", name, exc.message)
            return
        if args is None:
            self._suppress(name, "no-change")
            return

        targets = self._subscriptions.get(name)
        if not targets:
            return

        if self._metrics:
            with self._metrics.track_dispatch(name):
                await self._deliver(name, args, targets)
        else:
            await self._deliver(name, args, targets)

    async def _deliver(
        self, name: EventName, args: Sequence[Any], targets: Sequence[WebhookTarget]
    ) -> None:
        requests: list[tuple[WebhookTarget, asyncio.Task[None]]] = []
        for target in targets:
            platform = target.platform
            try:
                message = render_message(platform, name, args, self._config.explorer_tx)
                body = target.build_body(message)
            except NotifierError as exc:
                logger.error("Skipping %s for %s: %s", name, target.endpoint, exc.message)
                if self._metrics:
                    self._metrics.failed(name, platform)
                continue
            task = asyncio.create_task(self._sender.post(target.endpoint, body))
            requests.append((target, task))

        if name is EventName.WALLET_VOTE:
            await asyncio.sleep(self._config.vote_delay)

        results = await asyncio.gather(*(task for _, task in requests), return_exceptions=True)

        failures: list[str] = []
        for (target, _), result in zip(requests, results, strict=True):
            if isinstance(result, BaseException):
                failures.append(f"{target.endpoint}: {result}")
                if self._metrics:
                    self._metrics.failed(name, target.platform)
            elif self._metrics:
                self._metrics.delivered(name, target.platform)

        if failures:
            logger.error(
                "Failed to deliver %s to %d of %d webhooks: %s",
                name,
                len(failures),
                len(requests),
                "; ".join(failures),
            )

    def _suppress(self, name: EventName, reason: str) -> None:
        logger.debug("Suppressed %s notification (%s)", name, reason)
        if self._metrics:
            self._metrics.suppressed(name, reason)

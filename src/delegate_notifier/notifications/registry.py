"""Webhook subscriptions — map configured events to webhook targets."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from delegate_notifier.notifications.events import EventName
from delegate_notifier.notifications.webhook import WebhookTarget

if TYPE_CHECKING:
    from collections.abc import Iterable

    from delegate_notifier.config.settings import WebhookConfig

logger = logging.getLogger(__name__)

SubscriptionTable = dict[EventName, list[WebhookTarget]]


def build_subscriptions(webhooks: Iterable[WebhookConfig]) -> SubscriptionTable:
    """Build the event -> targets table from webhook configuration.

    Event names outside the allow-list are logged and skipped. Targets
    keep configuration order within each event.
    """
    table: SubscriptionTable = {}
    for webhook in webhooks:
        target = WebhookTarget(endpoint=webhook.endpoint, payload=webhook.payload)
        for name in webhook.events:
            event = EventName.parse(name)
            if event is None:
                logger.warning(
                    "%s is not a valid event. Check events in your notifier configuration", name
                )
                continue
            table.setdefault(event, []).append(target)
    return table

"""Notifications — node event dispatch to chat and push webhooks.

Provides:
- ``NotifierService`` — turns node events into webhook notifications
- ``EventBus`` — in-process asyncio event bus
- ``ActiveDelegateTracker`` — detects changes in the forging delegate set
- ``WebhookSender`` — posts rendered notifications over HTTP
"""

from __future__ import annotations

from delegate_notifier.notifications.bus import EventBus
from delegate_notifier.notifications.delegates import ActiveDelegateTracker
from delegate_notifier.notifications.events import EventName, RawEvent
from delegate_notifier.notifications.platforms import Platform, detect_platform
from delegate_notifier.notifications.registry import build_subscriptions
from delegate_notifier.notifications.service import NotifierService
from delegate_notifier.notifications.webhook import WebhookSender, WebhookTarget

__all__ = [
    "ActiveDelegateTracker",
    "EventBus",
    "EventName",
    "NotifierService",
    "Platform",
    "RawEvent",
    "WebhookSender",
    "WebhookTarget",
    "build_subscriptions",
    "detect_platform",
]

"""delegate-notifier — chat and push notifications for blockchain delegate events."""

from __future__ import annotations

__version__ = "0.1.0"

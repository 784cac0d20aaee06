"""Platform detection — infer the notification service from an endpoint URL."""

from __future__ import annotations

import enum


class Platform(enum.StrEnum):
    """Notification service families with their own message markup."""

    SLACK = "slack"
    DISCORD = "discord"
    PUSHOVER = "pushover"
    FALLBACK = "fallback"


# Checked in order; the first matching host wins.
_HOST_MARKERS: tuple[tuple[Platform, tuple[str, ...]], ...] = (
    (Platform.SLACK, ("hooks.slack.com",)),
    (Platform.DISCORD, ("discordapp.com", "discord.com")),
    (Platform.PUSHOVER, ("pushover.net",)),
)


def detect_platform(endpoint: str) -> Platform:
    """Return the platform for *endpoint*, or ``FALLBACK`` if none matches."""
    for platform, markers in _HOST_MARKERS:
        if any(marker in endpoint for marker in markers):
            return platform
    return Platform.FALLBACK

"""Message templates — one formatter per platform and event.

Every formatter takes the transform's arguments positionally followed by
the explorer transaction URL prefix, and returns the display string.
Argument contracts per event (identical on every platform):

- ``wallet.vote`` / ``wallet.unvote``: address, {vote, unvote}, balance, txid
- ``forger.missing``: hostname, username
- ``forger.failed``: hostname, error
- ``forger.started``: hostname
- ``block.forged``: hostname, block id
- ``round.created``: active delegates
- ``activedelegateschanged``: added delegates, removed delegates
- ``delegate.registered`` / ``delegate.resigned``: username
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from delegate_notifier.errors.notifier_errors import ConfigurationError
from delegate_notifier.notifications.events import HANDLED_EVENTS, EventName
from delegate_notifier.notifications.platforms import Platform

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    Formatter = Callable[..., str]


def _bullets(delegates: Sequence[str]) -> str:
    return "".join(f"- {delegate}\n" for delegate in delegates)


# ---------------------------------------------------------------------------
# Discord
# ---------------------------------------------------------------------------


def _discord_vote(
    address: str, data: dict[str, str], balance: str, txid: str, explorer_tx: str
) -> str:
    link = f"[Open transaction](<{explorer_tx}{txid}>)"
    if not data.get("unvote"):
        return f"⬆️ **{address}** voted for **{data['vote']}** with **{balance}**. {link}"
    return (
        f"⬆️ **{address}** switched vote from **{data['unvote']}** to **{data['vote']}** "
        f"with **{balance}**. {link}"
    )


def _discord_unvote(
    address: str, data: dict[str, str], balance: str, txid: str, explorer_tx: str
) -> str:
    return (
        f"⬇️ **{address}** unvoted **{data['unvote']}** with **{balance}**. "
        f"[Open transaction](<{explorer_tx}{txid}>)"
    )


def _discord_delegates_changed(
    added: Sequence[str], removed: Sequence[str], explorer_tx: str
) -> str:
    if len(added) == 1 and len(removed) == 1:
        return (
            "🚨 **Changes in forging positions**\n"
            f"🔃 **{added[0]}** replaced **{removed[0]}** as a forging delegate."
        )
    return (
        "🚨 **Changes in forging positions**\n"
        "**Moved out of a forging spot:**\n"
        f"{_bullets(removed)}"
        "**Moved into a forging spot:**\n"
        f"{_bullets(added)}"
    )


DISCORD: dict[EventName, Formatter] = {
    EventName.WALLET_VOTE: _discord_vote,
    EventName.WALLET_UNVOTE: _discord_unvote,
    EventName.FORGER_MISSING: lambda hostname, username, explorer_tx: (
        f"⚠️ **{username}** failed to forge in this round"
    ),
    EventName.FORGER_FAILED: lambda hostname, error, explorer_tx: (
        f"⚠️ Your forger failed to forge in this slot on **{hostname}**: {error}"
    ),
    EventName.FORGER_STARTED: lambda hostname, explorer_tx: f"Forger started on **{hostname}**",
    EventName.BLOCK_FORGED: lambda hostname, block_id, explorer_tx: (
        f"Forged a new block **{block_id}** on **{hostname}**"
    ),
    EventName.ROUND_CREATED: lambda delegates, explorer_tx: (
        f"Round created with following active delegates: {json.dumps(delegates)}"
    ),
    EventName.ACTIVE_DELEGATES_CHANGED: _discord_delegates_changed,
    EventName.DELEGATE_REGISTERED: lambda delegate, explorer_tx: (
        f"🆕 New delegate registered: **{delegate}**"
    ),
    EventName.DELEGATE_RESIGNED: lambda delegate, explorer_tx: f"**{delegate}** resigned",
}


# ---------------------------------------------------------------------------
# Slack (mrkdwn)
# ---------------------------------------------------------------------------


def _slack_vote(
    address: str, data: dict[str, str], balance: str, txid: str, explorer_tx: str
) -> str:
    link = f"<{explorer_tx}{txid}|Open transaction>"
    if not data.get("unvote"):
        return f"⬆️ *{address}* voted for *{data['vote']}* with *{balance}*. {link}"
    return (
        f"⬆️ *{address}* switched vote from *{data['unvote']}* to *{data['vote']}* "
        f"with *{balance}*. {link}"
    )


def _slack_unvote(
    address: str, data: dict[str, str], balance: str, txid: str, explorer_tx: str
) -> str:
    return (
        f"⬇️ *{address}* unvoted *{data['unvote']}* with *{balance}*. "
        f"<{explorer_tx}{txid}|Open transaction>"
    )


def _slack_delegates_changed(added: Sequence[str], removed: Sequence[str], explorer_tx: str) -> str:
    return (
        "🚨 *Changes in forging positions*\n"
        "*Moved out of a forging spot:*\n"
        f"{_bullets(removed)}"
        "*Moved into a forging spot:*\n"
        f"{_bullets(added)}"
    )


SLACK: dict[EventName, Formatter] = {
    EventName.WALLET_VOTE: _slack_vote,
    EventName.WALLET_UNVOTE: _slack_unvote,
    EventName.FORGER_MISSING: lambda hostname, username, explorer_tx: (
        f"⚠️ *{username}* failed to forge in this round"
    ),
    EventName.FORGER_FAILED: lambda hostname, error, explorer_tx: (
        f"⚠️ Your delegate failed to forge in this slot on *{hostname}*: {error}"
    ),
    EventName.FORGER_STARTED: lambda hostname, explorer_tx: f"Forger started on *{hostname}*",
    EventName.BLOCK_FORGED: lambda hostname, block_id, explorer_tx: (
        f"Forged a new block *{block_id}* on *{hostname}*"
    ),
    EventName.ROUND_CREATED: lambda delegates, explorer_tx: (
        f"Round created with following active delegates: {json.dumps(delegates)}"
    ),
    EventName.ACTIVE_DELEGATES_CHANGED: _slack_delegates_changed,
    EventName.DELEGATE_REGISTERED: lambda delegate, explorer_tx: (
        f"🆕 New delegate registered: *{delegate}*"
    ),
    EventName.DELEGATE_RESIGNED: lambda delegate, explorer_tx: f"*{delegate}* resigned",
}


# ---------------------------------------------------------------------------
# Fallback (plain text)
# ---------------------------------------------------------------------------


def _fallback_vote(
    address: str, data: dict[str, str], balance: str, txid: str, explorer_tx: str
) -> str:
    if not data.get("unvote"):
        return f"⬆️ {address} voted for {data['vote']} with {balance}. {explorer_tx}{txid}"
    return (
        f"⬆️ {address} switched vote from {data['unvote']} to {data['vote']} "
        f"with {balance}. {explorer_tx}{txid}"
    )


FALLBACK: dict[EventName, Formatter] = {
    EventName.WALLET_VOTE: _fallback_vote,
    EventName.WALLET_UNVOTE: lambda address, data, balance, txid, explorer_tx: (
        f"⬇️ {address} unvoted {data['unvote']} with {balance}. {explorer_tx}{txid}"
    ),
    EventName.FORGER_MISSING: lambda hostname, username, explorer_tx: (
        f"{username} failed to forge in this round"
    ),
    EventName.FORGER_FAILED: lambda hostname, error, explorer_tx: (
        f"Your forger failed to forge in this slot on {hostname}: {error}"
    ),
    EventName.FORGER_STARTED: lambda hostname, explorer_tx: f"Forger started on {hostname}",
    EventName.BLOCK_FORGED: lambda hostname, block_id, explorer_tx: (
        f"Forged a new block {block_id} on {hostname}"
    ),
    EventName.ROUND_CREATED: lambda delegates, explorer_tx: (
        f"Round created with following active delegates: {json.dumps(delegates)}"
    ),
    EventName.ACTIVE_DELEGATES_CHANGED: lambda added, removed, explorer_tx: (
        f"Active delegates changed: {', '.join(removed) or 'none'} replaced by "
        f"{', '.join(added) or 'none'}."
    ),
    EventName.DELEGATE_REGISTERED: lambda delegate, explorer_tx: (
        f"New delegate registered: {delegate}"
    ),
    EventName.DELEGATE_RESIGNED: lambda delegate, explorer_tx: f"{delegate} resigned",
}


# Pushover renders plain text, so it shares the fallback set.
TEMPLATES: dict[Platform, dict[EventName, Formatter]] = {
    Platform.DISCORD: DISCORD,
    Platform.SLACK: SLACK,
    Platform.PUSHOVER: FALLBACK,
    Platform.FALLBACK: FALLBACK,
}


def validate_templates(templates: dict[Platform, dict[EventName, Formatter]] = TEMPLATES) -> None:
    """Ensure every handled event has a formatter on every platform.

    Raises:
        ConfigurationError: Listing the missing (platform, event) pairs.
    """
    missing = [
        f"{platform}/{event}"
        for platform in Platform
        for event in sorted(HANDLED_EVENTS)
        if event not in templates.get(platform, {})
    ]
    if missing:
        msg = f"Missing message templates: {', '.join(missing)}"
        raise ConfigurationError(msg)


def render_message(
    platform: Platform, event: EventName, args: Sequence[Any], explorer_tx: str
) -> str:
    """Render the notification text for *event* on *platform*.

    Raises:
        ConfigurationError: If no formatter exists for the pair.
    """
    try:
        formatter = TEMPLATES[platform][event]
    except KeyError as exc:
        msg = f"No message template for {platform}/{event}"
        raise ConfigurationError(msg) from exc
    return formatter(*args, explorer_tx)

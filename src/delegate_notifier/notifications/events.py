"""Event names and the envelope delivered by the event bus.

- ``EventName`` — every node event a webhook may subscribe to
- ``HANDLED_EVENTS`` — the subset that produces a notification
- ``RawEvent`` — envelope with the event name + payload
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class EventName(enum.StrEnum):
    """Node events accepted in webhook configuration."""

    BLOCK_APPLIED = "block.applied"
    BLOCK_FORGED = "block.forged"
    BLOCK_REVERTED = "block.reverted"
    DELEGATE_REGISTERED = "delegate.registered"
    DELEGATE_RESIGNED = "delegate.resigned"
    FORGER_FAILED = "forger.failed"
    FORGER_MISSING = "forger.missing"
    FORGER_STARTED = "forger.started"
    PEER_ADDED = "peer.added"
    PEER_REMOVED = "peer.removed"
    TRANSACTION_APPLIED = "transaction.applied"
    TRANSACTION_EXPIRED = "transaction.expired"
    TRANSACTION_FORGED = "transaction.forged"
    TRANSACTION_REVERTED = "transaction.reverted"
    WALLET_VOTE = "wallet.vote"
    WALLET_UNVOTE = "wallet.unvote"
    ROUND_CREATED = "round.created"
    ROUND_MISSED = "round.missed"
    ACTIVE_DELEGATES_CHANGED = "activedelegateschanged"

    @classmethod
    def parse(cls, value: str) -> EventName | None:
        """Return the matching member, or None for names outside the allow-list."""
        try:
            return cls(value)
        except ValueError:
            return None


# Events with a transform and a template on every platform
HANDLED_EVENTS: frozenset[EventName] = frozenset(
    {
        EventName.WALLET_VOTE,
        EventName.WALLET_UNVOTE,
        EventName.FORGER_MISSING,
        EventName.FORGER_FAILED,
        EventName.FORGER_STARTED,
        EventName.BLOCK_FORGED,
        EventName.ROUND_CREATED,
        EventName.DELEGATE_REGISTERED,
        EventName.DELEGATE_RESIGNED,
        EventName.ACTIVE_DELEGATES_CHANGED,
    }
)

# Synthetic events are not emitted by the node; they ride on a real one.
SYNTHETIC_TRIGGERS: dict[EventName, EventName] = {
    EventName.ACTIVE_DELEGATES_CHANGED: EventName.BLOCK_APPLIED,
}


def bus_event_for(name: EventName) -> EventName:
    """Return the node event a subscription must listen to on the bus."""
    return SYNTHETIC_TRIGGERS.get(name, name)


@dataclass(frozen=True)
class RawEvent:
    """Event envelope as delivered by the bus."""

    name: str
    data: Any = None

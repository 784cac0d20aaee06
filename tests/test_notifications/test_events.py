"""Tests for event names and the bus envelope."""

from __future__ import annotations

import pytest

from delegate_notifier.notifications.events import (
    HANDLED_EVENTS,
    EventName,
    RawEvent,
    bus_event_for,
)


class TestEventName:
    def test_parse_known(self) -> None:
        assert EventName.parse("wallet.vote") is EventName.WALLET_VOTE

    @pytest.mark.parametrize("name", ["", "wallet", "Wallet.Vote", "block.forged "])
    def test_parse_unknown(self, name: str) -> None:
        assert EventName.parse(name) is None

    def test_handled_is_subset(self) -> None:
        assert HANDLED_EVENTS <= set(EventName)
        assert EventName.PEER_ADDED not in HANDLED_EVENTS
        assert len(HANDLED_EVENTS) == 10


class TestBusEventFor:
    def test_synthetic_rides_on_block_applied(self) -> None:
        assert bus_event_for(EventName.ACTIVE_DELEGATES_CHANGED) is EventName.BLOCK_APPLIED

    def test_node_events_map_to_themselves(self) -> None:
        assert bus_event_for(EventName.BLOCK_FORGED) is EventName.BLOCK_FORGED


class TestRawEvent:
    def test_create(self) -> None:
        e = RawEvent(name="block.forged", data={"id": "b"})
        assert e.name == "block.forged"
        assert e.data == {"id": "b"}

    def test_default_data(self) -> None:
        assert RawEvent(name="forger.started").data is None

    def test_frozen(self) -> None:
        e = RawEvent(name="x")
        with pytest.raises(AttributeError):
            e.name = "y"  # type: ignore[misc]

"""Tests for the per-event transforms."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from delegate_notifier.errors.notifier_errors import TransformError
from delegate_notifier.notifications.events import EventName
from delegate_notifier.notifications.models import Transaction, Wallet
from delegate_notifier.notifications.transforms import EventTransformer

VOTER_KEY = "03voter"
GENESIS_KEY = "03genesis"
BIOLY_KEY = "03bioly"


@pytest.fixture
def transformer(wallets) -> EventTransformer:
    return EventTransformer(wallets, hostname=lambda: "node-1")


def _vote_payload(votes: list[str], *, sender: str | None = VOTER_KEY) -> dict:
    tx: dict = {"id": "tx1", "asset": {"votes": votes}}
    if sender is not None:
        tx["senderPublicKey"] = sender
    return {"delegate": votes[0], "transaction": tx}


class TestTransaction:
    def test_from_node_dict(self) -> None:
        tx = Transaction.from_dict(
            {
                "id": "abc",
                "senderPublicKey": "03pk",
                "asset": {"votes": ["+03a"], "delegate": {"username": "bob"}},
            }
        )
        assert tx.id == "abc"
        assert tx.sender_public_key == "03pk"
        assert tx.votes == ["+03a"]
        assert tx.delegate_username == "bob"
        assert not tx.is_vote_switch

    def test_from_empty(self) -> None:
        tx = Transaction.from_dict(None)
        assert tx.votes == []
        assert tx.sender_public_key is None


class TestHandlers:
    def test_covers_node_events(self, transformer: EventTransformer) -> None:
        handlers = transformer.handlers()
        assert EventName.WALLET_VOTE in handlers
        assert EventName.ACTIVE_DELEGATES_CHANGED not in handlers
        assert len(handlers) == 9


class TestWalletVote:
    async def test_single_vote(self, transformer: EventTransformer) -> None:
        args = await transformer.wallet_vote(_vote_payload([f"+{GENESIS_KEY}"]))
        assert args == ["AVoterAddress", {"vote": "genesis_1"}, "12,345 Ѧ", "tx1"]

    async def test_vote_switch(self, transformer: EventTransformer) -> None:
        args = await transformer.wallet_vote(
            _vote_payload([f"-{GENESIS_KEY}", f"+{BIOLY_KEY}"])
        )
        assert args is not None
        assert args[1] == {"vote": "biolypunk", "unvote": "genesis_1"}

    async def test_missing_sender_raises(self, transformer: EventTransformer) -> None:
        with pytest.raises(TransformError, match="sender public key"):
            await transformer.wallet_vote(_vote_payload([f"+{GENESIS_KEY}"], sender=None))


class TestWalletUnvote:
    async def test_unvote(self, transformer: EventTransformer) -> None:
        args = await transformer.wallet_unvote(_vote_payload([f"-{GENESIS_KEY}"]))
        assert args == ["AVoterAddress", {"unvote": "genesis_1"}, "12,345 Ѧ", "tx1"]


class TestForgerEvents:
    async def test_forger_missing(self, transformer: EventTransformer) -> None:
        wallet = Wallet(address="AGenesis", username="genesis_1")
        assert await transformer.forger_missing({"delegate": wallet}) == ["node-1", "genesis_1"]

    async def test_forger_failed(self, transformer: EventTransformer) -> None:
        assert await transformer.forger_failed("boom") == ["node-1", "boom"]

    async def test_forger_started(self, transformer: EventTransformer) -> None:
        assert await transformer.forger_started(None) == ["node-1"]

    async def test_block_forged_header(self, transformer: EventTransformer) -> None:
        assert await transformer.block_forged({"id": "blk1"}) == ["node-1", "blk1"]

    async def test_block_forged_full_block(self, transformer: EventTransformer) -> None:
        block = {"data": {"id": "blk2", "height": 10}}
        assert await transformer.block_forged(block) == ["node-1", "blk2"]

    async def test_round_created(self, transformer: EventTransformer) -> None:
        delegates = [Wallet(address="A", username="alpha"), "bravo"]
        assert await transformer.round_created(delegates) == [["alpha", "bravo"]]

    async def test_round_created_from_wire_dicts(self, transformer: EventTransformer) -> None:
        delegates = [
            {"username": "alpha", "address": "A1", "balance": 5},
            {"username": "bravo", "address": "B1", "balance": 7},
        ]
        assert await transformer.round_created(delegates) == [["alpha", "bravo"]]

    async def test_round_created_from_attribute_objects(
        self, transformer: EventTransformer
    ) -> None:
        delegates = [SimpleNamespace(username="alpha"), SimpleNamespace(username="bravo")]
        assert await transformer.round_created(delegates) == [["alpha", "bravo"]]


class TestDelegateEvents:
    async def test_registered(self, transformer: EventTransformer) -> None:
        tx = {"id": "t", "asset": {"delegate": {"username": "newbie"}}}
        assert await transformer.delegate_registered(tx) == ["newbie"]

    async def test_resigned(self, transformer: EventTransformer) -> None:
        tx = {"id": "t", "senderPublicKey": BIOLY_KEY}
        assert await transformer.delegate_resigned(tx) == ["biolypunk"]

    async def test_resigned_without_sender_is_suppressed(
        self, transformer: EventTransformer
    ) -> None:
        assert await transformer.delegate_resigned({"id": "t"}) is None

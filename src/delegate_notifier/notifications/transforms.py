"""Event transforms — turn node event payloads into message arguments.

Each handler returns the positional arguments for the event's message
template, or ``None`` when the event should not produce a notification.
"""

from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING, Any

from delegate_notifier.errors.notifier_errors import TransformError
from delegate_notifier.notifications.events import EventName
from delegate_notifier.notifications.models import Transaction, payload_field
from delegate_notifier.utils.formatting import format_satoshi

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from delegate_notifier.notifications.models import Wallet, WalletRepository

    Handler = Callable[[Any], Awaitable[list[Any] | None]]

logger = logging.getLogger(__name__)


class EventTransformer:
    """Per-event transforms backed by the node's wallet repository.

    Args:
        wallets: Wallet lookup by public key.
        hostname: Accessor for the host identifier shown in forger messages.
        currency_symbol: Symbol appended to formatted balances.
    """

    def __init__(
        self,
        wallets: WalletRepository,
        *,
        hostname: Callable[[], str] = socket.gethostname,
        currency_symbol: str = "Ѧ",
    ) -> None:
        self._wallets = wallets
        self._hostname = hostname
        self._currency_symbol = currency_symbol

    def handlers(self) -> dict[EventName, Handler]:
        """Return the transform for every node event this layer handles."""
        return {
            EventName.WALLET_VOTE: self.wallet_vote,
            EventName.WALLET_UNVOTE: self.wallet_unvote,
            EventName.FORGER_MISSING: self.forger_missing,
            EventName.FORGER_FAILED: self.forger_failed,
            EventName.FORGER_STARTED: self.forger_started,
            EventName.BLOCK_FORGED: self.block_forged,
            EventName.ROUND_CREATED: self.round_created,
            EventName.DELEGATE_REGISTERED: self.delegate_registered,
            EventName.DELEGATE_RESIGNED: self.delegate_resigned,
        }

    # ------------------------------------------------------------------
    # Wallet events
    # ------------------------------------------------------------------

    async def wallet_vote(self, data: Any) -> list[Any] | None:
        """``[voter address, {vote[, unvote]}, balance, txid]``."""
        transaction = Transaction.from_dict(payload_field(data, "transaction"))
        voter = self._voter(transaction)

        if transaction.is_vote_switch:
            voted: str | None = None
            unvoted: str | None = None
            for vote in transaction.votes:
                if vote.startswith("+"):
                    voted = self._username(vote[1:])
                elif vote.startswith("-"):
                    unvoted = self._username(vote[1:])
            if voted is None:
                msg = f"Vote transaction {transaction.id} has no '+' directive"
                raise TransformError(msg)
            votes = {"vote": voted} if unvoted is None else {"vote": voted, "unvote": unvoted}
        else:
            delegate = payload_field(data, "delegate") or next(iter(transaction.votes), "")
            if not delegate:
                msg = f"Vote transaction {transaction.id} has no delegate"
                raise TransformError(msg)
            votes = {"vote": self._username(delegate.removeprefix("+"))}

        return [voter.address, votes, self._balance(voter), transaction.id]

    async def wallet_unvote(self, data: Any) -> list[Any] | None:
        """``[voter address, {unvote}, balance, txid]``."""
        transaction = Transaction.from_dict(payload_field(data, "transaction"))
        voter = self._voter(transaction)
        delegate = payload_field(data, "delegate") or next(iter(transaction.votes), "")
        if not delegate:
            msg = f"Unvote transaction {transaction.id} has no delegate"
            raise TransformError(msg)
        return [
            voter.address,
            {"unvote": self._username(delegate.removeprefix("-"))},
            self._balance(voter),
            transaction.id,
        ]

    # ------------------------------------------------------------------
    # Forger / block / round events
    # ------------------------------------------------------------------

    async def forger_missing(self, data: Any) -> list[Any] | None:
        delegate = payload_field(data, "delegate")
        return [self._hostname(), payload_field(delegate, "username")]

    async def forger_failed(self, data: Any) -> list[Any] | None:
        return [self._hostname(), data]

    async def forger_started(self, data: Any) -> list[Any] | None:
        return [self._hostname()]

    async def block_forged(self, data: Any) -> list[Any] | None:
        # Full blocks nest their header fields under "data".
        block = payload_field(data, "data") or data
        return [self._hostname(), payload_field(block, "id")]

    async def round_created(self, data: Any) -> list[Any] | None:
        # Rounds arrive as wallets, wire-format dicts or bare usernames.
        delegates = [payload_field(wallet, "username", wallet) for wallet in data or []]
        return [delegates]

    # ------------------------------------------------------------------
    # Delegate events
    # ------------------------------------------------------------------

    async def delegate_registered(self, data: Any) -> list[Any] | None:
        return [Transaction.from_dict(data).delegate_username]

    async def delegate_resigned(self, data: Any) -> list[Any] | None:
        transaction = Transaction.from_dict(data)
        if not transaction.sender_public_key:
            logger.debug("Resignation %s has no sender public key", transaction.id)
            return None
        return [self._username(transaction.sender_public_key)]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _voter(self, transaction: Transaction) -> Wallet:
        if not transaction.sender_public_key:
            msg = f"Transaction {transaction.id} has no sender public key"
            raise TransformError(msg)
        return self._wallets.find_by_public_key(transaction.sender_public_key)

    def _username(self, public_key: str) -> str | None:
        return self._wallets.find_by_public_key(public_key).username

    def _balance(self, wallet: Wallet) -> str:
        return format_satoshi(wallet.balance, self._currency_symbol)

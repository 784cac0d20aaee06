"""Wallet and transaction values read from node event payloads.

The node's wallet repository and delegate query are external; the
notifier only depends on the protocols below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


def payload_field(obj: Any, key: str, default: Any = None) -> Any:
    """Read *key* from a mapping or an attribute-style payload."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


@dataclass(frozen=True)
class Wallet:
    """A node wallet as seen by the notifier.

    Attributes:
        address: Wallet address.
        balance: Balance in satoshis.
        public_key: Hex public key.
        username: Delegate username, if the wallet is a registered delegate.
    """

    address: str
    balance: int = 0
    public_key: str = ""
    username: str | None = None


@dataclass
class Transaction:
    """The fields of a node transaction the notifier reads.

    Attributes:
        id: Transaction id.
        sender_public_key: Public key of the signing wallet, if present.
        votes: Vote directives, each ``+<publicKey>`` or ``-<publicKey>``.
        delegate_username: Username claimed by a delegate registration.
    """

    id: str = ""
    sender_public_key: str | None = None
    votes: list[str] = field(default_factory=list)
    delegate_username: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Transaction:
        """Create a Transaction from a node JSON transaction dict."""
        data = data or {}
        asset = data.get("asset") or {}
        delegate = asset.get("delegate") or {}
        return cls(
            id=data.get("id", ""),
            sender_public_key=data.get("senderPublicKey", data.get("sender_public_key")),
            votes=list(asset.get("votes") or []),
            delegate_username=delegate.get("username"),
        )

    @property
    def is_vote_switch(self) -> bool:
        """Whether the transaction carries more than one vote directive."""
        return len(self.votes) > 1


class WalletRepository(Protocol):
    """Wallet lookup by public key."""

    def find_by_public_key(self, public_key: str) -> Wallet: ...


class DelegateQuery(Protocol):
    """Query for the usernames of the currently forging delegates."""

    async def get_active_delegates(self) -> Sequence[str] | None: ...

"""Shared test fixtures for the delegate-notifier test suite."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from delegate_notifier.config.settings import AppConfig, MetricsConfig, WebhookConfig
from delegate_notifier.metrics.collector import NotifierMetrics
from delegate_notifier.notifications.models import Wallet
from delegate_notifier.notifications.webhook import WebhookSender

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

# ---------------------------------------------------------------------------
# Fake node collaborators
# ---------------------------------------------------------------------------

VOTER_KEY = "03voter"
GENESIS_KEY = "03genesis"
BIOLY_KEY = "03bioly"


class FakeWalletRepository:
    """Wallet lookup backed by a dict keyed by public key."""

    def __init__(self, wallets: list[Wallet]) -> None:
        self._wallets = {wallet.public_key: wallet for wallet in wallets}

    def find_by_public_key(self, public_key: str) -> Wallet:
        return self._wallets[public_key]


class FakeDelegateQuery:
    """Delegate query whose answer the test changes between calls."""

    def __init__(self, delegates: list[str] | None) -> None:
        self.delegates = delegates
        self.calls = 0

    async def get_active_delegates(self) -> list[str] | None:
        self.calls += 1
        return None if self.delegates is None else list(self.delegates)


class RecordingTransport:
    """httpx handler that records requests and answers per endpoint host."""

    def __init__(self, status_by_host: dict[str, int] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._status_by_host = status_by_host or {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self._status_by_host.get(request.url.host, 200))

    def bodies_for(self, host: str) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.host == host]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def wallets() -> FakeWalletRepository:
    return FakeWalletRepository(
        [
            Wallet(address="AVoterAddress", balance=1_234_500_000_000, public_key=VOTER_KEY),
            Wallet(address="AGenesis", public_key=GENESIS_KEY, username="genesis_1"),
            Wallet(address="ABioly", public_key=BIOLY_KEY, username="biolypunk"),
        ]
    )


@pytest.fixture
def delegate_query() -> FakeDelegateQuery:
    return FakeDelegateQuery(["alpha", "bravo", "charlie"])


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
async def sender(transport: RecordingTransport) -> AsyncIterator[WebhookSender]:
    """A started WebhookSender whose client talks to the recording transport."""
    s = WebhookSender()
    s._client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    yield s
    await s.stop()


@pytest.fixture
def metrics() -> NotifierMetrics:
    return NotifierMetrics()


@pytest.fixture
def make_config():
    """Factory for an AppConfig with no pacing delay and metrics off."""

    def _make(*webhooks: WebhookConfig, **overrides: Any) -> AppConfig:
        defaults: dict[str, Any] = {
            "explorer_tx": "https://explorer.test/tx/",
            "vote_delay": 0.0,
            "metrics": MetricsConfig(enabled=False),
            "webhooks": list(webhooks),
        }
        defaults.update(overrides)
        return AppConfig(**defaults)

    return _make

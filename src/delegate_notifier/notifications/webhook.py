"""Webhook delivery — outgoing bodies and the HTTP POST transport.

One POST per (event, target); no retries, the caller aggregates failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from delegate_notifier.config.settings import WebhookPayload
from delegate_notifier.errors.notifier_errors import DeliveryError, MissingCredentialsError
from delegate_notifier.notifications.platforms import Platform, detect_platform

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds


@dataclass(frozen=True)
class WebhookTarget:
    """An endpoint subscribed to one or more events."""

    endpoint: str
    payload: WebhookPayload = field(default_factory=WebhookPayload)

    @property
    def platform(self) -> Platform:
        """Return the platform inferred from the endpoint URL."""
        return detect_platform(self.endpoint)

    def build_body(self, message: str) -> dict[str, Any]:
        """Return the JSON body carrying *message* in the configured field.

        Raises:
            MissingCredentialsError: For Pushover targets without token or user.
        """
        body = self.payload.extra_fields()
        body[self.payload.msg] = message
        if self.platform is Platform.PUSHOVER:
            if not self.payload.token or not self.payload.user:
                raise MissingCredentialsError(self.endpoint)
            body.update(token=self.payload.token, user=self.payload.user)
        return body


class WebhookSender:
    """Posts JSON bodies to webhook endpoints over a shared HTTP client.

    Usage::

        sender = WebhookSender()
        await sender.start()
        try:
            await sender.post(url, {"content": "hello"})
        finally:
            await sender.stop()
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def is_running(self) -> bool:
        """Whether the HTTP client is open."""
        return self._client is not None

    async def start(self) -> None:
        """Open the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

    async def stop(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post(self, endpoint: str, body: dict[str, Any]) -> None:
        """POST *body* to *endpoint*; the response content is ignored.

        Raises:
            DeliveryError: On transport errors or a 4xx/5xx response.
        """
        client = self._ensure_started()
        try:
            resp = await client.post(endpoint, json=body)
        except httpx.HTTPError as exc:
            msg = f"Webhook {endpoint} error: {exc}"
            raise DeliveryError(msg, endpoint=endpoint) from exc

        if resp.status_code >= 400:
            msg = f"Webhook {endpoint} returned {resp.status_code}"
            raise DeliveryError(msg, endpoint=endpoint, status_code=resp.status_code)
        logger.debug("Webhook %s accepted notification (%d)", endpoint, resp.status_code)

    def _ensure_started(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Webhook sender not started. Call start() first."
            raise RuntimeError(msg)
        return self._client

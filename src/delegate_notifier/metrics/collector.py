"""Metrics collector — Prometheus counters and histograms.

- ``notifier_events_total`` counter (event)
- ``notifier_suppressed_total`` counter (event, reason)
- ``notifier_deliveries_total`` counter (event, platform)
- ``notifier_delivery_failures_total`` counter (event, platform)
- ``notifier_dispatch_duration_seconds`` histogram (event)
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    start_http_server,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from wsgiref.simple_server import WSGIServer

_PREFIX = "notifier"

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`NotifierMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class NotifierMetrics:
    """Dispatch metrics for the notifier service."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()
        self._server: WSGIServer | None = None

        self._events = self._collector.counter(
            f"{_PREFIX}_events",
            "Node events received by the dispatcher",
            ("event",),
        )
        self._suppressed = self._collector.counter(
            f"{_PREFIX}_suppressed",
            "Events that produced no notification",
            ("event", "reason"),
        )
        self._deliveries = self._collector.counter(
            f"{_PREFIX}_deliveries",
            "Webhook deliveries that succeeded",
            ("event", "platform"),
        )
        self._failures = self._collector.counter(
            f"{_PREFIX}_delivery_failures",
            "Webhook deliveries that failed or were skipped",
            ("event", "platform"),
        )
        self._dispatch = self._collector.histogram(
            f"{_PREFIX}_dispatch_duration_seconds",
            "Duration of a full event dispatch, including the vote pause",
            ("event",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def exposition(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self._collector.registry)

    def serve(self, port: int, addr: str = "0.0.0.0") -> None:
        """Expose the registry on ``http://<addr>:<port>/metrics``."""
        if self._server is not None:
            return
        self._server, _ = start_http_server(port, addr=addr, registry=self._collector.registry)
        logger.info("Serving metrics on %s:%d", addr, port)

    def close(self) -> None:
        """Stop the metrics HTTP server, if one is running."""
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        self._server = None

    def event_received(self, event: str) -> None:
        self._events.labels(event=event).inc()

    def suppressed(self, event: str, reason: str) -> None:
        self._suppressed.labels(event=event, reason=reason).inc()

    def delivered(self, event: str, platform: str) -> None:
        self._deliveries.labels(event=event, platform=platform).inc()

    def failed(self, event: str, platform: str) -> None:
        self._failures.labels(event=event, platform=platform).inc()

    @contextmanager
    def track_dispatch(self, event: str) -> Iterator[None]:
        """Track the duration of one event dispatch."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._dispatch.labels(event=event).observe(time.monotonic() - start)

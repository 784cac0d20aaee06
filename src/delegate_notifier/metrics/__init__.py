"""Metrics — Prometheus counters for the dispatch path."""

from __future__ import annotations

from delegate_notifier.metrics.collector import MetricsCollector, NotifierMetrics

__all__ = ["MetricsCollector", "NotifierMetrics"]

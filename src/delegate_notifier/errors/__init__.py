"""Error types for the notifier."""

from __future__ import annotations

from delegate_notifier.errors.notifier_errors import (
    ConfigurationError,
    DeliveryError,
    MissingCredentialsError,
    NotifierError,
    TransformError,
)

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "MissingCredentialsError",
    "NotifierError",
    "TransformError",
]

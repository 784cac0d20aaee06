"""NotifierError — base exception class and the dispatch error taxonomy."""

from __future__ import annotations


class NotifierError(Exception):
    """Base error for all notifier operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "notifier-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(NotifierError):
    """Invalid webhook configuration or an incomplete template table."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="configuration-error")


class MissingCredentialsError(NotifierError):
    """A push-notification target lacks its token or user."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(
            f"Unable to setup pushover notifications for {endpoint}. "
            "User and token params must be set",
            code="missing-credentials",
        )
        self.endpoint = endpoint


class TransformError(NotifierError):
    """An event payload could not be turned into notification arguments."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="transform-error")


class DeliveryError(NotifierError):
    """A webhook POST failed at the transport or HTTP level."""

    def __init__(self, message: str, *, endpoint: str, status_code: int | None = None) -> None:
        super().__init__(message, code="delivery-error")
        self.endpoint = endpoint
        self.status_code = status_code

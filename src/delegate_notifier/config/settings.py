"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``NOTIFIER_``, nested via ``__``)
2. YAML config file (``config_path`` or ``NOTIFIER_CONFIG_PATH`` env var)
3. Defaults defined here

Example YAML::

    explorerTx: https://explorer.ark.io/transaction/
    webhooks:
      - endpoint: https://discord.com/api/webhooks/123/abc
        events: [block.forged, wallet.vote]
        payload:
          msg: content
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Webhook definitions
# ---------------------------------------------------------------------------


class WebhookPayload(BaseModel):
    """Outgoing body template for one webhook.

    ``msg`` names the JSON field that receives the rendered text (Discord
    uses ``content``, Slack and Pushover use ``text`` / ``message``). Any other
    field is copied verbatim into the request body.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    msg: str = "content"
    token: str | None = None
    user: str | None = None

    def extra_fields(self) -> dict[str, Any]:
        """Return the verbatim fields, excluding ``msg`` and unset credentials."""
        return self.model_dump(exclude={"msg"}, exclude_none=True)


class WebhookConfig(BaseModel):
    """A single configured webhook and the events it subscribes to."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    events: list[str] = Field(default_factory=list)
    payload: WebhookPayload = Field(default_factory=WebhookPayload)


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFIER_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True
    port: int | None = Field(
        default=None,
        ge=1,
        le=65535,
        description="Serve /metrics on this port when set",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


# Keys accepted in the plugin-style camelCase form
_YAML_ALIASES = {"explorerTx": "explorer_tx"}


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a notifier YAML file into settings keys.

    camelCase plugin keys such as ``explorerTx`` are renamed to their field
    names. A missing file, an empty file or a non-mapping document all read
    as no settings.
    """
    config_file = Path(path)
    if not config_file.is_file():
        return {}
    with config_file.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        return {}
    return {_YAML_ALIASES.get(key, key): value for key, value in data.items()}


class AppConfig(BaseSettings):
    """Top-level notifier configuration.

    Loads settings from environment variables (``NOTIFIER_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFIER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    config_path: str = ""
    log_level: str = "INFO"

    explorer_tx: str = Field(
        default="https://explorer.ark.io/transaction/",
        description="Base URL prepended to transaction ids in vote messages",
    )
    webhooks: list[WebhookConfig] = Field(default_factory=list)
    vote_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Seconds to wait before settling the deliveries of a vote event",
    )
    request_timeout: float = 10.0
    currency_symbol: str = "Ѧ"

    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

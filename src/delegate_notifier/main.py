"""Entry point — validate a notifier configuration.

Loads the YAML file named by ``NOTIFIER_CONFIG_PATH`` (plus environment
overrides), checks the message templates and logs which webhooks each
event will reach. Exits non-zero when nothing would be delivered.
"""

from __future__ import annotations

import logging
import os
import sys

from delegate_notifier.config.settings import AppConfig
from delegate_notifier.errors.notifier_errors import ConfigurationError
from delegate_notifier.notifications.events import HANDLED_EVENTS
from delegate_notifier.notifications.messages import validate_templates
from delegate_notifier.notifications.registry import build_subscriptions

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the notifier process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def main() -> int:
    """Check the configuration and report the subscription table."""
    config_path = os.getenv("NOTIFIER_CONFIG_PATH", "")
    config = AppConfig.from_yaml(config_path) if config_path else AppConfig()
    configure_logging(config.log_level)

    try:
        validate_templates()
    except ConfigurationError as exc:
        logger.error("%s", exc.message)
        return 1

    table = build_subscriptions(config.webhooks)
    if not table:
        logger.error("No webhook is subscribed to a valid event")
        return 1

    for event, targets in table.items():
        if event not in HANDLED_EVENTS:
            logger.warning("%s is accepted but does not produce notifications yet", event)
        for target in targets:
            logger.info("%s -> %s (%s)", event, target.endpoint, target.platform)
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def warn(self, message: str) -> None:
        ...


class LoggingNotifier:
    def warn(self, message: str) -> None:
        logger.warning("%s", message)

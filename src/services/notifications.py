# src/services/notifications.py

"""Toast-style notifications raised by the search pipeline."""

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

logger = logging.getLogger("trendbuy.notify")

Severity = Literal["information", "warning", "error"]

_LOG_LEVELS: dict[str, int] = {
    "information": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Notifier(Protocol):
    """Anything that can show a titled message at a severity."""

    def notify(
        self,
        message: str,
        *,
        title: str = "",
        severity: Severity = "information",
    ) -> None: ...


@dataclass
class Notification:
    """A notification captured by :class:`RecordingNotifier`."""

    message: str
    title: str
    severity: Severity


class LoggingNotifier:
    """Default notifier: writes notifications to the log."""

    def notify(
        self,
        message: str,
        *,
        title: str = "",
        severity: Severity = "information",
    ) -> None:
        logger.log(
            _LOG_LEVELS.get(severity, logging.INFO),
            "%s: %s",
            title or severity.capitalize(),
            message,
        )


class RecordingNotifier:
    """Keeps every notification in memory, newest last."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(
        self,
        message: str,
        *,
        title: str = "",
        severity: Severity = "information",
    ) -> None:
        self.notifications.append(
            Notification(message=message, title=title, severity=severity)
        )

    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]

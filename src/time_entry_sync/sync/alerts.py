"""User-facing notifications published by the sync engine."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import httpx

logger = logging.getLogger(__name__)


class AlertLevel(str, Enum):
    """Severity of an alert."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Alert:
    """A dismissible message for the user."""

    level: AlertLevel
    message: str


AlertCallback = Callable[[Alert], None]


class AlertChannel:
    """Publishes alerts to whoever renders them.

    The engine only publishes; the CLI (or any other front end) subscribes.
    """

    def __init__(self) -> None:
        """Initialize an empty channel."""
        self._subscribers: list[AlertCallback] = []
        self.current: Alert | None = None

    def subscribe(self, callback: AlertCallback) -> Callable[[], None]:
        """Register a callback for every published alert.

        Args:
            callback: Called with each alert, in publication order.

        Returns:
            Function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, alert: Alert) -> None:
        """Make an alert current and notify subscribers."""
        self.current = alert
        for callback in list(self._subscribers):
            callback(alert)

    def success(self, message: str) -> None:
        self.publish(Alert(AlertLevel.SUCCESS, message))

    def warning(self, message: str) -> None:
        self.publish(Alert(AlertLevel.WARNING, message))

    def publish_error(self, error: BaseException) -> None:
        """Publish an error alert describing a failed operation.

        HTTP response bodies go to the log only; the alert points there.
        """
        response_error = _find_status_error(error)
        if response_error is not None:
            logger.error(
                f"{response_error.request.method} {response_error.request.url} "
                f"returned {response_error.response.status_code}: "
                f"{response_error.response.text}"
            )
            message = f"{error}. Check the log for the detailed error response."
        else:
            message = str(error) or type(error).__name__
        self.publish(Alert(AlertLevel.ERROR, message))

    def dismiss(self) -> None:
        """Clear the current alert."""
        self.current = None


def _find_status_error(error: BaseException) -> httpx.HTTPStatusError | None:
    """Find an HTTP status error in an exception or its causes."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, httpx.HTTPStatusError):
            return current
        seen.add(id(current))
        current = current.__cause__
    return None

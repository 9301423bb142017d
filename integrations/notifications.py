"""
Operator notifications.

Fire-and-forget messages for the operator UI. Each message is logged,
kept in a bounded buffer the UI polls, and fanned out to any sinks
(toast push, websocket bridge). Sinks never break the caller.
"""

from collections import deque
from datetime import datetime, timezone
from typing import Callable, Optional
import structlog

from config import settings
from integrations.notification_messages import get_message
from models.notification import Notification, NotificationCode, NotificationLevel

logger = structlog.get_logger(__name__)


NotificationSink = Callable[[Notification], None]


# Default level per code; anything not listed is INFO
LEVELS: dict[NotificationCode, NotificationLevel] = {
    NotificationCode.SAVE_SUCCEEDED: NotificationLevel.SUCCESS,
    NotificationCode.PRODUCT_FOUND: NotificationLevel.SUCCESS,
    NotificationCode.MISSING_PRODUCT_REPORTED: NotificationLevel.SUCCESS,
    NotificationCode.DUPLICATE_SCAN: NotificationLevel.WARNING,
    NotificationCode.SCAN_REJECTED_SAVING: NotificationLevel.WARNING,
    NotificationCode.PRODUCT_NOT_FOUND: NotificationLevel.WARNING,
    NotificationCode.INVALID_SHELF_ID: NotificationLevel.ERROR,
    NotificationCode.NOTHING_TO_SAVE: NotificationLevel.ERROR,
    NotificationCode.SAVE_FAILED: NotificationLevel.ERROR,
    NotificationCode.ROUTER_NOT_CONFIGURED: NotificationLevel.ERROR,
    NotificationCode.SCAN_FAILED: NotificationLevel.ERROR,
}


class Notifier:
    """
    Buffered operator notifications.

    Usage:
        notifier = Notifier()
        notifier.notify(NotificationCode.SCAN_ACCEPTED, barcode="123")
        pending = notifier.drain()
    """

    def __init__(self, buffer_size: Optional[int] = None, lang: Optional[str] = None):
        self._buffer: deque[Notification] = deque(
            maxlen=buffer_size or settings.notification_buffer_size
        )
        self._sinks: list[NotificationSink] = []
        self.lang = lang

    def add_sink(self, sink: NotificationSink) -> None:
        self._sinks.append(sink)

    def notify(
        self,
        code: NotificationCode,
        level: Optional[NotificationLevel] = None,
        **details
    ) -> Notification:
        """
        Raise a notification.

        Args:
            code: Message code
            level: Override the default level for the code
            **details: Template variables, also kept as details

        Returns:
            The notification that was buffered
        """
        title, message = get_message(code, lang=self.lang, **details)
        notification = Notification(
            code=code,
            level=level or LEVELS.get(code, NotificationLevel.INFO),
            title=title,
            message=message,
            details={k: _plain(v) for k, v in details.items()},
            created_at=datetime.now(timezone.utc),
        )
        self._buffer.append(notification)

        logger.info(
            "operator_notified",
            code=code.value,
            level=notification.level.value,
            **notification.details
        )

        for sink in list(self._sinks):
            try:
                sink(notification)
            except Exception as e:
                logger.error(
                    "notification_sink_failed",
                    code=code.value,
                    error=str(e),
                    error_type=type(e).__name__
                )

        return notification

    def recent(self) -> list[Notification]:
        """Buffered notifications, oldest first."""
        return list(self._buffer)

    def drain(self) -> list[Notification]:
        """Return and clear buffered notifications."""
        pending = list(self._buffer)
        self._buffer.clear()
        return pending

    def codes(self) -> list[NotificationCode]:
        return [n.code for n in self._buffer]


def _plain(value):
    # Enums are stored by value so details stay JSON friendly
    return getattr(value, "value", value)

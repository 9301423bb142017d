"""
Outbound integrations.
"""

from integrations.notifications import Notifier, NotificationSink
from integrations.notification_messages import get_message

__all__ = [
    "Notifier",
    "NotificationSink",
    "get_message",
]

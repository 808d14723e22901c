"""Logging and user-notification helpers."""

from .logging_utils import configure_logging
from .notifications import Notification, NotificationQueue

__all__ = [
    "configure_logging",
    "Notification",
    "NotificationQueue",
]

"""Notification dispatch and bundled local notification centers."""

from .base import (
    DeliveryResult,
    DeliveryStatus,
    LocalNotificationCenter,
    NotificationDispatcher,
)
from .file_delivery import FileNotificationCenter
from .stdout_delivery import StdoutNotificationCenter

__all__ = [
    "DeliveryResult",
    "DeliveryStatus",
    "FileNotificationCenter",
    "LocalNotificationCenter",
    "NotificationDispatcher",
    "StdoutNotificationCenter",
]

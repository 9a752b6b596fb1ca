"""
Platform adapter contracts.

Abstract location, notification and geocoding subsystems, plus simulated
implementations that stand in for the OS in tests and replays.
"""

from .base import (
    LocationSubsystem,
    MonitoringOptions,
    NotificationCategory,
    NotificationCenter,
    NotificationRequest,
    ReverseGeocoder,
)

__all__ = [
    "LocationSubsystem",
    "MonitoringOptions",
    "NotificationCategory",
    "NotificationCenter",
    "NotificationRequest",
    "ReverseGeocoder",
]

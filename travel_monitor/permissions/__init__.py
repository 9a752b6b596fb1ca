"""Permission gateways for location and notification authorization."""

from .gateways import LocationPermissionGateway, NotificationPermissionGateway

__all__ = ["LocationPermissionGateway", "NotificationPermissionGateway"]

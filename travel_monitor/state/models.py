"""
Data models for the travel region monitor.

This module defines the authorization enums, the durable monitor
configuration, and the immutable values that flow between the monitor and
its collaborators.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from ..utils.time import ensure_utc


class LocationAuthorization(str, Enum):
    """Location permission tiers reported by the OS."""
    NOT_DETERMINED = "not_determined"
    WHEN_IN_USE = "when_in_use"
    ALWAYS = "always"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def allows_background(self) -> bool:
        """Only the always tier delivers significant changes in the background."""
        return self is LocationAuthorization.ALWAYS


class NotificationAuthorization(str, Enum):
    """Notification permission tiers reported by the OS."""
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    PROVISIONAL = "provisional"
    DENIED = "denied"

    @property
    def allows_delivery(self) -> bool:
        return self in (NotificationAuthorization.AUTHORIZED,
                        NotificationAuthorization.PROVISIONAL)


class MonitorState(str, Enum):
    """Travel region monitor lifecycle states."""
    DISABLED = "disabled"
    AWAITING_PERMISSIONS = "awaiting_permissions"
    MONITORING = "monitoring"
    DEGRADED = "degraded"  # Enabled but not authorized to monitor


@dataclass(frozen=True)
class MonitorConfig:
    """Durable monitor configuration."""
    enabled: bool = False
    last_known_region: Optional[str] = None

    def with_enabled(self, enabled: bool) -> "MonitorConfig":
        return replace(self, enabled=enabled)

    def with_region(self, region: str) -> "MonitorConfig":
        return replace(self, last_known_region=region)


@dataclass(frozen=True)
class PermissionState:
    """Authorization statuses as last read from the OS."""
    location: LocationAuthorization = LocationAuthorization.NOT_DETERMINED
    notification: NotificationAuthorization = NotificationAuthorization.NOT_DETERMINED

    def with_location(self, status: LocationAuthorization) -> "PermissionState":
        return replace(self, location=status)

    def with_notification(self, status: NotificationAuthorization) -> "PermissionState":
        return replace(self, notification=status)


@dataclass(frozen=True)
class LocationFix:
    """A single approximate position reported by the monitoring session."""
    latitude: float
    longitude: float
    timestamp: datetime

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))


@dataclass(frozen=True)
class RegionChangeEvent:
    """An accepted change of resolved region."""
    new_region: str
    timestamp: datetime
    previous_region: Optional[str] = None


@dataclass(frozen=True)
class StateTransition:
    """Result of reconciling the monitor state against its inputs."""
    from_state: MonitorState
    to_state: MonitorState
    trigger: str
    start_session: bool = False
    stop_session: bool = False

    @property
    def changed(self) -> bool:
        return self.from_state != self.to_state


@dataclass(frozen=True)
class MonitorSnapshot:
    """Observable monitor fields, as handed to UI listeners."""
    enabled: bool
    is_monitoring: bool
    state: MonitorState
    location_authorization: LocationAuthorization
    notification_authorization: NotificationAuthorization
    last_known_region: Optional[str] = None
    pending_events: int = field(default=0, compare=False)

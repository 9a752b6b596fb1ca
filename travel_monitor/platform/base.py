"""Boundary contracts for the OS subsystems the monitor depends on."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..state.events import EventSink
from ..state.models import (
    LocationAuthorization,
    LocationFix,
    NotificationAuthorization,
)


@dataclass(frozen=True)
class MonitoringOptions:
    """How the OS should deliver significant location changes."""
    desired_accuracy_m: float = 3000.0
    distance_filter_m: Optional[float] = None
    pauses_automatically: bool = True


@dataclass(frozen=True)
class NotificationCategory:
    """Notification category registered once notifications are granted."""
    identifier: str
    actions: tuple[str, ...] = ()
    custom_dismiss_action: bool = True


@dataclass(frozen=True)
class NotificationRequest:
    """A local notification to present immediately."""
    identifier: str
    title: str
    body: str
    category: str
    sound: Optional[str] = "default"
    user_info: dict = field(default_factory=dict)


class LocationSubsystem(ABC):
    """OS location services: authorization and significant-change delivery."""

    @property
    @abstractmethod
    def authorization_status(self) -> LocationAuthorization:
        """Cached authorization status; never prompts."""

    @abstractmethod
    async def request_when_in_use(self) -> LocationAuthorization:
        """Show the when-in-use prompt and return the status the user picked."""

    @abstractmethod
    async def request_always(self) -> LocationAuthorization:
        """Show the always prompt and return the resulting status."""

    @abstractmethod
    def start_significant_change_monitoring(self, options: MonitoringOptions) -> None:
        """Begin low-power significant-change delivery."""

    @abstractmethod
    def stop_significant_change_monitoring(self) -> None:
        """End significant-change delivery."""

    @abstractmethod
    def attach(self, sink: EventSink) -> None:
        """
        Register where authorization changes and fixes are pushed.

        Implementations translate their native callbacks into
        AuthorizationChanged and LocationFixReceived events.
        """


class NotificationCenter(ABC):
    """OS local notification center."""

    @abstractmethod
    async def get_settings(self) -> NotificationAuthorization:
        """Read the current notification authorization."""

    @abstractmethod
    async def request_authorization(self, options: tuple[str, ...]) -> bool:
        """Prompt for authorization; returns whether it was granted."""

    @abstractmethod
    def set_categories(self, categories: list[NotificationCategory]) -> None:
        """Register notification categories."""

    @abstractmethod
    async def submit(self, request: NotificationRequest) -> None:
        """Present a notification now; raises on failure."""


class ReverseGeocoder(ABC):
    """Converts a coordinate into a coarse region label."""

    @abstractmethod
    async def resolve(self, fix: LocationFix) -> Optional[str]:
        """Return the region label, or None when nothing was found."""

"""
Typed events crossing the platform boundary.

Platform adapters translate native OS callbacks into these events and push
them into the monitor's queue; a single worker applies them in delivery
order.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Union

from ..utils.time import utc_now
from .models import LocationAuthorization, LocationFix


@dataclass(frozen=True)
class AuthorizationChanged:
    """The OS reported a new location authorization status."""
    status: LocationAuthorization
    received_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class LocationFixReceived:
    """The monitoring session delivered a new approximate position."""
    fix: LocationFix
    received_at: datetime = field(default_factory=utc_now)


MonitorEvent = Union[AuthorizationChanged, LocationFixReceived]
EventSink = Callable[[MonitorEvent], None]

"""
Simulated OS subsystems.

In-memory stand-ins for the location services, notification center and
reverse geocoder. They answer permission prompts with scripted choices,
count every call made against them and push events through the attached
sink exactly as a native adapter would.
"""

import asyncio
from collections import deque
from datetime import datetime
from typing import Iterable, Optional, Union

from ..logging.config import get_logger
from ..state.events import AuthorizationChanged, EventSink, LocationFixReceived
from ..state.models import (
    LocationAuthorization,
    LocationFix,
    NotificationAuthorization,
)
from ..utils.time import utc_now
from .base import (
    LocationSubsystem,
    MonitoringOptions,
    NotificationCategory,
    NotificationCenter,
    NotificationRequest,
    ReverseGeocoder,
)

logger = get_logger(__name__)

GeocoderResponse = Union[Optional[str], BaseException]


class SimulatedLocationSubsystem(LocationSubsystem):
    """Location services driven by scripted prompt answers."""

    def __init__(
        self,
        status: LocationAuthorization = LocationAuthorization.NOT_DETERMINED,
        when_in_use_answer: LocationAuthorization = LocationAuthorization.WHEN_IN_USE,
        always_answer: LocationAuthorization = LocationAuthorization.ALWAYS,
        prompt_delay: float = 0.0
    ):
        self._status = status
        self.when_in_use_answer = when_in_use_answer
        self.always_answer = always_answer
        self.prompt_delay = prompt_delay
        self._sink: Optional[EventSink] = None

        self.when_in_use_requests = 0
        self.always_requests = 0
        self.start_calls = 0
        self.stop_calls = 0
        self.monitoring = False
        self.options: Optional[MonitoringOptions] = None

    @property
    def authorization_status(self) -> LocationAuthorization:
        return self._status

    async def request_when_in_use(self) -> LocationAuthorization:
        self.when_in_use_requests += 1
        if self.prompt_delay:
            await asyncio.sleep(self.prompt_delay)
        if self._status == LocationAuthorization.NOT_DETERMINED:
            self._change(self.when_in_use_answer)
        return self._status

    async def request_always(self) -> LocationAuthorization:
        self.always_requests += 1
        if self.prompt_delay:
            await asyncio.sleep(self.prompt_delay)
        if self._status == LocationAuthorization.WHEN_IN_USE:
            self._change(self.always_answer)
        return self._status

    def start_significant_change_monitoring(self, options: MonitoringOptions) -> None:
        self.start_calls += 1
        self.monitoring = True
        self.options = options

    def stop_significant_change_monitoring(self) -> None:
        self.stop_calls += 1
        self.monitoring = False

    def attach(self, sink: EventSink) -> None:
        self._sink = sink

    def set_authorization(self, status: LocationAuthorization) -> None:
        """Simulate the user changing the permission in system settings."""
        self._change(status)

    def deliver_fix(
        self,
        latitude: float,
        longitude: float,
        timestamp: Optional[datetime] = None
    ) -> LocationFix:
        """Simulate the OS reporting a significant location change."""
        fix = LocationFix(latitude=latitude, longitude=longitude,
                          timestamp=timestamp or utc_now())
        if self._sink is not None:
            self._sink(LocationFixReceived(fix=fix))
        return fix

    def _change(self, status: LocationAuthorization) -> None:
        if status == self._status:
            return
        self._status = status
        if self._sink is not None:
            self._sink(AuthorizationChanged(status=status))


class SimulatedNotificationCenter(NotificationCenter):
    """Notification center that records submissions in memory."""

    def __init__(
        self,
        status: NotificationAuthorization = NotificationAuthorization.NOT_DETERMINED,
        grant: bool = True,
        submit_error: Optional[BaseException] = None,
        settings_error: Optional[BaseException] = None
    ):
        self._status = status
        self.grant = grant
        self.submit_error = submit_error
        self.settings_error = settings_error

        self.authorization_requests = 0
        self.settings_reads = 0
        self.categories: list[NotificationCategory] = []
        self.delivered: list[NotificationRequest] = []
        self.submitted: list[NotificationRequest] = []

    async def get_settings(self) -> NotificationAuthorization:
        self.settings_reads += 1
        if self.settings_error is not None:
            raise self.settings_error
        return self._status

    async def request_authorization(self, options: tuple[str, ...]) -> bool:
        self.authorization_requests += 1
        if self._status != NotificationAuthorization.NOT_DETERMINED:
            return self._status.allows_delivery
        self._status = (NotificationAuthorization.AUTHORIZED if self.grant
                        else NotificationAuthorization.DENIED)
        return self.grant

    def set_categories(self, categories: list[NotificationCategory]) -> None:
        self.categories = list(categories)

    async def submit(self, request: NotificationRequest) -> None:
        self.submitted.append(request)
        if self.submit_error is not None:
            raise self.submit_error
        self.delivered.append(request)

    def set_authorization(self, status: NotificationAuthorization) -> None:
        """Simulate the user changing the permission in system settings."""
        self._status = status


class ScriptedGeocoder(ReverseGeocoder):
    """
    Reverse geocoder answering from a script.

    Each resolve call consumes the next response: a label, None for "no
    result", or an exception to raise. Once the script is exhausted the
    default label is returned. An optional gate holds every call until set.
    """

    def __init__(
        self,
        responses: Iterable[GeocoderResponse] = (),
        default: Optional[str] = None,
        gate: Optional[asyncio.Event] = None
    ):
        self._responses: deque[GeocoderResponse] = deque(responses)
        self.default = default
        self.gate = gate
        self.calls: list[LocationFix] = []

    def queue(self, *responses: GeocoderResponse) -> None:
        self._responses.extend(responses)

    async def resolve(self, fix: LocationFix) -> Optional[str]:
        self.calls.append(fix)
        if self.gate is not None:
            await self.gate.wait()

        response = self._responses.popleft() if self._responses else self.default
        if isinstance(response, BaseException):
            logger.debug("Scripted geocoder failure", error=str(response))
            raise response
        return response

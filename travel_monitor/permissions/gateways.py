"""
Permission gateways for the location and notification subsystems.

Gateways hold no state of their own beyond what the OS last reported. They
prompt only when the OS says the decision is still open and never re-prompt
after a denial: a denial stays terminal until the user changes it in system
settings, which the monitor picks up on its next sync.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..config.defaults import LocationParams, NotificationParams
from ..errors import PermissionRequestError
from ..logging.config import get_permission_logger, log_permission_decision
from ..platform.base import LocationSubsystem, NotificationCategory, NotificationCenter
from ..state.models import LocationAuthorization, NotificationAuthorization

permission_logger = get_permission_logger(__name__)

T = TypeVar("T")


async def _bounded(awaitable: Awaitable[T], timeout: Optional[float],
                   permission: str, operation: str) -> T:
    """Await an OS call, converting failures into PermissionRequestError."""
    try:
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        raise PermissionRequestError(
            f"{permission} {operation} timed out after {timeout}s",
            permission=permission
        ) from e
    except PermissionRequestError:
        raise
    except Exception as e:
        raise PermissionRequestError(
            f"{permission} {operation} failed: {e}",
            permission=permission
        ) from e


class LocationPermissionGateway:
    """Queries and requests location authorization."""

    def __init__(self, subsystem: LocationSubsystem, params: Optional[LocationParams] = None):
        self.subsystem = subsystem
        self.params = params or LocationParams()
        self.logger = permission_logger
        self._always_requested = False

    def current_status(self) -> LocationAuthorization:
        """Cached OS status; never prompts."""
        return self.subsystem.authorization_status

    @property
    def always_requested(self) -> bool:
        return self._always_requested

    async def request_if_undetermined(self) -> LocationAuthorization:
        """
        Show the when-in-use prompt if no decision was made yet.

        Returns immediately with the current status otherwise.
        """
        status = self.current_status()
        if status != LocationAuthorization.NOT_DETERMINED:
            log_permission_decision(self.logger, "location", status.value, False,
                                    "already decided")
            return status

        status = await _bounded(self.subsystem.request_when_in_use(),
                                self.params.request_timeout_seconds,
                                "location", "when-in-use request")
        log_permission_decision(self.logger, "location", status.value, True,
                                "when-in-use prompt answered")
        return status

    async def request_always(self) -> LocationAuthorization:
        """
        Escalate from when-in-use to always.

        The OS shows this prompt at most once; the gateway issues it at most
        once per process and only from the when-in-use tier.
        """
        status = self.current_status()
        if status != LocationAuthorization.WHEN_IN_USE:
            log_permission_decision(self.logger, "location", status.value, False,
                                    "escalation only applies to when-in-use")
            return status
        if self._always_requested:
            log_permission_decision(self.logger, "location", status.value, False,
                                    "always already requested")
            return status

        self._always_requested = True
        status = await _bounded(self.subsystem.request_always(),
                                self.params.request_timeout_seconds,
                                "location", "always request")
        log_permission_decision(self.logger, "location", status.value, True,
                                "always prompt answered")
        return status


class NotificationPermissionGateway:
    """Queries and requests notification authorization."""

    def __init__(self, center: NotificationCenter, params: Optional[NotificationParams] = None):
        self.center = center
        self.params = params or NotificationParams()
        self.logger = permission_logger
        self._status = NotificationAuthorization.NOT_DETERMINED

    def current_status(self) -> NotificationAuthorization:
        """Status as of the last refresh; never suspends."""
        return self._status

    async def refresh(self) -> NotificationAuthorization:
        """Re-read the notification settings from the OS."""
        self._status = await _bounded(self.center.get_settings(),
                                      self.params.timeout_seconds,
                                      "notification", "settings read")
        return self._status

    async def request_if_undetermined(self) -> NotificationAuthorization:
        """
        Prompt for notification authorization if no decision was made yet.

        A granted request also registers the region change category.
        """
        status = await self.refresh()
        if status != NotificationAuthorization.NOT_DETERMINED:
            log_permission_decision(self.logger, "notification", status.value, False,
                                    "already decided")
            return status

        granted = await _bounded(
            self.center.request_authorization(tuple(self.params.authorization_options)),
            self.params.timeout_seconds,
            "notification", "authorization request"
        )
        if granted:
            self.center.set_categories([
                NotificationCategory(identifier=self.params.category_id)
            ])

        status = await self.refresh()
        log_permission_decision(self.logger, "notification", status.value, True,
                                "authorization prompt answered",
                                context={"granted": granted})
        return status

"""Notification dispatch and base classes for local notification centers."""

import asyncio
import time
import uuid
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..config.defaults import NotificationParams
from ..errors import NotificationSubmissionError
from ..logging.config import get_logger
from ..platform.base import NotificationCategory, NotificationCenter, NotificationRequest
from ..state.models import NotificationAuthorization, RegionChangeEvent
from ..utils.time import format_timestamp


class DeliveryStatus(Enum):
    """Notification delivery status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of a notification submission attempt."""
    status: DeliveryStatus
    request_id: Optional[str] = None
    message: Optional[str] = None
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


class NotificationDispatcher:
    """
    Formats and submits local notifications.

    Stateless per call apart from counters. Submission is best-effort with
    fire-immediately semantics: failures come back as a FAILED result and
    are never raised or retried.
    """

    def __init__(self, center: NotificationCenter, params: Optional[NotificationParams] = None):
        self.center = center
        self.params = params or NotificationParams()
        self.logger = get_logger("notification.dispatcher")
        self._delivery_count = 0
        self._error_count = 0

    def build_region_change_request(self, change: RegionChangeEvent) -> NotificationRequest:
        """Build the "welcome to" notification for an accepted region change."""
        return self._build_request(
            title=self.params.title_template.format(region=change.new_region),
            body=self.params.body_template.format(region=change.new_region),
            category=self.params.category_id,
            user_info={
                "region": change.new_region,
                "previous_region": change.previous_region,
                "changed_at": format_timestamp(change.timestamp),
            }
        )

    async def dispatch(self, title: str, body: str, category: str) -> DeliveryResult:
        """Submit a notification that fires immediately."""
        return await self.dispatch_request(
            self._build_request(title=title, body=body, category=category)
        )

    async def dispatch_request(self, request: NotificationRequest) -> DeliveryResult:
        """Submit a prepared notification request."""
        start_time = time.time()
        timeout = self.params.timeout_seconds

        try:
            if timeout is None:
                await self.center.submit(request)
            else:
                await asyncio.wait_for(self.center.submit(request), timeout)

        except Exception as e:
            self._error_count += 1
            self.logger.warning(
                "Notification submission failed",
                request_id=request.identifier,
                category=request.category,
                error=str(e) or type(e).__name__
            )
            return DeliveryResult(
                status=DeliveryStatus.FAILED,
                request_id=request.identifier,
                message=f"Submission error: {str(e) or type(e).__name__}",
                error=e
            )

        self._delivery_count += 1
        delivery_time = int((time.time() - start_time) * 1000)
        self.logger.info(
            "Notification submitted",
            request_id=request.identifier,
            category=request.category,
            delivery_time_ms=delivery_time
        )
        return DeliveryResult(
            status=DeliveryStatus.SUCCESS,
            request_id=request.identifier,
            message="Submitted",
            delivery_time_ms=delivery_time
        )

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0

    def _build_request(self, title: str, body: str, category: str,
                       user_info: Optional[dict] = None) -> NotificationRequest:
        return NotificationRequest(
            identifier=str(uuid.uuid4()),
            title=title,
            body=body,
            category=category,
            sound=self.params.sound,
            user_info=user_info or {},
        )


class LocalNotificationCenter(NotificationCenter):
    """
    Base class for notification centers that present notifications locally.

    Authorization is a configured value instead of an OS prompt; a request
    resolves a not-determined status according to grant_on_request.
    """

    def __init__(self, name: str, authorization: str = "not_determined",
                 grant_on_request: bool = True):
        self.name = name
        self.logger = get_logger(f"notification.center.{name}")
        self._status = NotificationAuthorization(authorization)
        self.grant_on_request = grant_on_request
        self.categories: list[NotificationCategory] = []

    async def get_settings(self) -> NotificationAuthorization:
        return self._status

    async def request_authorization(self, options: tuple[str, ...]) -> bool:
        if self._status == NotificationAuthorization.NOT_DETERMINED:
            self._status = (NotificationAuthorization.AUTHORIZED if self.grant_on_request
                            else NotificationAuthorization.DENIED)
            self.logger.info("Notification authorization resolved",
                             center=self.name, status=self._status.value,
                             options=list(options))
        return self._status.allows_delivery

    def set_categories(self, categories: list[NotificationCategory]) -> None:
        self.categories = list(categories)

    async def submit(self, request: NotificationRequest) -> None:
        try:
            await asyncio.to_thread(self._present, request)
        except (OSError, TypeError, ValueError) as e:
            raise NotificationSubmissionError(
                f"{self.name} could not present notification: {e}",
                request_id=request.identifier,
                category=request.category
            ) from e

    @abstractmethod
    def _present(self, request: NotificationRequest) -> None:
        """Write the notification out; runs in a worker thread."""

    def health_check(self) -> bool:
        """Check if the notification center can present notifications."""
        return True

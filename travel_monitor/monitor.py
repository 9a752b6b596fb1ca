"""
Travel region monitor.

Owns the travel notifications toggle and coordinates the permission
gateways, the significant-change monitoring session, region resolution and
notification dispatch.

The monitor behaves as an actor. Every state-mutating operation runs under a
single asyncio.Lock, and platform callbacks arrive as typed events on a FIFO
queue drained by one worker task, so location fixes and authorization changes
are applied in delivery order. Reverse geocoding suspends outside the lock:
the toggle stays responsive while a lookup is outstanding, and a lookup that
completes after the feature was disabled is dropped. Each fix is stamped with
an arrival number, so a lookup that finishes after a newer fix was committed
is dropped as well, even when on_location_fix is called directly.

Nothing here propagates a failure to the caller. Permission denials are
status values; geocoding, notification and persistence hiccups are logged and
kept as Outcome records in suppressed_outcomes.
"""

import asyncio
from collections import deque
from contextlib import suppress
from typing import Awaitable, Callable, Optional

from .config.defaults import MonitorSettings, get_default_settings
from .delivery.base import NotificationDispatcher
from .errors import NotificationSubmissionError, SystemFailureError
from .geocoding.resolver import RegionResolver
from .location.session import MonitoringSession
from .logging.config import get_logger, get_state_logger, log_state_transition
from .permissions.gateways import LocationPermissionGateway, NotificationPermissionGateway
from .persistence.settings_store import DurableStore, MonitorConfigRepository
from .platform.base import LocationSubsystem, NotificationCenter, ReverseGeocoder
from .state.events import AuthorizationChanged, LocationFixReceived, MonitorEvent
from .state.machine import (
    check_transition,
    detect_region_change,
    initial_state,
    plan_reconciliation,
)
from .state.models import (
    LocationAuthorization,
    LocationFix,
    MonitorConfig,
    MonitorSnapshot,
    MonitorState,
    NotificationAuthorization,
    PermissionState,
    RegionChangeEvent,
    StateTransition,
)
from .utils.outcome import Outcome

logger = get_logger(__name__)
state_logger = get_state_logger(__name__)

SnapshotListener = Callable[[MonitorSnapshot], None]


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class TravelRegionMonitor:
    """Background region change monitor behind the travel notifications toggle."""

    def __init__(
        self,
        store: DurableStore,
        location: LocationSubsystem,
        notifications: NotificationCenter,
        geocoder: ReverseGeocoder,
        settings: Optional[MonitorSettings] = None
    ) -> None:
        self.settings = settings or get_default_settings()
        self.logger = logger

        self.repository = MonitorConfigRepository(store, self.settings.storage)
        self.location_gateway = LocationPermissionGateway(location, self.settings.location)
        self.notification_gateway = NotificationPermissionGateway(
            notifications, self.settings.notifications
        )
        self.session = MonitoringSession(location, self.settings.location)
        self.resolver = RegionResolver(geocoder, self.settings.geocoding)
        self.dispatcher = NotificationDispatcher(notifications, self.settings.notifications)

        self.suppressed_outcomes: deque[Outcome] = deque(
            maxlen=self.settings.runtime.outcome_history
        )
        self._lock = asyncio.Lock()
        self._events: asyncio.Queue[MonitorEvent] = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._listeners: list[SnapshotListener] = []
        # Bumped on disable; resolutions started under an older generation are dropped
        self._generation = 0
        # Arrival numbers of location fixes; older fixes never overwrite newer ones
        self._fix_sequence = 0
        self._committed_sequence = 0

        self._config = self._load_config()
        self._permissions = PermissionState(location=self.location_gateway.current_status())
        self._state = initial_state(self._config.enabled, self._permissions.location)

        location.attach(self.post_event)

        self.logger.info(
            "Travel region monitor initialized",
            enabled=self._config.enabled,
            state=self._state.value,
            location_authorization=self._permissions.location.value
        )

    # Observable fields

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def is_monitoring(self) -> bool:
        return self.session.is_active

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def location_authorization(self) -> LocationAuthorization:
        return self._permissions.location

    @property
    def notification_authorization(self) -> NotificationAuthorization:
        return self._permissions.notification

    @property
    def last_known_region(self) -> Optional[str]:
        return self._config.last_known_region

    def snapshot(self) -> MonitorSnapshot:
        """Current observable fields as one immutable value."""
        return MonitorSnapshot(
            enabled=self._config.enabled,
            is_monitoring=self.session.is_active,
            state=self._state,
            location_authorization=self._permissions.location,
            notification_authorization=self._permissions.notification,
            last_known_region=self._config.last_known_region,
            pending_events=self._events.qsize(),
        )

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call listener with a fresh snapshot after every mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        with suppress(ValueError):
            self._listeners.remove(listener)

    # Lifecycle

    async def start(self) -> None:
        """
        Start the event worker and reconcile with the OS.

        This is the cold start: the state follows the persisted toggle and the
        current authorization, and no permission prompt is shown.
        """
        if self._worker is None or self._worker.done():
            self._loop = asyncio.get_running_loop()
            self._worker = asyncio.create_task(
                self._process_events(), name="travel-region-monitor-events"
            )
        await self.sync()

    async def shutdown(self) -> None:
        """Stop the event worker. The monitoring session is left as it is."""
        worker, self._worker = self._worker, None
        if worker is None:
            return
        worker.cancel()
        with suppress(asyncio.CancelledError):
            await worker
        self.logger.info("Travel region monitor event worker stopped")

    def post_event(self, event: MonitorEvent) -> None:
        """
        Queue a platform event for the worker.

        Safe to call from another thread once start() has run.
        """
        loop = self._loop
        if loop is not None and not loop.is_closed() and _running_loop() is not loop:
            loop.call_soon_threadsafe(self._events.put_nowait, event)
        else:
            self._events.put_nowait(event)

    async def drain(self) -> None:
        """Wait until every queued event has been applied."""
        if self._worker is not None and not self._worker.done():
            await self._events.join()
            return

        while not self._events.empty():
            event = self._events.get_nowait()
            try:
                await self._handle_event(event)
            finally:
                self._events.task_done()

    # Mutating entry points

    async def set_enabled(self, enabled: bool) -> None:
        """
        Turn travel notifications on or off.

        Enabling asks for notification permission, then location permission
        (escalating when-in-use to always), then starts monitoring if allowed.
        Disabling stops monitoring and persists the toggle before returning.
        Setting the current value again does nothing.
        """
        async with self._lock:
            if enabled == self._config.enabled:
                return

            self._config = self._config.with_enabled(enabled)
            self._persist("persist_enabled", self.repository.save_enabled, enabled)

            if enabled:
                self._transition(MonitorState.AWAITING_PERMISSIONS, "set_enabled")
                self._publish()
                await self._ensure_permissions()
                self._reconcile("permissions_resolved")
            else:
                self._generation += 1
                self.session.stop()
                self._transition(MonitorState.DISABLED, "set_enabled")

            self._publish()

    async def sync(self) -> None:
        """
        Re-read both authorizations and reconcile monitoring.

        Call on launch, on returning to the foreground and after the user may
        have changed permissions in system settings. Repeated calls without an
        external change make no further session calls.
        """
        async with self._lock:
            self._permissions = self._permissions.with_location(
                self.location_gateway.current_status()
            )
            await self._refresh_notification_status()
            self._reconcile("sync")
            self._publish()

    async def request_permissions(self) -> None:
        """Ask for any undecided permission. Failures leave state unchanged."""
        async with self._lock:
            await self._ensure_permissions()
            self._reconcile("permissions_requested")
            self._publish()

    # Platform callbacks

    async def on_authorization_changed(self, status: LocationAuthorization) -> None:
        """
        Apply a location authorization change reported by the OS.

        A when-in-use grant is escalated to always right away; this is the
        only permission request the monitor issues without a user action.
        The cached OS status wins over the reported one, so a stale queued
        event never starts or stops the session.
        """
        async with self._lock:
            current = self.location_gateway.current_status()
            if current != status:
                self.logger.debug(
                    "Authorization event superseded",
                    reported=status.value,
                    current=current.value
                )
            self._permissions = self._permissions.with_location(current)

            if current == LocationAuthorization.WHEN_IN_USE:
                escalation = await self._attempt(
                    "escalate_location", self.location_gateway.request_always()
                )
                if escalation.ok:
                    self._permissions = self._permissions.with_location(escalation.value)

            self._reconcile("authorization_changed")
            self._publish()

    async def on_location_fix(self, fix: LocationFix) -> Optional[RegionChangeEvent]:
        """
        Run the region change pipeline for one fix.

        Returns:
            The accepted RegionChangeEvent, or None when the fix was dropped
            or resolved to the region already known
        """
        generation = self._generation
        self._fix_sequence += 1
        sequence = self._fix_sequence

        resolution = await self._attempt("resolve_region", self.resolver.resolve(fix))
        if not resolution.ok:
            return None

        async with self._lock:
            if generation != self._generation:
                self._record(Outcome.skipped(
                    "commit_region", "travel notifications disabled while resolving"
                ))
                self.logger.info("Dropping region resolved after disable")
                return None

            if not self._config.enabled:
                self._record(Outcome.skipped(
                    "commit_region", "travel notifications disabled"
                ))
                self.logger.info("Dropping region while travel notifications are off")
                return None

            if sequence < self._committed_sequence:
                self._record(Outcome.skipped(
                    "commit_region", "superseded by a newer fix"
                ))
                self.logger.info("Dropping region resolved out of order")
                return None
            self._committed_sequence = sequence

            change = detect_region_change(
                self._config.last_known_region, resolution.value, fix.timestamp
            )
            if change is None:
                self.logger.debug("Region unchanged", region=resolution.value)
                return None

            self._config = self._config.with_region(change.new_region)
            self._persist("persist_last_region", self.repository.save_last_region,
                          change.new_region)
            self.logger.info(
                "Region changed",
                previous_region=change.previous_region,
                new_region=change.new_region
            )
            self._publish()

            await self._notify_region_change(change)
            return change

    # Internals

    async def _process_events(self) -> None:
        while True:
            event = await self._events.get()
            try:
                await self._handle_event(event)
            except SystemFailureError as e:
                self.logger.error("Event handling failed", event_type=type(event).__name__,
                                  error=str(e))
                self._record(Outcome.failed("handle_event", e))
            except Exception as e:
                self.logger.exception("Unexpected error handling event",
                                      event_type=type(event).__name__)
                self._record(Outcome.failed("handle_event", e))
            finally:
                self._events.task_done()

    async def _handle_event(self, event: MonitorEvent) -> None:
        if isinstance(event, AuthorizationChanged):
            await self.on_authorization_changed(event.status)
        elif isinstance(event, LocationFixReceived):
            await self.on_location_fix(event.fix)
        else:
            self.logger.warning("Ignoring unknown event", event_type=type(event).__name__)

    async def _ensure_permissions(self) -> list[Outcome]:
        """Notifications first, then location; each prompt at most once."""
        outcomes = []

        notification = await self._attempt(
            "request_notification_permission",
            self.notification_gateway.request_if_undetermined()
        )
        outcomes.append(notification)
        if notification.ok:
            self._permissions = self._permissions.with_notification(notification.value)

        location = await self._attempt(
            "request_location_permission",
            self.location_gateway.request_if_undetermined()
        )
        outcomes.append(location)
        if location.ok:
            status = location.value
            if status == LocationAuthorization.WHEN_IN_USE:
                escalation = await self._attempt(
                    "escalate_location", self.location_gateway.request_always()
                )
                outcomes.append(escalation)
                if escalation.ok:
                    status = escalation.value
            self._permissions = self._permissions.with_location(status)

        return outcomes

    async def _refresh_notification_status(self) -> Outcome:
        outcome = await self._attempt(
            "refresh_notification_settings", self.notification_gateway.refresh()
        )
        if outcome.ok:
            self._permissions = self._permissions.with_notification(outcome.value)
        return outcome

    async def _notify_region_change(self, change: RegionChangeEvent) -> Outcome:
        """One notification attempt per accepted change; never retried."""
        await self._refresh_notification_status()
        status = self._permissions.notification

        if not status.allows_delivery:
            outcome = Outcome.skipped(
                "dispatch_notification", f"notification authorization is {status.value}"
            )
            self._record(outcome)
            self.logger.info("Region change notification suppressed",
                             notification_authorization=status.value)
            return outcome

        request = self.dispatcher.build_region_change_request(change)
        result = await self.dispatcher.dispatch_request(request)
        if not result.ok:
            error = result.error or NotificationSubmissionError(
                result.message or "submission failed", request_id=result.request_id
            )
            outcome = Outcome.failed("dispatch_notification", error, reason=result.message)
            self._record(outcome)
            return outcome

        return Outcome.succeeded("dispatch_notification", result)

    def _reconcile(self, trigger: str) -> StateTransition:
        plan = plan_reconciliation(
            current=self._state,
            enabled=self._config.enabled,
            location=self._permissions.location,
            session_active=self.session.is_active,
            trigger=trigger,
        )
        if plan.stop_session:
            self.session.stop()
        if plan.start_session:
            self.session.start()
        self._transition(plan.to_state, trigger)
        return plan

    def _transition(self, to_state: MonitorState, trigger: str) -> None:
        if to_state == self._state:
            return
        check_transition(self._state, to_state)
        log_state_transition(
            state_logger,
            from_state=self._state.value,
            to_state=to_state.value,
            trigger=trigger,
            context={
                "enabled": self._config.enabled,
                "location_authorization": self._permissions.location.value,
                "notification_authorization": self._permissions.notification.value,
                "is_monitoring": self.session.is_active,
            }
        )
        self._state = to_state

    async def _attempt(self, operation: str, awaitable: Awaitable) -> Outcome:
        """Await a best-effort call, turning any failure into a recorded Outcome."""
        try:
            value = await awaitable
        except Exception as e:
            outcome = Outcome.failed(operation, e)
            self._record(outcome)
            if getattr(e, "recoverable", True):
                self.logger.warning("Best-effort operation failed",
                                    operation=operation, error=outcome.reason)
            else:
                self.logger.error("Best-effort operation failed",
                                  operation=operation, error=outcome.reason)
            return outcome
        return Outcome.succeeded(operation, value)

    def _persist(self, operation: str, write: Callable, value) -> Outcome:
        try:
            write(value)
        except Exception as e:
            outcome = Outcome.failed(operation, e)
            self._record(outcome)
            self.logger.error("Failed to persist monitor configuration",
                              operation=operation, error=outcome.reason)
            return outcome
        return Outcome.succeeded(operation, value)

    def _load_config(self) -> MonitorConfig:
        try:
            return self.repository.load()
        except Exception as e:
            self._record(Outcome.failed("load_config", e))
            self.logger.error("Failed to load monitor configuration, using defaults",
                              error=str(e))
            return MonitorConfig()

    def _record(self, outcome: Outcome) -> None:
        self.suppressed_outcomes.append(outcome)

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self.logger.exception("Snapshot listener failed")

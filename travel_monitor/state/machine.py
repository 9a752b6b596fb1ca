"""
Core travel region state machine logic.

Pure functions that decide the monitor state from the enabled flag and the
location authorization, plan the session start/stop needed to reach it, and
detect region changes. The monitor applies their results; nothing here
touches the OS or the durable store.
"""

from datetime import datetime
from typing import Optional

from ..errors import StateTransitionError
from .models import (
    LocationAuthorization,
    MonitorState,
    NotificationAuthorization,
    RegionChangeEvent,
    StateTransition,
)

ALLOWED_TRANSITIONS: dict[MonitorState, frozenset[MonitorState]] = {
    MonitorState.DISABLED: frozenset({MonitorState.AWAITING_PERMISSIONS}),
    MonitorState.AWAITING_PERMISSIONS: frozenset({
        MonitorState.MONITORING,
        MonitorState.DEGRADED,
        MonitorState.DISABLED,
    }),
    MonitorState.MONITORING: frozenset({MonitorState.DEGRADED, MonitorState.DISABLED}),
    MonitorState.DEGRADED: frozenset({MonitorState.MONITORING, MonitorState.DISABLED}),
}

LOCATION_DESCRIPTIONS = {
    LocationAuthorization.ALWAYS: "Always",
    LocationAuthorization.WHEN_IN_USE: "When In Use",
    LocationAuthorization.DENIED: "Denied",
    LocationAuthorization.RESTRICTED: "Restricted",
    LocationAuthorization.NOT_DETERMINED: "Not Determined",
}

NOTIFICATION_DESCRIPTIONS = {
    NotificationAuthorization.AUTHORIZED: "Authorized",
    NotificationAuthorization.PROVISIONAL: "Authorized",
    NotificationAuthorization.DENIED: "Denied",
    NotificationAuthorization.NOT_DETERMINED: "Not Determined",
}


def derive_state(enabled: bool, location: LocationAuthorization) -> MonitorState:
    """
    Settled state for a given toggle value and location authorization.

    Never returns AWAITING_PERMISSIONS; that state only exists while an
    explicit enable is prompting the user.
    """
    if not enabled:
        return MonitorState.DISABLED
    if location.allows_background:
        return MonitorState.MONITORING
    return MonitorState.DEGRADED


def is_transition_allowed(from_state: MonitorState, to_state: MonitorState) -> bool:
    return from_state == to_state or to_state in ALLOWED_TRANSITIONS[from_state]


def check_transition(from_state: MonitorState, to_state: MonitorState) -> None:
    """Raise StateTransitionError for a transition the machine does not define."""
    if not is_transition_allowed(from_state, to_state):
        raise StateTransitionError(
            f"Transition {from_state.value} -> {to_state.value} is not defined",
            current_state=from_state.value,
            attempted_state=to_state.value,
        )


def plan_reconciliation(
    current: MonitorState,
    enabled: bool,
    location: LocationAuthorization,
    session_active: bool,
    trigger: str
) -> StateTransition:
    """
    Work out the target state and the session calls needed to reach it.

    The session is started only when it is not already running and stopped
    only when it is, so repeated reconciliation against unchanged inputs
    plans no calls at all.
    """
    target = derive_state(enabled, location)
    should_run = target == MonitorState.MONITORING

    return StateTransition(
        from_state=current,
        to_state=target,
        trigger=trigger,
        start_session=should_run and not session_active,
        stop_session=not should_run and session_active,
    )


def initial_state(enabled: bool, location: LocationAuthorization) -> MonitorState:
    """State on process start; cold start never prompts for permissions."""
    return derive_state(enabled, location)


def detect_region_change(
    last_known_region: Optional[str],
    resolved_region: Optional[str],
    timestamp: datetime
) -> Optional[RegionChangeEvent]:
    """
    Compare a freshly resolved region with the last known one.

    Returns:
        RegionChangeEvent when the label is non-empty and differs exactly
        (case-sensitive) from the last known region, None otherwise
    """
    if not resolved_region:
        return None
    if resolved_region == last_known_region:
        return None

    return RegionChangeEvent(
        previous_region=last_known_region,
        new_region=resolved_region,
        timestamp=timestamp,
    )


def describe_location_authorization(status: LocationAuthorization) -> str:
    """Display string for a location authorization status."""
    return LOCATION_DESCRIPTIONS.get(status, "Unknown")


def describe_notification_authorization(status: NotificationAuthorization) -> str:
    """Display string for a notification authorization status."""
    return NOTIFICATION_DESCRIPTIONS.get(status, "Unknown")

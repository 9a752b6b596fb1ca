"""
Error classification for the travel monitor.

Permission denials are never errors; they surface as authorization status
values. What remains splits into transient failures of external collaborators
(absorbed and logged, the next location fix is the implicit retry) and system
failures of the monitor's own machinery.
"""

from .external_failures import (
    TransientExternalError,
    GeocodingError,
    NotificationSubmissionError,
    PermissionRequestError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    StateTransitionError,
    ConfigurationError,
)

__all__ = [
    # Transient external failures
    "TransientExternalError",
    "GeocodingError",
    "NotificationSubmissionError",
    "PermissionRequestError",
    # System failures
    "SystemFailureError",
    "PersistenceError",
    "StateTransitionError",
    "ConfigurationError",
]

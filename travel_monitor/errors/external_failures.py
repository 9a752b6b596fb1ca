"""
Transient failures of external collaborators.

These exceptions represent hiccups in OS subsystems or network services that
the monitor absorbs. None of them is retried; the next natural event takes
over.
"""

from typing import Any, Dict, Optional


class TransientExternalError(Exception):
    """Base class for recoverable failures of an external collaborator."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class GeocodingError(TransientExternalError):
    """Reverse geocoding failed or timed out."""

    def __init__(self, message: str, latitude: Optional[float] = None,
                 longitude: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.latitude = latitude
        self.longitude = longitude


class NotificationSubmissionError(TransientExternalError):
    """The notification subsystem rejected or failed a submission."""

    def __init__(self, message: str, request_id: Optional[str] = None,
                 category: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.request_id = request_id
        self.category = category


class PermissionRequestError(TransientExternalError):
    """Querying or requesting an authorization failed at the OS level."""

    def __init__(self, message: str, permission: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.permission = permission

"""
System failure error classifications.

These exceptions represent failures of the monitor's own machinery: the
durable store, the state machine or its configuration.
"""

from typing import Any, Dict, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Durable key-value store failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.key = key


class StateTransitionError(SystemFailureError):
    """A transition that the monitor state machine does not allow."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_state: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_state = attempted_state


class ConfigurationError(SystemFailureError):
    """Invalid or unreadable configuration."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []

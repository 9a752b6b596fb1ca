"""Location monitoring session."""

from .session import MonitoringSession

__all__ = ["MonitoringSession"]

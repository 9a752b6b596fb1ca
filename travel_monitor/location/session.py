"""Significant-change location monitoring session."""

from typing import Optional

from ..config.defaults import LocationParams
from ..logging.config import get_logger
from ..platform.base import LocationSubsystem, MonitoringOptions

logger = get_logger(__name__)


class MonitoringSession:
    """
    Start/stop wrapper around the OS significant-change primitive.

    Both calls are idempotent: the subsystem is only touched when the session
    actually changes state. The session applies no filtering of its own.
    """

    def __init__(self, subsystem: LocationSubsystem, params: Optional[LocationParams] = None):
        self.subsystem = subsystem
        params = params or LocationParams()
        self.options = MonitoringOptions(
            desired_accuracy_m=params.desired_accuracy_m,
            distance_filter_m=params.distance_filter_m,
            pauses_automatically=params.pauses_automatically,
        )
        self._active = False
        self.start_count = 0
        self.stop_count = 0

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> bool:
        """Start monitoring; returns False if it was already running."""
        if self._active:
            return False

        self.subsystem.start_significant_change_monitoring(self.options)
        self._active = True
        self.start_count += 1
        logger.info(
            "Significant-change monitoring started",
            desired_accuracy_m=self.options.desired_accuracy_m,
            pauses_automatically=self.options.pauses_automatically
        )
        return True

    def stop(self) -> bool:
        """Stop monitoring; returns False if it was not running."""
        if not self._active:
            return False

        self.subsystem.stop_significant_change_monitoring()
        self._active = False
        self.stop_count += 1
        logger.info("Significant-change monitoring stopped")
        return True

"""
Utility functions module.

Time handling and outcome records shared across the monitor.
"""

from .outcome import Outcome, OutcomeStatus
from .time import ensure_utc, format_timestamp, parse_timestamp, utc_now

__all__ = [
    "Outcome",
    "OutcomeStatus",
    "ensure_utc",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]

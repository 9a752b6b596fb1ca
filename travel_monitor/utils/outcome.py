"""Outcome records for best-effort operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .time import utc_now


class OutcomeStatus(str, Enum):
    """Result of a best-effort operation."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    """
    What happened to a best-effort operation.

    Public monitor coroutines discard these, but every swallowed failure is
    kept as an Outcome so it can be inspected after the fact.
    """
    operation: str
    status: OutcomeStatus
    value: Any = None
    error: Optional[BaseException] = None
    reason: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED

    @classmethod
    def succeeded(cls, operation: str, value: Any = None) -> "Outcome":
        return cls(operation=operation, status=OutcomeStatus.SUCCEEDED, value=value)

    @classmethod
    def failed(cls, operation: str, error: BaseException,
               reason: Optional[str] = None) -> "Outcome":
        return cls(
            operation=operation,
            status=OutcomeStatus.FAILED,
            error=error,
            reason=reason or str(error) or type(error).__name__,
        )

    @classmethod
    def skipped(cls, operation: str, reason: str) -> "Outcome":
        return cls(operation=operation, status=OutcomeStatus.SKIPPED, reason=reason)

"""Time entry approval state machine with transition validation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from payroll_admin.models.time_entry import TimeEntryStatus

if TYPE_CHECKING:
    from payroll_admin.models import TimeEntry


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TimeEntryStateMachine:
    """State machine for time entry approval.

    Allowed transitions:
    - PENDING → APPROVED | REJECTED
    - APPROVED → APPROVED (re-approval) | REJECTED | PENDING
    - REJECTED → REJECTED | APPROVED | PENDING

    No state is terminal. Entering APPROVED stamps the approval time and
    approver; entering any other state clears both.
    """

    # Define valid transitions: {from_status: [allowed_to_statuses]}
    VALID_TRANSITIONS: dict[str, list[str]] = {
        TimeEntryStatus.PENDING: [TimeEntryStatus.APPROVED, TimeEntryStatus.REJECTED],
        TimeEntryStatus.APPROVED: [
            TimeEntryStatus.APPROVED,
            TimeEntryStatus.REJECTED,
            TimeEntryStatus.PENDING,
        ],
        TimeEntryStatus.REJECTED: [
            TimeEntryStatus.REJECTED,
            TimeEntryStatus.APPROVED,
            TimeEntryStatus.PENDING,
        ],
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def apply(
        cls,
        entry: TimeEntry,
        to_status: str,
        approved_by: str | None = None,
        now: datetime | None = None,
    ) -> TimeEntry:
        """Move an entry to a new status, stamping or clearing approval."""
        if isinstance(to_status, TimeEntryStatus):
            to_status = to_status.value
        cls.validate_transition(entry.status, to_status)

        entry.status = to_status
        if to_status == TimeEntryStatus.APPROVED:
            entry.approved_at = now or datetime.now(timezone.utc)
            entry.approved_by = approved_by
        else:
            entry.approved_at = None
            entry.approved_by = None
        return entry

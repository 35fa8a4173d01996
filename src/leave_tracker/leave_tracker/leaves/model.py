from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DurationUnit, LeaveStatus, LeaveType


@dataclass(frozen=True)
class EmployeeSummary:
    """The applicant as shown next to a leave request."""

    user_id: int
    name: str
    email: str
    employee_code: str
    department: str
    position: str

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "employeeId": self.employee_code,
            "department": self.department,
            "position": self.position,
        }


@dataclass(frozen=True)
class ReviewerSummary:
    user_id: int
    name: str
    email: str

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class LeaveRequest:
    """One employee application for time off, with its review outcome.

    ``leave_id`` is ``None`` only for a record built by the lifecycle engine
    that has not been inserted yet. ``start_date < end_date`` always holds.
    Reviewer fields are all unset while the request is pending and all set
    once it has been decided.

    ``employee`` and ``reviewer`` are filled in by the repository on reads and
    are not part of record equality.
    """

    leave_id: Optional[int]
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    duration: float
    duration_unit: DurationUnit
    reason: str
    status: LeaveStatus
    applied_at: datetime
    admin_comment: Optional[str] = None
    rejected_reason: Optional[str] = None
    reviewer_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    employee: Optional[EmployeeSummary] = field(default=None, compare=False)
    reviewer: Optional[ReviewerSummary] = field(default=None, compare=False)

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.leave_id,
            "employeeId": self.employee_id,
            "employee": self.employee.to_dict() if self.employee else None,
            "leaveType": self.leave_type.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "duration": self.duration,
            "durationUnit": self.duration_unit.value,
            "reason": self.reason,
            "status": self.status.value,
            "adminComment": self.admin_comment,
            "rejectedReason": self.rejected_reason,
            "reviewerId": self.reviewer_id,
            "reviewedBy": self.reviewer.to_dict() if self.reviewer else None,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "appliedAt": self.applied_at.isoformat(),
        }

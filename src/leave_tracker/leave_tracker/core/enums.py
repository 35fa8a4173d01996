from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used by the access rules."""

    EMPLOYEE = "employee"
    HR = "hr"


class LeaveType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    OTHER = "other"


class DurationUnit(str, Enum):
    DAYS = "days"
    HOURS = "hours"


class LeaveStatus(str, Enum):
    """Review state of a leave request. Deleted requests have no row at all."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class LeaveOperation(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    CANCEL = "cancel"
    DECIDE = "decide"
    LIST_ALL = "list_all"

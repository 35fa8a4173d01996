from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from ..common.datetime_utils import end_of_day, start_of_day, today_local
from ..core.enums import LeaveStatus
from .model import LeaveRequest


@dataclass(frozen=True)
class PersonalStats:
    total: int
    approved: int
    pending: int
    rejected: int

    def to_dict(self) -> dict:
        return {
            "totalLeaves": self.total,
            "approvedLeaves": self.approved,
            "pendingLeaves": self.pending,
            "rejectedLeaves": self.rejected,
        }


@dataclass(frozen=True)
class OrgStats:
    total_employees: int
    total_leaves: int
    pending_leaves: int
    approved_leaves: int
    rejected_leaves: int
    today_leaves_details: List[LeaveRequest] = field(default_factory=list)

    @property
    def today_leaves(self) -> int:
        return len(self.today_leaves_details)

    def to_dict(self) -> dict:
        return {
            "totalEmployees": self.total_employees,
            "totalLeaves": self.total_leaves,
            "pendingLeaves": self.pending_leaves,
            "approvedLeaves": self.approved_leaves,
            "rejectedLeaves": self.rejected_leaves,
            "todayLeaves": self.today_leaves,
            "todayLeavesDetails": [r.to_dict() for r in self.today_leaves_details],
        }


def _as_datetime(value: Union[date, datetime], *, end: bool) -> datetime:
    if isinstance(value, datetime):
        return value
    return end_of_day(value) if end else start_of_day(value)


def covers_day(record: LeaveRequest, reference_date: Union[date, datetime]) -> bool:
    """True when the leave range touches any moment of the reference calendar day."""
    day_start = start_of_day(reference_date)
    day_end = end_of_day(reference_date)
    return (
        _as_datetime(record.start_date, end=False) <= day_end
        and _as_datetime(record.end_date, end=True) >= day_start
    )


def todays_approved_leaves(
    records: Iterable[LeaveRequest],
    reference_date: Union[date, datetime],
) -> List[LeaveRequest]:
    out = [r for r in records if r.status == LeaveStatus.APPROVED and covers_day(r, reference_date)]
    out.sort(key=lambda r: _as_datetime(r.start_date, end=False))
    return out


def _count_by_status(records: List[LeaveRequest]) -> dict:
    counts = {s: 0 for s in LeaveStatus}
    for r in records:
        counts[r.status] += 1
    return counts


def personal_stats(records: Iterable[LeaveRequest], employee_id: int) -> PersonalStats:
    mine = [r for r in records if r.employee_id == int(employee_id)]
    counts = _count_by_status(mine)
    return PersonalStats(
        total=len(mine),
        approved=counts[LeaveStatus.APPROVED],
        pending=counts[LeaveStatus.PENDING],
        rejected=counts[LeaveStatus.REJECTED],
    )


def org_stats(
    records: Iterable[LeaveRequest],
    employee_count: int,
    *,
    reference_date: Optional[date] = None,
) -> OrgStats:
    snapshot = list(records)
    counts = _count_by_status(snapshot)
    return OrgStats(
        total_employees=int(employee_count),
        total_leaves=len(snapshot),
        pending_leaves=counts[LeaveStatus.PENDING],
        approved_leaves=counts[LeaveStatus.APPROVED],
        rejected_leaves=counts[LeaveStatus.REJECTED],
        today_leaves_details=todays_approved_leaves(snapshot, reference_date or today_local()),
    )

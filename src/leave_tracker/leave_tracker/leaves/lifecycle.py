from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import as_date
from ..common.validators import require_min_length
from ..core.constants import HOURS_PER_DAY, MIN_DURATION, MIN_REASON_LENGTH, MIN_REJECTED_REASON_LENGTH
from ..core.enums import DurationUnit, LeaveDecision, LeaveStatus
from ..core.exceptions import AuthorizationError, InvalidStateError, ValidationError
from .model import LeaveRequest
from .schemas import LeavePatch, NewLeave, ReviewInput

_SECONDS_PER_DAY = 24 * 60 * 60


def inclusive_day_count(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """Whole days covered by ``start..end``, counting both ends."""
    if isinstance(start, datetime) != isinstance(end, datetime):
        start, end = as_date(start), as_date(end)
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / _SECONDS_PER_DAY) + 1


class LeaveLifecycle:
    """State machine for a single leave request.

    pending -> approved | rejected (decide, HR), pending -> pending (edit,
    owner), pending -> deleted (cancel, owner). Nothing leaves approved or
    rejected. The engine works on records already fetched by the caller and
    returns new records; persisting them is the caller's job.
    """

    def __init__(self, *, hours_per_day: int = HOURS_PER_DAY):
        self._hours_per_day = int(hours_per_day)

    def compute_duration(self, start_date: date, end_date: date, unit: DurationUnit) -> float:
        days = inclusive_day_count(start_date, end_date)
        duration = days * self._hours_per_day if unit == DurationUnit.HOURS else days
        if duration < MIN_DURATION:
            raise ValidationError(f"Duration must be at least {MIN_DURATION}")
        return float(duration)

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        if start_date >= end_date:
            raise ValidationError("End date must be after start date")

    @staticmethod
    def _check_not_past(start_date: date, today: date) -> None:
        # Start-of-day comparison so applying for today is still allowed.
        if as_date(start_date) < today:
            raise ValidationError("Cannot apply for leave in the past")

    @staticmethod
    def _check_reason(reason: Optional[str]) -> str:
        reason = (reason or "").strip()
        return require_min_length(reason, "Reason", MIN_REASON_LENGTH)

    @staticmethod
    def _require_owner(record: LeaveRequest, actor_id: int) -> None:
        if int(actor_id) != record.employee_id:
            raise AuthorizationError("Only the owner can change this leave request")

    @staticmethod
    def _require_pending(record: LeaveRequest, message: str) -> None:
        if record.status != LeaveStatus.PENDING:
            raise InvalidStateError(message)

    def create(self, employee_id: int, data: NewLeave, *, now: datetime) -> LeaveRequest:
        self._check_range(data.start_date, data.end_date)
        self._check_not_past(data.start_date, now.date())
        reason = self._check_reason(data.reason)

        return LeaveRequest(
            leave_id=None,
            employee_id=int(employee_id),
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            duration=self.compute_duration(data.start_date, data.end_date, data.duration_unit),
            duration_unit=data.duration_unit,
            reason=reason,
            status=LeaveStatus.PENDING,
            applied_at=now,
        )

    def edit(self, record: LeaveRequest, actor_id: int, patch: LeavePatch, *, today: date) -> LeaveRequest:
        self._require_owner(record, actor_id)
        self._require_pending(record, "Leave request has already been processed")

        changes: dict = {}
        if patch.leave_type is not None:
            changes["leave_type"] = patch.leave_type
        if patch.reason is not None:
            changes["reason"] = self._check_reason(patch.reason)

        if patch.touches_dates:
            start_date = patch.start_date if patch.start_date is not None else record.start_date
            end_date = patch.end_date if patch.end_date is not None else record.end_date
            if patch.start_date is not None:
                self._check_not_past(start_date, today)
            self._check_range(start_date, end_date)
            changes["start_date"] = start_date
            changes["end_date"] = end_date
            # The unit is kept; an hours request stays in hours.
            changes["duration"] = self.compute_duration(start_date, end_date, record.duration_unit)

        return replace(record, **changes)

    def cancel(self, record: LeaveRequest, actor_id: int) -> None:
        """Check that ``actor_id`` may delete ``record``; the caller deletes it."""
        self._require_owner(record, actor_id)
        self._require_pending(record, "Only pending leave requests can be cancelled")

    def decide(
        self,
        record: LeaveRequest,
        actor_id: int,
        decision: LeaveDecision,
        review: ReviewInput,
        *,
        now: datetime,
    ) -> LeaveRequest:
        self._require_pending(record, "Leave request has already been processed")

        if decision == LeaveDecision.APPROVE:
            return replace(
                record,
                status=LeaveStatus.APPROVED,
                admin_comment=review.admin_comment,
                reviewer_id=int(actor_id),
                reviewed_at=now,
            )

        rejected_reason = require_min_length(
            (review.rejected_reason or "").strip(),
            "Rejection reason",
            MIN_REJECTED_REASON_LENGTH,
        )
        return replace(
            record,
            status=LeaveStatus.REJECTED,
            rejected_reason=rejected_reason,
            admin_comment=review.admin_comment,
            reviewer_id=int(actor_id),
            reviewed_at=now,
        )

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import LeaveDecision, LeaveOperation, LeaveStatus
from ..core.exceptions import InvalidStateError, NotFoundError
from ..users.model import Actor
from .lifecycle import LeaveLifecycle
from .model import LeaveRequest
from .policy import require_access
from .reporting import OrgStats, PersonalStats, org_stats, personal_stats, todays_approved_leaves
from .repository import LeaveRepository
from .schemas import LeavePatch, NewLeave, ReviewInput


class LeaveService:
    """Use cases around leave requests.

    Every call takes the authenticated ``actor`` explicitly. The flow is always
    fetch, check policy, run the lifecycle engine, then one conditional write.
    """

    def __init__(self, leaves: LeaveRepository, *, lifecycle: Optional[LeaveLifecycle] = None):
        self._leaves = leaves
        self._lifecycle = lifecycle or LeaveLifecycle()

    def _get(self, leave_id: int) -> LeaveRequest:
        record = self._leaves.get_by_id(leave_id=int(leave_id))
        if not record:
            raise NotFoundError("Leave request not found")
        return record

    def _raise_lost_race(self, leave_id: int) -> None:
        """A conditional write touched no row; work out why."""
        current = self._leaves.get_by_id(leave_id=int(leave_id))
        if current is None:
            raise NotFoundError("Leave request not found")
        if not current.is_pending:
            raise InvalidStateError("Leave request has already been processed")

    def apply(self, *, actor: Actor, data: NewLeave, now: Optional[datetime] = None) -> LeaveRequest:
        record = self._lifecycle.create(actor.user_id, data, now=now or now_local())
        leave_id = self._leaves.insert(record)
        return self._get(leave_id)

    def get(self, *, actor: Actor, leave_id: int) -> LeaveRequest:
        record = self._get(leave_id)
        require_access(actor, record, LeaveOperation.VIEW)
        return record

    def list_mine(self, *, actor: Actor, limit: Optional[int] = None) -> Sequence[LeaveRequest]:
        return self._leaves.list_leaves(employee_id=actor.user_id, limit=limit)

    def list_all(
        self,
        *,
        actor: Actor,
        status: Optional[LeaveStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        require_access(actor, None, LeaveOperation.LIST_ALL)
        return self._leaves.list_leaves(status=status, limit=limit)

    def edit(
        self,
        *,
        actor: Actor,
        leave_id: int,
        patch: LeavePatch,
        today: Optional[date] = None,
    ) -> LeaveRequest:
        record = self._get(leave_id)
        require_access(actor, record, LeaveOperation.EDIT)
        updated = self._lifecycle.edit(record, actor.user_id, patch, today=today or now_local().date())

        if not self._leaves.update_if_pending(updated):
            self._raise_lost_race(leave_id)
        return self._get(leave_id)

    def cancel(self, *, actor: Actor, leave_id: int) -> None:
        record = self._get(leave_id)
        require_access(actor, record, LeaveOperation.CANCEL)
        self._lifecycle.cancel(record, actor.user_id)

        if not self._leaves.delete_if_pending(leave_id=int(leave_id)):
            self._raise_lost_race(leave_id)
            # Still pending but nothing deleted: treat as already gone.
            raise NotFoundError("Leave request not found")

    def decide(
        self,
        *,
        actor: Actor,
        leave_id: int,
        decision: LeaveDecision,
        review: ReviewInput,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        require_access(actor, None, LeaveOperation.DECIDE)
        record = self._get(leave_id)
        decided = self._lifecycle.decide(record, actor.user_id, decision, review, now=now or now_local())

        if not self._leaves.decide_if_pending(decided):
            self._raise_lost_race(leave_id)
            raise InvalidStateError("Leave request has already been processed")
        return self._get(leave_id)

    def approve(self, *, actor: Actor, leave_id: int, admin_comment: Optional[str] = None) -> LeaveRequest:
        return self.decide(
            actor=actor,
            leave_id=leave_id,
            decision=LeaveDecision.APPROVE,
            review=ReviewInput(admin_comment=admin_comment),
        )

    def reject(
        self,
        *,
        actor: Actor,
        leave_id: int,
        rejected_reason: Optional[str],
        admin_comment: Optional[str] = None,
    ) -> LeaveRequest:
        return self.decide(
            actor=actor,
            leave_id=leave_id,
            decision=LeaveDecision.REJECT,
            review=ReviewInput(admin_comment=admin_comment, rejected_reason=rejected_reason),
        )

    def todays_leaves(self, *, reference_date: Optional[date] = None) -> Sequence[LeaveRequest]:
        day = reference_date or now_local().date()
        return todays_approved_leaves(self._leaves.list_approved_covering(day=day), day)

    def my_stats(self, *, actor: Actor) -> PersonalStats:
        return personal_stats(self._leaves.list_leaves(employee_id=actor.user_id, limit=None), actor.user_id)

    def org_stats(self, *, actor: Actor, employee_count: int, reference_date: Optional[date] = None) -> OrgStats:
        require_access(actor, None, LeaveOperation.LIST_ALL)
        return org_stats(
            self._leaves.list_leaves(limit=None),
            employee_count,
            reference_date=reference_date or now_local().date(),
        )

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    """Persistence for leave requests.

    The ``*_if_pending`` writes are conditional on the stored status still
    being ``pending`` and report whether a row was touched, so two
    concurrent reviewers can never both decide the same request.

    Reads fill in the ``employee`` and ``reviewer`` summaries on each record.
    """

    def get_by_id(self, *, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first (by applied_at). ``limit=None`` returns every match."""

        raise NotImplementedError

    def list_approved_covering(self, *, day: date) -> Sequence[LeaveRequest]:
        """Approved requests whose range includes ``day``, ascending by start date."""

        raise NotImplementedError

    def insert(self, record: LeaveRequest) -> int:
        raise NotImplementedError

    def update_if_pending(self, record: LeaveRequest) -> bool:
        raise NotImplementedError

    def delete_if_pending(self, *, leave_id: int) -> bool:
        raise NotImplementedError

    def decide_if_pending(self, record: LeaveRequest) -> bool:
        raise NotImplementedError

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import DurationUnit, LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeeSummary, LeaveRequest, ReviewerSummary
from .repository import LeaveRepository

_LEAVE_COLUMNS = """
    l.leave_id, l.employee_id, l.leave_type, l.start_date, l.end_date,
    l.duration, l.duration_unit, l.reason, l.status, l.applied_at,
    l.admin_comment, l.rejected_reason, l.reviewer_id, l.reviewed_at,
    e.name AS employee_name, e.email AS employee_email,
    e.employee_code AS employee_code, e.department AS employee_department,
    e.position AS employee_position,
    rv.name AS reviewer_name, rv.email AS reviewer_email
"""

_LEAVE_FROM = """
    leave_requests l
    LEFT JOIN users e ON e.user_id = l.employee_id
    LEFT JOIN users rv ON rv.user_id = l.reviewer_id
"""


def _row_to_employee(r: dict) -> Optional[EmployeeSummary]:
    if r.get("employee_name") is None:
        return None
    return EmployeeSummary(
        user_id=int(r["employee_id"]),
        name=r["employee_name"],
        email=r["employee_email"],
        employee_code=r["employee_code"],
        department=r["employee_department"],
        position=r["employee_position"],
    )


def _row_to_reviewer(r: dict) -> Optional[ReviewerSummary]:
    if r.get("reviewer_id") is None or r.get("reviewer_name") is None:
        return None
    return ReviewerSummary(
        user_id=int(r["reviewer_id"]),
        name=r["reviewer_name"],
        email=r["reviewer_email"],
    )


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        duration=float(r["duration"]),
        duration_unit=DurationUnit(r["duration_unit"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_at=r["applied_at"],
        admin_comment=r.get("admin_comment"),
        rejected_reason=r.get("rejected_reason"),
        reviewer_id=int(r["reviewer_id"]) if r.get("reviewer_id") is not None else None,
        reviewed_at=r.get("reviewed_at"),
        employee=_row_to_employee(r),
        reviewer=_row_to_reviewer(r),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM {_LEAVE_FROM} WHERE l.leave_id=%s",
                (int(leave_id),),
            )
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("l.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("l.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM {_LEAVE_FROM}
                WHERE {where}
                ORDER BY l.applied_at DESC, l.leave_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_approved_covering(self, *, day: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM {_LEAVE_FROM}
                WHERE l.status=%s AND l.start_date<=%s AND l.end_date>=%s
                ORDER BY l.start_date ASC
                """,
                (LeaveStatus.APPROVED.value, day, day),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def insert(self, record: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, start_date, end_date,
                    duration, duration_unit, reason, status, applied_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.employee_id,
                    record.leave_type.value,
                    record.start_date,
                    record.end_date,
                    record.duration,
                    record.duration_unit.value,
                    record.reason,
                    LeaveStatus.PENDING.value,
                    record.applied_at,
                ),
            )
            return int(cur.lastrowid)

    def update_if_pending(self, record: LeaveRequest) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_type=%s, start_date=%s, end_date=%s, duration=%s, reason=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    record.leave_type.value,
                    record.start_date,
                    record.end_date,
                    record.duration,
                    record.reason,
                    int(record.leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_if_pending(self, *, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM leave_requests WHERE leave_id=%s AND status=%s",
                (int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def decide_if_pending(self, record: LeaveRequest) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, admin_comment=%s, rejected_reason=%s, reviewer_id=%s, reviewed_at=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    record.status.value,
                    record.admin_comment,
                    record.rejected_reason,
                    record.reviewer_id,
                    record.reviewed_at,
                    int(record.leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

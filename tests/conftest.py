from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.leave_tracker.leave_tracker.core.enums import DurationUnit, LeaveStatus, LeaveType, Role
from src.leave_tracker.leave_tracker.leaves.model import EmployeeSummary, LeaveRequest, ReviewerSummary
from src.leave_tracker.leave_tracker.users.model import Actor, User


class InMemoryLeaves:
    """Leave repository fake; conditional writes are atomic under one lock.

    With ``users`` given, reads fill in the employee and reviewer summaries
    the way the SQL join does.
    """

    def __init__(self, users=None):
        self._lock = threading.Lock()
        self._next_id = 1
        self._users = users
        self.rows: dict[int, LeaveRequest] = {}

    def _populate(self, record):
        if record is None or self._users is None:
            return record
        emp = self._users.get_by_id(record.employee_id)
        rev = self._users.get_by_id(record.reviewer_id) if record.reviewer_id is not None else None
        return replace(
            record,
            employee=EmployeeSummary(
                user_id=emp.user_id,
                name=emp.name,
                email=emp.email,
                employee_code=emp.employee_code,
                department=emp.department,
                position=emp.position,
            )
            if emp
            else None,
            reviewer=ReviewerSummary(user_id=rev.user_id, name=rev.name, email=rev.email) if rev else None,
        )

    def get_by_id(self, *, leave_id):
        with self._lock:
            record = self.rows.get(int(leave_id))
        return self._populate(record)

    def list_leaves(self, *, employee_id=None, status=None, limit=None):
        with self._lock:
            items = [
                r
                for r in self.rows.values()
                if (employee_id is None or r.employee_id == int(employee_id)) and (status is None or r.status == status)
            ]
        items.sort(key=lambda r: (r.applied_at, r.leave_id), reverse=True)
        items = items if limit is None else items[:limit]
        return [self._populate(r) for r in items]

    def list_approved_covering(self, *, day):
        with self._lock:
            items = [
                r
                for r in self.rows.values()
                if r.status == LeaveStatus.APPROVED and r.start_date <= day <= r.end_date
            ]
        items.sort(key=lambda r: r.start_date)
        return [self._populate(r) for r in items]

    def insert(self, record):
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            self.rows[rid] = replace(record, leave_id=rid)
            return rid

    def update_if_pending(self, record):
        with self._lock:
            current = self.rows.get(record.leave_id)
            if not current or current.status != LeaveStatus.PENDING:
                return False
            self.rows[record.leave_id] = record
            return True

    def delete_if_pending(self, *, leave_id):
        with self._lock:
            current = self.rows.get(int(leave_id))
            if not current or current.status != LeaveStatus.PENDING:
                return False
            del self.rows[int(leave_id)]
            return True

    def decide_if_pending(self, record):
        with self._lock:
            current = self.rows.get(record.leave_id)
            if not current or current.status != LeaveStatus.PENDING:
                return False
            self.rows[record.leave_id] = record
            return True


class InMemoryUsers:
    def __init__(self, users=()):
        self._users: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_email(self, email) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    def get_by_employee_code(self, employee_code) -> Optional[User]:
        return next((u for u in self._users.values() if u.employee_code == employee_code), None)

    def create_user(self, *, name, email, employee_code, department, position, phone, password_hash, role):
        uid = max(self._users, default=0) + 1
        self._users[uid] = User(
            user_id=uid,
            name=name,
            email=email,
            employee_code=employee_code,
            department=department,
            position=position,
            phone=phone,
            password_hash=password_hash,
            role=role,
        )
        return uid

    def list_by_role(self, role):
        return sorted((u for u in self._users.values() if u.role == role), key=lambda u: u.name)

    def count_by_role(self, role):
        return len(self.list_by_role(role))


def make_user(user_id: int, role: Role, *, password: str = "secret123") -> User:
    return User(
        user_id=user_id,
        name=f"User {user_id}",
        email=f"user{user_id}@example.com",
        employee_code=f"E{user_id:03d}",
        department="Engineering",
        position="Developer",
        password_hash=generate_password_hash(password),
        role=role,
    )


def make_leave(
    leave_id: int,
    *,
    employee_id: int = 2,
    start_date: date = date(2025, 6, 10),
    end_date: date = date(2025, 6, 12),
    status: LeaveStatus = LeaveStatus.PENDING,
    duration_unit: DurationUnit = DurationUnit.DAYS,
    applied_at: datetime = datetime(2025, 6, 1, 9, 0),
) -> LeaveRequest:
    decided = status != LeaveStatus.PENDING
    return LeaveRequest(
        leave_id=leave_id,
        employee_id=employee_id,
        leave_type=LeaveType.VACATION,
        start_date=start_date,
        end_date=end_date,
        duration=float((end_date - start_date).days + 1),
        duration_unit=duration_unit,
        reason="Family trip to the coast",
        status=status,
        applied_at=applied_at,
        rejected_reason="Busy week" if status == LeaveStatus.REJECTED else None,
        reviewer_id=1 if decided else None,
        reviewed_at=datetime(2025, 6, 2, 10, 0) if decided else None,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 6, 1, 9, 0, 0)


@pytest.fixture
def hr() -> Actor:
    return Actor(user_id=1, role=Role.HR)


@pytest.fixture
def employee() -> Actor:
    return Actor(user_id=2, role=Role.EMPLOYEE)


@pytest.fixture
def other_employee() -> Actor:
    return Actor(user_id=3, role=Role.EMPLOYEE)


@pytest.fixture
def leaves_repo(users_repo) -> InMemoryLeaves:
    return InMemoryLeaves(users=users_repo)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers([make_user(1, Role.HR), make_user(2, Role.EMPLOYEE), make_user(3, Role.EMPLOYEE)])


@pytest.fixture
def leave_factory():
    return make_leave


@pytest.fixture
def user_factory():
    return make_user

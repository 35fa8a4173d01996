from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Actor, User
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> SessionUser:
        return cls(user_id=user.user_id, name=user.name, email=user.email, role=user.role)

    def as_actor(self) -> Actor:
        return Actor(user_id=self.user_id, role=self.role)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser.from_user(user)


class UserService:
    """Use case: account registration and employee directory."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        department: str,
        position: str,
        employee_code: str,
        phone: Optional[str] = None,
        role: Role = Role.EMPLOYEE,
    ) -> int:
        name = require_min_length(require_non_empty(name, "Name"), "Name", MIN_NAME_LENGTH)
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        department = require_non_empty(department, "Department")
        position = require_non_empty(position, "Position")
        employee_code = require_non_empty(employee_code, "Employee ID")

        if self._users.get_by_email(email) or self._users.get_by_employee_code(employee_code):
            raise ValidationError("User with this email or employee ID already exists")

        return self._users.create_user(
            name=name,
            email=email,
            employee_code=employee_code,
            department=department,
            position=position,
            phone=(phone or "").strip() or None,
            password_hash=generate_password_hash(password),
            role=role,
        )

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_employees(self, *, actor: Actor) -> Sequence[User]:
        if not actor.is_hr:
            raise AuthorizationError("Access denied")
        return self._users.list_by_role(Role.EMPLOYEE)

    def count_employees(self) -> int:
        return self._users.count_by_role(Role.EMPLOYEE)

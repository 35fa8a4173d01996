from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Actor:
    """The authenticated identity behind a call.

    Built by the caller (controller, script) and passed explicitly to every
    service operation; nothing reads it from ambient state.
    """

    user_id: int
    role: Role

    @property
    def is_hr(self) -> bool:
        return self.role == Role.HR


@dataclass(frozen=True)
class User:
    """Domain entity: account record.

    Plain data object, no DB access code here.
    """

    user_id: int
    name: str
    email: str
    employee_code: str
    department: str
    position: str
    password_hash: str
    role: Role
    phone: Optional[str] = None
    is_active: bool = True

from __future__ import annotations

from typing import Optional

from ..core.enums import LeaveOperation, Role
from ..core.exceptions import AuthorizationError
from ..users.model import Actor
from .model import LeaveRequest


def can_access(actor: Actor, record: Optional[LeaveRequest], operation: LeaveOperation) -> bool:
    """Decide whether ``actor`` may perform ``operation`` on ``record``.

    ``record`` may be ``None`` for operations that are not about one request
    (``LIST_ALL``, or ``DECIDE`` before the record is loaded).
    """

    is_hr = actor.role == Role.HR
    is_owner = record is not None and int(actor.user_id) == record.employee_id

    if operation == LeaveOperation.VIEW:
        return is_hr or is_owner
    if operation in (LeaveOperation.EDIT, LeaveOperation.CANCEL):
        # Role-independent: HR cannot edit someone else's request either.
        return is_owner
    if operation in (LeaveOperation.DECIDE, LeaveOperation.LIST_ALL):
        return is_hr
    return False


def require_access(actor: Actor, record: Optional[LeaveRequest], operation: LeaveOperation) -> None:
    if not can_access(actor, record, operation):
        raise AuthorizationError("Access denied")

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import HOURS_PER_DAY
from .database.connection import DBConfig, DatabaseConnection
from .leaves.lifecycle import LeaveLifecycle
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    leaves_repo: LeaveRepository

    auth_service: AuthService
    user_service: UserService
    leave_service: LeaveService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    users_repo: UserRepository,
    leaves_repo: LeaveRepository,
    hours_per_day: int = HOURS_PER_DAY,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    return Container(
        users_repo=users_repo,
        leaves_repo=leaves_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        leave_service=LeaveService(leaves_repo, lifecycle=LeaveLifecycle(hours_per_day=hours_per_day)),
        conn=conn,
    )


def build_container(*, db_config: dict, hours_per_day: int = HOURS_PER_DAY) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        hours_per_day=hours_per_day,
        conn=conn,
    )

"""Example: drive the leave service directly (no Flask).

Controllers are a thin layer; the lifecycle rules live in the services.
"""

import importlib

from config import get_settings_module

from src.leave_tracker.leave_tracker.container import build_container
from src.leave_tracker.leave_tracker.core.enums import Role
from src.leave_tracker.leave_tracker.users.model import Actor


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    hr = Actor(user_id=1, role=Role.HR)
    stats = container.leave_service.org_stats(actor=hr, employee_count=container.user_service.count_employees())
    print(stats.to_dict())


if __name__ == "__main__":
    main()

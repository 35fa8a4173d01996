from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

from src.leave_tracker.leave_tracker.core.enums import LeaveStatus
from src.leave_tracker.leave_tracker.leaves.reporting import (
    covers_day,
    org_stats,
    personal_stats,
    todays_approved_leaves,
)


def test_today_includes_first_and_last_day(leave_factory):
    leave = leave_factory(1, status=LeaveStatus.APPROVED)

    assert todays_approved_leaves([leave], date(2025, 6, 10)) == [leave]
    assert todays_approved_leaves([leave], date(2025, 6, 11)) == [leave]
    assert todays_approved_leaves([leave], date(2025, 6, 12)) == [leave]
    assert todays_approved_leaves([leave], date(2025, 6, 13)) == []
    assert todays_approved_leaves([leave], date(2025, 6, 9)) == []


def test_today_ignores_pending_and_rejected(leave_factory):
    records = [
        leave_factory(1, status=LeaveStatus.PENDING),
        leave_factory(2, status=LeaveStatus.REJECTED),
    ]
    assert todays_approved_leaves(records, date(2025, 6, 11)) == []


def test_today_is_sorted_by_start_date(leave_factory):
    late = leave_factory(1, start_date=date(2025, 6, 11), end_date=date(2025, 6, 14), status=LeaveStatus.APPROVED)
    early = leave_factory(2, start_date=date(2025, 6, 8), end_date=date(2025, 6, 12), status=LeaveStatus.APPROVED)

    assert todays_approved_leaves([late, early], date(2025, 6, 11)) == [early, late]


def test_today_window_is_the_whole_day_for_timestamps(leave_factory):
    leave = replace(
        leave_factory(1, status=LeaveStatus.APPROVED),
        start_date=datetime(2025, 6, 11, 15, 0),
        end_date=datetime(2025, 6, 12, 8, 0),
    )

    assert covers_day(leave, datetime(2025, 6, 11, 8, 0))
    assert covers_day(leave, date(2025, 6, 12))
    assert not covers_day(leave, date(2025, 6, 13))


def test_personal_stats_counts_only_that_employee(leave_factory):
    records = [
        leave_factory(1, employee_id=2, status=LeaveStatus.PENDING),
        leave_factory(2, employee_id=2, status=LeaveStatus.APPROVED),
        leave_factory(3, employee_id=2, status=LeaveStatus.APPROVED),
        leave_factory(4, employee_id=3, status=LeaveStatus.REJECTED),
    ]

    stats = personal_stats(records, 2)

    assert (stats.total, stats.approved, stats.pending, stats.rejected) == (3, 2, 1, 0)
    assert stats.to_dict() == {"totalLeaves": 3, "approvedLeaves": 2, "pendingLeaves": 1, "rejectedLeaves": 0}


def test_org_stats_combines_counts_and_today(leave_factory):
    on_leave = leave_factory(2, employee_id=3, status=LeaveStatus.APPROVED)
    records = [
        leave_factory(1, employee_id=2, status=LeaveStatus.PENDING),
        on_leave,
        leave_factory(3, employee_id=4, status=LeaveStatus.REJECTED),
    ]

    stats = org_stats(records, 5, reference_date=date(2025, 6, 11))

    assert stats.total_employees == 5
    assert stats.total_leaves == 3
    assert (stats.pending_leaves, stats.approved_leaves, stats.rejected_leaves) == (1, 1, 1)
    assert stats.today_leaves == 1
    assert stats.today_leaves_details == [on_leave]

    payload = stats.to_dict()
    assert payload["todayLeaves"] == 1
    assert payload["todayLeavesDetails"][0]["id"] == 2

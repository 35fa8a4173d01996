from __future__ import annotations

from datetime import date, datetime

import pytest

from src.leave_tracker.leave_tracker.core.enums import DurationUnit, LeaveDecision, LeaveStatus, LeaveType
from src.leave_tracker.leave_tracker.core.exceptions import AuthorizationError, InvalidStateError, ValidationError
from src.leave_tracker.leave_tracker.leaves.lifecycle import LeaveLifecycle, inclusive_day_count
from src.leave_tracker.leave_tracker.leaves.schemas import LeavePatch, NewLeave, ReviewInput


def _new(start: date, end: date, *, unit=DurationUnit.DAYS, reason="Family trip to the coast") -> NewLeave:
    return NewLeave(leave_type=LeaveType.VACATION, start_date=start, end_date=end, reason=reason, duration_unit=unit)


@pytest.fixture
def engine() -> LeaveLifecycle:
    return LeaveLifecycle()


def test_create_counts_days_inclusively(engine, fixed_now):
    leave = engine.create(2, _new(date(2025, 6, 10), date(2025, 6, 12)), now=fixed_now)

    assert leave.duration == 3
    assert leave.duration_unit == DurationUnit.DAYS
    assert leave.status == LeaveStatus.PENDING
    assert leave.applied_at == fixed_now
    assert leave.reviewer_id is None and leave.reviewed_at is None


def test_create_in_hours_multiplies_by_eight(engine, fixed_now):
    leave = engine.create(2, _new(date(2025, 6, 10), date(2025, 6, 12), unit=DurationUnit.HOURS), now=fixed_now)
    assert leave.duration == 24


def test_hours_per_day_is_configurable(fixed_now):
    leave = LeaveLifecycle(hours_per_day=7).create(
        2, _new(date(2025, 6, 10), date(2025, 6, 11), unit=DurationUnit.HOURS), now=fixed_now
    )
    assert leave.duration == 14


def test_create_rejects_same_start_and_end(engine, fixed_now):
    with pytest.raises(ValidationError):
        engine.create(2, _new(date(2025, 6, 10), date(2025, 6, 10)), now=fixed_now)


def test_create_rejects_end_before_start(engine, fixed_now):
    with pytest.raises(ValidationError):
        engine.create(2, _new(date(2025, 6, 12), date(2025, 6, 10)), now=fixed_now)


def test_create_rejects_start_yesterday(engine, fixed_now):
    with pytest.raises(ValidationError):
        engine.create(2, _new(date(2025, 5, 31), date(2025, 6, 3)), now=fixed_now)


def test_create_allows_start_today_even_late_in_the_day(engine):
    late = datetime(2025, 6, 1, 23, 30)
    leave = engine.create(2, _new(date(2025, 6, 1), date(2025, 6, 2)), now=late)
    assert leave.start_date == date(2025, 6, 1)
    assert leave.duration == 2


def test_create_rejects_short_reason(engine, fixed_now):
    with pytest.raises(ValidationError):
        engine.create(2, _new(date(2025, 6, 10), date(2025, 6, 12), reason="  too short "), now=fixed_now)


def test_day_count_rounds_partial_days_up():
    assert inclusive_day_count(datetime(2025, 6, 10, 9), datetime(2025, 6, 11, 17)) == 3
    assert inclusive_day_count(date(2025, 6, 12), date(2025, 6, 10)) == 3


def test_edit_by_non_owner_is_denied_even_for_pending(engine, leave_factory):
    with pytest.raises(AuthorizationError):
        engine.edit(leave_factory(1, employee_id=2), 3, LeavePatch(reason="A much better reason"), today=date(2025, 6, 1))


def test_edit_of_decided_request_is_invalid_state(engine, leave_factory):
    record = leave_factory(1, status=LeaveStatus.APPROVED)
    with pytest.raises(InvalidStateError):
        engine.edit(record, 2, LeavePatch(reason="A much better reason"), today=date(2025, 6, 1))


def test_edit_recomputes_duration_when_dates_change(engine, leave_factory):
    record = leave_factory(1)
    updated = engine.edit(record, 2, LeavePatch(end_date=date(2025, 6, 15)), today=date(2025, 6, 1))

    assert updated.start_date == date(2025, 6, 10)
    assert updated.end_date == date(2025, 6, 15)
    assert updated.duration == 6
    assert updated.reason == record.reason


def test_edit_keeps_hours_unit_and_conversion(engine, leave_factory):
    record = leave_factory(1, duration_unit=DurationUnit.HOURS)
    updated = engine.edit(record, 2, LeavePatch(start_date=date(2025, 6, 11)), today=date(2025, 6, 1))

    assert updated.duration_unit == DurationUnit.HOURS
    assert updated.duration == 16


def test_edit_rejects_start_moved_into_the_past(engine, leave_factory):
    with pytest.raises(ValidationError):
        engine.edit(leave_factory(1), 2, LeavePatch(start_date=date(2025, 6, 5)), today=date(2025, 6, 8))


def test_edit_rejects_inverted_range(engine, leave_factory):
    with pytest.raises(ValidationError):
        engine.edit(leave_factory(1), 2, LeavePatch(end_date=date(2025, 6, 10)), today=date(2025, 6, 1))


def test_edit_only_reason_leaves_dates_untouched(engine, leave_factory):
    record = leave_factory(1)
    updated = engine.edit(
        record, 2, LeavePatch(reason="Doctor appointment", leave_type=LeaveType.SICK), today=date(2025, 6, 20)
    )
    assert updated.leave_type == LeaveType.SICK
    assert updated.duration == record.duration


def test_cancel_requires_owner_and_pending(engine, leave_factory):
    engine.cancel(leave_factory(1), 2)

    with pytest.raises(AuthorizationError):
        engine.cancel(leave_factory(1), 1)
    with pytest.raises(InvalidStateError):
        engine.cancel(leave_factory(1, status=LeaveStatus.REJECTED), 2)


def test_approve_sets_reviewer_fields(engine, leave_factory, fixed_now):
    decided = engine.decide(leave_factory(1), 1, LeaveDecision.APPROVE, ReviewInput(admin_comment="ok"), now=fixed_now)

    assert decided.status == LeaveStatus.APPROVED
    assert decided.admin_comment == "ok"
    assert decided.reviewer_id == 1
    assert decided.reviewed_at == fixed_now
    assert decided.rejected_reason is None


def test_reject_requires_reason_of_five_chars(engine, leave_factory, fixed_now):
    record = leave_factory(1)
    with pytest.raises(ValidationError):
        engine.decide(record, 1, LeaveDecision.REJECT, ReviewInput(), now=fixed_now)
    with pytest.raises(ValidationError):
        engine.decide(record, 1, LeaveDecision.REJECT, ReviewInput(rejected_reason="no"), now=fixed_now)

    assert record.status == LeaveStatus.PENDING


def test_reject_sets_reason(engine, leave_factory, fixed_now):
    decided = engine.decide(
        leave_factory(1), 1, LeaveDecision.REJECT, ReviewInput(rejected_reason="Team offsite"), now=fixed_now
    )
    assert decided.status == LeaveStatus.REJECTED
    assert decided.rejected_reason == "Team offsite"


@pytest.mark.parametrize("status", [LeaveStatus.APPROVED, LeaveStatus.REJECTED])
@pytest.mark.parametrize("decision", list(LeaveDecision))
def test_decided_request_cannot_be_decided_again(engine, leave_factory, fixed_now, status, decision):
    review = ReviewInput(rejected_reason="Team offsite")
    with pytest.raises(InvalidStateError):
        engine.decide(leave_factory(1, status=status), 1, decision, review, now=fixed_now)

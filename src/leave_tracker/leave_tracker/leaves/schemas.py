"""Typed inputs for the leave lifecycle.

Raw request payloads (JSON bodies, form dicts) are parsed here into frozen
dataclasses, so the lifecycle engine only ever sees typed values. Range and
length rules stay in the engine; this layer checks shape and enum membership.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_enum, require_non_empty
from ..core.enums import DurationUnit, LeaveStatus, LeaveType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class NewLeave:
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    duration_unit: DurationUnit = DurationUnit.DAYS


@dataclass(frozen=True)
class LeavePatch:
    """Owner edit of a pending request. ``None`` means "leave unchanged"."""

    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None

    @property
    def touches_dates(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    @property
    def is_empty(self) -> bool:
        return self.leave_type is None and not self.touches_dates and self.reason is None


@dataclass(frozen=True)
class ReviewInput:
    admin_comment: Optional[str] = None
    rejected_reason: Optional[str] = None


def _text(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip()


def _date(payload: Mapping[str, Any], key: str, label: str) -> date:
    value = payload.get(key)
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {label}")
    return parse_iso_date(value)


def parse_new_leave(payload: Mapping[str, Any]) -> NewLeave:
    # A client "duration" is accepted for compatibility but never trusted;
    # the engine recomputes it from the date range.
    if payload is None:
        raise ValidationError("Request body is required")

    unit = payload.get("durationUnit") or DurationUnit.DAYS.value
    return NewLeave(
        leave_type=require_enum(payload.get("leaveType"), LeaveType, "leave type"),
        start_date=_date(payload, "startDate", "start date"),
        end_date=_date(payload, "endDate", "end date"),
        reason=require_non_empty(_text(payload, "reason"), "Reason"),
        duration_unit=require_enum(unit, DurationUnit, "duration unit"),
    )


def parse_leave_patch(payload: Mapping[str, Any]) -> LeavePatch:
    if payload is None:
        raise ValidationError("Request body is required")

    leave_type = payload.get("leaveType")
    patch = LeavePatch(
        leave_type=require_enum(leave_type, LeaveType, "leave type") if leave_type is not None else None,
        start_date=_date(payload, "startDate", "start date") if payload.get("startDate") is not None else None,
        end_date=_date(payload, "endDate", "end date") if payload.get("endDate") is not None else None,
        reason=_text(payload, "reason"),
    )
    if patch.is_empty:
        raise ValidationError("Nothing to update")
    return patch


def parse_review(payload: Optional[Mapping[str, Any]]) -> ReviewInput:
    payload = payload or {}
    return ReviewInput(
        admin_comment=_text(payload, "adminComment") or None,
        rejected_reason=_text(payload, "rejectedReason"),
    )


def parse_status_filter(value: Optional[str]) -> Optional[LeaveStatus]:
    """``?status=`` query value; blank means no filter."""
    value = (value or "").strip().lower()
    if not value:
        return None
    return require_enum(value, LeaveStatus, "status")

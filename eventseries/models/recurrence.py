"""Recurrence models for eventseries.

Two pattern shapes drive event generation:
- RecurrenceRule: frequency + interval + end condition (weekly classes, monthly meetups).
- CampPattern: inclusive date range + weekday filter (summer camps, intensives).

Weekday indices follow the submission form: 0=Sunday ... 6=Saturday.
"""

from __future__ import annotations

from datetime import date, time as dtime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from eventseries.models.constants import DEFAULT_DURATION_MINUTES


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class RecurrenceEndType(str, Enum):
    """How a recurrence ends."""

    NEVER = "never"
    COUNT = "count"
    DATE = "date"


def _normalize_days_of_week(v: Optional[List[int]]) -> List[int]:
    if not v:
        return []
    days = set()
    for day in v:
        try:
            idx = int(day)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid weekday index: {day!r}")
        if idx < 0 or idx > 6:
            raise ValueError("days_of_week entries must be between 0 (Sunday) and 6 (Saturday)")
        days.add(idx)
    return sorted(days)


class RecurrenceRule(BaseModel):
    """Recurrence definition captured by the submission form.

    Notes:
    - `frequency` is kept as a plain string so that rows carrying frequencies we
      do not generate (e.g. legacy "yearly") still load; expansion skips them.
    - Times are naive local times in the event's timezone.
    """

    frequency: str = Field(..., description="daily | weekly | biweekly | monthly")
    interval: int = Field(1, ge=1, description="Every N frequency units")

    # Weekly / biweekly specifics
    days_of_week: List[int] = Field(
        default_factory=list, description="Weekday indices (0=Sunday..6=Saturday)"
    )

    # Monthly specifics
    day_of_month: Optional[int] = Field(None, ge=1, le=31)

    time: dtime = Field(dtime(0, 0), description="Local start time of each session")
    duration_minutes: int = Field(DEFAULT_DURATION_MINUTES, ge=1)

    # End condition
    end_type: RecurrenceEndType = RecurrenceEndType.NEVER
    end_count: Optional[int] = Field(None, ge=1)
    end_date: Optional[date] = None

    @field_validator("frequency")
    @classmethod
    def _normalize_frequency(cls, v):
        return (v or "").strip().lower()

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _validate_days_of_week(cls, v):
        return _normalize_days_of_week(v)

    @model_validator(mode="after")
    def _validate_end_condition(self):
        if self.end_type == RecurrenceEndType.COUNT and self.end_count is None:
            raise ValueError("end_count is required when end_type is 'count'")
        if self.end_type == RecurrenceEndType.DATE and self.end_date is None:
            raise ValueError("end_date is required when end_type is 'date'")
        return self

    @property
    def is_supported(self) -> bool:
        return self.frequency in {f.value for f in RecurrenceFrequency}


class CampPattern(BaseModel):
    """Consecutive-day program: every selected weekday within [start_date, end_date]."""

    start_date: date
    end_date: date
    days_of_week: List[int] = Field(
        default_factory=list, description="Weekday indices (0=Sunday..6=Saturday); [1,2,3,4,5] = Mon-Fri"
    )
    core_start_time: dtime = Field(..., description="Core program start time, e.g. 09:00")
    core_end_time: dtime = Field(..., description="Core program end time, e.g. 15:00")

    # No range check here: an inverted range expands to nothing and is
    # reported to the submitter as "no matching days".

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _validate_days_of_week(cls, v):
        return _normalize_days_of_week(v)

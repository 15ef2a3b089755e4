"""Human-readable labels for recurrence rules and session times."""

from __future__ import annotations

from datetime import time as dtime
from typing import Iterable, Optional, Union

from eventseries.models.recurrence import RecurrenceFrequency, RecurrenceRule


RECURRENCE_LABELS: dict[str, str] = {
    RecurrenceFrequency.DAILY.value: "Every day",
    RecurrenceFrequency.WEEKLY.value: "Every week",
    RecurrenceFrequency.BIWEEKLY.value: "Every 2 weeks",
    RecurrenceFrequency.MONTHLY.value: "Every month",
}

# 0 = Sunday
DAY_OF_WEEK_LABELS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_OF_WEEK_SHORT = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 22 -> '22nd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_time_display(value: Union[str, dtime, None]) -> Optional[str]:
    """Format 'HH:MM' / 'HH:MM:SS' (or a time) as 12-hour display, e.g. '17:30' -> '5:30 PM'."""
    if value is None or value == "":
        return None
    if isinstance(value, dtime):
        hours, minutes = value.hour, value.minute
    else:
        pieces = str(value).split(":")
        if len(pieces) < 2:
            return None
        try:
            hours, minutes = int(pieces[0]), int(pieces[1])
        except ValueError:
            return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def format_days_of_week(days: Optional[Iterable[int]], *, short: bool = True) -> str:
    if not days:
        return ""
    labels = DAY_OF_WEEK_SHORT if short else DAY_OF_WEEK_LABELS
    return ", ".join(labels[d] for d in sorted(set(days)) if 0 <= d <= 6)


def format_recurrence(rule: Optional[RecurrenceRule]) -> str:
    """Format a rule for display, e.g. 'Every Tuesday at 7:00 PM'."""
    if rule is None:
        return ""

    parts = []
    one_day = len(rule.days_of_week) == 1
    if rule.frequency == RecurrenceFrequency.WEEKLY.value and one_day:
        parts.append(f"Every {DAY_OF_WEEK_LABELS[rule.days_of_week[0]]}")
    elif rule.frequency == RecurrenceFrequency.BIWEEKLY.value and one_day:
        parts.append(f"Every other {DAY_OF_WEEK_LABELS[rule.days_of_week[0]]}")
    elif rule.frequency == RecurrenceFrequency.MONTHLY.value and rule.day_of_month:
        parts.append(f"Monthly on the {ordinal(rule.day_of_month)}")
    else:
        parts.append(RECURRENCE_LABELS.get(rule.frequency, rule.frequency))

    if rule.time is not None:
        parts.append(f"at {format_time_display(rule.time)}")
    return " ".join(parts)

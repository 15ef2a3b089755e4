"""Expand camp ranges and recurrence rules into concrete calendar dates.

Everything here is pure: same inputs -> same ordered list of dates. Malformed but
well-typed input never raises; it degrades to an empty (or capped) list and the
caller decides how to present that to the submitter.
"""

from __future__ import annotations

import calendar
import logging
from datetime import MAXYEAR, date, timedelta
from typing import Iterable, List, Optional

from eventseries.models.constants import (
    DEFAULT_RECURRENCE_HORIZON_WEEKS,
    MAX_CAMP_SCAN_DAYS,
    MAX_RECURRENCE_OCCURRENCES,
    WEEKLY_ITERATION_FACTOR,
)
from eventseries.models.recurrence import RecurrenceEndType, RecurrenceFrequency, RecurrenceRule

logger = logging.getLogger(__name__)


def weekday_index(d: date) -> int:
    # Python weekday: Monday=0 ... Sunday=6; ours: Sunday=0 ... Saturday=6
    return (d.weekday() + 1) % 7


def _shift(d: date, days: int) -> Optional[date]:
    """d + days, or None when the result falls outside the representable calendar."""
    try:
        return d + timedelta(days=days)
    except OverflowError:
        return None


def _clamp_day(year: int, month: int, day: int) -> date:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))


def _add_months(year: int, month: int, months: int) -> tuple[int, int]:
    total = (year * 12 + (month - 1)) + months
    return total // 12, total % 12 + 1


def expand_camp_dates(start_date: date, end_date: date, days_of_week: Iterable[int]) -> List[date]:
    """Every day in [start_date, end_date] whose weekday is selected.

    Scans at most MAX_CAMP_SCAN_DAYS calendar days; longer ranges are silently
    truncated. An inverted range or an empty weekday selection yields [].
    """
    selected = set(days_of_week or [])
    if not selected:
        logger.debug("Camp expansion skipped: no weekdays selected")
        return []
    if start_date > end_date:
        logger.debug(f"Camp expansion skipped: end_date {end_date} is before start_date {start_date}")
        return []

    out: List[date] = []
    cur = start_date
    scanned = 0
    while cur is not None and cur <= end_date and scanned < MAX_CAMP_SCAN_DAYS:
        if weekday_index(cur) in selected:
            out.append(cur)
        cur = _shift(cur, 1)
        scanned += 1

    if cur is not None and cur <= end_date:
        logger.info(
            f"Camp range {start_date}..{end_date} truncated after {MAX_CAMP_SCAN_DAYS} days "
            f"({len(out)} sessions)"
        )
    return out


def _limits(rule: RecurrenceRule, first_date: date) -> tuple[int, Optional[date]]:
    """Return (max_count, last allowed date or None) for a rule's end condition."""
    if rule.end_type == RecurrenceEndType.COUNT:
        return min(int(rule.end_count), MAX_RECURRENCE_OCCURRENCES), None
    if rule.end_type == RecurrenceEndType.DATE:
        return MAX_RECURRENCE_OCCURRENCES, rule.end_date
    # Open-ended: stop at the default horizon (exclusive of the day 12 weeks out).
    horizon = _shift(first_date, DEFAULT_RECURRENCE_HORIZON_WEEKS * 7 - 1) or date.max
    return MAX_RECURRENCE_OCCURRENCES, horizon


def _expand_daily(rule: RecurrenceRule, first_date: date, max_count: int, until: Optional[date]) -> List[date]:
    out: List[date] = []
    cur = first_date
    while cur is not None and len(out) < max_count:
        if until is not None and cur > until:
            break
        out.append(cur)
        cur = _shift(cur, rule.interval)
    return out


def _expand_weekly(rule: RecurrenceRule, first_date: date, max_count: int, until: Optional[date]) -> List[date]:
    step_days = 7 * rule.interval * (2 if rule.frequency == RecurrenceFrequency.BIWEEKLY.value else 1)
    days = sorted(set(rule.days_of_week)) or [weekday_index(first_date)]
    # Offsets are measured from first_date; the week itself starts on Sunday.
    first_weekday = weekday_index(first_date)

    out: List[date] = []
    for week in range(WEEKLY_ITERATION_FACTOR * max_count):
        for day in days:
            offset = week * step_days + day - first_weekday
            if offset < 0:
                continue
            candidate = _shift(first_date, offset)
            if candidate is None:
                return out
            if until is not None and candidate > until:
                return out
            out.append(candidate)
            if len(out) >= max_count:
                return out
    return out


def _expand_monthly(rule: RecurrenceRule, first_date: date, max_count: int, until: Optional[date]) -> List[date]:
    target_day = rule.day_of_month or first_date.day
    year, month = first_date.year, first_date.month

    out: List[date] = []
    while len(out) < max_count and year <= MAXYEAR:
        candidate = _clamp_day(year, month, target_day)
        if until is not None and candidate > until:
            break
        if candidate >= first_date:
            out.append(candidate)
        year, month = _add_months(year, month, rule.interval)
    return out


_EXPANDERS = {
    RecurrenceFrequency.DAILY.value: _expand_daily,
    RecurrenceFrequency.WEEKLY.value: _expand_weekly,
    RecurrenceFrequency.BIWEEKLY.value: _expand_weekly,
    RecurrenceFrequency.MONTHLY.value: _expand_monthly,
}


def expand_recurrence(rule: RecurrenceRule, first_date: date) -> List[date]:
    """Expand a recurrence rule into ascending occurrence dates starting at first_date.

    Never emits more than MAX_RECURRENCE_OCCURRENCES dates. Unsupported
    frequencies are logged and produce [].
    """
    expander = _EXPANDERS.get(rule.frequency)
    if expander is None:
        logger.warning(f"Unsupported recurrence frequency {rule.frequency!r}; no occurrences generated")
        return []

    max_count, until = _limits(rule, first_date)
    if until is not None and until < first_date:
        logger.debug(f"Recurrence end date {until} is before first date {first_date}")
        return []
    return expander(rule, first_date, max_count, until)


def collect_manual_dates(first_date: date, additional_dates: Optional[Iterable[date]] = None) -> List[date]:
    """Merge a hand-picked multi-session date list with the first date.

    Deduplicated, ascending, capped at MAX_RECURRENCE_OCCURRENCES.
    """
    merged = {first_date}
    merged.update(additional_dates or [])
    return sorted(merged)[:MAX_RECURRENCE_OCCURRENCES]

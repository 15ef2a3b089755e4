"""Materialize expanded pattern dates into concrete event records."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, time as dtime
from typing import Iterable, List, Optional, Sequence

from eventseries.models.constants import (
    CAMP_TITLE_TEMPLATE,
    DEFAULT_DURATION_MINUTES,
    MINUTES_PER_DAY,
)
from eventseries.models.event import EventDraft, GeneratedEvent, GeneratedSeries, SeriesAggregate
from eventseries.models.event_factory import create_event_base
from eventseries.models.recurrence import CampPattern, RecurrenceRule
from eventseries.recurrence.expand import collect_manual_dates, expand_camp_dates, expand_recurrence

logger = logging.getLogger(__name__)


class NoOccurrencesGenerated(ValueError):
    """Expansion succeeded but produced zero dates (usually a user input mismatch)."""

    def __init__(self, message: str, *, pattern_kind: Optional[str] = None):
        super().__init__(message)
        self.pattern_kind = pattern_kind


def end_after_duration(day: date, start_time: dtime, duration_minutes: int) -> datetime:
    """Start plus duration in minute-of-day arithmetic; wraps past midnight onto the next day."""
    total = start_time.hour * 60 + start_time.minute + int(duration_minutes)
    day_offset, minute_of_day = divmod(total, MINUTES_PER_DAY)
    end_t = dtime(minute_of_day // 60, minute_of_day % 60)
    return datetime.combine(day + timedelta(days=day_offset), end_t)


def _session_bounds(
    day: date,
    start_time: dtime,
    end_time: Optional[dtime],
    duration_minutes: Optional[int],
) -> tuple[datetime, datetime]:
    start_dt = datetime.combine(day, start_time)
    if end_time is not None:
        end_dt = datetime.combine(day, end_time)
        if end_time <= start_time:
            # spans midnight
            end_dt = end_dt + timedelta(days=1)
        return (start_dt, end_dt)
    return (start_dt, end_after_duration(day, start_time, duration_minutes or DEFAULT_DURATION_MINUTES))


def _apply_title(title_template: Optional[str], title: str, n: int, total: int, number_single: bool) -> str:
    if not title_template or (total <= 1 and not number_single):
        return title
    return title_template.format(title=title, n=n)


def materialize_events(
    draft: EventDraft,
    dates: Sequence[date],
    start_time: dtime,
    *,
    end_time: Optional[dtime] = None,
    duration_minutes: Optional[int] = None,
    title_template: Optional[str] = None,
    series_id: Optional[str] = None,
    number_single: bool = False,
) -> List[GeneratedEvent]:
    """Build one event per date, numbered 1..N in emission order.

    The end of each session is `end_time` when given (camps), otherwise
    `start_time + duration_minutes` (recurring rules). A lone session keeps the
    plain draft title unless `number_single` is set.

    Dates are ascending; materialization stops at the first session whose end
    falls past the last representable date.
    """
    total = len(dates)
    events: List[GeneratedEvent] = []
    for n, day in enumerate(dates, start=1):
        try:
            start_dt, end_dt = _session_bounds(day, start_time, end_time, duration_minutes)
        except OverflowError:
            logger.warning(f"Session {n} on {day} ends past the supported calendar range; stopping")
            break
        events.append(
            create_event_base(
                draft,
                sequence_number=n,
                instance_date=day,
                start_datetime=start_dt,
                end_datetime=end_dt,
                title=_apply_title(title_template, draft.title, n, total, number_single),
                series_id=series_id,
            )
        )
    return events


def compute_series_aggregate(dates: Iterable[date]) -> SeriesAggregate:
    """Derive start/end/total for the parent series from the generated dates."""
    dates = list(dates)
    if not dates:
        raise NoOccurrencesGenerated("Cannot summarize a series with no sessions")
    return SeriesAggregate(start_date=min(dates), end_date=max(dates), total_sessions=len(dates))


def _finish(events: List[GeneratedEvent], pattern_kind: str) -> GeneratedSeries:
    if not events:
        raise NoOccurrencesGenerated(
            f"No {pattern_kind} sessions fall within the supported calendar range",
            pattern_kind=pattern_kind,
        )
    aggregate = compute_series_aggregate(e.instance_date for e in events)
    logger.info(
        f"Generated {aggregate.total_sessions} {pattern_kind} sessions "
        f"({aggregate.start_date} to {aggregate.end_date})"
    )
    return GeneratedSeries(events=events, aggregate=aggregate)


def generate_camp_series(
    draft: EventDraft,
    camp: CampPattern,
    *,
    series_id: Optional[str] = None,
    title_template: Optional[str] = CAMP_TITLE_TEMPLATE,
) -> GeneratedSeries:
    """Expand a camp pattern and materialize "<Title> - Day N" sessions."""
    dates = expand_camp_dates(camp.start_date, camp.end_date, camp.days_of_week)
    if not dates:
        raise NoOccurrencesGenerated(
            "No matching days: the selected weekdays do not fall within the camp dates",
            pattern_kind="camp",
        )
    events = materialize_events(
        draft,
        dates,
        camp.core_start_time,
        end_time=camp.core_end_time,
        title_template=title_template,
        series_id=series_id,
        number_single=True,
    )
    return _finish(events, "camp")


def generate_recurring_series(
    draft: EventDraft,
    rule: RecurrenceRule,
    first_date: date,
    *,
    series_id: Optional[str] = None,
    title_template: Optional[str] = None,
) -> GeneratedSeries:
    """Expand a recurrence rule from first_date and materialize its sessions."""
    dates = expand_recurrence(rule, first_date)
    if not dates:
        raise NoOccurrencesGenerated(
            f"The {rule.frequency or 'recurrence'} schedule produced no dates on or after {first_date}",
            pattern_kind="recurrence",
        )
    events = materialize_events(
        draft,
        dates,
        rule.time,
        duration_minutes=rule.duration_minutes,
        title_template=title_template,
        series_id=series_id,
    )
    return _finish(events, "recurrence")


def generate_manual_series(
    draft: EventDraft,
    first_date: date,
    additional_dates: Optional[Iterable[date]],
    start_time: dtime,
    *,
    end_time: Optional[dtime] = None,
    duration_minutes: Optional[int] = None,
    series_id: Optional[str] = None,
    title_template: Optional[str] = None,
) -> GeneratedSeries:
    """Materialize a hand-picked multi-session date list."""
    dates = collect_manual_dates(first_date, additional_dates)
    events = materialize_events(
        draft,
        dates,
        start_time,
        end_time=end_time,
        duration_minutes=duration_minutes,
        title_template=title_template,
        series_id=series_id,
    )
    return _finish(events, "manual")

"""Tests for event-batch materialization and series aggregates."""

import pytest
from datetime import date, datetime, time

from eventseries.models.constants import SESSION_TITLE_TEMPLATE
from eventseries.models.event import EventDraft
from eventseries.models.recurrence import CampPattern, RecurrenceRule
from eventseries.recurrence.materialize import (
    NoOccurrencesGenerated,
    compute_series_aggregate,
    end_after_duration,
    generate_camp_series,
    generate_manual_series,
    generate_recurring_series,
    materialize_events,
)


class TestGenerateCampSeries:
    """Camp: Mon-Fri sessions titled '<Title> - Day N' with core hours."""

    def test_weekday_camp(self, sample_draft, weekday_camp):
        result = generate_camp_series(sample_draft, weekday_camp, series_id="series-1")

        assert [e.sequence_number for e in result.events] == [1, 2, 3, 4, 5]
        assert [e.title for e in result.events] == [f"Summer Art Camp - Day {n}" for n in range(1, 6)]
        first = result.events[0]
        assert first.start_datetime == datetime(2026, 6, 1, 9, 0)
        assert first.end_datetime == datetime(2026, 6, 1, 15, 0)
        assert first.slug == "summer-art-camp-day-1-2026-06-01"

        assert result.aggregate.start_date == date(2026, 6, 1)
        assert result.aggregate.end_date == date(2026, 6, 5)
        assert result.aggregate.total_sessions == 5

    def test_copies_draft_fields_to_every_event(self, sample_draft, weekday_camp):
        result = generate_camp_series(sample_draft, weekday_camp, series_id="series-1")

        for event in result.events:
            assert event.series_id == "series-1"
            assert event.is_series_instance is True
            assert event.location_id == "loc-community-center"
            assert event.organizer_id == "org-art-league"
            assert event.price_type == "fixed"
            assert event.price_low == 150.0
            assert event.is_free is False
            assert event.registration_url == "https://example.com/register"
            assert event.timezone == "America/Chicago"
            assert event.status == "pending_review"
            assert event.source == "user_submission"

    def test_no_matching_days_raises(self, sample_draft):
        weekend = CampPattern(
            start_date=date(2026, 6, 6),
            end_date=date(2026, 6, 7),
            days_of_week=[1, 2, 3, 4, 5],
            core_start_time=time(9, 0),
            core_end_time=time(15, 0),
        )
        with pytest.raises(NoOccurrencesGenerated) as exc_info:
            generate_camp_series(sample_draft, weekend)
        assert exc_info.value.pattern_kind == "camp"

    def test_inverted_range_raises(self, sample_draft):
        inverted = CampPattern(
            start_date=date(2026, 6, 5),
            end_date=date(2026, 6, 1),
            days_of_week=[1, 2, 3, 4, 5],
            core_start_time=time(9, 0),
            core_end_time=time(15, 0),
        )
        with pytest.raises(NoOccurrencesGenerated):
            generate_camp_series(sample_draft, inverted)

    def test_overnight_core_hours_end_next_day(self, sample_draft):
        overnight = CampPattern(
            start_date=date(2026, 6, 1),
            end_date=date(2026, 6, 1),
            days_of_week=[1],
            core_start_time=time(20, 0),
            core_end_time=time(8, 0),
        )
        result = generate_camp_series(sample_draft, overnight)
        assert result.events[0].end_datetime == datetime(2026, 6, 2, 8, 0)

    def test_single_day_camp_keeps_day_suffix(self, sample_draft):
        one_day = CampPattern(
            start_date=date(2026, 6, 1),
            end_date=date(2026, 6, 1),
            days_of_week=[1],
            core_start_time=time(9, 0),
            core_end_time=time(15, 0),
        )
        result = generate_camp_series(sample_draft, one_day)
        assert [e.title for e in result.events] == ["Summer Art Camp - Day 1"]


class TestGenerateRecurringSeries:
    def test_weekly_count(self, sample_draft, weekly_rule):
        result = generate_recurring_series(sample_draft, weekly_rule, date(2026, 1, 6))

        assert result.aggregate.total_sessions == 6
        assert len(result.events) == 6
        assert result.aggregate.start_date == date(2026, 1, 6)
        assert result.aggregate.end_date == date(2026, 2, 10)
        first = result.events[0]
        assert first.start_datetime == datetime(2026, 1, 6, 19, 0)
        assert first.end_datetime == datetime(2026, 1, 6, 20, 30)
        # No template: titles are shared.
        assert {e.title for e in result.events} == {"Summer Art Camp"}

    def test_session_title_template(self, sample_draft, weekly_rule):
        result = generate_recurring_series(
            sample_draft, weekly_rule, date(2026, 1, 6), title_template=SESSION_TITLE_TEMPLATE
        )
        assert result.events[2].title == "Summer Art Camp - Session 3"

    def test_duration_wraps_past_midnight(self, sample_draft):
        rule = RecurrenceRule(
            frequency="daily",
            time=time(23, 30),
            duration_minutes=90,
            end_type="count",
            end_count=2,
        )
        result = generate_recurring_series(sample_draft, rule, date(2026, 1, 1))
        assert result.events[0].end_datetime == datetime(2026, 1, 2, 1, 0)
        assert result.events[1].end_datetime == datetime(2026, 1, 3, 1, 0)

    def test_unsupported_frequency_raises_no_occurrences(self, sample_draft):
        rule = RecurrenceRule(frequency="yearly")
        with pytest.raises(NoOccurrencesGenerated) as exc_info:
            generate_recurring_series(sample_draft, rule, date(2026, 1, 1))
        assert exc_info.value.pattern_kind == "recurrence"

    def test_identical_inputs_identical_output(self, sample_draft, weekly_rule):
        a = generate_recurring_series(sample_draft, weekly_rule, date(2026, 1, 6))
        b = generate_recurring_series(sample_draft, weekly_rule, date(2026, 1, 6))
        assert a == b

    def test_session_past_end_of_calendar_stops_batch(self, sample_draft):
        rule = RecurrenceRule(
            frequency="daily",
            time=time(23, 30),
            duration_minutes=90,
            end_type="count",
            end_count=2,
        )
        result = generate_recurring_series(sample_draft, rule, date(9999, 12, 30))
        assert [e.instance_date for e in result.events] == [date(9999, 12, 30)]
        assert result.aggregate.total_sessions == 1

    def test_no_representable_session_raises_no_occurrences(self, sample_draft):
        rule = RecurrenceRule(frequency="daily", time=time(23, 30), duration_minutes=90)
        with pytest.raises(NoOccurrencesGenerated) as exc_info:
            generate_recurring_series(sample_draft, rule, date.max)
        assert exc_info.value.pattern_kind == "recurrence"


class TestGenerateManualSeries:
    def test_manual_dates(self, sample_draft):
        result = generate_manual_series(
            sample_draft,
            date(2026, 3, 4),
            [date(2026, 3, 18), date(2026, 3, 11)],
            time(18, 0),
            end_time=time(20, 0),
        )
        assert [e.instance_date for e in result.events] == [
            date(2026, 3, 4),
            date(2026, 3, 11),
            date(2026, 3, 18),
        ]
        assert result.aggregate.total_sessions == 3
        assert result.events[-1].end_datetime == datetime(2026, 3, 18, 20, 0)


class TestMaterializeEvents:
    def test_default_duration(self, sample_draft):
        events = materialize_events(sample_draft, [date(2026, 5, 1)], time(10, 0))
        assert events[0].end_datetime == datetime(2026, 5, 1, 11, 0)

    def test_single_occurrence_keeps_plain_title(self, sample_draft):
        events = materialize_events(
            sample_draft, [date(2026, 5, 1)], time(10, 0), title_template="{title} - Day {n}"
        )
        assert events[0].title == "Summer Art Camp"

    def test_free_price_type_sets_is_free(self, sample_draft_base):
        draft = EventDraft(**{**sample_draft_base, "price_type": "free", "price_low": None})
        events = materialize_events(draft, [date(2026, 5, 1)], time(10, 0))
        assert events[0].is_free is True

    def test_explicit_is_free_wins(self, sample_draft_base):
        draft = EventDraft(**{**sample_draft_base, "price_type": "donation", "is_free": True})
        events = materialize_events(draft, [date(2026, 5, 1)], time(10, 0))
        assert events[0].is_free is True

    def test_empty_dates_produce_no_events(self, sample_draft):
        assert materialize_events(sample_draft, [], time(10, 0)) == []


class TestEndAfterDuration:
    def test_same_day(self):
        assert end_after_duration(date(2026, 1, 1), time(9, 15), 45) == datetime(2026, 1, 1, 10, 0)

    def test_exactly_midnight(self):
        assert end_after_duration(date(2026, 1, 1), time(23, 0), 60) == datetime(2026, 1, 2, 0, 0)

    def test_multi_day_duration(self):
        assert end_after_duration(date(2026, 1, 1), time(0, 0), 2 * 1440 + 5) == datetime(2026, 1, 3, 0, 5)


class TestComputeSeriesAggregate:
    def test_min_max_count(self):
        aggregate = compute_series_aggregate([date(2026, 6, 3), date(2026, 6, 1), date(2026, 6, 5)])
        assert aggregate.start_date == date(2026, 6, 1)
        assert aggregate.end_date == date(2026, 6, 5)
        assert aggregate.total_sessions == 3

    def test_empty_raises(self):
        with pytest.raises(NoOccurrencesGenerated):
            compute_series_aggregate([])

    def test_matches_generated_batch(self, sample_draft, weekly_rule):
        result = generate_recurring_series(sample_draft, weekly_rule, date(2026, 1, 6))
        assert result.aggregate.start_date == result.events[0].instance_date
        assert result.aggregate.end_date == result.events[-1].instance_date
        assert result.aggregate.total_sessions == len(result.events)

"""Data models for eventseries."""

from eventseries.models.event import (
    EventDraft,
    EventStatus,
    GeneratedEvent,
    GeneratedSeries,
    PriceType,
    SeriesAggregate,
    SeriesType,
)
from eventseries.models.recurrence import (
    CampPattern,
    RecurrenceEndType,
    RecurrenceFrequency,
    RecurrenceRule,
)

__all__ = [
    "EventDraft",
    "EventStatus",
    "GeneratedEvent",
    "GeneratedSeries",
    "PriceType",
    "SeriesAggregate",
    "SeriesType",
    "CampPattern",
    "RecurrenceEndType",
    "RecurrenceFrequency",
    "RecurrenceRule",
]

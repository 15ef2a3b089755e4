"""Event generation engine for eventseries."""

from eventseries.recurrence.expand import collect_manual_dates, expand_camp_dates, expand_recurrence
from eventseries.recurrence.materialize import (
    NoOccurrencesGenerated,
    compute_series_aggregate,
    generate_camp_series,
    generate_manual_series,
    generate_recurring_series,
    materialize_events,
)

__all__ = [
    "collect_manual_dates",
    "expand_camp_dates",
    "expand_recurrence",
    "NoOccurrencesGenerated",
    "compute_series_aggregate",
    "generate_camp_series",
    "generate_manual_series",
    "generate_recurring_series",
    "materialize_events",
]

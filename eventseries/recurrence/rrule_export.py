"""Export RecurrenceRule to iCalendar RRULE strings (export-only)."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from eventseries.models.recurrence import RecurrenceEndType, RecurrenceFrequency, RecurrenceRule


# Indexed by our weekday numbering (0=Sunday)
_WD_CODES: List[str] = ["SU", "MO", "TU", "WE", "TH", "FR", "SA"]

_FREQ_MAP: dict[str, str] = {
    RecurrenceFrequency.DAILY.value: "DAILY",
    RecurrenceFrequency.WEEKLY.value: "WEEKLY",
    RecurrenceFrequency.BIWEEKLY.value: "WEEKLY",
    RecurrenceFrequency.MONTHLY.value: "MONTHLY",
}


def rule_to_rrule(rule: RecurrenceRule) -> Optional[str]:
    """Convert a rule to an RRULE (without the leading 'RRULE:' prefix).

    Returns None for frequencies we do not generate.
    """
    freq = _FREQ_MAP.get(rule.frequency)
    if freq is None:
        return None

    parts: List[str] = [f"FREQ={freq}"]
    interval = int(rule.interval)
    if rule.frequency == RecurrenceFrequency.BIWEEKLY.value:
        interval *= 2
    if interval != 1:
        parts.append(f"INTERVAL={interval}")
    if freq == "WEEKLY" and rule.days_of_week:
        parts.append("BYDAY=" + ",".join(_WD_CODES[d] for d in rule.days_of_week))
    if freq == "MONTHLY" and rule.day_of_month:
        # RRULE skips short months for BYMONTHDAY=31; our generator clamps instead.
        parts.append(f"BYMONTHDAY={int(rule.day_of_month)}")

    if rule.end_type == RecurrenceEndType.COUNT and rule.end_count:
        parts.append(f"COUNT={int(rule.end_count)}")
    # UNTIL: keep date-only to avoid timezone drift; calendars treat it as end of day in UTC.
    if rule.end_type == RecurrenceEndType.DATE and rule.end_date:
        until: date = rule.end_date
        parts.append(f"UNTIL={until.strftime('%Y%m%d')}T235959Z")
    return ";".join(parts)

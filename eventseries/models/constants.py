"""Constants for eventseries.

This module centralizes the generation policy limits and default values used
throughout the application. The caps exist to prevent runaway generation from
pathological submissions (a "weekly forever" rule or a multi-year camp range).
"""


# Camp expansion: never scan more than this many calendar days from start_date.
MAX_CAMP_SCAN_DAYS = 60

# Recurrence expansion: never emit more than this many occurrences.
MAX_RECURRENCE_OCCURRENCES = 52

# Open-ended ("never") recurrences stop at this horizon from the first date.
# Users are not told about the cutoff; kept as-is pending product review.
DEFAULT_RECURRENCE_HORIZON_WEEKS = 12

# Weekly expansion walks at most (this factor x max occurrences) weeks.
WEEKLY_ITERATION_FACTOR = 4

# Minutes in a day (time-of-day arithmetic wraps at midnight)
MINUTES_PER_DAY = 1440

# Event defaults
DEFAULT_DURATION_MINUTES = 60
DEFAULT_TIMEZONE = "America/Chicago"
DEFAULT_EVENT_STATUS = "pending_review"
DEFAULT_EVENT_SOURCE = "user_submission"

# Title templates ({title} = draft title, {n} = 1-based sequence number)
CAMP_TITLE_TEMPLATE = "{title} - Day {n}"
SESSION_TITLE_TEMPLATE = "{title} - Session {n}"

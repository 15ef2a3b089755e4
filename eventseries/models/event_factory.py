"""Event creation factory for eventseries.

This module centralizes how a generated occurrence is built from a draft so
that every event in a batch gets the same copied fields and defaults.
"""

import re
import unicodedata
from datetime import date, datetime
from typing import Optional, Dict, Any

from eventseries.models.event import EventDraft, EventStatus, GeneratedEvent, PriceType
from eventseries.models.constants import DEFAULT_EVENT_SOURCE, DEFAULT_EVENT_STATUS

_slug_invalid = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Return a canonical slug suitable for URLs."""
    value = (
        unicodedata.normalize("NFKD", value or "")
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    value = value.strip().lower()
    value = _slug_invalid.sub("-", value)
    return value.strip("-")


def event_slug(title: str, instance_date: date) -> str:
    """Slug for one occurrence: title plus ISO date, unique within a series."""
    base = slugify(title) or "event"
    return f"{base}-{instance_date.isoformat()}"


def resolve_is_free(draft: EventDraft) -> bool:
    """Explicit is_free wins; otherwise derived from the price type."""
    if draft.is_free is not None:
        return bool(draft.is_free)
    return draft.price_type == PriceType.FREE.value


def copied_draft_fields(draft: EventDraft) -> Dict[str, Any]:
    """Get the draft fields every occurrence copies verbatim.

    Returns:
        Dictionary of event field values shared across the batch
    """
    return {
        "description": draft.description,
        "short_description": draft.short_description,
        "category_id": draft.category_id,
        "location_id": draft.location_id,
        "organizer_id": draft.organizer_id,
        "price_type": draft.price_type,
        "price_low": draft.price_low,
        "price_high": draft.price_high,
        "price_details": draft.price_details,
        "is_free": resolve_is_free(draft),
        "ticket_url": draft.ticket_url,
        "image_url": draft.image_url,
        "thumbnail_url": draft.thumbnail_url,
        "website_url": draft.website_url,
        "instagram_url": draft.instagram_url,
        "facebook_url": draft.facebook_url,
        "registration_url": draft.registration_url,
        "timezone": draft.timezone,
        "is_all_day": draft.is_all_day,
    }


def create_event_base(
    draft: EventDraft,
    *,
    sequence_number: int,
    instance_date: date,
    start_datetime: datetime,
    end_datetime: datetime,
    title: Optional[str] = None,
    series_id: Optional[str] = None,
    status: Optional[EventStatus] = None,
    source: Optional[str] = None,
) -> GeneratedEvent:
    """Create one generated event from a draft, allowing overrides.

    Args:
        draft: Submission draft whose shared fields are copied
        sequence_number: 1-based position within the batch
        instance_date: Local calendar date of the occurrence
        start_datetime: Occurrence start
        end_datetime: Occurrence end
        title: Final title (defaults to the draft title)
        series_id: Parent series id
        status: Moderation status (defaults to pending review)
        source: Submission source tag

    Returns:
        GeneratedEvent with draft fields and defaults applied
    """
    final_title = title if title is not None else draft.title
    return GeneratedEvent(
        sequence_number=sequence_number,
        instance_date=instance_date,
        start_datetime=start_datetime,
        end_datetime=end_datetime,
        series_id=series_id,
        is_series_instance=True,
        title=final_title,
        slug=event_slug(final_title, instance_date),
        status=status if status is not None else DEFAULT_EVENT_STATUS,
        source=source if source is not None else DEFAULT_EVENT_SOURCE,
        **copied_draft_fields(draft),
    )

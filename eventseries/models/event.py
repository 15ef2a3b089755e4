"""Event, draft and series data models for eventseries."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from eventseries.models.constants import DEFAULT_TIMEZONE


class PriceType(str, Enum):
    """Price type enumeration."""
    FREE = "free"
    FIXED = "fixed"
    RANGE = "range"
    VARIES = "varies"
    DONATION = "donation"
    PER_SESSION = "per_session"


class EventStatus(str, Enum):
    """Event moderation status."""
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    CHANGES_REQUESTED = "changes_requested"
    PUBLISHED = "published"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class SeriesType(str, Enum):
    """Series type enumeration."""
    CLASS = "class"
    CAMP = "camp"
    WORKSHOP = "workshop"
    RECURRING = "recurring"
    FESTIVAL = "festival"
    SEASON = "season"


class EventDraft(BaseModel):
    """Shared per-event field values captured by the submission wizard.

    Every generated occurrence copies these fields verbatim.
    """

    title: str = Field(..., min_length=1, description="Event title")
    description: Optional[str] = Field(None, description="Long description")
    short_description: Optional[str] = Field(None, description="Card/teaser description")
    category_id: Optional[str] = Field(None, description="Category reference")
    location_id: Optional[str] = Field(None, description="Venue reference")
    organizer_id: Optional[str] = Field(None, description="Organizer reference")

    price_type: PriceType = Field(PriceType.FREE, description="Pricing model")
    price_low: Optional[float] = Field(None, ge=0)
    price_high: Optional[float] = Field(None, ge=0)
    price_details: Optional[str] = None
    is_free: Optional[bool] = Field(None, description="Defaults to price_type == free when unset")
    ticket_url: Optional[str] = None

    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    # External links
    website_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    registration_url: Optional[str] = None

    timezone: str = Field(DEFAULT_TIMEZONE, description="IANA timezone the local times refer to")
    is_all_day: bool = False

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class GeneratedEvent(BaseModel):
    """One concrete occurrence materialized from a pattern."""

    sequence_number: int = Field(..., ge=1, description="1-based position in the generated series")
    instance_date: date = Field(..., description="Local calendar date of the occurrence")
    start_datetime: datetime = Field(..., description="instance_date combined with the start time")
    end_datetime: datetime = Field(..., description="Occurrence end (may fall on the next day)")
    series_id: Optional[str] = Field(None, description="Parent series id (assigned on insert if unset)")
    is_series_instance: bool = Field(True, description="Always true for generated occurrences")

    title: str
    slug: str
    status: EventStatus = EventStatus.PENDING_REVIEW
    source: str = "user_submission"

    description: Optional[str] = None
    short_description: Optional[str] = None
    category_id: Optional[str] = None
    location_id: Optional[str] = None
    organizer_id: Optional[str] = None
    price_type: PriceType = PriceType.FREE
    price_low: Optional[float] = None
    price_high: Optional[float] = None
    price_details: Optional[str] = None
    is_free: bool = True
    ticket_url: Optional[str] = None
    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    website_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    registration_url: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    is_all_day: bool = False

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class SeriesAggregate(BaseModel):
    """Aggregate fields written back onto the parent series row."""

    start_date: date = Field(..., description="Earliest generated date")
    end_date: date = Field(..., description="Latest generated date")
    total_sessions: int = Field(..., ge=1, description="Number of generated events")


class GeneratedSeries(BaseModel):
    """A materialized batch plus the aggregate derived from it."""

    events: List[GeneratedEvent]
    aggregate: SeriesAggregate

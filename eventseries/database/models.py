"""SQLAlchemy database models for eventseries."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Float, Boolean, Date, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from typing import Union, TypeVar, Type
from eventseries.database.database import Base
from eventseries.models.event import EventStatus, PriceType, SeriesType

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class SeriesDB(Base):
    """Database model for a series (parent grouping of generated events)."""

    __tablename__ = "series"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, index=True)
    series_type = Column(String, nullable=False, default=SeriesType.CLASS.value)
    status = Column(String, nullable=False, default=EventStatus.PENDING_REVIEW.value)

    # Aggregate fields derived from the generated batch
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    total_sessions = Column(Integer, nullable=True)

    # Pattern as submitted (recurrence rule or camp pattern, stored as JSON)
    recurrence_rule = Column(JSON, nullable=True)
    days_of_week = Column(JSON, nullable=True)
    core_start_time = Column(String, nullable=True)
    core_end_time = Column(String, nullable=True)

    location_id = Column(String, nullable=True, index=True)
    organizer_id = Column(String, nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    events = relationship("EventDB", back_populates="series", order_by="EventDB.series_sequence")


class EventDB(Base):
    """Database model for a single calendar event."""

    __tablename__ = "events"
    __table_args__ = (
        # One row per sequence position within a series.
        UniqueConstraint("series_id", "series_sequence", name="uq_event_series_sequence"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    series_id = Column(String, ForeignKey("series.id", ondelete="CASCADE"), nullable=True, index=True)
    series_sequence = Column(Integer, nullable=True)
    is_series_instance = Column(Boolean, nullable=False, default=False)

    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=EventStatus.PENDING_REVIEW.value)
    source = Column(String, nullable=False, default="user_submission")

    instance_date = Column(Date, nullable=False, index=True)
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=True)
    timezone = Column(String, nullable=False)
    is_all_day = Column(Boolean, nullable=False, default=False)

    description = Column(String, nullable=True)
    short_description = Column(String, nullable=True)
    category_id = Column(String, nullable=True)
    location_id = Column(String, nullable=True, index=True)
    organizer_id = Column(String, nullable=True, index=True)

    # Pricing
    price_type = Column(String, nullable=False, default=PriceType.FREE.value)
    price_low = Column(Float, nullable=True)
    price_high = Column(Float, nullable=True)
    price_details = Column(String, nullable=True)
    is_free = Column(Boolean, nullable=False, default=True)

    # Links and media
    ticket_url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    website_url = Column(String, nullable=True)
    instagram_url = Column(String, nullable=True)
    facebook_url = Column(String, nullable=True)
    registration_url = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    series = relationship("SeriesDB", back_populates="events")

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from eventseries.models.event import GeneratedEvent

        return GeneratedEvent(
            sequence_number=self.series_sequence or 1,
            instance_date=self.instance_date,
            start_datetime=self.start_datetime,
            end_datetime=self.end_datetime,
            series_id=self.series_id,
            is_series_instance=self.is_series_instance,
            title=self.title,
            slug=self.slug,
            status=value_to_enum(self.status, EventStatus, EventStatus.PENDING_REVIEW),
            source=self.source,
            description=self.description,
            short_description=self.short_description,
            category_id=self.category_id,
            location_id=self.location_id,
            organizer_id=self.organizer_id,
            price_type=value_to_enum(self.price_type, PriceType, PriceType.FREE),
            price_low=self.price_low,
            price_high=self.price_high,
            price_details=self.price_details,
            is_free=self.is_free,
            ticket_url=self.ticket_url,
            image_url=self.image_url,
            thumbnail_url=self.thumbnail_url,
            website_url=self.website_url,
            instagram_url=self.instagram_url,
            facebook_url=self.facebook_url,
            registration_url=self.registration_url,
            timezone=self.timezone,
            is_all_day=self.is_all_day,
        )

    @classmethod
    def from_pydantic(cls, event, *, series_id: str):
        """Create database model from a generated event bound to series_id."""
        return cls(
            series_id=series_id,
            series_sequence=event.sequence_number,
            is_series_instance=event.is_series_instance,
            title=event.title,
            slug=event.slug,
            status=enum_to_value(event.status),
            source=event.source,
            instance_date=event.instance_date,
            start_datetime=event.start_datetime,
            end_datetime=event.end_datetime,
            timezone=event.timezone,
            is_all_day=event.is_all_day,
            description=event.description,
            short_description=event.short_description,
            category_id=event.category_id,
            location_id=event.location_id,
            organizer_id=event.organizer_id,
            price_type=enum_to_value(event.price_type),
            price_low=event.price_low,
            price_high=event.price_high,
            price_details=event.price_details,
            is_free=event.is_free,
            ticket_url=event.ticket_url,
            image_url=event.image_url,
            thumbnail_url=event.thumbnail_url,
            website_url=event.website_url,
            instagram_url=event.instagram_url,
            facebook_url=event.facebook_url,
            registration_url=event.registration_url,
        )

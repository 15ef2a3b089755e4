"""Repository for series and generated-event database operations."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from eventseries.database.models import EventDB, SeriesDB, enum_to_value
from eventseries.models.event import GeneratedEvent, GeneratedSeries, SeriesType
from eventseries.models.event_factory import slugify

logger = logging.getLogger(__name__)


class SeriesRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_with_events(
        self,
        *,
        title: str,
        series_type: SeriesType,
        generated: GeneratedSeries,
        recurrence_rule: Optional[dict] = None,
        days_of_week: Optional[List[int]] = None,
        core_start_time: Optional[str] = None,
        core_end_time: Optional[str] = None,
    ) -> SeriesDB:
        """Insert the series row and its generated event batch in one commit.

        The aggregate columns come from `generated.aggregate`; they are never set
        independently of the batch.
        """
        first = generated.events[0] if generated.events else None
        series_id = (first.series_id if first and first.series_id else None) or str(uuid.uuid4())
        row = SeriesDB(
            id=series_id,
            title=title,
            slug=slugify(title) or "series",
            series_type=enum_to_value(series_type),
            start_date=generated.aggregate.start_date,
            end_date=generated.aggregate.end_date,
            total_sessions=generated.aggregate.total_sessions,
            recurrence_rule=recurrence_rule,
            days_of_week=days_of_week,
            core_start_time=core_start_time,
            core_end_time=core_end_time,
            location_id=first.location_id if first else None,
            organizer_id=first.organizer_id if first else None,
        )
        try:
            self.db.add(row)
            self.db.add_all([EventDB.from_pydantic(e, series_id=series_id) for e in generated.events])
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Created series {series_id} with {len(generated.events)} events: {title[:50]}")
            return row
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create series {title[:50]!r}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, series_id: str) -> Optional[SeriesDB]:
        return self.db.query(SeriesDB).filter(SeriesDB.id == series_id).first()

    def list_events(self, series_id: str) -> List[GeneratedEvent]:
        """Events of a series in sequence order."""
        rows = (
            self.db.query(EventDB)
            .filter(EventDB.series_id == series_id)
            .order_by(EventDB.series_sequence.asc())
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def list_event_ids(self, series_id: str) -> List[str]:
        rows = (
            self.db.query(EventDB.id)
            .filter(EventDB.series_id == series_id)
            .order_by(EventDB.series_sequence.asc())
            .all()
        )
        return [r[0] for r in rows]

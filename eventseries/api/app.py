"""FastAPI web application for eventseries."""

import logging
from datetime import date, time as dtime
from string import Formatter
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from eventseries.database.database import get_db, init_db
from eventseries.database.series_repository import SeriesRepository
from eventseries.models.constants import CAMP_TITLE_TEMPLATE
from eventseries.models.event import EventDraft, GeneratedEvent, GeneratedSeries, SeriesAggregate, SeriesType
from eventseries.models.recurrence import CampPattern, RecurrenceRule
from eventseries.recurrence.describe import format_days_of_week, format_recurrence, format_time_display
from eventseries.recurrence.materialize import (
    NoOccurrencesGenerated,
    generate_camp_series,
    generate_manual_series,
    generate_recurring_series,
)
from eventseries.recurrence.rrule_export import rule_to_rrule

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

_TITLE_TEMPLATE_FIELDS = ("title", "n")

# Initialize FastAPI app
app = FastAPI(
    title="eventseries API",
    description="Generates the sessions of camps, classes and recurring community events",
    version=API_VERSION,
)


@app.on_event("startup")
def _startup() -> None:
    init_db()


# Request / response models
class ManualSessions(BaseModel):
    """Hand-picked multi-session dates sharing one time slot."""
    first_date: date
    additional_dates: List[date] = Field(default_factory=list)
    start_time: dtime
    end_time: Optional[dtime] = None
    duration_minutes: Optional[int] = Field(None, ge=1)


class SeriesRequest(BaseModel):
    """Draft plus exactly one pattern (camp, recurrence or manual dates)."""
    draft: EventDraft
    camp: Optional[CampPattern] = None
    recurrence: Optional[RecurrenceRule] = None
    manual: Optional[ManualSessions] = None
    first_date: Optional[date] = Field(None, description="Reference start date for recurrence rules")
    title_template: Optional[str] = Field(
        None, description="Per-session title, e.g. '{title} - Session {n}'"
    )

    @field_validator("title_template")
    @classmethod
    def _validate_title_template(cls, v):
        if v is None:
            return None
        for _, field_name, format_spec, _ in Formatter().parse(v):
            if field_name is None:
                continue
            if field_name not in _TITLE_TEMPLATE_FIELDS or "{" in (format_spec or ""):
                raise ValueError("title_template may only reference {title} and {n}")
        try:
            v.format(title="Title", n=1)
        except (KeyError, IndexError, ValueError):
            raise ValueError("title_template may only reference {title} and {n}")
        return v

    @model_validator(mode="after")
    def _validate_recurrence_start(self):
        if self.recurrence is not None and self.first_date is None:
            raise ValueError("first_date is required with a recurrence rule")
        return self


class SubmitSeriesRequest(SeriesRequest):
    series_title: Optional[str] = Field(None, description="Defaults to the draft title")
    series_type: Optional[SeriesType] = Field(None, description="Defaults from the pattern kind")


class SeriesPreviewResponse(BaseModel):
    """Response for a generation preview."""
    events: List[GeneratedEvent]
    aggregate: SeriesAggregate
    summary: str
    rrule: Optional[str] = None


class SubmitSeriesResponse(BaseModel):
    """Response for a submitted series."""
    series_id: str
    event_ids: List[str]
    aggregate: SeriesAggregate


def _pattern_kind(req: SeriesRequest) -> str:
    supplied = [
        name
        for name, value in (("camp", req.camp), ("recurrence", req.recurrence), ("manual", req.manual))
        if value is not None
    ]
    if len(supplied) != 1:
        raise HTTPException(
            status_code=400,
            detail="Supply exactly one of camp, recurrence or manual",
        )
    return supplied[0]


def _generate(req: SeriesRequest, kind: str, series_id: Optional[str] = None) -> GeneratedSeries:
    try:
        if kind == "camp":
            return generate_camp_series(
                req.draft,
                req.camp,
                series_id=series_id,
                title_template=req.title_template or CAMP_TITLE_TEMPLATE,
            )
        if kind == "recurrence":
            return generate_recurring_series(
                req.draft,
                req.recurrence,
                req.first_date,
                series_id=series_id,
                title_template=req.title_template,
            )
        return generate_manual_series(
            req.draft,
            req.manual.first_date,
            req.manual.additional_dates,
            req.manual.start_time,
            end_time=req.manual.end_time,
            duration_minutes=req.manual.duration_minutes,
            series_id=series_id,
            title_template=req.title_template,
        )
    except NoOccurrencesGenerated as e:
        logger.info(f"No occurrences generated for {kind} submission: {e}")
        raise HTTPException(status_code=422, detail={"code": "no_occurrences", "message": str(e)})


def _summary(req: SeriesRequest, kind: str) -> str:
    if kind == "recurrence":
        return format_recurrence(req.recurrence)
    if kind == "camp":
        days = format_days_of_week(req.camp.days_of_week)
        start = format_time_display(req.camp.core_start_time)
        end = format_time_display(req.camp.core_end_time)
        return f"{days}, {start} - {end}"
    return "Selected dates"


_DEFAULT_SERIES_TYPE = {
    "camp": SeriesType.CAMP,
    "recurrence": SeriesType.RECURRING,
    "manual": SeriesType.CLASS,
}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": API_VERSION}


@app.post("/series/preview", response_model=SeriesPreviewResponse)
def preview_series(req: SeriesRequest):
    """Expand and materialize a pattern without writing anything."""
    kind = _pattern_kind(req)
    generated = _generate(req, kind)
    return SeriesPreviewResponse(
        events=generated.events,
        aggregate=generated.aggregate,
        summary=_summary(req, kind),
        rrule=rule_to_rrule(req.recurrence) if req.recurrence is not None else None,
    )


@app.post("/series", response_model=SubmitSeriesResponse, status_code=201)
def submit_series(req: SubmitSeriesRequest, db: Session = Depends(get_db)):
    """Generate the session batch and insert it together with its series row."""
    kind = _pattern_kind(req)
    generated = _generate(req, kind)

    repo = SeriesRepository(db)
    try:
        row = repo.create_with_events(
            title=req.series_title or req.draft.title,
            series_type=req.series_type or _DEFAULT_SERIES_TYPE[kind],
            generated=generated,
            recurrence_rule=req.recurrence.model_dump(mode="json") if req.recurrence else None,
            days_of_week=req.camp.days_of_week if req.camp else None,
            core_start_time=req.camp.core_start_time.strftime("%H:%M") if req.camp else None,
            core_end_time=req.camp.core_end_time.strftime("%H:%M") if req.camp else None,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create series: {str(e)}")

    return SubmitSeriesResponse(
        series_id=row.id,
        event_ids=repo.list_event_ids(row.id),
        aggregate=generated.aggregate,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

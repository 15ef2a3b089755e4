"""Pytest fixtures and configuration for eventseries tests."""

import pytest
from datetime import date, time
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from eventseries.database.database import Base, DatabaseSettings, build_engine, init_db, make_session_factory
from eventseries.database.series_repository import SeriesRepository
from eventseries.models.event import EventDraft
from eventseries.models.recurrence import CampPattern, RecurrenceRule


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = build_engine(DatabaseSettings(url=TEST_DATABASE_URL))
    init_db(bind=engine)

    session = make_session_factory(engine)()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def series_repository(db_session: Session):
    """Create a SeriesRepository instance for testing."""
    return SeriesRepository(db_session)


@pytest.fixture
def sample_draft_base():
    """Base draft data; override keys per test."""
    return {
        "title": "Summer Art Camp",
        "description": "Painting, sculpture and printmaking for young artists.",
        "short_description": "Week-long art camp",
        "category_id": "cat-arts",
        "location_id": "loc-community-center",
        "organizer_id": "org-art-league",
        "price_type": "fixed",
        "price_low": 150.0,
        "registration_url": "https://example.com/register",
        "website_url": "https://example.com",
        "timezone": "America/Chicago",
    }


@pytest.fixture
def sample_draft(sample_draft_base):
    """Create a sample EventDraft for testing."""
    return EventDraft(**sample_draft_base)


@pytest.fixture
def weekday_camp():
    """Mon-Fri camp, Jun 1-5 2026 (Jun 1 is a Monday), 9am-3pm."""
    return CampPattern(
        start_date=date(2026, 6, 1),
        end_date=date(2026, 6, 5),
        days_of_week=[1, 2, 3, 4, 5],
        core_start_time=time(9, 0),
        core_end_time=time(15, 0),
    )


@pytest.fixture
def weekly_rule():
    """Every Tuesday at 7pm for 90 minutes, 6 sessions."""
    return RecurrenceRule(
        frequency="weekly",
        interval=1,
        days_of_week=[2],
        time=time(19, 0),
        duration_minutes=90,
        end_type="count",
        end_count=6,
    )


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from eventseries.api.app import app
    from eventseries.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    # Not used as a context manager: startup would initialize the real database.
    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()

"""Global test fixtures and utilities for badge engine tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, timezone
from itertools import count

from sticket.models.event_log import EventLogEntry


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with standard query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    cursor.executemany = AsyncMock()
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock connection whose cursor() is an async context manager yielding mock_db_cursor"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = mock_db_cursor
    conn.cursor.return_value.__aexit__.return_value = False
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


# ============================================================================
# Show History Fixtures
# ============================================================================

@pytest.fixture
def log_entry_factory():
    """Factory for EventLogEntry rows with sensible defaults"""
    ids = count(1)

    def _create(
        event_date=None,
        artist_id="artist-1",
        genres=None,
        venue_id="venue-1",
        city="Austin",
        state="TX",
        country="US",
    ):
        n = next(ids)
        return EventLogEntry(
            log_id=f"log-{n}",
            event_id=f"event-{n}",
            event_date=event_date or datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc),
            artist_id=artist_id,
            artist_genres=genres if genres is not None else [],
            venue_id=venue_id,
            venue_city=city,
            venue_state=state,
            venue_country=country,
        )

    return _create

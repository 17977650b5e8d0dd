"""Unit tests for badge awarding (sticket/badges/badge_checker.py)"""
import asyncio
import pytest
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import psycopg

from sticket.badges.badge_checker import (
    check_badges,
    ensure_catalog,
    get_badge_progress,
    get_earned_badges,
)
from sticket.badges.catalog import BADGES
from sticket.badges.statistics import UserStatistics
from sticket.exceptions import DuplicateAwardError


class FakeBadgeStore:
    """
    In-memory stand-in for the badge tables

    Enforces the unique (user_id, badge_id) pair the way the database
    constraint does, and yields to the event loop on every call so
    concurrent checks interleave.
    """

    def __init__(self):
        self.badges = {}  # key -> row
        self.awards = []  # award rows
        self._next_award = 1

    async def upsert_badge_catalog(self, definitions):
        await asyncio.sleep(0)
        definitions = list(definitions)
        for badge in definitions:
            existing = self.badges.get(badge.id)
            self.badges[badge.id] = {
                'id': existing['id'] if existing else f"db-{badge.id}",
                'name': badge.name,
                'points': badge.points,
                'criteria': badge.criteria.model_dump(),
            }
        return len(definitions)

    async def get_badge_ids_by_key(self):
        await asyncio.sleep(0)
        return {key: row['id'] for key, row in self.badges.items()}

    async def get_earned_badge_keys(self, user_id):
        await asyncio.sleep(0)
        keys_by_id = {row['id']: key for key, row in self.badges.items()}
        return {keys_by_id[a['badge_id']] for a in self.awards if a['user_id'] == user_id}

    async def insert_user_badge(self, user_id, badge_id, event_id=None):
        await asyncio.sleep(0)
        if any(a['user_id'] == user_id and a['badge_id'] == badge_id for a in self.awards):
            raise DuplicateAwardError(user_id=user_id, badge_id=badge_id)
        award_id = f"award-{self._next_award}"
        self._next_award += 1
        self.awards.append({'id': award_id, 'user_id': user_id, 'badge_id': badge_id, 'event_id': event_id})
        return award_id


@pytest.fixture
def store():
    return FakeBadgeStore()


@contextmanager
def patched_store(store, stats):
    """Route the checker's queries to the fake store and fix the statistics"""
    with patch('sticket.badges.badge_checker.queries.upsert_badge_catalog', side_effect=store.upsert_badge_catalog), \
            patch('sticket.badges.badge_checker.queries.get_badge_ids_by_key', side_effect=store.get_badge_ids_by_key), \
            patch('sticket.badges.badge_checker.queries.get_earned_badge_keys', side_effect=store.get_earned_badge_keys), \
            patch('sticket.badges.badge_checker.queries.insert_user_badge', side_effect=store.insert_user_badge) as mock_insert, \
            patch('sticket.badges.badge_checker.get_user_statistics', AsyncMock(return_value=stats)):
        yield mock_insert


ONE_SHOW = UserStatistics(
    show_count=1, unique_venues=1, unique_cities=1, unique_states=1, unique_countries=1,
    max_artist_count=1, max_venue_count=1, max_month_count=1, max_consecutive=1,
    genre_counts={"rock": 1},
)


def _keys(badges):
    return [b.id for b in badges]


# ============================================================================
# Catalog Sync Tests
# ============================================================================

@pytest.mark.asyncio
async def test_ensure_catalog_idempotent(store):
    """Test syncing twice leaves the same rows as syncing once"""
    with patched_store(store, ONE_SHOW):
        await ensure_catalog()
        once = {k: dict(v) for k, v in store.badges.items()}
        await ensure_catalog()

    assert store.badges == once
    assert len(store.badges) == len(BADGES)


# ============================================================================
# Award Tests
# ============================================================================

@pytest.mark.asyncio
async def test_check_badges_awards_first_show(store, test_user_id):
    """Test a first logged show awards exactly the first_show badge"""
    with patched_store(store, ONE_SHOW):
        result = await check_badges(test_user_id, event_id="event-1")

    assert _keys(result.new_badges) == ["first_show"]
    assert store.awards == [
        {'id': 'award-1', 'user_id': test_user_id, 'badge_id': 'db-first_show', 'event_id': 'event-1'}
    ]
    # Newly earned badges are not reported as progress
    assert "first_show" not in _keys(p.badge for p in result.progress)
    assert len(result.progress) == len(BADGES) - 1


@pytest.mark.asyncio
async def test_check_badges_awards_several_at_once(store, test_user_id):
    """Test every newly satisfied badge is awarded in one pass, in catalog order"""
    stats = UserStatistics(show_count=10, unique_venues=1, max_artist_count=3, genre_counts={})

    with patched_store(store, stats):
        result = await check_badges(test_user_id)

    assert _keys(result.new_badges) == ["first_show", "shows_10", "loyalty_3"]
    assert len(store.awards) == 3


@pytest.mark.asyncio
async def test_check_badges_skips_already_earned(store, test_user_id):
    """Test earned badges are neither re-awarded nor listed in progress"""
    with patched_store(store, ONE_SHOW):
        await check_badges(test_user_id)
        second = await check_badges(test_user_id)

    assert second.new_badges == []
    assert "first_show" not in _keys(p.badge for p in second.progress)
    assert len(store.awards) == 1


@pytest.mark.asyncio
async def test_check_badges_earned_badge_stays_earned(store, test_user_id):
    """Test a badge stays earned even if a later snapshot no longer satisfies it"""
    with patched_store(store, ONE_SHOW):
        await check_badges(test_user_id)

    with patched_store(store, UserStatistics()):
        later = await check_badges(test_user_id)

    assert "first_show" not in _keys(p.badge for p in later.progress)
    assert len(store.awards) == 1


@pytest.mark.asyncio
async def test_check_badges_progress_entries(store, test_user_id):
    """Test progress values for unearned badges"""
    stats = UserStatistics(show_count=5, genre_counts={"rock": 3})

    with patched_store(store, stats):
        result = await check_badges(test_user_id)

    progress = {p.badge.id: p for p in result.progress}

    assert progress["shows_10"].current == 5
    assert progress["shows_10"].target == 10
    assert progress["shows_10"].percentage == 50
    assert progress["genre_rock"].percentage == 30
    assert progress["distance_500"].target == 500
    assert progress["distance_500"].percentage == 0
    assert progress["festival"].percentage == 0
    for entry in result.progress:
        assert 0 <= entry.percentage <= 100
        assert entry.is_earned is False


@pytest.mark.asyncio
async def test_check_badges_passes_event_id_none_by_default(store, test_user_id):
    with patched_store(store, ONE_SHOW) as mock_insert:
        await check_badges(test_user_id)

    mock_insert.assert_awaited_once_with(test_user_id, "db-first_show", None)


# ============================================================================
# Read-only Tests
# ============================================================================

@pytest.mark.asyncio
async def test_check_badges_award_false_writes_nothing(store, test_user_id):
    """Test award=False reports earned badges as complete progress instead"""
    with patched_store(store, ONE_SHOW) as mock_insert:
        result = await check_badges(test_user_id, award=False)

    mock_insert.assert_not_called()
    assert result.new_badges == []
    first = next(p for p in result.progress if p.badge.id == "first_show")
    assert first.percentage == 100
    assert first.is_earned is False


@pytest.mark.asyncio
async def test_get_badge_progress_never_awards(store, test_user_id):
    """Test the read-only variant creates no award rows however much is satisfied"""
    maxed = UserStatistics(
        show_count=1000, unique_venues=500, unique_cities=500, unique_states=50,
        unique_countries=20, max_artist_count=100, max_venue_count=100,
        max_month_count=31, max_consecutive=60,
        genre_counts={g: 100 for g in ("rock", "pop", "hip-hop", "electronic", "country")},
    )

    with patched_store(store, maxed) as mock_insert:
        progress = await get_badge_progress(test_user_id)

    mock_insert.assert_not_called()
    assert store.awards == []
    assert len(progress) == len(BADGES)


# ============================================================================
# Concurrency & Error Tests
# ============================================================================

@pytest.mark.asyncio
async def test_concurrent_checks_award_exactly_once(store, test_user_id):
    """Test N concurrent checks produce one award row and one reporting call"""
    with patched_store(store, ONE_SHOW):
        results = await asyncio.gather(*(check_badges(test_user_id) for _ in range(5)))

    reported = [r for r in results if _keys(r.new_badges) == ["first_show"]]

    assert len(store.awards) == 1
    assert len(reported) == 1
    for r in results:
        assert "first_show" not in _keys(p.badge for p in r.progress)


@pytest.mark.asyncio
async def test_check_badges_lost_race_is_not_an_error(store, test_user_id):
    """Test a duplicate-key rejection is swallowed and not reported"""
    with patched_store(store, ONE_SHOW) as mock_insert:
        mock_insert.side_effect = DuplicateAwardError(user_id=test_user_id, badge_id="db-first_show")
        result = await check_badges(test_user_id)

    assert result.new_badges == []
    assert "first_show" not in _keys(p.badge for p in result.progress)


@pytest.mark.asyncio
async def test_check_badges_other_insert_errors_propagate(store, test_user_id):
    with patched_store(store, ONE_SHOW) as mock_insert:
        mock_insert.side_effect = psycopg.OperationalError("server closed the connection")

        with pytest.raises(psycopg.OperationalError):
            await check_badges(test_user_id)


@pytest.mark.asyncio
async def test_check_badges_statistics_failure_propagates(store, test_user_id):
    """Test no partial result is returned when aggregation fails"""
    with patched_store(store, ONE_SHOW):
        with patch('sticket.badges.badge_checker.get_user_statistics', AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(RuntimeError):
                await check_badges(test_user_id)

    assert store.awards == []


@pytest.mark.asyncio
async def test_check_badges_skips_badge_without_db_row(store, test_user_id):
    """Test an earned badge with no durable id is neither awarded nor listed"""
    with patched_store(store, ONE_SHOW):
        with patch('sticket.badges.badge_checker.queries.get_badge_ids_by_key', AsyncMock(return_value={})):
            result = await check_badges(test_user_id)

    assert result.new_badges == []
    assert "first_show" not in _keys(p.badge for p in result.progress)
    assert store.awards == []


# ============================================================================
# Earned Badge Listing Tests
# ============================================================================

@pytest.mark.asyncio
async def test_get_earned_badges_joins_catalog(test_user_id):
    now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    rows = [
        {'id': 'award-2', 'badge_key': 'shows_10', 'earned_at': now, 'event_id': 'event-9'},
        {'id': 'award-1', 'badge_key': 'first_show', 'earned_at': now - timedelta(days=30), 'event_id': None},
    ]

    with patch('sticket.badges.badge_checker.queries.upsert_badge_catalog', AsyncMock(return_value=len(BADGES))) as mock_sync, \
            patch('sticket.badges.badge_checker.queries.get_user_badge_rows', AsyncMock(return_value=rows)):
        earned = await get_earned_badges(test_user_id)

    mock_sync.assert_awaited_once()
    assert [e.badge.id for e in earned] == ["shows_10", "first_show"]
    assert earned[0].event_id == "event-9"
    assert earned[0].badge.name == "Getting Started"
    assert earned[1].event_id is None


@pytest.mark.asyncio
async def test_get_earned_badges_drops_retired_keys(test_user_id):
    """Test awards for badges no longer in the catalog are skipped"""
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    rows = [
        {'id': 'award-3', 'badge_key': 'summer_tour_2019', 'earned_at': now, 'event_id': None},
        {'id': 'award-1', 'badge_key': 'first_show', 'earned_at': now, 'event_id': None},
    ]

    with patch('sticket.badges.badge_checker.queries.upsert_badge_catalog', AsyncMock(return_value=len(BADGES))), \
            patch('sticket.badges.badge_checker.queries.get_user_badge_rows', AsyncMock(return_value=rows)):
        earned = await get_earned_badges(test_user_id)

    assert [e.id for e in earned] == ["award-1"]

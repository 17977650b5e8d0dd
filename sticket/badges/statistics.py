"""
Show Statistics

Aggregates a user's full attended-show history into the snapshot that every
badge criterion is evaluated against. The snapshot is rebuilt from scratch on
each call and never stored.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Sequence, Tuple, Union
import logging

from sticket.db import queries
from sticket.models.event_log import EventLogEntry

logger = logging.getLogger(__name__)

# Venues without a country are assumed to be domestic
DEFAULT_COUNTRY = "US"

# Checked top to bottom, first match wins
GENRE_BUCKETS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("rock",), "rock"),
    (("pop",), "pop"),
    (("hip", "rap"), "hip-hop"),
    (("electro", "edm", "house", "techno"), "electronic"),
    (("country",), "country"),
    (("r&b", "soul"), "r&b"),
    (("jazz",), "jazz"),
    (("classical",), "classical"),
    (("metal",), "metal"),
    (("punk",), "punk"),
)


@dataclass(frozen=True)
class UserStatistics:
    """Derived statistics for one user's show history"""
    show_count: int = 0
    unique_venues: int = 0
    unique_cities: int = 0
    unique_states: int = 0
    unique_countries: int = 0
    max_artist_count: int = 0
    max_venue_count: int = 0
    max_month_count: int = 0
    max_consecutive: int = 0
    genre_counts: Dict[str, int] = field(default_factory=dict)


def normalize_genre(genre: str) -> str:
    """
    Map a raw artist genre onto a canonical bucket

    Matching is a case-insensitive substring test against GENRE_BUCKETS.
    Genres that match nothing keep their lowercased form.

    Examples:
        "Alt-Rock" -> "rock"
        "Trap Rap" -> "hip-hop"
        "Neo Soul" -> "r&b"
        "Bluegrass" -> "bluegrass"
    """
    lower = genre.lower()
    for keywords, bucket in GENRE_BUCKETS:
        if any(keyword in lower for keyword in keywords):
            return bucket
    return lower


def month_key(value: Union[datetime, date]) -> str:
    """Calendar month of an event date as 'YYYY-MM' (aware datetimes in UTC)"""
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value.year:04d}-{value.month:02d}"


def _month_index(key: str) -> int:
    year, month = key.split("-")
    return int(year) * 12 + int(month) - 1


def longest_consecutive_months(months: Iterable[str]) -> int:
    """
    Longest run of calendar-adjacent months in a set of 'YYYY-MM' keys

    December followed by January of the next year counts as adjacent.

    Returns:
        0 for no months, otherwise the length of the longest run (>= 1)
    """
    longest = 0
    current = 0
    previous = None

    for index in sorted({_month_index(m) for m in months}):
        if previous is not None and index == previous + 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = index

    return longest


def compute_statistics(entries: Sequence[EventLogEntry]) -> UserStatistics:
    """
    Build the statistics snapshot for a list of attended shows

    Pure function: does not touch the database and does not depend on the
    order of `entries`.
    """
    artist_counts = Counter(e.artist_id for e in entries)
    venue_counts = Counter(e.venue_id for e in entries)
    month_counts = Counter(month_key(e.event_date) for e in entries)

    genre_counts: Counter = Counter()
    for entry in entries:
        # One increment per raw genre, so a multi-genre artist feeds several buckets
        for genre in entry.artist_genres:
            genre_counts[normalize_genre(genre)] += 1

    return UserStatistics(
        show_count=len(entries),
        unique_venues=len(venue_counts),
        unique_cities=len({e.venue_city for e in entries}),
        unique_states=len({e.venue_state for e in entries if e.venue_state}),
        unique_countries=len({e.venue_country or DEFAULT_COUNTRY for e in entries}),
        max_artist_count=max(artist_counts.values(), default=0),
        max_venue_count=max(venue_counts.values(), default=0),
        max_month_count=max(month_counts.values(), default=0),
        max_consecutive=longest_consecutive_months(month_counts),
        genre_counts=dict(genre_counts),
    )


async def get_user_statistics(user_id: str) -> UserStatistics:
    """
    Load a user's show history and aggregate it

    Args:
        user_id: User ID

    Returns:
        UserStatistics snapshot computed from every logged show
    """
    entries: List[EventLogEntry] = await queries.get_user_event_logs(user_id)
    stats = compute_statistics(entries)

    logger.debug(
        f"Computed statistics for user {user_id}: {stats.show_count} shows, "
        f"{stats.unique_venues} venues, best month streak {stats.max_consecutive}"
    )

    return stats

"""
Database queries - re-exports every query function.

Module organization:
- badges.py: Badge catalog sync, award rows
- logs.py: Attended-show history
"""

# Badge operations
from sticket.db.queries.badges import (
    AWARD_UNIQUE_CONSTRAINT,
    upsert_badge_catalog,
    get_badge_ids_by_key,
    get_earned_badge_keys,
    insert_user_badge,
    get_user_badge_rows,
)

# Show history operations
from sticket.db.queries.logs import (
    get_user_event_logs,
)

__all__ = [
    # Badges
    "AWARD_UNIQUE_CONSTRAINT",
    "upsert_badge_catalog",
    "get_badge_ids_by_key",
    "get_earned_badge_keys",
    "insert_user_badge",
    "get_user_badge_rows",

    # Show history
    "get_user_event_logs",
]

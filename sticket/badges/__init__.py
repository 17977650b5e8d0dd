"""
Badge engine for logged live-music shows

- Badge catalog (static definitions)
- Show statistics aggregation
- Criteria evaluation
- Exactly-once awarding and progress reporting
"""

from sticket.badges.catalog import BADGES, get_badge_by_id, get_badges_by_category
from sticket.badges.badge_checker import (
    ensure_catalog,
    check_badges,
    get_badge_progress,
    get_earned_badges,
)

__all__ = [
    "BADGES",
    "get_badge_by_id",
    "get_badges_by_category",
    "ensure_catalog",
    "check_badges",
    "get_badge_progress",
    "get_earned_badges",
]

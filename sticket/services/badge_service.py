"""
BadgeService - Badge Business Logic

Entry points the host application calls after a show is logged and when a
user opens their badge screen. Wraps the badge engine in sticket.badges.
"""

import logging
from typing import Any, Dict, List

from sticket.badges import (
    BADGES,
    check_badges,
    get_badge_progress,
    get_earned_badges,
)
from sticket.models.badge import BadgeDefinition

logger = logging.getLogger(__name__)


class BadgeService:
    """
    Service for badge features.

    Responsibilities:
    - Awarding badges after a show is logged
    - Badge overview (earned, points, closest to completion)
    - Catalog listing
    """

    def __init__(self, db_connection):
        """
        Initialize BadgeService.

        Args:
            db_connection: Database connection instance
        """
        self.db = db_connection
        logger.debug("BadgeService initialized")

    async def process_show_logged(self, user_id: str, event_id: str) -> Dict[str, Any]:
        """
        Award any badges earned by a newly logged show.

        Args:
            user_id: User ID
            event_id: Event the user just logged

        Returns:
            {
                'new_badges': list[BadgeDefinition],
                'points_awarded': int,
                'message': str  # empty when nothing was awarded
            }
        """
        result = await check_badges(user_id, award=True, event_id=event_id)

        points = sum(badge.points for badge in result.new_badges)

        if result.new_badges:
            logger.info(
                f"Show logged for user {user_id} (event {event_id}): "
                f"{len(result.new_badges)} new badges, +{points} points"
            )

        return {
            'new_badges': result.new_badges,
            'points_awarded': points,
            'message': self._build_award_message(result.new_badges, points),
        }

    async def get_badge_summary(self, user_id: str, closest_limit: int = 3) -> Dict[str, Any]:
        """
        Badge overview for a user.

        Args:
            user_id: User ID
            closest_limit: How many in-progress badges to return

        Returns:
            {
                'earned': list[EarnedBadge],
                'total_earned': int,
                'total_badges': int,
                'total_points': int,
                'closest': list[BadgeProgress]  # highest percentage first
            }
        """
        earned = await get_earned_badges(user_id)
        progress = await get_badge_progress(user_id)

        # sorted() is stable, so equal percentages keep catalog order
        closest = sorted(progress, key=lambda p: p.percentage, reverse=True)[:closest_limit]

        return {
            'earned': earned,
            'total_earned': len(earned),
            'total_badges': len(BADGES),
            'total_points': sum(e.badge.points for e in earned),
            'closest': closest,
        }

    def get_catalog(self) -> List[BadgeDefinition]:
        """All badge definitions in catalog order."""
        return list(BADGES)

    @staticmethod
    def _build_award_message(new_badges: List[BadgeDefinition], points: int) -> str:
        if not new_badges:
            return ""

        if len(new_badges) == 1:
            badge = new_badges[0]
            return f"Badge unlocked: {badge.name}! {badge.description}. +{points} points"

        names = ", ".join(badge.name for badge in new_badges)
        return f"{len(new_badges)} badges unlocked: {names}. +{points} points"

"""
Badge Checker

Awards badges from a user's attended-show history and reports progress
toward the ones not yet earned.

Flow of check_badges():
1. Sync the badge catalog to the database
2. Load the user's earned badge keys and the key -> badge id map
3. Aggregate the user's show history once
4. Evaluate every unearned badge against that snapshot
5. Insert an award row for each newly earned badge

Concurrent checks for the same user are allowed. No lock is taken: if two
checks both find a badge newly earned, the unique (user, badge) constraint
rejects the second insert and that check simply does not report the badge.
"""

from typing import List, Optional
import logging
import time

from sticket.badges.catalog import BADGES, BADGE_MAP
from sticket.badges.criteria import evaluate_criterion, progress_percentage
from sticket.badges.statistics import get_user_statistics
from sticket.db import queries
from sticket.exceptions import DuplicateAwardError
from sticket.models.badge import BadgeCheckResult, BadgeProgress, EarnedBadge
from sticket.observability import metrics

logger = logging.getLogger(__name__)


async def ensure_catalog() -> None:
    """Make the badges table match the in-process catalog (idempotent)"""
    written = await queries.upsert_badge_catalog(BADGES)
    metrics.badge_catalog_syncs_total.inc()
    logger.debug(f"Badge catalog synced ({written} definitions)")


async def check_badges(
    user_id: str,
    award: bool = True,
    event_id: Optional[str] = None
) -> BadgeCheckResult:
    """
    Evaluate every unearned badge for a user and award the ones now earned

    Args:
        user_id: User ID
        award: Insert award rows for earned badges. With award=False nothing
            is written and earned badges are reported as progress instead.
        event_id: Optional event recorded on new award rows

    Returns:
        BadgeCheckResult with
        - new_badges: definitions awarded by this call
        - progress: one entry per unearned badge (earned ones too when award=False)

    Raises:
        Any database error other than a lost award race
    """
    mode = "award" if award else "read_only"
    started = time.perf_counter()

    await ensure_catalog()

    earned_keys = await queries.get_earned_badge_keys(user_id)
    badge_ids = await queries.get_badge_ids_by_key()

    stats = await get_user_statistics(user_id)

    result = BadgeCheckResult()

    for badge in BADGES:
        if badge.id in earned_keys:
            continue

        earned, current, target = evaluate_criterion(badge.criteria, stats)

        if earned and award:
            badge_id = badge_ids.get(badge.id)
            if not badge_id:
                logger.warning(f"Badge {badge.id} has no database row, cannot award to user {user_id}")
                continue

            try:
                await queries.insert_user_badge(user_id, badge_id, event_id)
            except DuplicateAwardError:
                # A concurrent check recorded it first
                metrics.badge_award_conflicts_total.labels(badge=badge.id).inc()
                continue

            result.new_badges.append(badge)
            earned_keys.add(badge.id)
            metrics.badges_awarded_total.labels(badge=badge.id).inc()

            logger.info(
                f"User {user_id} earned badge: {badge.id} "
                f"({badge.name}) +{badge.points} points"
            )
        else:
            result.progress.append(BadgeProgress(
                badge=badge,
                current=current,
                target=target,
                percentage=progress_percentage(current, target),
                is_earned=False,
            ))

    metrics.badge_checks_total.labels(mode=mode).inc()
    metrics.badge_check_duration_seconds.labels(mode=mode).observe(time.perf_counter() - started)

    return result


async def get_badge_progress(user_id: str) -> List[BadgeProgress]:
    """Progress toward every unearned badge, without awarding anything"""
    result = await check_badges(user_id, award=False)
    return result.progress


async def get_earned_badges(user_id: str) -> List[EarnedBadge]:
    """
    Get user's earned badges, most recent first

    Awards whose badge key is no longer in the catalog are skipped.

    Args:
        user_id: User ID

    Returns:
        List of EarnedBadge with full definitions
    """
    await ensure_catalog()

    rows = await queries.get_user_badge_rows(user_id)

    earned = []
    for row in rows:
        badge = BADGE_MAP.get(row['badge_key'])
        if badge is None:
            logger.warning(f"User {user_id} holds retired badge {row['badge_key']}, skipping")
            continue

        earned.append(EarnedBadge(
            id=str(row['id']),
            badge=badge,
            earned_at=row['earned_at'],
            event_id=str(row['event_id']) if row.get('event_id') else None,
        ))

    return earned

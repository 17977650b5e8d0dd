"""Badge catalog and award database queries"""
import json
import logging
from typing import Iterable, Optional

from psycopg import errors

from sticket.db.connection import db
from sticket.exceptions import DuplicateAwardError
from sticket.models.badge import BadgeDefinition

logger = logging.getLogger(__name__)

# Unique (user_id, badge_id) constraint on user_badges, see migrations/001_badges.sql
AWARD_UNIQUE_CONSTRAINT = "user_badges_user_id_badge_id_key"


# ==========================================
# Catalog
# ==========================================

async def upsert_badge_catalog(definitions: Iterable[BadgeDefinition]) -> int:
    """
    Create or overwrite a badges row for every definition, keyed by badge key

    All rows are written in one transaction, so the table either fully
    matches the definitions or is left as it was.

    Returns:
        Number of definitions written
    """
    params = [
        (
            badge.id,
            badge.name,
            badge.description,
            badge.category.value,
            badge.rarity.value,
            badge.icon,
            badge.points,
            json.dumps(badge.criteria.model_dump()),
        )
        for badge in definitions
    ]

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.executemany(
                """
                INSERT INTO badges (key, name, description, category, rarity, icon, points, criteria)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s::jsonb)
                ON CONFLICT (key) DO UPDATE
                SET name = EXCLUDED.name,
                    description = EXCLUDED.description,
                    category = EXCLUDED.category,
                    rarity = EXCLUDED.rarity,
                    icon = EXCLUDED.icon,
                    points = EXCLUDED.points,
                    criteria = EXCLUDED.criteria,
                    updated_at = CURRENT_TIMESTAMP
                """,
                params
            )
            await conn.commit()

    return len(params)


async def get_badge_ids_by_key() -> dict[str, str]:
    """
    Get durable badge id for every catalog key

    Returns:
        {badge_key: badge_id}
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, key
                FROM badges
                """
            )
            rows = await cur.fetchall()
            return {row['key']: str(row['id']) for row in rows}


# ==========================================
# Awards
# ==========================================

async def get_earned_badge_keys(user_id: str) -> set[str]:
    """
    Get keys of all badges the user has been awarded

    Args:
        user_id: User ID

    Returns:
        Set of badge keys
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT b.key
                FROM user_badges ub
                JOIN badges b ON b.id = ub.badge_id
                WHERE ub.user_id = %s
                """,
                (user_id,)
            )
            rows = await cur.fetchall()
            return {row['key'] for row in rows}


async def insert_user_badge(user_id: str, badge_id: str, event_id: Optional[str] = None) -> str:
    """
    Record a badge award

    This is a plain INSERT. Exactly-once awarding relies on the unique
    (user_id, badge_id) constraint rejecting a second row.

    Args:
        user_id: User ID
        badge_id: Durable badge id (not the key)
        event_id: Optional event whose log triggered the award

    Returns:
        Award row ID

    Raises:
        DuplicateAwardError: The user already holds this badge
    """
    try:
        async with db.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO user_badges (user_id, badge_id, event_id)
                    VALUES (%s, %s, %s)
                    RETURNING id
                    """,
                    (user_id, badge_id, event_id)
                )
                result = await cur.fetchone()
                await conn.commit()
    except errors.UniqueViolation as e:
        if e.diag.constraint_name != AWARD_UNIQUE_CONSTRAINT:
            raise
        raise DuplicateAwardError(
            user_id=user_id,
            badge_id=badge_id,
            operation="insert_user_badge",
            cause=e
        ) from e

    logger.info(f"User {user_id} awarded badge {badge_id}")
    return str(result['id'])


async def get_user_badge_rows(user_id: str) -> list[dict]:
    """
    Get user's award rows joined to their badges, newest first

    Returns:
        [
            {
                'id': str,
                'badge_key': str,
                'earned_at': datetime,
                'event_id': Optional[str]
            }
        ]
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT ub.id, b.key AS badge_key, ub.earned_at, ub.event_id
                FROM user_badges ub
                JOIN badges b ON b.id = ub.badge_id
                WHERE ub.user_id = %s
                ORDER BY ub.earned_at DESC
                """,
                (user_id,)
            )
            rows = await cur.fetchall()
            return [dict(row) for row in rows]

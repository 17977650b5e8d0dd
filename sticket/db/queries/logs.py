"""Attended-show history queries"""
import logging

from sticket.db.connection import db
from sticket.models.event_log import EventLogEntry

logger = logging.getLogger(__name__)


async def get_user_event_logs(user_id: str) -> list[EventLogEntry]:
    """
    Get every show the user has logged, with event, venue and artist data

    Args:
        user_id: User ID

    Returns:
        Log entries ordered by event date ascending
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT ul.id::text AS log_id,
                       e.id::text AS event_id,
                       e.date AS event_date,
                       a.id::text AS artist_id,
                       COALESCE(a.genres, '{}') AS artist_genres,
                       v.id::text AS venue_id,
                       v.city AS venue_city,
                       v.state AS venue_state,
                       v.country AS venue_country
                FROM user_logs ul
                JOIN events e ON e.id = ul.event_id
                JOIN venues v ON v.id = e.venue_id
                JOIN artists a ON a.id = e.artist_id
                WHERE ul.user_id = %s
                ORDER BY e.date ASC
                """,
                (user_id,)
            )
            rows = await cur.fetchall()
            return [EventLogEntry(**row) for row in rows]

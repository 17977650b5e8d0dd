"""Sync the badges table with the in-process badge catalog"""
import asyncio
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import psycopg

from sticket.config import validate_config, LOG_LEVEL
from sticket.db.connection import db
from sticket.badges import BADGES, ensure_catalog
from sticket.exceptions import BadgeEngineError, wrap_external_exception

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)
logger = logging.getLogger(__name__)


async def main() -> int:
    """Run catalog sync"""
    try:
        validate_config()

        logger.info("Initializing database connection...")
        await db.init_pool()

        logger.info(f"Syncing {len(BADGES)} badge definitions...")
        await ensure_catalog()
        logger.info("✅ Badge catalog is in sync")
        return 0

    except psycopg.Error as e:
        error = wrap_external_exception(e, operation="sync_badge_catalog")
        logger.error(f"❌ Catalog sync failed: {error.user_message} (request {error.request_id})")
        return 1
    except BadgeEngineError as e:
        logger.error(f"❌ Catalog sync failed: {e.message}")
        return 1
    finally:
        await db.close_pool()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

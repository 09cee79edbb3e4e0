"""
One-shot unverified-account sweep, for an external scheduler (cron, k8s CronJob):
    python scripts/cleanup_unverified.py

Set CLEANUP_ENABLED=false on the API when running the sweep this way.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.logging import setup_logging, get_logger
from app.db.mongo import connect_to_mongo, close_mongo_connection
from app.services.cleanup_service import sweep_unverified_accounts

logger = get_logger("scripts.cleanup_unverified")


async def main() -> int:
    setup_logging()
    await connect_to_mongo()
    try:
        deleted = await sweep_unverified_accounts()
    except Exception as e:
        logger.error(f"❌ Sweep failed: {e}", exc_info=True)
        return 1
    finally:
        await close_mongo_connection()

    logger.info(f"✅ Removed {deleted} unverified accounts")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

"""
app/services/cleanup_service.py

Purpose: Unverified-account sweep

- Deletes accounts that never verified an OTP within the TTL
- Periodic asyncio runner started from the app lifespan
- A failed sweep is logged and the next one still runs
"""

import asyncio
from datetime import datetime
from typing import Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.db.mongo import get_users_collection
from utils.time_utils import cutoff_before

logger = get_logger(__name__)


async def sweep_unverified_accounts(now: Optional[datetime] = None) -> int:
    """
    Deletes unverified accounts created more than
    UNVERIFIED_ACCOUNT_TTL_HOURS ago.

    Returns:
        Number of accounts deleted
    """
    cutoff = cutoff_before(settings.UNVERIFIED_ACCOUNT_TTL_HOURS, now)
    users = get_users_collection()

    logger.info(f"Sweeping unverified accounts created before {cutoff.isoformat()}")
    result = await users.delete_many({
        "is_verified": False,
        "created_at": {"$lt": cutoff}
    })

    logger.info(f"Sweep finished: {result.deleted_count} unverified accounts deleted")
    return result.deleted_count


class AccountCleanupScheduler:

    def __init__(self, interval_hours: int = 24):
        self.interval_hours = interval_hours
        self._task: Optional[asyncio.Task] = None
        logger.info(f"AccountCleanupScheduler initialized with interval: {interval_hours}h")

    def start(self):
        if self.is_running():
            logger.warning("Account cleanup already running")
            return

        self._task = asyncio.create_task(self._run(), name="account-cleanup")
        logger.info(f"Account cleanup started (runs every {self.interval_hours}h)")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Account cleanup stopped")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        try:
            return await sweep_unverified_accounts()
        except Exception as e:
            logger.error(f"Account cleanup failed: {str(e)}", exc_info=True)
            return 0

    async def _run(self):
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_hours * 3600)


account_cleanup = AccountCleanupScheduler(interval_hours=settings.CLEANUP_INTERVAL_HOURS)

"""
Background scheduler service for periodic jobs.

Runs the chat index reconciliation pass on a fixed interval.
Uses APScheduler for in-process scheduling without external dependencies.
"""

from __future__ import annotations

from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from chatledger.core.config import get_settings
from chatledger.core.logger import logger
from chatledger.services.index_reconciler import IndexReconciler


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Chat index reconciliation (every INDEX_RECONCILE_INTERVAL_MINUTES)
    """

    def __init__(self, reconciler: IndexReconciler):
        self._reconciler = reconciler
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def start(self):
        """Start the scheduler."""
        settings = get_settings()

        # Only run scheduler in non-test environments
        if settings.is_test:
            logger.info("Background scheduler disabled in test environment")
            return
        if not settings.INDEX_RECONCILE_ENABLED:
            logger.info("Chat index reconciliation disabled")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._run_index_reconciliation,
            IntervalTrigger(minutes=settings.INDEX_RECONCILE_INTERVAL_MINUTES),
            id="chat_index_reconciliation",
            name="Chat Index Reconciliation",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Chat index reconciliation: every {settings.INDEX_RECONCILE_INTERVAL_MINUTES} minutes"
        )

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def _run_index_reconciliation(self):
        settings = get_settings()
        try:
            await self._reconciler.reconcile(limit=settings.INDEX_RECONCILE_BATCH_SIZE)
        except Exception as e:
            logger.error(f"Chat index reconciliation failed: {e}")


# Global scheduler instance
_scheduler: Optional[BackgroundScheduler] = None


async def get_background_scheduler() -> BackgroundScheduler:
    """Get the global background scheduler instance."""
    global _scheduler
    if _scheduler is None:
        from chatledger.api.deps import get_index_reconciler

        _scheduler = BackgroundScheduler(reconciler=get_index_reconciler())
    return _scheduler


async def start_background_scheduler():
    """Start the global background scheduler."""
    scheduler = await get_background_scheduler()
    await scheduler.start()


async def stop_background_scheduler():
    """Stop the global background scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None

"""
Unit tests for BackgroundScheduler.
"""

from unittest.mock import AsyncMock

import pytest

from chatledger.services.background_scheduler import BackgroundScheduler


@pytest.mark.asyncio
async def test_scheduler_disabled_in_test_environment():
    scheduler = BackgroundScheduler(reconciler=AsyncMock())

    await scheduler.start()

    assert not scheduler.running
    await scheduler.stop()


@pytest.mark.asyncio
async def test_reconciliation_job_swallows_failures():
    """A failed pass is logged and the next interval runs normally."""
    reconciler = AsyncMock()
    reconciler.reconcile.side_effect = RuntimeError("boom")
    scheduler = BackgroundScheduler(reconciler=reconciler)

    await scheduler._run_index_reconciliation()

    reconciler.reconcile.assert_awaited_once()

"""
Periodic alert sweeps during the application lifespan.
"""
import asyncio
import logging
import threading
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from leafy.db.row_store import RowStore
from leafy.services.alert_engine import AlertEngine

logger = logging.getLogger(__name__)


def run_sweep(session_factory: Callable[[], Session]) -> int:
    """One engine run on a fresh session."""
    db = session_factory()
    try:
        return AlertEngine(RowStore(db)).run()
    finally:
        db.close()


class AlertSweepScheduler:
    """
    Runs the alert engine every ``interval_minutes`` on a background task.

    Sweeps execute in the thread pool. A tick that arrives while the
    previous sweep is still running is skipped.

    Args:
        session_factory: Creates a Session per sweep (SessionLocal)
        interval_minutes: Minutes between ticks
    """

    def __init__(self, session_factory: Callable[[], Session], interval_minutes: int = 15):
        self.session_factory = session_factory
        self.interval_seconds = interval_minutes * 60
        self._lock = threading.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> Optional[int]:
        """
        Run a sweep unless one is already in progress.

        Returns:
            Alerts inserted, or None if the sweep was skipped or failed
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Alert sweep still running; skipping this tick")
            return None
        try:
            inserted = run_sweep(self.session_factory)
            logger.info(f"Alert sweep inserted {inserted} alerts")
            return inserted
        except Exception:
            logger.exception("Alert sweep failed")
            return None
        finally:
            self._lock.release()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await run_in_threadpool(self.sweep_once)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Alert sweep scheduled every {self.interval_seconds // 60} minutes")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Alert sweep scheduler stopped")

"""
Ticket External Integrations
============================

APScheduler driver for the periodic escalation sweep.
"""

from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ticket_engine.core import utc_now
from ticket_engine.shared.infrastructure.logging import get_logger
from ticket_engine.tickets.application import EscalationSweepService

logger = get_logger(__name__)


class EscalationScheduler:
    """
    Runs EscalationSweepService.run_once on an interval.

    At most one sweep runs at a time and late ticks are coalesced. A
    sweep that raises is logged and counted; the next tick runs as usual.
    The outcome of the latest sweep is kept for health reporting.
    """

    JOB_ID = "escalation_sweep"

    def __init__(self, sweep: EscalationSweepService, interval_seconds: int = 300):
        self.sweep = sweep
        self.interval_seconds = interval_seconds
        self.last_summary: Optional[dict] = None
        self.last_run_at: Optional[datetime] = None
        self.consecutive_failures = 0
        self._scheduler: Optional[AsyncIOScheduler] = None

    async def run_sweep(self) -> Optional[dict]:
        """
        One scheduled tick.

        Returns:
            Sweep summary, or None if the sweep raised
        """
        self.last_run_at = utc_now()
        try:
            summary = await self.sweep.run_once()
        except Exception:
            self.consecutive_failures += 1
            logger.exception(
                "Escalation sweep crashed",
                extra={"consecutive_failures": self.consecutive_failures}
            )
            return None

        self.consecutive_failures = 0
        self.last_summary = summary
        return summary

    async def start(self) -> None:
        if self.is_running:
            logger.warning("Escalation scheduler already running")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.run_sweep,
            "interval",
            seconds=self.interval_seconds,
            id=self.JOB_ID,
            name="Escalation Sweep Job",
            misfire_grace_time=60,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        self._scheduler.start()

        logger.info(
            "Escalation scheduler started",
            extra={"interval_seconds": self.interval_seconds}
        )

    async def stop(self) -> None:
        if not self.is_running:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Escalation scheduler stopped")

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    def get_job(self):
        """Scheduled sweep job, None when not running."""
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(self.JOB_ID)

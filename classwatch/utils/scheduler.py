"""
Scheduler - APScheduler-based periodic availability checks
Used by watch mode to run one check cycle every N minutes
"""

import logging
from typing import Callable, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

CHECK_JOB_ID = 'availability_check'


class CheckScheduler:
    """Runs the availability check on a fixed interval"""

    def __init__(self, interval_minutes: int = 15, scheduler: Optional[AsyncIOScheduler] = None):
        if interval_minutes < 1:
            raise ValueError("interval_minutes must be at least 1")
        self.scheduler = scheduler or AsyncIOScheduler()
        self.interval_minutes = interval_minutes
        self.is_running = False

    def start(self):
        """Start the scheduler"""
        if not self.is_running:
            self.scheduler.start()
            self.is_running = True
            logger.info("CheckScheduler started")

    def shutdown(self):
        """Shutdown the scheduler"""
        if self.is_running:
            self.scheduler.shutdown()
            self.is_running = False
            logger.info("CheckScheduler stopped")

    def add_check_job(self, callback: Callable, run_now: bool = True):
        """
        Add the periodic check job

        A single instance runs at a time, a cycle that overruns the
        interval makes the next tick get skipped rather than overlap.

        Args:
            callback: Async function running one check cycle
            run_now: Also fire once immediately instead of waiting a full interval
        """
        kwargs = {}
        if run_now:
            from datetime import datetime
            kwargs['next_run_time'] = datetime.now()

        self.scheduler.add_job(
            callback,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=CHECK_JOB_ID,
            name='Check class availability',
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            **kwargs
        )
        logger.info(f"Added availability check job (every {self.interval_minutes} minutes)")

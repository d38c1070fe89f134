"""Scheduler for periodic catalog checks."""

import logging
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


class CatalogScheduler:
    """Runs the catalog check on a fixed interval."""

    def __init__(
        self,
        logger: logging.Logger,
        check_function: Callable,
        interval_ms: int = 1800000,
        scheduler: Optional[BackgroundScheduler] = None
    ):
        """Initialize scheduler.

        Args:
            logger: Logger instance
            check_function: Function to call for checks (should take no args)
            interval_ms: Check interval in milliseconds
            scheduler: APScheduler instance (a BackgroundScheduler if not given)
        """
        self.logger = logger
        self.check_function = check_function
        self.interval_ms = interval_ms

        self.scheduler = scheduler or BackgroundScheduler()
        self._job_id = "catalog_check"

    def start(self) -> None:
        """Start the scheduler."""
        try:
            trigger = IntervalTrigger(seconds=self.interval_ms / 1000)
            self.logger.info(f"Starting scheduler with interval: {self.interval_ms} ms")

            # A tick that fires while a cycle is still running is skipped.
            self.scheduler.add_job(
                self._safe_check_function,
                trigger=trigger,
                id=self._job_id,
                name="Catalog Check",
                replace_existing=True,
                max_instances=1,
                coalesce=True
            )

            self.scheduler.start()
            self.logger.info("Scheduler started successfully")

        except Exception as e:
            self.logger.error(f"Failed to start scheduler: {e}")
            raise

    def stop(self) -> None:
        """Stop the scheduler, letting an in-flight check finish."""
        try:
            if self.scheduler.running:
                self.logger.info("Stopping scheduler...")
                self.scheduler.shutdown(wait=True)
                self.logger.info("Scheduler stopped")
        except Exception as e:
            self.logger.error(f"Error stopping scheduler: {e}")

    def _safe_check_function(self) -> None:
        """Wrapper for check function with error handling.

        This ensures that errors in the check function don't stop the scheduler.
        """
        try:
            self.logger.debug("Running scheduled catalog check")
            self.check_function()
        except Exception as e:
            self.logger.error(f"Error in scheduled check: {e}", exc_info=True)

    def get_next_run_time(self) -> Optional[str]:
        """Get the next scheduled run time.

        Returns:
            Next run time as string, or None if scheduler not running
        """
        job = self.scheduler.get_job(self._job_id)
        if job and job.next_run_time:
            return str(job.next_run_time)
        return None

    def is_running(self) -> bool:
        return self.scheduler.running

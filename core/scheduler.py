import logging
from datetime import datetime
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from features.sync.services.sync_service import SyncService

logger = logging.getLogger(__name__)

SYNC_JOB_ID = "saved_location_sync"

class Scheduler:
    def __init__(self, sync_service: SyncService, interval_minutes: int = 30):
        self.scheduler = AsyncIOScheduler()
        self.sync_service = sync_service
        self.interval_minutes = interval_minutes

    def start(self):
        """Start the scheduler with configured jobs."""
        logger.info("Starting scheduler")

        # Refresh stale weather/tide data for saved locations
        self.scheduler.add_job(
            self.sync_service.sync_now,
            IntervalTrigger(minutes=self.interval_minutes),
            id=SYNC_JOB_ID,
            name='saved_location_sync',
            next_run_time=datetime.now()
        )

        self.scheduler.start()
        logger.info(f"Scheduler started, syncing every {self.interval_minutes} minutes")

    def get_next_run_time(self, job_id: str = SYNC_JOB_ID) -> Optional[str]:
        """Get the next run time for a scheduled job."""
        job = self.scheduler.get_job(job_id)
        if job and job.next_run_time:
            return job.next_run_time.isoformat()
        return None

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            logger.info("Shutting down scheduler")
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown complete")

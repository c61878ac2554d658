"""
Scheduler - Daily briefings refresh

Current Setup:
- Briefings for every known audience are regenerated once a day at
  BRIEFINGS_REFRESH_HOUR (UTC) and written into the briefings cache
- The job runs inside the API process (BRIEFINGS_REFRESH_ENABLED), so the
  routes read the cache it fills

Usage:
    python scheduler.py              # Generate once and log the briefings (smoke check)
"""
import asyncio
import sys
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import settings, ensure_directories
from constants import KNOWN_AUDIENCES
from utils import logger, init_logging
from utils.cache import InMemoryTTLCache, TTLCache


class BriefingsScheduler:
    """
    Scheduler that keeps the briefings cache warm.

    Failures for one audience are logged and do not stop the others;
    the previous cache entry for that audience is left untouched.
    """

    def __init__(
        self,
        service_factory: Optional[Callable] = None,
        cache: Optional[TTLCache] = None,
        audiences: Optional[list[str]] = None,
    ):
        if service_factory is None:
            from processor import IntelligenceService
            service_factory = IntelligenceService

        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.service_factory = service_factory
        self.cache = cache if cache is not None else InMemoryTTLCache(ttl=settings.cache_ttl_seconds, name="briefings")
        self.audiences = audiences or list(KNOWN_AUDIENCES)
        self._last_run_result: Optional[dict] = None

    def setup(self):
        """Setup the daily refresh job."""
        ensure_directories()

        self.scheduler.add_job(
            self.refresh_all,
            CronTrigger(hour=settings.BRIEFINGS_REFRESH_HOUR, minute=0, timezone="UTC"),
            id="briefings_refresh",
            name="Daily Briefings Refresh",
            replace_existing=True,
        )

        logger.info("Scheduler setup complete with 1 job (briefings refresh)")
        self._log_schedule()

    def _log_schedule(self):
        jobs = self.scheduler.get_jobs()
        logger.info(f"Scheduled jobs ({len(jobs)}):")
        for job in jobs:
            logger.info(f"  - {job.name}: {job.trigger}")

    async def refresh_all(self) -> bool:
        """
        Job: regenerate briefings for every audience.

        Returns:
            True when every audience refreshed
        """
        logger.info(f"Starting briefings refresh for {len(self.audiences)} audiences...")
        service = self.service_factory()
        results = {}

        for audience in self.audiences:
            try:
                briefings = await service.generate_briefings(audience, settings.BRIEFINGS_LIMIT)
                self.cache.set(audience, briefings)
                results[audience] = len(briefings)
                logger.info(f"Refreshed {len(briefings)} briefings for {audience}")
            except Exception as e:
                results[audience] = None
                logger.exception(f"Briefings refresh failed for {audience}: {e}")

        self._last_run_result = results
        failed = [a for a, count in results.items() if count is None]
        if failed:
            logger.warning(f"Briefings refresh finished with failures: {failed}")
            return False

        logger.info("Briefings refresh complete")
        return True

    def start(self):
        """Start the scheduler."""
        self.setup()
        self.scheduler.start()
        logger.info("Scheduler started")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Scheduler stopped")

    def run_once(self) -> bool:
        """Refresh briefings once and log what was generated."""
        ensure_directories()

        logger.info("Running briefings refresh once...")
        result = asyncio.run(self.refresh_all())

        if result:
            logger.info("Briefings refresh completed successfully")
        else:
            logger.error("Briefings refresh failed")

        self._log_briefings()
        return result

    def _log_briefings(self):
        for audience in self.audiences:
            entry = self.cache.get(audience)
            if entry is None:
                logger.warning(f"[{audience}] no briefings")
                continue
            for briefing in entry.value:
                logger.info(f"[{audience}] {briefing.theme}: {briefing.title}")


def main():
    """Main entry point with CLI arguments."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Generate briefings for every audience once and log them"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    init_logging(app_name="scheduler")
    if args.verbose:
        logger.info("Verbose mode enabled")

    result = BriefingsScheduler().run_once()
    sys.exit(0 if result else 1)


if __name__ == "__main__":
    main()

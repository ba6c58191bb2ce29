# promo_publisher/services/scheduler.py

"""Long-lived loop that triggers the promo pipeline on a fixed interval."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from promo_publisher.config.settings import Settings
from promo_publisher.services.pipeline import PipelineResult

logger = logging.getLogger("promo_publisher.scheduler")


class PublishScheduler:
    """Run a pipeline job after a startup delay, then every interval.

    Runs never overlap within one scheduler.  A run that raises is
    logged and the loop carries on with the next tick.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[PipelineResult]],
        interval_seconds: float | None = None,
        startup_delay: float | None = None,
        max_runs: int | None = None,
    ) -> None:
        self.job = job
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None
            else Settings.SCHEDULE_INTERVAL_MINUTES * 60
        )
        self.startup_delay = (
            startup_delay if startup_delay is not None
            else Settings.STARTUP_DELAY
        )
        self.max_runs = max_runs
        self.runs = 0

    async def run_once(self) -> PipelineResult | None:
        """Trigger the job once and log its summary."""
        self.runs += 1
        logger.info("Scheduled run #%d starting", self.runs)
        try:
            result = await self.job()
        except Exception as exc:
            logger.error(
                "Scheduled run #%d crashed: %s",
                self.runs,
                exc,
                exc_info=True,
            )
            return None

        logger.info(
            "Scheduled run #%d finished: success=%s count=%d",
            self.runs,
            result.success,
            result.count,
        )
        return result

    async def serve(self) -> None:
        """Loop until cancelled (or ``max_runs`` is reached)."""
        logger.info(
            "Scheduler started: first run in %.0fs, then every %.0fs",
            self.startup_delay,
            self.interval_seconds,
        )
        await asyncio.sleep(self.startup_delay)
        while True:
            await self.run_once()
            if self.max_runs is not None and self.runs >= self.max_runs:
                logger.info("Scheduler reached %d runs, stopping", self.runs)
                return
            await asyncio.sleep(self.interval_seconds)

"""
scheduler.py — Scheduled cache maintenance.

Each job clears exactly one source's cache on a cron schedule in the
Helsinki time zone, staggered so the remote services are not all hit at once
after a clear:

  walking distance   daily   00:00
  green spaces       daily   01:00
  property prices    weekly  Sunday 02:00
  postal boundaries  weekly  Sunday 03:00

TTLCache.clear() is synchronous and atomic, so jobs never overlap a
half-cleared cache.
"""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
import structlog

from ecoestate_shared.config import settings
from ecoestate_data.registry import DataServices
from ecoestate_data.sources.base import CachedSource

log = structlog.get_logger(__name__)


def _clear_job(source: CachedSource, job_id: str) -> None:
    log.info("scheduled_cache_clear", job_id=job_id, cache=source.cache.name)
    source.clear_cache()


def build_scheduler(
    services: DataServices,
    *,
    timezone: str | None = None,
) -> AsyncIOScheduler:
    """Return an unstarted scheduler with one cache-clearing job per source."""
    tz = timezone or settings.scheduler_timezone
    scheduler = AsyncIOScheduler(timezone=tz)

    jobs: list[tuple[str, CachedSource, CronTrigger]] = [
        (
            "clear_walking_distance_cache",
            services.walking_distance,
            CronTrigger(hour=0, minute=0, timezone=tz),
        ),
        (
            "clear_green_space_cache",
            services.green_spaces,
            CronTrigger(hour=1, minute=0, timezone=tz),
        ),
        (
            "clear_property_price_cache",
            services.property_prices,
            CronTrigger(day_of_week="sun", hour=2, minute=0, timezone=tz),
        ),
        (
            "clear_postcode_cache",
            services.postal_boundaries,
            CronTrigger(day_of_week="sun", hour=3, minute=0, timezone=tz),
        ),
    ]
    for job_id, source, trigger in jobs:
        scheduler.add_job(
            _clear_job,
            trigger,
            args=[source, job_id],
            id=job_id,
            coalesce=True,
            max_instances=1,
            replace_existing=True,
        )

    log.info("scheduler_configured", jobs=[job_id for job_id, _, _ in jobs], timezone=tz)
    return scheduler

"""Periodic refresh of activity listings."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import Config, load_config
from .core.dashboard import format_dashboard
from .core.listing import ALL
from .ports.activity_repo import ActivityRepository
from .workflows import build_dashboard

logger = logging.getLogger(__name__)


def refresh(
    repo: ActivityRepository,
    user_id: str | None,
    on_update: Callable[[str], None],
    bucket: str = ALL,
    mine: bool = False,
) -> None:
    """Fetch fresh data, re-run the core over it, and hand the text to on_update."""
    try:
        data = build_dashboard(repo, user_id, bucket=bucket, mine=mine)
    except Exception as e:
        # A failed poll keeps the previous output; the next tick retries
        logger.error(f"Refresh failed: {e}")
        return
    on_update(format_dashboard(data))


def setup_scheduler(
    repo: ActivityRepository,
    on_update: Callable[[str], None],
    config: Config | None = None,
    bucket: str = ALL,
    mine: bool = False,
) -> BlockingScheduler:
    """Set up the polling job. The first run fires immediately."""
    if config is None:
        config = load_config()

    scheduler = BlockingScheduler(timezone=config.timezone or "UTC")
    scheduler.add_job(
        refresh,
        IntervalTrigger(seconds=config.poll_interval),
        args=[repo, config.user_id or None, on_update, bucket, mine],
        id="refresh_activities",
        next_run_time=datetime.now(timezone.utc),
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Refreshing activities every {config.poll_interval}s")
    return scheduler

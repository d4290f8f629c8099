from apscheduler.schedulers.blocking import (  # type: ignore[import-untyped]
    BlockingScheduler,
)
from apscheduler.triggers.cron import CronTrigger  # type: ignore[import-untyped]
from sqlmodel import Session

from socialfeed.core.db import engine
from socialfeed.logging_.logger import setup_logger
from socialfeed.services import rate_limiter


def prune_rate_limits() -> int:
    with Session(engine) as session:
        return rate_limiter.prune_expired_states(session=session)


def build_scheduler() -> BlockingScheduler:
    scheduler = BlockingScheduler(timezone="UTC")
    scheduler.add_job(
        func=prune_rate_limits,
        trigger=CronTrigger(hour=4, minute=0, timezone="UTC"),
        id="prune_rate_limits",
    )
    return scheduler


if __name__ == "__main__":
    setup_logger("scheduler")
    build_scheduler().start()

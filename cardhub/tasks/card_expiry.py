"""Card expiry background task."""

from __future__ import annotations

import asyncio
import datetime
import logging

from cardhub.config import Config, get_config
from cardhub.db import DatabaseConnection
from cardhub.dependencies.services import ServiceContainer
from cardhub.uow import UnitOfWork

logger = logging.getLogger(__name__)


def run_card_expiry(config: Config | None = None) -> int:
    config = config or get_config()
    db_conn = DatabaseConnection(config)
    session = db_conn.get_session()
    with UnitOfWork(session) as uow:
        container = ServiceContainer(uow, config)
        expired_count = container.member_card_service.expire_overdue_cards()
    return expired_count


def _seconds_until_next_run(now: datetime.datetime) -> float:
    target = datetime.datetime.combine(now.date(), datetime.time(3, 00))
    if now >= target:
        target = target + datetime.timedelta(days=1)
    return (target - now).total_seconds()


async def schedule_card_expiry() -> None:
    while True:
        delay = _seconds_until_next_run(datetime.datetime.now())
        await asyncio.sleep(delay)
        try:
            expired_count = await asyncio.to_thread(run_card_expiry)
            logger.info("Card expiry completed. expired=%s", expired_count)
        except Exception:
            logger.exception("Card expiry failed")

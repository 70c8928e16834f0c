"""
TTL purge worker.

Runs the purge sweep on a fixed interval, independently of the API
process. Each batch commits on its own, so stopping the worker mid-sweep
loses nothing: the next run picks up what is still expired.
"""

import asyncio
import logging

from config import ApplicationConfig
from src.app.use_cases.admin import PurgeExpiredRecordsUseCase
from src.depends import unit_of_work_factory

logger = logging.getLogger("purge_worker")


async def run_forever(interval_seconds: int, batch_size: int):
    use_case = PurgeExpiredRecordsUseCase(unit_of_work_factory, batch_size=batch_size)
    while True:
        result = await use_case.execute()
        if result.is_err():
            logger.error(f"Purge sweep failed: {result.error.code} {result.error.message}")
        else:
            logger.info(f"Purge sweep removed {result.value.total} record(s)")
        await asyncio.sleep(interval_seconds)


if __name__ == "__main__":
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())
    asyncio.run(
        run_forever(
            ApplicationConfig.PURGE_INTERVAL_SECONDS,
            ApplicationConfig.PURGE_BATCH_SIZE,
        )
    )

"""Readiness-gated periodic driver for the notice pipeline."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from .errors import NoticeBotError
from .pipeline import NoticePipeline

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10 * 60.0


class NoticeScheduler:
    """Run the pipeline once when ready, then every ``interval`` seconds.

    Ticks are measured from the start of each run. A run that takes longer
    than the interval pushes the next tick back until it finishes, so two
    runs never overlap.
    """

    def __init__(
        self,
        pipeline: NoticePipeline,
        interval: float = DEFAULT_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.pipeline = pipeline
        self.interval = interval
        self.clock = clock
        self.sleep = sleep

    async def tick(self) -> bool:
        """Run the pipeline once; errors are logged and never propagate."""
        try:
            await self.pipeline.run_once()
        except NoticeBotError as exc:
            LOGGER.error("Notice run failed (%s): %s", type(exc).__name__, exc)
            return False
        except Exception:  # noqa: BLE001
            LOGGER.exception("Unexpected error during notice run")
            return False
        return True

    async def run_forever(self, ready: Awaitable[object]) -> None:
        LOGGER.info("디스코드 준비 대기 중")
        await ready

        LOGGER.info("공지 확인 시작, %.0f초 간격", self.interval)
        while True:
            started = self.clock()
            await self.tick()
            elapsed = self.clock() - started
            await self.sleep(max(self.interval - elapsed, 0.0))

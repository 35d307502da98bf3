"""SweepTicker -- 低频定时过期扫描

长时间打开的会话即使没有用户操作，也会按固定间隔让过期的完成状态回到 Open。
停止 ticker 即取消后台 asyncio.Task。
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

log = structlog.get_logger()


class SweepTicker:
    """固定间隔执行 sweep 协程"""

    def __init__(
        self,
        sweep: Callable[[], Awaitable[Any]],
        interval_s: float,
    ) -> None:
        self._sweep = sweep
        self._interval_s = interval_s
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="pxgdaily-sweep-ticker")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            try:
                await self._sweep()
            except Exception:
                log.exception("sweep_tick_failed")

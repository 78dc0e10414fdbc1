import asyncio
from typing import Callable

from backend.logging import scheduler_logger as logger


class PeriodicTimer:
    """一定周期でコールバックを呼び出すタイマー

    イベントループ上のタスクとして動作する。処理が遅れて周期を
    取りこぼした場合は、遅れた分をまとめて呼び出さずに次の周期へ進む。

    使用例:
        >>> timer = PeriodicTimer(2.0, on_tick)
        >>> timer.arm()
        >>> timer.disarm()
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> None:
        """タイマーを開始 (開始済みなら何もしない)"""
        if self.armed:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def disarm(self) -> None:
        """タイマーを停止 (以降コールバックは呼ばれない)"""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._interval
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            now = loop.time()
            next_tick += self._interval
            if next_tick <= now:
                next_tick = now + self._interval
            try:
                self._callback()
            except Exception as e:
                logger.error(f"Timer callback failed: {e}")

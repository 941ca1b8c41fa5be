import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

_logger = logging.getLogger(__name__)


class RepeatingTask:
    """Run ``func`` every ``interval`` seconds until stopped.

    Meant to be owned by whatever needs the refresh and stopped with it
    (``async with`` or ``start``/``stop``). A failing tick is logged and the
    loop carries on; a slow tick delays the next one instead of overlapping.
    """

    def __init__(
        self,
        func: Callable[[], Awaitable[None]],
        interval: float,
        name: str = "repeating-task",
        run_immediately: bool = False,
    ) -> None:
        self.func = func
        self.interval = interval
        self.name = name
        self.run_immediately = run_immediately
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        # wait() leaves a cancellation aimed at the caller to propagate.
        await asyncio.wait([task])

    async def tick(self) -> None:
        try:
            await self.func()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            _logger.warning("%s tick failed: %s", self.name, e)
        finally:
            self.ticks += 1

    async def _run(self) -> None:
        if self.run_immediately:
            await self.tick()
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()

    async def __aenter__(self) -> "RepeatingTask":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()


class ActivityTicker:
    """Cycles through activity messages, re-fetching when the list wraps."""

    def __init__(self, fetch: Callable[[], Awaitable[List[str]]]) -> None:
        self.fetch = fetch
        self.queue: List[str] = []
        self.index = 0
        self.current: Optional[str] = None

    async def refresh(self) -> None:
        self.queue = list(await self.fetch())
        self.index = 0

    async def advance(self) -> Optional[str]:
        if not self.queue:
            await self.refresh()
            if not self.queue:
                self.current = None
                return None
        self.current = self.queue[self.index]
        self.index = (self.index + 1) % len(self.queue)
        if self.index == 0:
            await self.refresh()
        return self.current

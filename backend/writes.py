"""Fire-and-forget write execution.

Callers hand over a coroutine factory and return immediately. A single worker
task runs the writes in submission order, so a read-modify-write (a toggle)
never interleaves with the next one on the same key. Failures are logged and
swallowed: callers never observe completion or errors. ``submit`` is the only
seam a caller touches, so an acknowledging variant can replace it later.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

log = logging.getLogger(__name__)

WriteFn = Callable[[], Awaitable[object]]


class WriteQueue:
    def __init__(self) -> None:
        self._queue: asyncio.Queue[tuple[str, WriteFn]] = asyncio.Queue()
        self._worker: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        if not self.running:
            self._worker = asyncio.create_task(self._run())

    def submit(self, label: str, write: WriteFn) -> None:
        self._queue.put_nowait((label, write))

    async def drain(self) -> None:
        """Wait until every write submitted so far has run."""
        await self._queue.join()

    async def stop(self) -> None:
        if self._worker is None:
            return
        await self.drain()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def _run(self) -> None:
        while True:
            label, write = await self._queue.get()
            try:
                await write()
            except Exception as e:
                log.error("Queued write %s failed: %s", label, e)
            finally:
                self._queue.task_done()

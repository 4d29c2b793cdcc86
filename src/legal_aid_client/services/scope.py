"""Per-screen execution scope.

Every view-model owns one scope. State is only touched on the event loop
thread; blocking backend calls are pushed to worker threads with
``asyncio.to_thread`` and their results land back on the loop after the
``await``. Launched tasks are tracked but never cancelled.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScreenScope:
    """Single owner of a screen's state and of its in-flight work."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    async def run_remote(
        self, func: Callable[..., T], /, *args: Any, **kwargs: Any
    ) -> T:
        """Run a blocking backend call on a worker thread."""
        self._bind()
        return await asyncio.to_thread(func, *args, **kwargs)

    def launch(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        """Start a coroutine on the owning loop and keep a reference to it."""
        self._bind()
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._finish)
        return task

    async def join(self) -> None:
        """Wait until every launched task, including ones started meanwhile, ends."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def post(self, callback: Callable[..., None], *args: Any) -> None:
        """Run ``callback`` on the owning loop, from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            callback(*args)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            callback(*args)
        else:
            loop.call_soon_threadsafe(callback, *args)

    def _bind(self) -> None:
        self._loop = asyncio.get_running_loop()

    def _finish(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            _logger.error("Unhandled error in %s task", self.name, exc_info=error)

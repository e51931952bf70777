"""
Detached background tasks.

Side effects such as embedding generation and usage logging run as
fire-and-forget tasks: the caller returns immediately and never observes the
outcome. Failures are logged here and never re-raised.

There is no cancellation: ``drain`` waits for in-flight work to settle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """
    Owns detached tasks until they finish.

    The event loop only keeps weak references to tasks, so a strong
    reference is held here until completion.

    Usage:
        tasks = BackgroundTasks()
        tasks.spawn(do_work(), name="embed:task:42")
        ...
        await tasks.drain()  # at shutdown or in tests
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    def spawn(
        self,
        coro: Coroutine[Any, Any, Any],
        *,
        name: str = "background",
    ) -> asyncio.Task[Any] | None:
        """
        Schedule ``coro`` on the running loop without awaiting it.

        Returns the task, or None when no event loop is running (the
        coroutine is closed and a warning logged).
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning(f"No running event loop, dropped background task '{name}'")
            return None

        task = loop.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"Background task '{task.get_name()}' was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task '{task.get_name()}' failed: {exc!r}")

    async def drain(self) -> None:
        """Wait until every pending task (including ones spawned meanwhile) settles."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

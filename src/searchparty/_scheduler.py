"""Owned, cancellable periodic tasks.

Every periodic activity (sampling, presence polling, heatmap polling) runs
as its own :class:`PeriodicTask` whose lifetime is tied to the party view
that started it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from searchparty.exceptions import SearchPartyError

_logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``tick`` now and then every ``interval`` seconds until stopped.

    Cycles start on a fixed grid: the time a tick takes is subtracted from
    the following sleep, and slots a tick overran entirely are skipped.

    Transient failures inside ``tick`` are logged and the next cycle
    proceeds; they never end the task. Once :meth:`stop` is requested no
    new cycle starts.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        tick: Callable[[], Awaitable[object]],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.name = name
        self._interval = interval
        self._tick = tick
        self._logger = logger or _logger
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self.cycles = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def start(self) -> None:
        """Schedule the loop on the running event loop. Idempotent while running."""
        if self.is_running:
            return
        self._stop_requested = False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        self._logger.info("%s started (interval=%.1fs)", self.name, self._interval)

    async def stop(self) -> None:
        """Cancel the loop and wait until it has fully exited."""
        self._stop_requested = True
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        if task is asyncio.current_task():
            # Stopped from inside a tick; the loop exits at its next await.
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                # Our own caller is being cancelled, not just the loop.
                raise
        self._logger.info("%s stopped after %d cycles", self.name, self.cycles)

    async def run_once(self) -> None:
        """Run a single guarded cycle."""
        try:
            await self._tick()
        except asyncio.CancelledError:
            raise
        except SearchPartyError as exc:
            self._logger.warning("%s cycle failed: %s", self.name, exc)
        except Exception:
            self._logger.exception("%s cycle raised unexpectedly", self.name)
        finally:
            self.cycles += 1

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while not self._stop_requested:
            await self.run_once()
            if self._stop_requested:
                return
            deadline += self._interval
            now = loop.time()
            if deadline < now:
                # Overran one or more whole slots.
                skipped = int((now - deadline) // self._interval) + 1
                deadline += skipped * self._interval
                self._logger.debug("%s overran its interval, skipping %d slot(s)", self.name, skipped)
            await asyncio.sleep(deadline - now)

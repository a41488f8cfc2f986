"""Periodic sampling of the local participant's position.

State machine::

    IDLE -> ACQUIRING -> WRITING -> IDLE   (each tick)
    any  -> STOPPED                         (teardown, terminal)

A sampler only ever writes keys owned by its own participant, so samplers
of different participants in the same party never contend.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from searchparty._clock import Clock, now_ms
from searchparty._constants import DEFAULT_SAMPLE_INTERVAL_S
from searchparty._scheduler import PeriodicTask
from searchparty.exceptions import AcquisitionFailedError, PermissionDeniedError, StoreUnavailableError
from searchparty.models import CurrentPosition
from searchparty.source import PositionSource
from searchparty.store.base import LocationStore

_logger = logging.getLogger(__name__)


class SamplerState(StrEnum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    WRITING = "writing"
    STOPPED = "stopped"


class Sampler:
    """Samples the device position on a fixed cadence and records it.

    Each successful sample is written twice with the same timestamp: as the
    participant's current position and as a new history sample. Timestamps
    are strictly increasing per sampler so history keys never collide.

    ``on_permission_denied`` fires once per run of consecutive denials so the
    UI can prompt; sampling keeps retrying on later ticks.
    """

    def __init__(
        self,
        party_id: str,
        participant_id: str,
        source: PositionSource,
        store: LocationStore,
        *,
        interval: float = DEFAULT_SAMPLE_INTERVAL_S,
        clock: Clock = now_ms,
        on_permission_denied: Callable[[PermissionDeniedError], None] | None = None,
    ) -> None:
        self.party_id = party_id
        self.participant_id = participant_id
        self._source = source
        self._store = store
        self._clock = clock
        self._on_permission_denied = on_permission_denied
        self._state = SamplerState.IDLE
        self._last_ts: int | None = None
        self._denied = False
        self._stop_requested = False
        self._task = PeriodicTask(
            f"sampler[{party_id}/{participant_id}]",
            interval,
            self.sample_once,
            logger=_logger,
        )
        self.last_sample: CurrentPosition | None = None

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task.is_running

    def start(self) -> None:
        if self._stop_requested:
            raise RuntimeError("sampler has been stopped")
        self._task.start()

    async def stop(self) -> None:
        """Tear down: cancel the timer and any in-flight acquisition.

        Nothing is written once this has been called, even by a sample whose
        acquisition completed just before.
        """
        self._stop_requested = True
        self._state = SamplerState.STOPPED
        await self._task.stop()

    def _next_timestamp(self) -> int:
        ts = self._clock()
        if self._last_ts is not None and ts <= self._last_ts:
            ts = self._last_ts + 1
        return ts

    def _report_denied(self, exc: PermissionDeniedError) -> None:
        if self._denied:
            return
        self._denied = True
        _logger.info("Location permission denied for %s; will keep retrying", self.participant_id)
        if self._on_permission_denied is not None:
            try:
                self._on_permission_denied(exc)
            except Exception:
                _logger.debug("on_permission_denied callback failed", exc_info=True)

    async def sample_once(self) -> CurrentPosition | None:
        """Run one full cycle. Returns the written position, or ``None`` if skipped."""
        if self._stop_requested:
            return None

        self._state = SamplerState.ACQUIRING
        try:
            position = await self._source.acquire()
        except PermissionDeniedError as exc:
            self._report_denied(exc)
            return None
        except AcquisitionFailedError as exc:
            _logger.warning("Skipping sample for %s: %s", self.participant_id, exc)
            return None
        finally:
            self._set_idle()

        self._denied = False
        if self._stop_requested:
            _logger.debug("Discarding sample acquired during teardown")
            return None

        self._state = SamplerState.WRITING
        ts = self._next_timestamp()
        self._last_ts = ts
        try:
            current = await self._store.put_current(self.party_id, self.participant_id, position, ts)
            if self._stop_requested:
                return None
            await self._store.append_history(self.party_id, self.participant_id, position, ts)
        except StoreUnavailableError as exc:
            _logger.warning("Failed to record sample for %s at %d: %s", self.participant_id, ts, exc)
            return None
        finally:
            self._set_idle()

        self.last_sample = current
        _logger.debug("Recorded sample for %s at %d", self.participant_id, ts)
        return current

    def _set_idle(self) -> None:
        if self._state != SamplerState.STOPPED:
            self._state = SamplerState.IDLE

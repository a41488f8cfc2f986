"""Lifecycle of the location engine while a participant has a party open."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from searchparty._clock import Clock, now_ms
from searchparty._scheduler import PeriodicTask
from searchparty.config import SearchPartyConfig
from searchparty.decay import DecayCurve, linear_decay
from searchparty.exceptions import PermissionDeniedError
from searchparty.heatmap import HeatmapAggregator
from searchparty.models import HeatmapOverlay, Presence
from searchparty.presence import PresenceMerger
from searchparty.sampler import Sampler
from searchparty.source import PositionSource
from searchparty.store.base import LocationStore

_logger = logging.getLogger(__name__)


class PartyView:
    """Owns the sampler and both polling tasks for one (party, participant).

    Usage::

        async with PartyView(party_id, uid, source, store, on_heatmap=render) as view:
            ...

    Leaving the block (or calling :meth:`stop`) cancels all three tasks and
    waits for them; no write or callback happens afterwards.
    """

    def __init__(
        self,
        party_id: str,
        participant_id: str,
        source: PositionSource,
        store: LocationStore,
        *,
        config: SearchPartyConfig | None = None,
        clock: Clock = now_ms,
        curve: DecayCurve = linear_decay,
        on_presence: Callable[[Presence], None] | None = None,
        on_heatmap: Callable[[HeatmapOverlay], None] | None = None,
        on_permission_denied: Callable[[PermissionDeniedError], None] | None = None,
        on_stopped: Callable[[PartyView], None] | None = None,
    ) -> None:
        self._config = config or SearchPartyConfig()
        self.party_id = party_id
        self.participant_id = participant_id
        self._clock = clock
        self._on_presence = on_presence
        self._on_heatmap = on_heatmap
        self._on_stopped = on_stopped
        self._stopped = False

        self.sampler = Sampler(
            party_id,
            participant_id,
            source,
            store,
            interval=self._config.sample_interval,
            clock=clock,
            on_permission_denied=on_permission_denied,
        )
        self.merger = PresenceMerger(store)
        self.aggregator = HeatmapAggregator(
            store,
            curve=curve,
            min_intensity=self._config.min_intensity,
            max_intensity=self._config.max_intensity,
            live_intensity=self._config.live_intensity,
            history_limit=self._config.history_query_limit,
        )
        self._presence_task = PeriodicTask(
            f"presence[{party_id}]",
            self._config.presence_interval,
            self.refresh_presence,
            logger=_logger,
        )
        self._heatmap_task = PeriodicTask(
            f"heatmap[{party_id}]",
            self._config.heatmap_interval,
            self.refresh_heatmap,
            logger=_logger,
        )

        self.presence: Presence | None = None
        self.heatmap: HeatmapOverlay | None = None

    @property
    def is_running(self) -> bool:
        return any(task.is_running for task in (self.sampler, self._presence_task, self._heatmap_task))

    async def __aenter__(self) -> PartyView:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    def start(self) -> None:
        if self._stopped:
            raise RuntimeError("party view has been stopped")
        self.sampler.start()
        self._presence_task.start()
        self._heatmap_task.start()

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def stop(self) -> None:
        self._stopped = True
        await asyncio.gather(
            self.sampler.stop(),
            self._presence_task.stop(),
            self._heatmap_task.stop(),
        )
        on_stopped, self._on_stopped = self._on_stopped, None
        self._notify(on_stopped, self)

    async def refresh_presence(self) -> Presence | None:
        presence = await self.merger.merge(self.party_id, self.participant_id)
        if self._stopped:
            return None
        self.presence = presence
        self._notify(self._on_presence, presence)
        return presence

    async def refresh_heatmap(self) -> HeatmapOverlay | None:
        overlay = await self.aggregator.overlay(
            self.party_id,
            self._config.heatmap_window_ms,
            self._clock(),
            self_id=self.participant_id,
        )
        if self._stopped:
            return None
        self.heatmap = overlay
        self._notify(self._on_heatmap, overlay)
        return overlay

    @staticmethod
    def _notify(callback: Callable[[Any], None] | None, value: Any) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception:
            _logger.debug("party view callback failed", exc_info=True)

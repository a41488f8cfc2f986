"""Decay-weighted heatmap of where the search has already been.

For a window ``W`` and a reference time ``now`` every history sample with
``0 <= now - ts <= W`` becomes a ``history`` point whose intensity fades
with age. Live positions become ``self`` / ``other-live`` points at a fixed
intensity; they are never decayed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from searchparty import _constants as c
from searchparty.decay import DecayCurve, linear_decay
from searchparty.exceptions import NotFoundError
from searchparty.models import CurrentPosition, HeatmapOverlay, HeatmapPoint, HistorySample, PointCategory
from searchparty.store.base import LocationStore

_logger = logging.getLogger(__name__)


class HeatmapAggregator:
    """Read-and-transform: queries a bounded history window and weights each sample.

    Output is fully determined by the store contents and ``now``; the
    aggregator keeps no state between calls.
    """

    def __init__(
        self,
        store: LocationStore,
        *,
        curve: DecayCurve = linear_decay,
        min_intensity: float = c.MIN_INTENSITY,
        max_intensity: float = c.MAX_INTENSITY,
        live_intensity: float = c.LIVE_INTENSITY,
        history_limit: int | None = None,
    ) -> None:
        for name, value in (
            ("min_intensity", min_intensity),
            ("max_intensity", max_intensity),
            ("live_intensity", live_intensity),
        ):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if min_intensity > max_intensity:
            raise ValueError("min_intensity must not exceed max_intensity")
        self._store = store
        self._curve = curve
        self._min_intensity = min_intensity
        self._max_intensity = max_intensity
        self._live_intensity = live_intensity
        self._history_limit = history_limit

    def intensity(self, age_ms: int, window_ms: int) -> float:
        return self._curve(
            age_ms,
            window_ms,
            min_intensity=self._min_intensity,
            max_intensity=self._max_intensity,
        )

    def history_points(self, samples: Iterable[HistorySample], window_ms: int, now: int) -> list[HeatmapPoint]:
        """Weight history samples; anything outside ``[now - window, now]`` is dropped.

        The age check is authoritative even if the store returned older rows.
        """
        points: list[HeatmapPoint] = []
        dropped = 0
        for sample in samples:
            age = now - sample.timestamp
            if age < 0 or age > window_ms:
                dropped += 1
                continue
            points.append(
                HeatmapPoint(
                    latitude=sample.latitude,
                    longitude=sample.longitude,
                    intensity=self.intensity(age, window_ms),
                    category=PointCategory.HISTORY,
                    participant_id=sample.participant_id,
                    timestamp=sample.timestamp,
                )
            )
        if dropped:
            _logger.debug("Dropped %d history samples outside the window", dropped)
        return points

    def live_points(self, records: Iterable[CurrentPosition], self_id: str | None) -> list[HeatmapPoint]:
        own: list[HeatmapPoint] = []
        others: list[HeatmapPoint] = []
        for record in sorted(records, key=lambda r: r.participant_id):
            is_self = self_id is not None and record.participant_id == self_id
            point = HeatmapPoint(
                latitude=record.latitude,
                longitude=record.longitude,
                intensity=self._live_intensity,
                category=PointCategory.SELF if is_self else PointCategory.OTHER_LIVE,
                participant_id=record.participant_id,
                timestamp=record.timestamp,
            )
            (own if is_self else others).append(point)
        return own + others

    async def aggregate(
        self,
        party_id: str,
        window_ms: int,
        now: int,
        *,
        self_id: str | None = None,
    ) -> list[HeatmapPoint]:
        """Build the point set: live points first (self, then others), then history newest first.

        Without ``self_id`` every live position is tagged ``other-live``.
        """
        if window_ms <= 0:
            raise ValueError(f"window must be positive, got {window_ms}")
        since_ts = now - window_ms

        try:
            history = await self._store.query_history(party_id, since_ts, limit=self._history_limit)
        except NotFoundError:
            history = []
        try:
            live = await self._store.list_current(party_id)
        except NotFoundError:
            live = []

        points = self.live_points(live, self_id) + self.history_points(history, window_ms, now)
        _logger.debug(
            "Aggregated party=%s window=%dms: %d live, %d history",
            party_id,
            window_ms,
            len(live),
            len(points) - len(live),
        )
        return points

    async def overlay(
        self,
        party_id: str,
        window_ms: int,
        now: int,
        *,
        self_id: str | None = None,
    ) -> HeatmapOverlay:
        """:meth:`aggregate` plus the party's search area, when the party document exists."""
        points = await self.aggregate(party_id, window_ms, now, self_id=self_id)
        try:
            party = await self._store.get_party(party_id)
        except NotFoundError:
            search_area = None
        else:
            search_area = party.search_area()
        return HeatmapOverlay(points=points, search_area=search_area, generated_at=now)

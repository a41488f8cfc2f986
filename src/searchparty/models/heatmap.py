"""Derived, render-only values. Never persisted."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from searchparty.geo import LatLon, within_radius
from searchparty.models._base import SearchPartyModel
from searchparty.models.position import Coordinates, CurrentPosition


class PointCategory(StrEnum):
    SELF = "self"
    OTHER_LIVE = "other-live"
    HISTORY = "history"


class HeatmapPoint(SearchPartyModel):
    """One weighted map point.

    ``timestamp`` and ``participant_id`` are informational and carried
    over from the record the point was derived from.
    """

    latitude: float
    longitude: float
    intensity: float = Field(ge=0.0, le=1.0)
    category: PointCategory
    participant_id: str | None = None
    timestamp: int | None = None


class SearchArea(SearchPartyModel):
    """Circular search area drawn around the party start point."""

    center: Coordinates
    radius_m: float = Field(ge=0.0)

    def contains(self, point: LatLon) -> bool:
        return within_radius(point, self.center, self.radius_m)


class HeatmapOverlay(SearchPartyModel):
    """Points plus the party's search area, as consumed by a map renderer."""

    points: list[HeatmapPoint] = Field(default_factory=list)
    search_area: SearchArea | None = None
    generated_at: int

    def by_category(self, category: PointCategory) -> list[HeatmapPoint]:
        return [point for point in self.points if point.category == category]

    def outside_search_area(self) -> list[HeatmapPoint]:
        """Points lying beyond the search radius; empty when the area is unknown."""
        area = self.search_area
        if area is None:
            return []
        return [point for point in self.points if not area.contains(point)]


class Presence(SearchPartyModel):
    """Who is where right now, from one participant's point of view.

    No staleness filtering is applied: a position may be arbitrarily old
    if its owner stopped sampling.
    """

    self_position: CurrentPosition | None = None
    others: list[CurrentPosition] = Field(default_factory=list)

    @property
    def participant_ids(self) -> set[str]:
        ids = {position.participant_id for position in self.others}
        if self.self_position is not None:
            ids.add(self.self_position.participant_id)
        return ids

"""Data models for search party locations and heatmaps."""

from searchparty.models._base import EpochMillis, SearchPartyModel, parse_epoch_ms
from searchparty.models.heatmap import HeatmapOverlay, HeatmapPoint, PointCategory, Presence, SearchArea
from searchparty.models.party import MissingPerson, Party
from searchparty.models.position import Coordinates, CurrentPosition, HistorySample, Position, history_key

__all__ = [
    "Coordinates",
    "CurrentPosition",
    "EpochMillis",
    "HeatmapOverlay",
    "HeatmapPoint",
    "HistorySample",
    "MissingPerson",
    "Party",
    "PointCategory",
    "Position",
    "Presence",
    "SearchArea",
    "SearchPartyModel",
    "history_key",
    "parse_epoch_ms",
]

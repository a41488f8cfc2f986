"""searchparty - live location aggregation and decay-weighted heatmaps for search parties."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("searchparty")
except PackageNotFoundError:
    __version__ = "0+local"
from searchparty.client import SearchPartyClient
from searchparty.config import SearchPartyConfig
from searchparty.decay import DecayCurve, exponential_decay, linear_decay
from searchparty.exceptions import (
    AcquisitionFailedError,
    LocationError,
    NotFoundError,
    PermissionDeniedError,
    SearchPartyConfigError,
    SearchPartyError,
    StoreError,
    StoreUnavailableError,
    WriteFailedError,
)
from searchparty.heatmap import HeatmapAggregator
from searchparty.identity import Identity
from searchparty.models import (
    Coordinates,
    CurrentPosition,
    HeatmapOverlay,
    HeatmapPoint,
    HistorySample,
    MissingPerson,
    Party,
    PointCategory,
    Position,
    Presence,
    SearchArea,
)
from searchparty.party_view import PartyView
from searchparty.presence import PresenceMerger
from searchparty.sampler import Sampler, SamplerState
from searchparty.source import PermissionChecker, PositionSource, StaticPermission
from searchparty.store import FirestoreLocationStore, InMemoryLocationStore, LocationStore

__all__ = [
    "__version__",
    "AcquisitionFailedError",
    "Coordinates",
    "CurrentPosition",
    "DecayCurve",
    "FirestoreLocationStore",
    "HeatmapAggregator",
    "HeatmapOverlay",
    "HeatmapPoint",
    "HistorySample",
    "Identity",
    "InMemoryLocationStore",
    "LocationError",
    "LocationStore",
    "MissingPerson",
    "NotFoundError",
    "Party",
    "PartyView",
    "PermissionChecker",
    "PermissionDeniedError",
    "PointCategory",
    "Position",
    "PositionSource",
    "Presence",
    "PresenceMerger",
    "Sampler",
    "SamplerState",
    "SearchArea",
    "SearchPartyClient",
    "SearchPartyConfig",
    "SearchPartyConfigError",
    "SearchPartyError",
    "StaticPermission",
    "StoreError",
    "StoreUnavailableError",
    "WriteFailedError",
    "exponential_decay",
    "linear_decay",
]

"""Position records: device fixes, current positions and history samples."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from searchparty._normalize import safe_float
from searchparty.models._base import EpochMillis, SearchPartyModel


def history_key(participant_id: str, timestamp: int) -> str:
    """Composite key of a history sample: ``<participant>_<timestamp>``."""
    return f"{participant_id}_{timestamp}"


class Coordinates(SearchPartyModel):
    """A WGS84 latitude/longitude pair in degrees."""

    latitude: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lng", "lon"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_degrees(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"not a coordinate: {value!r}")
        return parsed


class Position(Coordinates):
    """A fix read from the local device.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float or None
        Horizontal accuracy radius in meters, when the provider reports one.
    """

    accuracy: float | None = None

    @field_validator("accuracy", mode="before")
    @classmethod
    def _coerce_accuracy(cls, value: Any) -> float | None:
        return safe_float(value)


class CurrentPosition(Coordinates):
    """Latest known position of one participant in one party.

    Exactly one exists per (party, participant); every sample overwrites
    it. The history trail is the lossless record, this one is deliberately
    ephemeral.
    """

    participant_id: str
    timestamp: EpochMillis


class HistorySample(Coordinates):
    """Immutable, append-only past position of one participant."""

    participant_id: str
    timestamp: EpochMillis

    @property
    def key(self) -> str:
        return history_key(self.participant_id, self.timestamp)

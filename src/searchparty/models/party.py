"""Read-only view of a search party document."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from searchparty._normalize import safe_float, safe_str
from searchparty.models._base import SearchPartyModel
from searchparty.models.heatmap import SearchArea
from searchparty.models.position import Coordinates


class MissingPerson(SearchPartyModel):
    """The person being searched for."""

    name: str | None = None
    age: str | None = None
    description: str | None = None
    image_url: str | None = None

    @field_validator("age", mode="before")
    @classmethod
    def _coerce_age(cls, value: Any) -> str | None:
        # Entered as free text by the party creator.
        return safe_str(value)


class Party(SearchPartyModel):
    """A coordinated search effort.

    Created and edited by the surrounding application; the location core
    only reads it.

    Parameters
    ----------
    party_id : str
        Document id of the party.
    creator_id : str or None
        Participant id of the creator.
    participants : list[str]
        Participant ids currently in the party.
    start_location : Coordinates or None
        Point the search radiates from.
    search_radius_km : float or None
        Radius of the search area in kilometers.
    party_code : str or None
        Short join code shared with volunteers.
    missing_person : MissingPerson
        Details of the person being searched for.
    """

    party_id: str
    creator_id: str | None = None
    participants: list[str] = Field(default_factory=list)
    start_location: Coordinates | None = None
    search_radius_km: float | None = None
    party_code: str | None = None
    missing_person: MissingPerson = Field(default_factory=MissingPerson)

    @field_validator("search_radius_km", mode="before")
    @classmethod
    def _coerce_radius(cls, value: Any) -> float | None:
        parsed = safe_float(value)
        if parsed is None or parsed < 0:
            return None
        return parsed

    @field_validator("participants", mode="before")
    @classmethod
    def _coerce_participants(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple, set)):
            return []
        return [text for text in (safe_str(item) for item in value) if text]

    def has_participant(self, participant_id: str) -> bool:
        return participant_id in self.participants

    def search_area(self) -> SearchArea | None:
        """Circle around the start location, or ``None`` when incomplete."""
        if self.start_location is None or self.search_radius_km is None:
            return None
        return SearchArea(center=self.start_location, radius_m=self.search_radius_km * 1000.0)

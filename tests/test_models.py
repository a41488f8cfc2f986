"""Tests for model parsing with SearchPartyModel."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from searchparty.models import (
    Coordinates,
    CurrentPosition,
    HeatmapOverlay,
    HeatmapPoint,
    HistorySample,
    Party,
    PointCategory,
    Position,
    Presence,
    SearchArea,
    history_key,
)

# ------------------------------------------------------------------
# Coordinates / positions
# ------------------------------------------------------------------


class TestCoordinates:
    def test_accepts_short_aliases(self) -> None:
        coords = Coordinates.model_validate({"lat": "38.5", "lng": -77})
        assert coords.latitude == 38.5
        assert coords.longitude == -77.0

    def test_lon_alias(self) -> None:
        assert Coordinates.model_validate({"lat": 1, "lon": 2}).longitude == 2.0

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [(90.1, 0.0), (-90.1, 0.0), (0.0, 180.5), (0.0, -181.0)],
    )
    def test_rejects_out_of_range(self, lat: float, lon: float) -> None:
        with pytest.raises(ValidationError):
            Coordinates(latitude=lat, longitude=lon)

    def test_rejects_non_numeric(self) -> None:
        with pytest.raises(ValidationError):
            Coordinates.model_validate({"latitude": "north", "longitude": 1.0})

    def test_rejects_nan(self) -> None:
        with pytest.raises(ValidationError):
            Coordinates(latitude=float("nan"), longitude=0.0)

    def test_position_accuracy_is_optional(self) -> None:
        assert Position(latitude=1.0, longitude=2.0).accuracy is None
        assert Position.model_validate({"lat": 1, "lng": 2, "accuracy": "12.5"}).accuracy == 12.5

    def test_models_are_frozen(self) -> None:
        position = Position(latitude=1.0, longitude=2.0)
        with pytest.raises(ValidationError):
            position.latitude = 3.0  # type: ignore[misc]


class TestTimestamps:
    def test_numeric_string_timestamp(self) -> None:
        record = CurrentPosition.model_validate(
            {"participant_id": "a", "latitude": 0, "longitude": 0, "timestamp": "1700000000000"}
        )
        assert record.timestamp == 1_700_000_000_000

    def test_datetime_timestamp(self) -> None:
        record = HistorySample(
            participant_id="a",
            latitude=0,
            longitude=0,
            timestamp=datetime(2024, 1, 1, tzinfo=UTC),  # type: ignore[arg-type]
        )
        assert record.timestamp == 1_704_067_200_000

    def test_integral_float_timestamp(self) -> None:
        record = HistorySample(participant_id="a", latitude=0, longitude=0, timestamp=5.0)  # type: ignore[arg-type]
        assert record.timestamp == 5

    def test_garbage_timestamp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HistorySample.model_validate({"participant_id": "a", "latitude": 0, "longitude": 0, "timestamp": "soon"})


def test_history_key_concatenates_participant_and_timestamp() -> None:
    sample = HistorySample(participant_id="alice", latitude=0, longitude=0, timestamp=1234)
    assert sample.key == history_key("alice", 1234) == "alice_1234"


# ------------------------------------------------------------------
# Party
# ------------------------------------------------------------------


class TestParty:
    PAYLOAD: dict = {
        "party_id": "p1",
        "creator_id": "alice",
        "participants": ["alice", " bob ", "", None, 7],
        "start_location": {"lat": 38.9, "lng": -77.0},
        "search_radius_km": "2.5",
        "party_code": "  ",
        "missing_person": {"name": "Sam", "age": 12, "description": ""},
        "unknownField": True,
    }

    def test_parses_document(self) -> None:
        party = Party.model_validate(self.PAYLOAD)
        assert party.participants == ["alice", "bob", "7"]
        assert party.start_location == Coordinates(latitude=38.9, longitude=-77.0)
        assert party.search_radius_km == 2.5
        assert party.party_code is None
        assert party.missing_person.name == "Sam"
        assert party.missing_person.age == "12"
        assert party.missing_person.description is None
        assert party.has_participant("bob")
        assert not party.has_participant("carol")

    def test_search_area_in_meters(self) -> None:
        area = Party.model_validate(self.PAYLOAD).search_area()
        assert area is not None
        assert area.radius_m == 2500.0
        assert area.center.latitude == 38.9

    def test_search_area_missing_without_radius(self) -> None:
        party = Party(party_id="p2", start_location=Coordinates(latitude=0, longitude=0))
        assert party.search_area() is None

    def test_negative_radius_dropped(self) -> None:
        assert Party(party_id="p3", search_radius_km=-1).search_radius_km is None

    def test_participants_non_list_becomes_empty(self) -> None:
        assert Party.model_validate({"party_id": "p4", "participants": "alice"}).participants == []


# ------------------------------------------------------------------
# Derived values
# ------------------------------------------------------------------


class TestHeatmapValues:
    def test_intensity_bounds(self) -> None:
        with pytest.raises(ValidationError):
            HeatmapPoint(latitude=0, longitude=0, intensity=1.2, category=PointCategory.HISTORY)

    def test_category_values(self) -> None:
        assert PointCategory("other-live") is PointCategory.OTHER_LIVE
        assert str(PointCategory.SELF) == "self"

    def test_search_area_contains(self) -> None:
        area = SearchArea(center=Coordinates(latitude=0.0, longitude=0.0), radius_m=1000.0)
        assert area.contains(Coordinates(latitude=0.0, longitude=0.005))
        assert not area.contains(Coordinates(latitude=0.0, longitude=0.02))

    def test_overlay_outside_search_area(self) -> None:
        inside = HeatmapPoint(latitude=0.0, longitude=0.001, intensity=0.5, category=PointCategory.HISTORY)
        outside = HeatmapPoint(latitude=0.1, longitude=0.0, intensity=0.5, category=PointCategory.OTHER_LIVE)
        overlay = HeatmapOverlay(
            points=[inside, outside],
            search_area=SearchArea(center=Coordinates(latitude=0.0, longitude=0.0), radius_m=500.0),
            generated_at=0,
        )
        assert overlay.outside_search_area() == [outside]
        assert overlay.by_category(PointCategory.HISTORY) == [inside]

    def test_overlay_without_area(self) -> None:
        point = HeatmapPoint(latitude=10.0, longitude=10.0, intensity=0.5, category=PointCategory.HISTORY)
        assert HeatmapOverlay(points=[point], generated_at=0).outside_search_area() == []

    def test_presence_participant_ids(self) -> None:
        me = CurrentPosition(participant_id="me", latitude=0, longitude=0, timestamp=1)
        other = CurrentPosition(participant_id="you", latitude=0, longitude=0, timestamp=1)
        assert Presence(self_position=me, others=[other]).participant_ids == {"me", "you"}
        assert Presence().participant_ids == set()

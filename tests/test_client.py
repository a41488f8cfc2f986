from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from searchparty import (
    Coordinates,
    Identity,
    InMemoryLocationStore,
    Party,
    PointCategory,
    Position,
    PositionSource,
    SearchPartyClient,
    SearchPartyConfig,
    SearchPartyError,
    StaticPermission,
)
from searchparty.exceptions import NotFoundError

PARTY = "party-1"


@dataclass
class _FakeResponse:
    status: int
    body: str

    async def text(self) -> str:
        return self.body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class _FakeHttpSession:
    responses: list[_FakeResponse] = field(default_factory=list)
    requests: list[dict[str, Any]] = field(default_factory=list)
    closed: bool = False

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        return self.responses.pop(0)

    async def close(self) -> None:
        self.closed = True


def _source() -> PositionSource:
    async def provider() -> Position:
        return Position(latitude=10.0, longitude=10.0)

    return PositionSource(StaticPermission(True), provider)


async def _seeded_store() -> InMemoryLocationStore:
    store = InMemoryLocationStore()
    store.add_party(
        Party(
            party_id=PARTY,
            participants=["alice", "bob"],
            start_location=Coordinates(latitude=10.0, longitude=10.0),
            search_radius_km=0.5,
        )
    )
    await store.put_current(PARTY, "alice", Position(latitude=10.0, longitude=10.0), 9_000)
    await store.put_current(PARTY, "bob", Position(latitude=10.1, longitude=10.0), 9_500)
    await store.append_history(PARTY, "alice", Position(latitude=10.0, longitude=10.0), 9_000)
    await store.append_history(PARTY, "bob", Position(latitude=10.1, longitude=10.0), 5_000)
    return store


@pytest.mark.asyncio
async def test_one_shot_reads_use_the_injected_store() -> None:
    store = await _seeded_store()
    config = SearchPartyConfig(heatmap_window_ms=5_000)

    async with SearchPartyClient(config, Identity(participant_id="alice"), store=store, clock=lambda: 10_000) as client:
        presence = await client.merge(PARTY)
        points = await client.aggregate(PARTY)
        overlay = await client.overlay(PARTY, window_ms=1_000)
        party = await client.get_party(PARTY)

    assert presence.self_position is not None
    assert [o.participant_id for o in presence.others] == ["bob"]

    assert [p.category for p in points] == [
        PointCategory.SELF,
        PointCategory.OTHER_LIVE,
        PointCategory.HISTORY,
        PointCategory.HISTORY,
    ]
    assert points[-1].intensity == pytest.approx(0.1)

    assert len(overlay.by_category(PointCategory.HISTORY)) == 1
    assert [p.participant_id for p in overlay.outside_search_area()] == ["bob"]
    assert party.has_participant("bob")


@pytest.mark.asyncio
async def test_requires_context_manager_without_store() -> None:
    client = SearchPartyClient(SearchPartyConfig(project_id="demo"), Identity(participant_id="alice"))
    with pytest.raises(SearchPartyError, match="not initialized"):
        await client.merge(PARTY)


@pytest.mark.asyncio
async def test_party_view_requires_source() -> None:
    async with SearchPartyClient(
        SearchPartyConfig(), Identity(participant_id="alice"), store=InMemoryLocationStore()
    ) as client:
        with pytest.raises(SearchPartyError):
            client.party_view(PARTY)


@pytest.mark.asyncio
async def test_exit_stops_open_views(wait_until) -> None:
    store = InMemoryLocationStore()
    config = SearchPartyConfig(sample_interval=0.01, presence_interval=0.01, heatmap_interval=0.01)

    async with SearchPartyClient(config, Identity(participant_id="alice"), source=_source(), store=store) as client:
        view = client.party_view(PARTY)
        view.start()
        await wait_until(lambda: store.history_count(PARTY) > 0)

    assert not view.is_running
    count = store.history_count(PARTY)
    assert await view.sampler.sample_once() is None
    assert store.history_count(PARTY) == count


@pytest.mark.asyncio
async def test_stopped_views_are_released() -> None:
    store = InMemoryLocationStore()

    async with SearchPartyClient(
        SearchPartyConfig(), Identity(participant_id="alice"), source=_source(), store=store
    ) as client:
        for _ in range(100):
            async with client.party_view(PARTY):
                pass
        assert client.open_views == []

        running = client.party_view(PARTY)
        assert client.open_views == [running]
        await running.stop()
        assert client.open_views == []


@pytest.mark.asyncio
async def test_set_identity_rejects_other_participant() -> None:
    client = SearchPartyClient(SearchPartyConfig(), Identity(participant_id="alice"), store=InMemoryLocationStore())
    client.set_identity(Identity(participant_id="alice", id_token="fresh"))
    assert client.identity.id_token == "fresh"
    with pytest.raises(ValueError):
        client.set_identity(Identity(participant_id="mallory"))


@pytest.mark.asyncio
async def test_remote_store_over_http_session() -> None:
    party_doc = {
        "name": f"projects/demo/databases/(default)/documents/search_parties/{PARTY}",
        "fields": {
            "creator_id": {"stringValue": "alice"},
            "participants": {"arrayValue": {"values": [{"stringValue": "alice"}]}},
            "start_location": {
                "mapValue": {
                    "fields": {
                        "latitude": {"doubleValue": 38.8977},
                        "longitude": {"doubleValue": -77.0365},
                    }
                }
            },
            "search_radius_km": {"integerValue": "5"},
            "party_code": {"stringValue": "Ab12"},
        },
    }
    session = _FakeHttpSession(
        responses=[
            _FakeResponse(200, json.dumps(party_doc)),
            _FakeResponse(404, ""),
        ]
    )
    identity = Identity(participant_id="alice", id_token="tok")

    async with SearchPartyClient(SearchPartyConfig(project_id="demo"), identity, session=session) as client:  # type: ignore[arg-type]
        party = await client.get_party(PARTY)
        with pytest.raises(NotFoundError):
            await client.get_party("missing")

    assert party.party_code == "Ab12"
    assert party.search_radius_km == 5.0
    assert party.search_area() is not None
    assert session.requests[0]["method"] == "GET"
    assert session.requests[0]["url"].endswith(f"/v1/projects/demo/databases/(default)/documents/search_parties/{PARTY}")
    assert session.requests[0]["headers"]["authorization"] == "Bearer tok"
    assert not session.closed


@pytest.mark.e2e
@pytest.mark.asyncio
async def test_two_clients_share_a_store(wait_until) -> None:
    store = InMemoryLocationStore()
    config = SearchPartyConfig(sample_interval=0.01, presence_interval=0.01, heatmap_interval=0.01)

    async with (
        SearchPartyClient(config, Identity(participant_id="alice"), source=_source(), store=store) as alice,
        SearchPartyClient(config, Identity(participant_id="bob"), source=_source(), store=store) as bob,
    ):
        alice_view = alice.party_view(PARTY)
        bob_view = bob.party_view(PARTY)
        alice_view.start()
        bob_view.start()
        await wait_until(
            lambda: alice_view.heatmap is not None
            and {p.participant_id for p in alice_view.heatmap.by_category(PointCategory.OTHER_LIVE)} == {"bob"}
        )

    assert alice_view.heatmap is not None
    assert alice_view.heatmap.search_area is None

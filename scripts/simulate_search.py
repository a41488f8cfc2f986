#!/usr/bin/env python3
"""Simulate a search party against the in-memory store.

Several volunteers random-walk away from a start point while their party
views sample, merge and aggregate on accelerated cadences. After the run
the script prints the presence view and a heatmap summary for the first
volunteer.

Example::

    python scripts/simulate_search.py --volunteers 4 --seconds 5 --deny 2
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from searchparty import (  # noqa: E402
    Coordinates,
    InMemoryLocationStore,
    Party,
    PartyView,
    PointCategory,
    Position,
    PositionSource,
    SearchPartyConfig,
    StaticPermission,
)
from searchparty._clock import now_ms  # noqa: E402


def _random_walk(start: Coordinates, rng: random.Random, step_deg: float):
    state = {"lat": start.latitude, "lon": start.longitude}

    async def provider() -> Position:
        state["lat"] += rng.uniform(-step_deg, step_deg)
        state["lon"] += rng.uniform(-step_deg, step_deg)
        return Position(latitude=state["lat"], longitude=state["lon"])

    return provider


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--volunteers", type=int, default=3, help="Number of simulated participants")
    parser.add_argument("--seconds", type=float, default=3.0, help="Wall-clock duration of the simulation")
    parser.add_argument("--interval", type=float, default=0.2, help="Sampling/polling interval in seconds")
    parser.add_argument("--window-ms", type=int, default=2000, help="Heatmap decay window in milliseconds")
    parser.add_argument("--deny", type=int, default=0, help="How many volunteers start without location permission")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    rng = random.Random(args.seed)
    start = Coordinates(latitude=38.8977, longitude=-77.0365)
    participants = [f"volunteer-{i + 1}" for i in range(args.volunteers)]

    store = InMemoryLocationStore()
    store.add_party(
        Party(
            party_id="demo",
            creator_id=participants[0],
            participants=participants,
            start_location=start,
            search_radius_km=1.0,
        )
    )
    config = SearchPartyConfig(
        sample_interval=args.interval,
        presence_interval=args.interval,
        heatmap_interval=args.interval * 2,
        heatmap_window_ms=args.window_ms,
    ).validate()

    permissions: list[StaticPermission] = []
    views: list[PartyView] = []
    for index, participant in enumerate(participants):
        permission = StaticPermission(granted=index >= args.deny)
        permissions.append(permission)
        source = PositionSource(permission, _random_walk(start, rng, 0.002), timeout=1.0)
        views.append(
            PartyView(
                "demo",
                participant,
                source,
                store,
                config=config,
                on_permission_denied=lambda exc, who=participant: print(f"[prompt] {who}: {exc}"),
            )
        )

    for view in views:
        view.start()
    try:
        await asyncio.sleep(args.seconds / 2)
        for permission in permissions:
            permission.granted = True
        await asyncio.sleep(args.seconds / 2)
    finally:
        await asyncio.gather(*(view.stop() for view in views))

    first = views[0]
    presence = await first.merger.merge("demo", first.participant_id)
    overlay = await first.aggregator.overlay("demo", config.heatmap_window_ms, now_ms(), self_id=first.participant_id)
    print(f"history samples stored: {store.history_count('demo')}")
    print(f"self: {presence.self_position}")
    for other in presence.others:
        print(f"other: {other.participant_id} @ {other.latitude:.5f},{other.longitude:.5f}")
    history = overlay.by_category(PointCategory.HISTORY)
    print(f"heatmap points: {len(overlay.points)} ({len(history)} history)")
    if history:
        print(f"intensity range: {min(p.intensity for p in history):.3f}..{max(p.intensity for p in history):.3f}")
    print(f"points outside search area: {len(overlay.outside_search_area())}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())

"""Persistence contract for positions.

Each participant only ever writes its own keys, so implementations need no
locking: current positions are upserts keyed by (party, participant) and
history samples are write-once inserts keyed by (participant, timestamp).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from searchparty.models import CurrentPosition, HistorySample, Party, Position


@runtime_checkable
class LocationStore(Protocol):
    """Structural store interface used by the sampler, merger and aggregator.

    Any failure surfaces as :class:`~searchparty.exceptions.StoreUnavailableError`
    (writes as its subclass ``WriteFailedError``). Implementations never
    retry internally.
    """

    async def put_current(self, party_id: str, participant_id: str, position: Position, ts: int) -> CurrentPosition:
        """Upsert the participant's current position, overwriting any prior value."""
        ...

    async def append_history(self, party_id: str, participant_id: str, position: Position, ts: int) -> HistorySample:
        """Insert a new immutable history sample. Never overwrites."""
        ...

    async def list_current(self, party_id: str) -> list[CurrentPosition]:
        """Snapshot of every participant's current position in the party."""
        ...

    async def query_history(self, party_id: str, since_ts: int, *, limit: int | None = None) -> list[HistorySample]:
        """History samples with ``timestamp >= since_ts``, newest first."""
        ...

    async def get_party(self, party_id: str) -> Party:
        """Read the party document. Raises ``NotFoundError`` when absent."""
        ...

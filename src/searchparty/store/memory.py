"""Deterministic in-memory location store.

Backs tests and simulations. Given the same sequence of writes it produces
the same reads, which keeps heatmap output exactly reproducible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from searchparty.exceptions import NotFoundError, StoreUnavailableError, WriteFailedError
from searchparty.models import CurrentPosition, HistorySample, Party, Position, history_key

_logger = logging.getLogger(__name__)


@dataclass
class _PartyRecords:
    current: dict[str, CurrentPosition] = field(default_factory=dict)
    history: dict[str, HistorySample] = field(default_factory=dict)


class InMemoryLocationStore:
    """Dict-backed :class:`~searchparty.store.base.LocationStore`.

    ``fail_writes`` / ``fail_reads`` make every subsequent write or read
    raise, to exercise the degraded paths of the periodic tasks.
    """

    def __init__(self) -> None:
        self._parties: dict[str, Party] = {}
        self._records: dict[str, _PartyRecords] = {}
        self.fail_writes = False
        self.fail_reads = False

    def _party_records(self, party_id: str) -> _PartyRecords:
        records = self._records.get(party_id)
        if records is None:
            records = _PartyRecords()
            self._records[party_id] = records
        return records

    def _check_write(self, endpoint: str) -> None:
        if self.fail_writes:
            raise WriteFailedError("store rejected the write", endpoint=endpoint)

    def _check_read(self, endpoint: str) -> None:
        if self.fail_reads:
            raise StoreUnavailableError("store unavailable", endpoint=endpoint)

    def add_party(self, party: Party) -> None:
        """Register a party document (normally created by the host application)."""
        self._parties[party.party_id] = party

    async def put_current(self, party_id: str, participant_id: str, position: Position, ts: int) -> CurrentPosition:
        self._check_write("put_current")
        record = CurrentPosition(
            participant_id=participant_id,
            latitude=position.latitude,
            longitude=position.longitude,
            timestamp=ts,
        )
        self._party_records(party_id).current[participant_id] = record
        return record

    async def append_history(self, party_id: str, participant_id: str, position: Position, ts: int) -> HistorySample:
        self._check_write("append_history")
        key = history_key(participant_id, ts)
        history = self._party_records(party_id).history
        if key in history:
            raise WriteFailedError(f"history sample {key} already exists", status_code=409, endpoint="append_history")
        sample = HistorySample(
            participant_id=participant_id,
            latitude=position.latitude,
            longitude=position.longitude,
            timestamp=ts,
        )
        history[key] = sample
        return sample

    async def list_current(self, party_id: str) -> list[CurrentPosition]:
        self._check_read("list_current")
        records = self._records.get(party_id)
        if records is None:
            return []
        return sorted(records.current.values(), key=lambda record: record.participant_id)

    async def query_history(self, party_id: str, since_ts: int, *, limit: int | None = None) -> list[HistorySample]:
        self._check_read("query_history")
        records = self._records.get(party_id)
        if records is None:
            return []
        matching = [sample for sample in records.history.values() if sample.timestamp >= since_ts]
        matching.sort(key=lambda sample: (sample.timestamp, sample.participant_id), reverse=True)
        if limit is not None and len(matching) > limit:
            _logger.debug("History query for party=%s truncated to %d samples", party_id, limit)
            matching = matching[:limit]
        return matching

    async def get_party(self, party_id: str) -> Party:
        self._check_read("get_party")
        party = self._parties.get(party_id)
        if party is None:
            raise NotFoundError(f"party {party_id} not found", status_code=404, endpoint="get_party")
        return party

    def history_count(self, party_id: str) -> int:
        records = self._records.get(party_id)
        return 0 if records is None else len(records.history)

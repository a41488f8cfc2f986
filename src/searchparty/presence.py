"""Who is where right now."""

from __future__ import annotations

import logging

from searchparty.exceptions import NotFoundError
from searchparty.models import Presence
from searchparty.store.base import LocationStore

_logger = logging.getLogger(__name__)


class PresenceMerger:
    """Splits a party's current positions into the caller's own and everyone else's.

    Stateless; callers poll :meth:`merge` on their own cadence. Store
    outages propagate so the polling task can log and skip the cycle.
    """

    def __init__(self, store: LocationStore) -> None:
        self._store = store

    async def merge(self, party_id: str, self_id: str) -> Presence:
        try:
            records = await self._store.list_current(party_id)
        except NotFoundError:
            _logger.debug("No live locations for party=%s", party_id)
            return Presence()

        own = None
        others = []
        for record in records:
            if record.participant_id == self_id:
                own = record
            else:
                others.append(record)
        return Presence(self_position=own, others=others)

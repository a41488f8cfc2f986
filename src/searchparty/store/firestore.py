"""Document-store backend over the Firestore REST API.

Layout (shared with the mobile application)::

    search_parties/{partyId}                                  party document
    search_parties/{partyId}/live_locations/{participantId}   current position
    search_parties/{partyId}/location_history/{participantId}_{ts}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from searchparty import _constants as c
from searchparty._transport import Transport
from searchparty.config import SearchPartyConfig
from searchparty.exceptions import NotFoundError, StoreError, WriteFailedError
from searchparty.models import CurrentPosition, HistorySample, Party, Position, history_key
from searchparty.store._values import decode_fields, document_id, encode_fields, encode_value

_logger = logging.getLogger(__name__)


def _position_fields(position: Position, ts: int) -> dict[str, Any]:
    return {
        "latitude": float(position.latitude),
        "longitude": float(position.longitude),
        c.TIMESTAMP_FIELD: int(ts),
    }


def _decode_document(document: Mapping[str, Any]) -> tuple[str, dict[str, Any]] | None:
    name = document.get("name")
    if not isinstance(name, str) or not name:
        return None
    try:
        fields = decode_fields(document.get("fields") or {})
    except (TypeError, ValueError):
        _logger.debug("Skipping undecodable document %s", name, exc_info=True)
        return None
    return document_id(name), fields


class FirestoreLocationStore:
    """Remote :class:`~searchparty.store.base.LocationStore`.

    Usage::

        transport = FirestoreTransport(config, http_session, identity=identity)
        store = FirestoreLocationStore(config, transport)
    """

    def __init__(self, config: SearchPartyConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport
        self._root = config.documents_root

    def _party_path(self, party_id: str) -> str:
        if not party_id or "/" in party_id:
            raise ValueError(f"invalid party id: {party_id!r}")
        return f"{self._root}/{c.PARTIES_COLLECTION}/{party_id}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def put_current(self, party_id: str, participant_id: str, position: Position, ts: int) -> CurrentPosition:
        path = f"{self._party_path(party_id)}/{c.LIVE_LOCATIONS_COLLECTION}/{participant_id}"
        try:
            await self._transport.request("PATCH", path, json_body={"fields": encode_fields(_position_fields(position, ts))})
        except StoreError as exc:
            raise WriteFailedError(str(exc), status_code=exc.status_code, endpoint=path) from exc
        return CurrentPosition(
            participant_id=participant_id,
            latitude=position.latitude,
            longitude=position.longitude,
            timestamp=ts,
        )

    async def append_history(self, party_id: str, participant_id: str, position: Position, ts: int) -> HistorySample:
        key = history_key(participant_id, ts)
        path = f"{self._party_path(party_id)}/{c.HISTORY_COLLECTION}"
        fields = _position_fields(position, ts)
        fields[c.PARTICIPANT_FIELD] = participant_id
        try:
            # Creating with an explicit document id fails with 409 when the key exists.
            await self._transport.request(
                "POST",
                path,
                params={"documentId": key},
                json_body={"fields": encode_fields(fields)},
            )
        except StoreError as exc:
            if exc.status_code == 409:
                raise WriteFailedError(
                    f"history sample {key} already exists",
                    status_code=409,
                    endpoint=path,
                ) from exc
            raise WriteFailedError(str(exc), status_code=exc.status_code, endpoint=path) from exc
        return HistorySample(
            participant_id=participant_id,
            latitude=position.latitude,
            longitude=position.longitude,
            timestamp=ts,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_current(self, party_id: str) -> list[CurrentPosition]:
        path = f"{self._party_path(party_id)}/{c.LIVE_LOCATIONS_COLLECTION}"
        result: list[CurrentPosition] = []
        page_token: str | None = None
        while True:
            body = await self._transport.request(
                "GET",
                path,
                params={"pageSize": c.LIST_PAGE_SIZE, "pageToken": page_token},
            )
            for document in body.get("documents") or []:
                decoded = _decode_document(document)
                if decoded is None:
                    continue
                participant_id, fields = decoded
                try:
                    result.append(CurrentPosition.model_validate({**fields, "participant_id": participant_id}))
                except ValidationError:
                    _logger.debug("Skipping malformed live location %s", participant_id, exc_info=True)
            page_token = body.get("nextPageToken")
            if not page_token:
                return result

    async def query_history(self, party_id: str, since_ts: int, *, limit: int | None = None) -> list[HistorySample]:
        path = f"{self._party_path(party_id)}:runQuery"
        query = {
            "structuredQuery": {
                "from": [{"collectionId": c.HISTORY_COLLECTION}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": c.TIMESTAMP_FIELD},
                        "op": "GREATER_THAN_OR_EQUAL",
                        "value": encode_value(int(since_ts)),
                    }
                },
                "orderBy": [{"field": {"fieldPath": c.TIMESTAMP_FIELD}, "direction": "DESCENDING"}],
                "limit": int(limit if limit is not None else self._config.history_query_limit),
            }
        }
        body = await self._transport.request("POST", path, json_body=query)
        rows = body if isinstance(body, list) else [body]

        samples: list[HistorySample] = []
        for row in rows:
            document = row.get("document") if isinstance(row, dict) else None
            if not isinstance(document, dict):
                # Rows without a document only carry read metadata.
                continue
            decoded = _decode_document(document)
            if decoded is None:
                continue
            doc_id, fields = decoded
            fields.setdefault(c.PARTICIPANT_FIELD, doc_id.rsplit("_", 1)[0])
            try:
                samples.append(HistorySample.model_validate(fields))
            except ValidationError:
                _logger.debug("Skipping malformed history sample %s", doc_id, exc_info=True)
        return samples

    async def get_party(self, party_id: str) -> Party:
        path = self._party_path(party_id)
        body = await self._transport.request("GET", path)
        decoded = _decode_document(body) if isinstance(body, dict) else None
        if decoded is None:
            raise NotFoundError(f"party {party_id} not found", endpoint=path)
        _, fields = decoded
        return Party.model_validate({**fields, "party_id": party_id})

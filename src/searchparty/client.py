"""High-level async client for the search party location engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from searchparty._clock import Clock, now_ms
from searchparty._transport import FirestoreTransport
from searchparty.config import SearchPartyConfig
from searchparty.decay import DecayCurve, linear_decay
from searchparty.exceptions import PermissionDeniedError, SearchPartyError
from searchparty.heatmap import HeatmapAggregator
from searchparty.identity import Identity
from searchparty.models import HeatmapOverlay, HeatmapPoint, Party, Presence
from searchparty.party_view import PartyView
from searchparty.presence import PresenceMerger
from searchparty.source import PositionSource
from searchparty.store.base import LocationStore
from searchparty.store.firestore import FirestoreLocationStore

_logger = logging.getLogger(__name__)


class SearchPartyClient:
    """Async client bound to one authenticated participant.

    Usage::

        async with SearchPartyClient(config, identity, source=source) as client:
            async with client.party_view(party_id, on_heatmap=render):
                await asyncio.Event().wait()

    When no ``store`` is injected the client talks to the remote document
    store over its own aiohttp session (or the one passed as ``session``).
    """

    def __init__(
        self,
        config: SearchPartyConfig,
        identity: Identity,
        *,
        source: PositionSource | None = None,
        store: LocationStore | None = None,
        session: aiohttp.ClientSession | None = None,
        clock: Clock = now_ms,
        curve: DecayCurve = linear_decay,
    ) -> None:
        self._config = config.validate()
        self._identity = identity
        self._source = source
        self._store = store
        self._injected_store = store is not None
        self._external_session = session is not None
        self._http_session = session
        self._transport: FirestoreTransport | None = None
        self._clock = clock
        self._curve = curve
        self._views: list[PartyView] = []

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SearchPartyClient:
        if not self._injected_store:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = FirestoreTransport(self._config, self._http_session, identity=self._identity)
            self._store = FirestoreLocationStore(self._config, self._transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        views, self._views = self._views, []
        if views:
            await asyncio.gather(*(view.stop() for view in views))
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        if not self._injected_store:
            self._store = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def identity(self) -> Identity:
        return self._identity

    def set_identity(self, identity: Identity) -> None:
        """Replace the bearer identity (same participant, refreshed token)."""
        if identity.participant_id != self._identity.participant_id:
            raise ValueError("identity belongs to a different participant")
        self._identity = identity
        if self._transport is not None:
            self._transport.set_identity(identity)

    def _require_store(self) -> LocationStore:
        if self._store is None:
            raise SearchPartyError("Client not initialized. Use 'async with SearchPartyClient(...) as client:'")
        return self._store

    def _forget_view(self, view: PartyView) -> None:
        if view in self._views:
            self._views.remove(view)

    @property
    def open_views(self) -> list[PartyView]:
        return list(self._views)

    def _aggregator(self) -> HeatmapAggregator:
        return HeatmapAggregator(
            self._require_store(),
            curve=self._curve,
            min_intensity=self._config.min_intensity,
            max_intensity=self._config.max_intensity,
            live_intensity=self._config.live_intensity,
            history_limit=self._config.history_query_limit,
        )

    # ------------------------------------------------------------------
    # One-shot reads
    # ------------------------------------------------------------------

    async def get_party(self, party_id: str) -> Party:
        return await self._require_store().get_party(party_id)

    async def merge(self, party_id: str) -> Presence:
        return await PresenceMerger(self._require_store()).merge(party_id, self._identity.participant_id)

    async def aggregate(
        self,
        party_id: str,
        *,
        window_ms: int | None = None,
        now: int | None = None,
    ) -> list[HeatmapPoint]:
        return await self._aggregator().aggregate(
            party_id,
            window_ms if window_ms is not None else self._config.heatmap_window_ms,
            now if now is not None else self._clock(),
            self_id=self._identity.participant_id,
        )

    async def overlay(
        self,
        party_id: str,
        *,
        window_ms: int | None = None,
        now: int | None = None,
    ) -> HeatmapOverlay:
        return await self._aggregator().overlay(
            party_id,
            window_ms if window_ms is not None else self._config.heatmap_window_ms,
            now if now is not None else self._clock(),
            self_id=self._identity.participant_id,
        )

    # ------------------------------------------------------------------
    # Live party view
    # ------------------------------------------------------------------

    def party_view(
        self,
        party_id: str,
        *,
        on_presence: Callable[[Presence], None] | None = None,
        on_heatmap: Callable[[HeatmapOverlay], None] | None = None,
        on_permission_denied: Callable[[PermissionDeniedError], None] | None = None,
    ) -> PartyView:
        """Create a (not yet started) view; it is stopped with the client at the latest.

        The client only tracks the view until it is stopped.
        """
        if self._source is None:
            raise SearchPartyError("A PositionSource is required to open a party view")
        view = PartyView(
            party_id,
            self._identity.participant_id,
            self._source,
            self._require_store(),
            config=self._config,
            clock=self._clock,
            curve=self._curve,
            on_presence=on_presence,
            on_heatmap=on_heatmap,
            on_permission_denied=on_permission_denied,
            on_stopped=self._forget_view,
        )
        self._views.append(view)
        _logger.debug("Opened party view party=%s participant=%s", party_id, self._identity.participant_id)
        return view

"""HTTP transport for the document store REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from searchparty._constants import USER_AGENT
from searchparty._redact import redact_for_log
from searchparty.config import SearchPartyConfig
from searchparty.exceptions import NotFoundError, StoreUnavailableError
from searchparty.identity import Identity

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the remote store.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`FirestoreTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any: ...


class FirestoreTransport:
    """JSON-over-HTTP transport that authenticates with the participant's bearer token."""

    def __init__(
        self,
        config: SearchPartyConfig,
        http_session: aiohttp.ClientSession,
        *,
        identity: Identity | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._identity = identity
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def set_identity(self, identity: Identity | None) -> None:
        """Swap the bearer identity, e.g. after the host refreshed its token."""
        self._identity = identity

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._identity is not None:
            if self._identity.is_expired:
                _logger.debug("Bearer token for %s is past its TTL", self._identity.participant_id)
            headers.update(self._identity.auth_headers())
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        ``path`` is relative to ``{base_url}/v1/``. An empty body decodes
        to ``{}``.
        """
        url = f"{self._config.base_url}/v1/{path}"
        query: dict[str, str] = {str(k): str(v) for k, v in (params or {}).items() if v is not None}
        if self._config.api_key:
            query["key"] = self._config.api_key

        _logger.debug(
            "%s %s params=%s body=%s",
            method,
            url,
            redact_for_log(query),
            redact_for_log(json_body),
        )

        try:
            async with self._http.request(
                method,
                url,
                params=query,
                json=json_body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise StoreUnavailableError(f"Request to {path} failed: {exc}", endpoint=path) from exc
        except TimeoutError as exc:
            raise StoreUnavailableError(f"Request to {path} timed out", endpoint=path) from exc

        if status == 404:
            raise NotFoundError(f"{path} not found", status_code=status, endpoint=path)
        if status < 200 or status >= 300:
            raise StoreUnavailableError(
                f"HTTP {status} from {path}: {text[:200]}",
                status_code=status,
                endpoint=path,
            )

        if not text.strip():
            return {}
        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreUnavailableError(f"Invalid JSON from {path}: {text[:200]}", endpoint=path) from exc

        _logger.debug("%s %s -> %s", method, path, redact_for_log(body, max_string=128))
        return body

"""Client configuration for searchparty."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from searchparty import _constants as c
from searchparty.exceptions import SearchPartyConfigError


def _env_float(value: str | None, name: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise SearchPartyConfigError(f"{name} must be numeric, got {value!r}") from exc


def _env_int(value: str | None, name: str) -> int | None:
    parsed = _env_float(value, name)
    if parsed is None:
        return None
    return int(parsed)


@dataclasses.dataclass(frozen=True)
class SearchPartyConfig:
    """Client configuration.

    Parameters
    ----------
    project_id : str
        Document store project identifier.
    api_key : str or None
        Optional API key appended to every store request.
    base_url : str
        REST endpoint of the document store.
    database : str
        Database name inside the project.
    sample_interval : float
        Seconds between two position samples while a party view is active.
    presence_interval : float
        Seconds between two presence polls.
    heatmap_interval : float
        Seconds between two heatmap aggregations.
    heatmap_window_ms : int
        Trailing window (milliseconds) of history shown on the heatmap.
    min_intensity : float
        Intensity of a history sample exactly at the window boundary.
    max_intensity : float
        Intensity of a history sample captured right now.
    live_intensity : float
        Fixed intensity of live (``self`` / ``other-live``) points.
    acquire_timeout : float
        Seconds to wait for the device position before giving up the cycle.
    history_query_limit : int
        Result-count ceiling for a single history range query.
    request_timeout : float
        Total timeout in seconds for a single store request.
    """

    project_id: str = ""
    api_key: str | None = None
    base_url: str = c.BASE_URL
    database: str = c.DEFAULT_DATABASE
    sample_interval: float = c.DEFAULT_SAMPLE_INTERVAL_S
    presence_interval: float = c.DEFAULT_PRESENCE_INTERVAL_S
    heatmap_interval: float = c.DEFAULT_HEATMAP_INTERVAL_S
    heatmap_window_ms: int = c.DEFAULT_WINDOW_MS
    min_intensity: float = c.MIN_INTENSITY
    max_intensity: float = c.MAX_INTENSITY
    live_intensity: float = c.LIVE_INTENSITY
    acquire_timeout: float = 10.0
    history_query_limit: int = c.HISTORY_QUERY_LIMIT
    request_timeout: float = 15.0

    def validate(self) -> SearchPartyConfig:
        """Raise :class:`SearchPartyConfigError` on inconsistent settings."""
        for name in ("sample_interval", "presence_interval", "heatmap_interval", "acquire_timeout"):
            if getattr(self, name) <= 0:
                raise SearchPartyConfigError(f"{name} must be positive")
        if self.heatmap_window_ms <= 0:
            raise SearchPartyConfigError("heatmap_window_ms must be positive")
        if self.history_query_limit <= 0:
            raise SearchPartyConfigError("history_query_limit must be positive")
        for name in ("min_intensity", "max_intensity", "live_intensity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise SearchPartyConfigError(f"{name} must be within [0, 1], got {value}")
        if self.min_intensity > self.max_intensity:
            raise SearchPartyConfigError("min_intensity must not exceed max_intensity")
        return self

    @property
    def documents_root(self) -> str:
        """Resource name of the document root, e.g. ``projects/p/databases/(default)/documents``."""
        if not self.project_id:
            raise SearchPartyConfigError("project_id is required for the remote store")
        return f"projects/{self.project_id}/databases/{self.database}/documents"

    @classmethod
    def from_env(cls, **overrides: Any) -> SearchPartyConfig:
        """Create configuration from environment variables.

        Reads ``SEARCHPARTY_PROJECT_ID``, ``SEARCHPARTY_API_KEY`` and the
        optional ``SEARCHPARTY_*`` tuning variables. Explicit keyword
        arguments override environment values.

        Returns
        -------
        SearchPartyConfig
            Populated and validated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "SEARCHPARTY_PROJECT_ID": "project_id",
            "SEARCHPARTY_API_KEY": "api_key",
            "SEARCHPARTY_BASE_URL": "base_url",
            "SEARCHPARTY_DATABASE": "database",
        }
        _ENV_FLOAT_MAP = {
            "SEARCHPARTY_SAMPLE_INTERVAL": "sample_interval",
            "SEARCHPARTY_PRESENCE_INTERVAL": "presence_interval",
            "SEARCHPARTY_HEATMAP_INTERVAL": "heatmap_interval",
            "SEARCHPARTY_MIN_INTENSITY": "min_intensity",
            "SEARCHPARTY_MAX_INTENSITY": "max_intensity",
            "SEARCHPARTY_LIVE_INTENSITY": "live_intensity",
            "SEARCHPARTY_ACQUIRE_TIMEOUT": "acquire_timeout",
            "SEARCHPARTY_REQUEST_TIMEOUT": "request_timeout",
        }
        _ENV_INT_MAP = {
            "SEARCHPARTY_HEATMAP_WINDOW_MS": "heatmap_window_ms",
            "SEARCHPARTY_HISTORY_QUERY_LIMIT": "history_query_limit",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            parsed = _env_float(env.get(env_key), env_key)
            if parsed is not None and field_name not in overrides:
                config_kwargs[field_name] = parsed
        for env_key, field_name in _ENV_INT_MAP.items():
            parsed_int = _env_int(env.get(env_key), env_key)
            if parsed_int is not None and field_name not in overrides:
                config_kwargs[field_name] = parsed_int

        config_kwargs.update(overrides)

        return cls(**config_kwargs).validate()

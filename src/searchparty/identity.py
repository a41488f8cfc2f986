"""Authenticated participant identity supplied by the host application."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Default lifetime of a bearer token in seconds (1 hour).
#: Identity providers typically issue short-lived ID tokens; the host
#: application is expected to hand over a fresh identity when it expires.
DEFAULT_TOKEN_TTL: float = 3600


class Identity(BaseModel):
    """The current participant, resolved before any sampling starts.

    Parameters
    ----------
    participant_id : str
        Opaque participant identifier (the authentication uid).
    id_token : str or None
        Bearer credential presented to the remote store.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the identity was
        resolved.  Defaults to *now* if not provided.
    ttl : float
        Seconds the ``id_token`` is considered valid.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    participant_id: str
    id_token: str | None = None
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = DEFAULT_TOKEN_TTL

    @field_validator("participant_id")
    @classmethod
    def _require_participant_id(cls, value: str) -> str:
        if not value:
            raise ValueError("participant_id must be non-empty")
        return value

    @property
    def is_expired(self) -> bool:
        """Whether the bearer token has exceeded its TTL."""
        if self.id_token is None:
            return False
        return (time.monotonic() - self.created_at) >= self.ttl

    def auth_headers(self) -> dict[str, str]:
        """HTTP headers carrying the bearer credential, if any."""
        if not self.id_token:
            return {}
        return {"authorization": f"Bearer {self.id_token}"}

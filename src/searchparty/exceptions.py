"""Custom exception hierarchy for searchparty."""

from __future__ import annotations


class SearchPartyError(Exception):
    """Base exception for all searchparty errors."""


class SearchPartyConfigError(SearchPartyError):
    """Invalid or missing configuration."""


class LocationError(SearchPartyError):
    """The local device position could not be obtained."""


class PermissionDeniedError(LocationError):
    """Location access has not been granted on this device.

    Distinct from :class:`AcquisitionFailedError` so callers can prompt
    the user instead of silently retrying.
    """


class AcquisitionFailedError(LocationError):
    """Sensor, provider or timeout failure while reading the position."""


class StoreError(SearchPartyError):
    """Failure talking to the location document store."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class StoreUnavailableError(StoreError):
    """Transient store fault (network, non-2xx, invalid response body)."""


class WriteFailedError(StoreUnavailableError):
    """A write was rejected or did not complete.

    Also raised when an append would overwrite an existing history sample.
    """


class NotFoundError(StoreError):
    """The party or document does not exist.

    Readers of a party treat this as an empty result, since a party with
    no recorded positions is a valid state.
    """

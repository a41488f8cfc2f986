"""Local device position acquisition, gated by a permission check."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from searchparty.exceptions import AcquisitionFailedError, LocationError, PermissionDeniedError
from searchparty.models import Position

_logger = logging.getLogger(__name__)

PositionProvider = Callable[[], Awaitable[Position]]


class PermissionChecker(Protocol):
    """Device location permission as exposed by the host platform."""

    async def is_granted(self) -> bool: ...

    async def request(self) -> bool: ...


class StaticPermission:
    """Permission answer held in memory; flip ``granted`` to simulate the user."""

    def __init__(self, granted: bool = True) -> None:
        self.granted = granted
        self.requests = 0

    async def is_granted(self) -> bool:
        return self.granted

    async def request(self) -> bool:
        self.requests += 1
        return self.granted


class PositionSource:
    """Reads the device position.

    The permission is re-checked on every :meth:`acquire`, because the user
    can revoke it between two samples. No writes happen here.
    """

    def __init__(
        self,
        permission: PermissionChecker,
        provider: PositionProvider,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._permission = permission
        self._provider = provider
        self._timeout = timeout

    async def request_permission(self) -> bool:
        """Ask the platform to prompt the user; returns whether access is now granted."""
        return await self._permission.request()

    async def acquire(self) -> Position:
        """Return the current device position.

        Raises
        ------
        PermissionDeniedError
            Location access is not granted; the provider is not called.
        AcquisitionFailedError
            The provider failed, timed out or returned an invalid fix.
        """
        if not await self._permission.is_granted():
            raise PermissionDeniedError("location permission not granted")

        try:
            position = await asyncio.wait_for(self._provider(), timeout=self._timeout)
        except TimeoutError as exc:
            raise AcquisitionFailedError(f"no position fix within {self._timeout:.1f}s") from exc
        except LocationError:
            raise
        except Exception as exc:
            raise AcquisitionFailedError(f"position provider failed: {exc}") from exc

        if not isinstance(position, Position):
            raise AcquisitionFailedError(f"position provider returned {type(position).__name__}")
        _logger.debug("Acquired position lat=%.5f lon=%.5f", position.latitude, position.longitude)
        return position

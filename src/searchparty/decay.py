"""Freshness weighting for history samples.

A decay curve maps the age of a sample to a display intensity. Curves are
pure functions so the aggregator can swap them without touching the store
or the aggregation logic. The linear curve is the default.
"""

from __future__ import annotations

import math
from typing import Protocol

from searchparty._constants import MAX_INTENSITY, MIN_INTENSITY


class DecayCurve(Protocol):
    def __call__(
        self,
        age_ms: int,
        window_ms: int,
        *,
        min_intensity: float = ...,
        max_intensity: float = ...,
    ) -> float: ...


def _check(age_ms: int, window_ms: int) -> None:
    if window_ms <= 0:
        raise ValueError(f"window must be positive, got {window_ms}")
    if age_ms < 0:
        raise ValueError(f"age must not be negative, got {age_ms}")


def linear_decay(
    age_ms: int,
    window_ms: int,
    *,
    min_intensity: float = MIN_INTENSITY,
    max_intensity: float = MAX_INTENSITY,
) -> float:
    """Fade linearly from *max_intensity* at age 0 to *min_intensity* at the window edge.

    Returns ``0.0`` past the window. Both ends are exact, so a sample
    exactly at the boundary reports *min_intensity* without rounding noise.
    """
    _check(age_ms, window_ms)
    if age_ms > window_ms:
        return 0.0
    if age_ms == 0:
        return max_intensity
    if age_ms == window_ms:
        return min_intensity
    return max_intensity - (age_ms / window_ms) * (max_intensity - min_intensity)


def exponential_decay(
    age_ms: int,
    window_ms: int,
    *,
    min_intensity: float = MIN_INTENSITY,
    max_intensity: float = MAX_INTENSITY,
) -> float:
    """Fade exponentially, hitting *min_intensity* exactly at the window edge.

    Fresh samples lose prominence faster than with :func:`linear_decay`.
    """
    _check(age_ms, window_ms)
    if age_ms > window_ms:
        return 0.0
    if age_ms == 0 or max_intensity <= 0:
        return max_intensity
    if age_ms == window_ms:
        return min_intensity
    floor = max(min_intensity, 1e-9)
    rate = math.log(max_intensity / floor) / window_ms
    return max(min_intensity, max_intensity * math.exp(-rate * age_ms))

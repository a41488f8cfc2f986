"""Base model and timestamp type shared by all searchparty models.

Every model inherits from :class:`SearchPartyModel` which provides:

* frozen instances, so a record read from the store can be handed to
  several consumers without defensive copies.
* ``extra="ignore"`` so unknown document fields never break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` and blank
  strings so the field default is used instead.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator


def parse_epoch_ms(value: Any) -> Any:
    """Coerce a timestamp to integer epoch milliseconds.

    Accepts ints, integral floats, numeric strings (the document store
    transports 64-bit integers as strings) and aware datetimes. Anything
    else is passed through so pydantic reports the validation error.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return value


EpochMillis = Annotated[int, BeforeValidator(parse_epoch_ms)]
"""Annotated type for epoch-millisecond timestamps."""


class SearchPartyModel(BaseModel):
    """Base for searchparty records and derived values."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {
            key: value
            for key, value in values.items()
            if value is not None and not (isinstance(value, str) and not value.strip())
        }

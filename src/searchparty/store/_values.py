"""Firestore REST typed-value codec.

The REST API wraps every field in a single-key object naming its type
(``{"integerValue": "42"}``, ``{"mapValue": {"fields": {...}}}``). 64-bit
integers travel as strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a plain Python value as a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
        return {"timestampValue": aware.astimezone(UTC).isoformat().replace("+00:00", "Z")}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    raise TypeError(f"cannot encode {type(value).__name__} as a document value")


def encode_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key): encode_value(value) for key, value in values.items()}


def decode_value(value: Mapping[str, Any]) -> Any:
    """Decode a Firestore typed value into a plain Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return str(value["stringValue"])
    if "timestampValue" in value:
        return datetime.fromisoformat(str(value["timestampValue"]))
    if "geoPointValue" in value:
        point = value["geoPointValue"] or {}
        return {"latitude": float(point.get("latitude", 0.0)), "longitude": float(point.get("longitude", 0.0))}
    if "mapValue" in value:
        return decode_fields((value["mapValue"] or {}).get("fields") or {})
    if "arrayValue" in value:
        return [decode_value(item) for item in (value["arrayValue"] or {}).get("values") or []]
    if "referenceValue" in value:
        return str(value["referenceValue"])
    if "bytesValue" in value:
        return str(value["bytesValue"])
    raise ValueError(f"unsupported document value: {sorted(value)}")


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key): decode_value(value) for key, value in fields.items()}


def document_id(name: str) -> str:
    """Last path segment of a document resource name."""
    return name.rstrip("/").rsplit("/", 1)[-1]

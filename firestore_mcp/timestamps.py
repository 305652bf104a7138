"""
Timestamp normalization and JSON encoding for Firestore payloads.

MCP clients cannot send native timestamps, so they send a wire shape instead:
{"seconds": <int>, "nanoseconds": <int>} (or the Node SDK's
{"_seconds": ..., "_nanoseconds": ...}). normalize() rewrites those into
DatetimeWithNanoseconds, the type the Firestore SDK reads and writes, and
to_json() encodes native timestamps back into the wire shape.
"""

import base64
import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Union

from google.api_core.datetime_helpers import DatetimeWithNanoseconds
from google.cloud.firestore_v1 import GeoPoint
from google.cloud.firestore_v1.base_document import BaseDocumentReference
from google.protobuf.timestamp_pb2 import Timestamp

# Closed document value type; Firestore-only scalars (bytes, GeoPoint,
# document references) travel as opaque leaves.
Value = Union[None, bool, int, float, str, datetime, list["Value"], dict[str, "Value"]]

_WIRE_KEYS = (("seconds", "nanoseconds"), ("_seconds", "_nanoseconds"))
_NANOS_PER_SECOND = 1_000_000_000


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _wire_fields(value: Mapping) -> tuple[Any, Any] | None:
    """Return (seconds, nanoseconds) if value is a wire timestamp, else None."""
    keys = set(value.keys())
    for seconds_key, nanos_key in _WIRE_KEYS:
        if keys == {seconds_key, nanos_key}:
            seconds, nanos = value[seconds_key], value[nanos_key]
            if _is_integral(seconds) and _is_integral(nanos):
                return seconds, nanos
    return None


def from_wire(seconds: int | float, nanoseconds: int | float) -> DatetimeWithNanoseconds:
    nanos = int(nanoseconds)
    if not 0 <= nanos < _NANOS_PER_SECOND:
        raise ValueError(f"Timestamp nanoseconds out of range: {nanos}")
    return DatetimeWithNanoseconds.from_timestamp_pb(Timestamp(seconds=int(seconds), nanos=nanos))


def to_wire(value: datetime) -> dict[str, int]:
    if isinstance(value, DatetimeWithNanoseconds):
        stamp = value.timestamp_pb()
    else:
        stamp = Timestamp()
        stamp.FromDatetime(value)
    return {"seconds": stamp.seconds, "nanoseconds": stamp.nanos}


def normalize(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, Mapping):
        fields = _wire_fields(value)
        if fields is not None:
            return from_wire(*fields)
        return {key: normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    return value


def _json_serial(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return to_wire(obj)
    if isinstance(obj, bytes):
        return base64.b64encode(obj).decode("ascii")
    if isinstance(obj, GeoPoint):
        return {"latitude": obj.latitude, "longitude": obj.longitude}
    if isinstance(obj, BaseDocumentReference):
        return obj.path
    raise TypeError(f"Type {type(obj)} not serializable")


def to_json(data: Any) -> str:
    return json.dumps(data, default=_json_serial, indent=2)

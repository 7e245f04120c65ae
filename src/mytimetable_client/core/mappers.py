"""
Response mappers: JSON body -> typed value, with root-value unwrapping.

MyTimetable wraps every payload one level under a resource-specific key,
e.g. ``{"timetable": [...]}`` or ``{"filterattribute": [...]}``.
"""

from __future__ import annotations

import json
from typing import IO, Any, Dict, Generic, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models import Event, Timetable, TimetableFilterType
from .errors import StreamMappingError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

Stream = Union[bytes, bytearray, str, IO[bytes]]


def read_json(stream: Stream) -> Any:
    if hasattr(stream, "read"):
        stream = stream.read()
    try:
        return json.loads(stream)
    except (ValueError, TypeError) as exc:
        raise StreamMappingError(f"Response body is not valid JSON: {exc}", exc) from exc


def unwrap_root(payload: Any, root: str) -> Any:
    """Return the value nested under ``root``."""
    if not isinstance(payload, Mapping):
        raise StreamMappingError(
            f"Expected a JSON object wrapped in {root!r}, got {type(payload).__name__}"
        )
    if root not in payload:
        raise StreamMappingError(
            f"Root property {root!r} missing; found {sorted(payload)!r}"
        )
    return payload[root]


class StreamMapper(Generic[T]):
    """Decode a response body, unwrap ``root`` and validate it as ``shape``."""

    def __init__(self, root: str, shape: Any, *, empty: Any = None):
        self.root = root
        self.adapter: TypeAdapter[T] = TypeAdapter(shape)
        self._empty = empty

    def map(self, stream: Stream) -> T:
        value = unwrap_root(read_json(stream), self.root)
        if value is None and self._empty is not None:
            return self._empty()
        return self.validate(value)

    def validate(self, value: Any) -> T:
        try:
            return self.adapter.validate_python(value)
        except ValidationError as exc:
            raise StreamMappingError(
                f"Payload under {self.root!r} did not match the expected shape: {exc}",
                exc,
            ) from exc


class KeyedStreamMapper(StreamMapper[Dict[str, M]]):
    """Map a wrapped array onto a dict keyed by one attribute of each item."""

    def __init__(self, model: Type[M], root: str, *, key: str = "id"):
        super().__init__(root, List[model], empty=dict)  # type: ignore[valid-type]
        self.key = key

    def validate(self, value: Any) -> Dict[str, M]:
        items: List[M] = super().validate(value)  # type: ignore[assignment]
        return {getattr(item, self.key): item for item in items}


def single_mapper(model: Type[M], root: str) -> StreamMapper[M]:
    return StreamMapper(root, model)


def list_mapper(model: Type[M], root: str) -> StreamMapper[List[M]]:
    # A wrapped null is treated like an empty array.
    return StreamMapper(root, List[model], empty=list)  # type: ignore[valid-type]


def keyed_mapper(model: Type[M], root: str, *, key: str = "id") -> KeyedStreamMapper[M]:
    return KeyedStreamMapper(model, root, key=key)


TIMETABLE_LIST = list_mapper(Timetable, "timetable")
TIMETABLE_MAP = keyed_mapper(Timetable, "timetable")
EVENT_LIST = list_mapper(Event, "event")
FILTER_TYPE_LIST = list_mapper(TimetableFilterType, "filterattribute")


__all__ = [
    "StreamMapper",
    "KeyedStreamMapper",
    "read_json",
    "unwrap_root",
    "single_mapper",
    "list_mapper",
    "keyed_mapper",
    "TIMETABLE_LIST",
    "TIMETABLE_MAP",
    "EVENT_LIST",
    "FILTER_TYPE_LIST",
]

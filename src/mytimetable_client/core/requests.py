"""
Request builders for the MyTimetable v0 API.

Builders only describe requests; they never perform I/O. Validation errors
are raised here so nothing reaches the transport for an invalid call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ..models import TimetableFilterOption

TIMETABLES_PATH = "v0/timetables"
FILTER_TYPES_PATH = "v0/timetables/filterattributes"
UPCOMING_EVENTS_PATH = "v0/events/upcoming"

QUERY_PARAM_TYPE = "type"
QUERY_PARAM_DS = "ds"
QUERY_PARAM_QUERY = "query"
QUERY_PARAM_LIMIT = "limit"
QUERY_PARAM_OFFSET = "offset"
QUERY_PARAM_USER = "user"
QUERY_PARAM_TIMETABLE_TYPE = "timetableType"
FILTER_PARAM_SUFFIX = "Filter"

FilterOptions = Union[
    Mapping[str, Optional[TimetableFilterOption]],
    Iterable[Tuple[str, Optional[TimetableFilterOption]]],
]


@dataclass(frozen=True)
class ApiRequest:
    method: str
    path: str
    params: Tuple[Tuple[str, str], ...] = ()
    headers: Tuple[Tuple[str, str], ...] = ()

    def url_for(self, base: str) -> str:
        return f"{base.rstrip('/')}/{self.path.lstrip('/')}"

    def param(self, name: str) -> Optional[str]:
        """First value for ``name``, if any."""
        return next((v for k, v in self.params if k == name), None)


class _ParamList:
    """Ordered multimap that only accepts non-empty values."""

    def __init__(self) -> None:
        self.items: List[Tuple[str, str]] = []

    def add(self, name: str, value: Optional[str]) -> None:
        if value:
            self.items.append((name, value))

    def add_positive(self, name: str, value: Optional[int]) -> None:
        # Zero and negative mean "unset".
        if value is not None and value > 0:
            self.items.append((name, str(value)))

    def freeze(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(self.items)


def _require(name: str, value: Any) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{name} must be provided.")


def iter_filter_options(
    filter_options: Optional[FilterOptions],
) -> Iterable[Tuple[str, str]]:
    """
    Yield ``(<attribute>Filter, option id)`` pairs in the iteration order of
    ``filter_options``. Pass a dict (insertion order) or a sorted list of
    pairs to pin the parameter order.
    """
    if not filter_options:
        return
    pairs = (
        filter_options.items() if isinstance(filter_options, Mapping) else filter_options
    )
    for attribute, option in pairs:
        if option is None or not option.id:
            continue
        yield f"{attribute}{FILTER_PARAM_SUFFIX}", option.id


def build_timetables_request(
    type: Optional[str],
    ds: Optional[str] = None,
    query: Optional[str] = None,
    filter_options: Optional[FilterOptions] = None,
    limit: int = 0,
    offset: int = 0,
) -> ApiRequest:
    """
    GET v0/timetables.

    ``type`` is required; every other argument only adds a parameter when it
    carries a value, so the parameter count equals the number of inputs given.
    """
    _require("type", type)

    params = _ParamList()
    params.add(QUERY_PARAM_TYPE, type)
    params.add(QUERY_PARAM_DS, ds)
    params.add(QUERY_PARAM_QUERY, query)
    params.add_positive(QUERY_PARAM_LIMIT, limit)
    params.add_positive(QUERY_PARAM_OFFSET, offset)
    for name, value in iter_filter_options(filter_options):
        params.add(name, value)

    return ApiRequest("GET", TIMETABLES_PATH, params.freeze())


def build_filter_types_request(type: Optional[str], ds: Optional[str] = None) -> ApiRequest:
    _require("type", type)

    params = _ParamList()
    params.add(QUERY_PARAM_TYPE, type)
    params.add(QUERY_PARAM_DS, ds)
    return ApiRequest("GET", FILTER_TYPES_PATH, params.freeze())


def locale_tag(locale: Optional[str]) -> Optional[str]:
    """``en_GB`` -> ``en-GB``; ``None``/empty stays ``None``."""
    if not locale:
        return None
    return locale.replace("_", "-")


def build_upcoming_events_request(
    username: Optional[str],
    locale: Optional[str] = None,
    *,
    limit: int = 0,
    timetable_types: Iterable[str] = (),
) -> ApiRequest:
    """
    GET v0/events/upcoming for one user.
    The server falls back to its default language when ``locale`` is not available.
    """
    _require("username", username)

    params = _ParamList()
    params.add(QUERY_PARAM_USER, username)
    params.add_positive(QUERY_PARAM_LIMIT, limit)
    for timetable_type in timetable_types:
        params.add(QUERY_PARAM_TIMETABLE_TYPE, timetable_type)

    headers: Tuple[Tuple[str, str], ...] = ()
    tag = locale_tag(locale)
    if tag:
        headers = (("Accept-Language", tag),)

    return ApiRequest("GET", UPCOMING_EVENTS_PATH, params.freeze(), headers)


__all__ = [
    "ApiRequest",
    "FilterOptions",
    "build_timetables_request",
    "build_filter_types_request",
    "build_upcoming_events_request",
    "iter_filter_options",
    "locale_tag",
    "TIMETABLES_PATH",
    "FILTER_TYPES_PATH",
    "UPCOMING_EVENTS_PATH",
    "QUERY_PARAM_TYPE",
    "QUERY_PARAM_DS",
    "QUERY_PARAM_QUERY",
    "QUERY_PARAM_LIMIT",
    "QUERY_PARAM_OFFSET",
    "QUERY_PARAM_USER",
    "QUERY_PARAM_TIMETABLE_TYPE",
]

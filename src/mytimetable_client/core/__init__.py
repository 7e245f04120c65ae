"""Transport-agnostic core: configuration, request builders and response mappers."""

from .configuration import DEFAULT_TIMETABLE_TYPES, PROPERTY_KEYS, Configuration
from .errors import MyTimetableClientError, MyTimetableHTTPError, StreamMappingError
from .logging import LogfmtFormatter, setup_logging
from .mappers import (
    EVENT_LIST,
    FILTER_TYPE_LIST,
    TIMETABLE_LIST,
    TIMETABLE_MAP,
    KeyedStreamMapper,
    StreamMapper,
    keyed_mapper,
    list_mapper,
    single_mapper,
    unwrap_root,
)
from .requests import (
    ApiRequest,
    build_filter_types_request,
    build_timetables_request,
    build_upcoming_events_request,
)

__all__ = [
    # Config
    "Configuration",
    "DEFAULT_TIMETABLE_TYPES",
    "PROPERTY_KEYS",
    # Exceptions
    "MyTimetableClientError",
    "MyTimetableHTTPError",
    "StreamMappingError",
    # Logging
    "LogfmtFormatter",
    "setup_logging",
    # Mappers
    "StreamMapper",
    "KeyedStreamMapper",
    "single_mapper",
    "list_mapper",
    "keyed_mapper",
    "unwrap_root",
    "TIMETABLE_LIST",
    "TIMETABLE_MAP",
    "EVENT_LIST",
    "FILTER_TYPE_LIST",
    # Requests
    "ApiRequest",
    "build_timetables_request",
    "build_filter_types_request",
    "build_upcoming_events_request",
]

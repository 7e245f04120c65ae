"""mytimetable_client package exports."""

from .core.configuration import DEFAULT_TIMETABLE_TYPES, Configuration
from .core.errors import (
    MyTimetableClientError,
    MyTimetableHTTPError,
    StreamMappingError,
)
from .core.requests import (
    ApiRequest,
    build_filter_types_request,
    build_timetables_request,
    build_upcoming_events_request,
)
from .models import (
    Event,
    EventLocation,
    Timetable,
    TimetableFilterOption,
    TimetableFilterType,
)
from .service import MyTimetableService

__all__ = [
    # Service
    "MyTimetableService",
    "Configuration",
    "DEFAULT_TIMETABLE_TYPES",
    # Exceptions
    "MyTimetableClientError",
    "MyTimetableHTTPError",
    "StreamMappingError",
    # Requests
    "ApiRequest",
    "build_timetables_request",
    "build_filter_types_request",
    "build_upcoming_events_request",
    # Models
    "Timetable",
    "TimetableFilterOption",
    "TimetableFilterType",
    "Event",
    "EventLocation",
]

import logging
import ssl
import threading
import time
from typing import Any, Dict, List, Optional, TypeVar, Union

import httpx

from .core.configuration import Configuration
from .core.errors import MyTimetableClientError, MyTimetableHTTPError
from .core.mappers import (
    EVENT_LIST,
    FILTER_TYPE_LIST,
    TIMETABLE_LIST,
    TIMETABLE_MAP,
    StreamMapper,
)
from .core.requests import (
    ApiRequest,
    FilterOptions,
    build_filter_types_request,
    build_timetables_request,
    build_upcoming_events_request,
)
from .models import Event, Timetable, TimetableFilterType

T = TypeVar("T")

API_KEY_HEADER = "apiToken"

_UNREACHABLE = (httpx.ConnectError, httpx.ConnectTimeout)


def ssl_verify(configuration: Configuration) -> Union[bool, ssl.SSLContext]:
    if configuration.api_ssl_cn_check:
        return True
    # Certificates are still verified; only the hostname match is skipped.
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    return ctx


def http_timeout(configuration: Configuration) -> httpx.Timeout:
    return httpx.Timeout(
        configuration.socket_timeout_seconds,
        connect=configuration.connect_timeout_seconds,
    )


def http_limits(configuration: Configuration) -> httpx.Limits:
    # Bounds the pool shared by every thread using the service.
    return httpx.Limits(
        max_connections=configuration.api_max_connections,
        max_keepalive_connections=configuration.api_max_connections,
    )


def create_http_client(configuration: Configuration) -> httpx.Client:
    """Connection pool sized and timed from the configuration."""
    return httpx.Client(
        timeout=http_timeout(configuration),
        limits=http_limits(configuration),
        verify=ssl_verify(configuration),
    )


class MyTimetableService:
    """
    Synchronous facade over the MyTimetable API.
    - One method per API operation: build request, execute, map response
    - Tries the configured endpoints in order; the first reachable one answers
    - Raises MyTimetableHTTPError on non-2xx responses, StreamMappingError on
      bodies that do not map, ValueError on invalid arguments (before any I/O)

    The underlying httpx.Client is thread-safe, so one service may be shared
    between threads; it holds no per-call state.
    """

    def __init__(
        self,
        configuration: Configuration,
        *,
        http: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.configuration = configuration
        self.log = logger or logging.getLogger("mytimetable_client.service")

        self.headers: Dict[str, str] = {
            "Accept": "application/json",
            API_KEY_HEADER: configuration.api_key or "",
        }
        if not configuration.api_enable_gzip:
            self.headers["Accept-Encoding"] = "identity"

        self.timeout = http_timeout(configuration)

        self._owns_http = http is None
        self.http = http or create_http_client(configuration)
        self._closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def from_env(cls, **kwargs: Any) -> "MyTimetableService":
        return cls(Configuration.from_env(), **kwargs)

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_http:
            self.http.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "MyTimetableService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- API operations ---

    def get_upcoming_events(
        self,
        username: str,
        locale: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Event]:
        """
        Upcoming events for ``username`` in ``locale`` (server default when
        the locale is unavailable). The username is decorated with the
        configured domain prefix/postfix, and the count is clamped to
        ``max_number_of_events``.
        """
        if not username:
            raise ValueError("username must be provided.")
        cfg = self.configuration
        request = build_upcoming_events_request(
            cfg.decorate_username(username),
            locale,
            limit=cfg.number_of_events(limit),
            timetable_types=cfg.timetable_types,
        )
        return self.execute(request, EVENT_LIST, operation="get_upcoming_events")

    def get_timetables(
        self,
        type: Optional[str],
        ds: Optional[str] = None,
        query: Optional[str] = None,
        filter_options: Optional[FilterOptions] = None,
        limit: int = 0,
        offset: int = 0,
    ) -> List[Timetable]:
        request = build_timetables_request(type, ds, query, filter_options, limit, offset)
        return self.execute(request, TIMETABLE_LIST, operation="get_timetables")

    def get_timetable_map(
        self,
        type: Optional[str],
        ds: Optional[str] = None,
        query: Optional[str] = None,
        filter_options: Optional[FilterOptions] = None,
        limit: int = 0,
        offset: int = 0,
    ) -> Dict[str, Timetable]:
        request = build_timetables_request(type, ds, query, filter_options, limit, offset)
        return self.execute(request, TIMETABLE_MAP, operation="get_timetable_map")

    def get_timetable_filter_types(
        self, type: Optional[str], ds: Optional[str] = None
    ) -> List[TimetableFilterType]:
        request = build_filter_types_request(type, ds)
        return self.execute(
            request, FILTER_TYPE_LIST, operation="get_timetable_filter_types"
        )

    # --- Transport ---

    def execute(
        self,
        request: ApiRequest,
        mapper: StreamMapper[T],
        *,
        operation: Optional[str] = None,
    ) -> T:
        resp = self._send(request, operation=operation)
        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp, method=request.method)
        return mapper.map(resp.content)

    def _send(self, request: ApiRequest, *, operation: Optional[str]) -> httpx.Response:
        if self._closed:
            raise MyTimetableClientError("Service is closed.")

        endpoints = [e for e in self.configuration.api_endpoint_uris if e]
        if not endpoints:
            raise MyTimetableClientError("No API endpoint URIs configured.")

        headers = dict(self.headers)
        headers.update(request.headers)

        last_exc: Optional[Exception] = None
        for attempt, endpoint in enumerate(endpoints):
            url = request.url_for(endpoint)
            start = time.perf_counter()
            try:
                resp = self.http.request(
                    request.method,
                    url,
                    params=list(request.params),
                    headers=headers,
                    timeout=self.timeout,
                )
            except _UNREACHABLE as exc:
                self.log.warning(
                    "mytimetable.endpoint_unreachable",
                    extra={
                        "operation": operation,
                        "endpoint": endpoint,
                        "attempt": attempt,
                    },
                )
                last_exc = exc
                continue
            except httpx.HTTPError as exc:
                raise MyTimetableClientError(
                    f"HTTPX error calling {request.method} {url}: {exc}"
                ) from exc

            duration_ms = int((time.perf_counter() - start) * 1000)
            self.log.debug(
                "mytimetable.request",
                extra={
                    "operation": operation,
                    "method": request.method,
                    "url": str(resp.request.url),
                    "endpoint": endpoint,
                    "status": resp.status_code,
                    "duration_ms": duration_ms,
                    "attempt": attempt,
                },
            )
            return resp

        raise MyTimetableClientError(
            f"No reachable API endpoint for {request.method} {request.path}: {last_exc}"
        ) from last_exc

    def _to_http_error(
        self, resp: httpx.Response, *, method: str
    ) -> MyTimetableHTTPError:
        url = str(resp.request.url)
        # Try JSON first; fall back to text snippet.
        response_json: Optional[Dict[str, Any]] = None
        response_text: Optional[str] = None
        message = resp.reason_phrase or "request failed"

        try:
            parsed = resp.json()
            if isinstance(parsed, dict):
                response_json = parsed
                message = parsed.get("message") or parsed.get("error") or message
        except ValueError:
            response_text = (resp.text or "")[:500]

        return MyTimetableHTTPError(
            status_code=resp.status_code,
            method=method,
            url=url,
            message=message,
            response_json=response_json,
            response_text=response_text,
        )


__all__ = [
    "MyTimetableService",
    "create_http_client",
    "http_limits",
    "http_timeout",
    "ssl_verify",
    "API_KEY_HEADER",
]

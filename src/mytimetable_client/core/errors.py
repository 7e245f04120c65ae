from typing import Any, Dict, Optional


class MyTimetableClientError(Exception):
    """Base error for client failures."""


class MyTimetableHTTPError(MyTimetableClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_json = response_json
        self.response_text = response_text


class StreamMappingError(MyTimetableClientError):
    """Raised when a response body cannot be mapped onto the requested shape."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


__all__ = [
    "MyTimetableClientError",
    "MyTimetableHTTPError",
    "StreamMappingError",
]

"""
Client configuration and its flat property-set representation.

Every property is described once in ``_PROPERTIES``; parsing and serialization
walk that table so that "absent or unparsable keeps the default" lives in a
single place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from dotenv import dotenv_values, load_dotenv

ENV_PREFIX = "MYTIMETABLE_"

DEFAULT_TIMETABLE_TYPES: Tuple[str, ...] = (
    "module",
    "pos",
    "posgroup",
    "studentsetgroup",
    "posss",
    "student",
    "staff",
    "activitygroup",
    "modulepos",
    "studentset",
)

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


def _parse_str(raw: str) -> str:
    return raw


def _parse_int(raw: str) -> int:
    return int(raw.strip())


def _parse_bool(raw: str) -> bool:
    val = raw.strip().lower()
    if val in _TRUE_VALUES:
        return True
    if val in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _splitter(sep: str) -> Callable[[str], List[str]]:
    def parse(raw: str) -> List[str]:
        items = [part.strip() for part in raw.split(sep) if part.strip()]
        if not items:
            raise ValueError("empty list")
        return items

    return parse


def _dump_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _joiner(sep: str) -> Callable[[List[str]], Optional[str]]:
    def dump(value: List[str]) -> Optional[str]:
        items = [v for v in value if v is not None]
        return sep.join(items) if items else None

    return dump


@dataclass(frozen=True)
class _Property:
    key: str
    attr: str
    parse: Callable[[str], Any]
    dump: Callable[[Any], Optional[str]] = _dump_scalar


_PROPERTIES: Tuple[_Property, ...] = (
    _Property("apiKey", "api_key", _parse_str),
    _Property("apiEndpointUris", "api_endpoint_uris", _splitter("\n"), _joiner("\n")),
    _Property("apiSslCnCheck", "api_ssl_cn_check", _parse_bool),
    _Property("apiConnectTimeout", "api_connect_timeout", _parse_int),
    _Property("apiSocketTimeout", "api_socket_timeout", _parse_int),
    _Property("apiMaxConnections", "api_max_connections", _parse_int),
    _Property("apiEnableGzip", "api_enable_gzip", _parse_bool),
    _Property("applicationUri", "application_uri", _parse_str),
    _Property("applicationTarget", "application_target", _parse_str),
    _Property("maxNumberOfEvents", "max_number_of_events", _parse_int),
    _Property("defaultNumberOfEvents", "default_number_of_events", _parse_int),
    _Property("usernameDomainPrefix", "username_domain_prefix", _parse_str),
    _Property("usernamePostfix", "username_postfix", _parse_str),
    _Property("timetableTypes", "timetable_types", _splitter(";"), _joiner(";")),
    _Property("showActivityType", "show_activity_type", _parse_bool),
    _Property("unknownLocationDescription", "unknown_location_description", _parse_str),
)

PROPERTY_KEYS: Tuple[str, ...] = tuple(p.key for p in _PROPERTIES)


@dataclass
class Configuration:
    """
    Connection, auth and presentation settings for the MyTimetable API.

    Values are not validated: malformed URIs or non-positive timeouts are
    stored as given and surface only when the transport uses them.
    """

    # Key used for communicating with the API; should have elevated access.
    api_key: str = ""
    # Candidate base URIs, e.g. https://timetable.example.ac.uk/api/ (first reachable wins)
    api_endpoint_uris: List[str] = field(default_factory=list)
    api_ssl_cn_check: bool = True
    # Milliseconds
    api_connect_timeout: int = 1000
    api_socket_timeout: int = 10000
    api_max_connections: int = 20
    api_enable_gzip: bool = True

    application_uri: Optional[str] = None
    # _self, _blank, _parent or _top
    application_target: Optional[str] = "_blank"
    max_number_of_events: int = 5
    default_number_of_events: int = 5
    username_domain_prefix: Optional[str] = None
    username_postfix: Optional[str] = None
    # Empty includes activities of every timetable type.
    timetable_types: List[str] = field(
        default_factory=lambda: list(DEFAULT_TIMETABLE_TYPES)
    )
    show_activity_type: bool = True
    unknown_location_description: Optional[str] = None

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "Configuration":
        """
        Build a configuration from a flat property set.

        Absent keys keep their default. Values that do not parse (e.g. a
        non-numeric timeout) also keep their default and are not reported.
        """
        config = cls()
        for prop in _PROPERTIES:
            raw = properties.get(prop.key)
            if raw is None:
                continue
            try:
                value = prop.parse(str(raw))
            except ValueError:
                continue
            setattr(config, prop.attr, value)
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Configuration":
        """
        Read a flat ``.env``-style ``key=value`` file.

        Java ``.properties`` syntax (``key: value``, ``!`` comments, line
        continuations) is not understood.
        """
        values = dotenv_values(path)
        return cls.from_properties({k: v for k, v in values.items() if v is not None})

    @classmethod
    def from_env(
        cls, *, prefix: str = ENV_PREFIX, use_dotenv: bool = True
    ) -> "Configuration":
        """
        Collect ``<prefix><propertyKey>`` environment variables (key matched
        case-insensitively, so MYTIMETABLE_APIKEY and MYTIMETABLE_apiKey both work).
        """
        if use_dotenv:
            load_dotenv()
        by_lower = {key.lower(): key for key in PROPERTY_KEYS}
        prefix_lower = prefix.lower()
        props: Dict[str, str] = {}
        for name, value in os.environ.items():
            if not name.lower().startswith(prefix_lower):
                continue
            key = by_lower.get(name[len(prefix) :].lower())
            if key is not None:
                props[key] = value
        return cls.from_properties(props)

    def to_properties(self) -> Dict[str, str]:
        """Serialize every field that has a value; empty lists are omitted."""
        ret: Dict[str, str] = {}
        for prop in _PROPERTIES:
            value = getattr(self, prop.attr)
            if value is None:
                continue
            dumped = prop.dump(value)
            if dumped is not None:
                ret[prop.key] = dumped
        return ret

    @property
    def connect_timeout_seconds(self) -> float:
        return self.api_connect_timeout / 1000.0

    @property
    def socket_timeout_seconds(self) -> float:
        return self.api_socket_timeout / 1000.0

    def number_of_events(self, requested: Optional[int] = None) -> int:
        if requested is None or requested <= 0:
            requested = self.default_number_of_events
        return min(requested, self.max_number_of_events)

    def decorate_username(self, username: str) -> str:
        # Domain prefix is stored without the backslash delimiter.
        if self.username_domain_prefix:
            username = f"{self.username_domain_prefix}\\{username}"
        if self.username_postfix:
            username = f"{username}{self.username_postfix}"
        return username


__all__ = ["Configuration", "DEFAULT_TIMETABLE_TYPES", "ENV_PREFIX", "PROPERTY_KEYS"]

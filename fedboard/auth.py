"""Bearer-token and impersonation handling for incoming request headers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from fedboard.status import MSG_LOGIN_UNAUTHORIZED_ERROR, new_unauthorized

__all__ = [
    "AUTHORIZATION_HEADER",
    "AUTHORIZATION_TOKEN_PREFIX",
    "DEFAULT_QPS",
    "DEFAULT_BURST",
    "DEFAULT_USER_AGENT",
    "DEFAULT_CMD_CONFIG_NAME",
    "IMPERSONATE_USER_HEADER",
    "IMPERSONATE_GROUP_HEADER",
    "IMPERSONATE_USER_EXTRA_HEADER",
    "AuthInfo",
    "has_authorization_header",
    "get_bearer_token",
    "set_authorization_header",
    "build_auth_info",
]

AUTHORIZATION_HEADER = "Authorization"
AUTHORIZATION_TOKEN_PREFIX = "Bearer "

DEFAULT_QPS = 1e6
DEFAULT_BURST = 1e6
DEFAULT_USER_AGENT = "dashboard"
DEFAULT_CMD_CONFIG_NAME = "kubernetes"
IMPERSONATE_USER_HEADER = "Impersonate-User"
IMPERSONATE_GROUP_HEADER = "Impersonate-Group"
IMPERSONATE_USER_EXTRA_HEADER = "Impersonate-Extra-"


@dataclass
class AuthInfo:
    """Credentials and impersonation settings for talking to the API server."""

    token: str = ""
    impersonate: str = ""
    impersonate_groups: list[str] = field(default_factory=list)
    impersonate_user_extra: dict[str, list[str]] = field(default_factory=dict)


def _canonical(name: str) -> str:
    """Canonical header form: each hyphen-separated word capitalised."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def _iter_headers(headers: Any) -> Iterator[tuple[str, str]]:
    pairs: Iterable[tuple[str, Any]]
    pairs = headers.items() if hasattr(headers, "items") else headers
    for name, value in pairs:
        if isinstance(value, (str, bytes)):
            values: Iterable[Any] = [value]
        else:
            values = value
        for item in values:
            if isinstance(item, bytes):
                item = item.decode("latin-1")
            yield _canonical(name), item


def _values(headers: Any, name: str) -> list[str]:
    wanted = _canonical(name)
    return [value for key, value in _iter_headers(headers) if key == wanted]


def _first(headers: Any, name: str) -> str:
    values = _values(headers, name)
    return values[0] if values else ""


def _extract_bearer_token(header: str) -> str:
    if header.startswith(AUTHORIZATION_TOKEN_PREFIX):
        return header[len(AUTHORIZATION_TOKEN_PREFIX):]
    return header


def has_authorization_header(headers: Any) -> bool:
    """True if the headers carry a non-empty bearer token."""
    header = _first(headers, AUTHORIZATION_HEADER)
    if not header:
        return False
    token = _extract_bearer_token(header)
    return header.startswith(AUTHORIZATION_TOKEN_PREFIX) and len(token) > 0


def get_bearer_token(headers: Any) -> str:
    """Return the bearer token from the Authorization header."""
    return _extract_bearer_token(_first(headers, AUTHORIZATION_HEADER))


def set_authorization_header(headers: MutableMapping[str, Any], token: str) -> None:
    """Set the Authorization header to carry ``token`` as a bearer token."""
    wanted = _canonical(AUTHORIZATION_HEADER)
    for key in [k for k in headers if _canonical(k) == wanted]:
        del headers[key]
    headers[AUTHORIZATION_HEADER] = AUTHORIZATION_TOKEN_PREFIX + token


def _handle_impersonation(auth_info: AuthInfo, headers: Any) -> None:
    user = _first(headers, IMPERSONATE_USER_HEADER)
    if not user:
        return
    auth_info.impersonate = user
    groups = _values(headers, IMPERSONATE_GROUP_HEADER)
    if groups:
        auth_info.impersonate_groups = groups
    for name, value in _iter_headers(headers):
        if name.startswith(IMPERSONATE_USER_EXTRA_HEADER):
            extra_name = name[len(IMPERSONATE_USER_EXTRA_HEADER):]
            auth_info.impersonate_user_extra.setdefault(extra_name, []).append(value)


def build_auth_info(headers: Any) -> AuthInfo:
    """Build credentials from request headers.

    Raises an unauthorized StatusError when no bearer token is present.
    """
    if not has_authorization_header(headers):
        raise new_unauthorized(MSG_LOGIN_UNAUTHORIZED_ERROR)
    auth_info = AuthInfo(token=get_bearer_token(headers))
    _handle_impersonation(auth_info, headers)
    return auth_info
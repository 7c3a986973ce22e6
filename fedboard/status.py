"""API status errors and predicates that classify them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Optional, Union

__all__ = [
    "STATUS_FAILURE",
    "MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR",
    "MSG_DEPLOY_EMPTY_NAMESPACE_ERROR",
    "MSG_LOGIN_UNAUTHORIZED_ERROR",
    "MSG_FORBIDDEN_ERROR",
    "MSG_DASHBOARD_EXCLUSIVE_RESOURCE_ERROR",
    "MSG_TOKEN_EXPIRED_ERROR",
    "MSG_CSRF_VALIDATION_ERROR",
    "StatusReason",
    "StatusCause",
    "StatusDetails",
    "StatusError",
    "new_unauthorized",
    "new_forbidden",
    "new_token_expired",
    "new_bad_request",
    "new_invalid",
    "new_not_found",
    "new_internal",
    "new_generic_response",
    "is_token_expired",
    "is_already_exists",
    "is_unauthorized",
    "is_forbidden",
    "is_not_found",
]

STATUS_FAILURE = "Failure"

# Error codes that the frontend localizes.
MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR = "MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR"
MSG_DEPLOY_EMPTY_NAMESPACE_ERROR = "MSG_DEPLOY_EMPTY_NAMESPACE_ERROR"
MSG_LOGIN_UNAUTHORIZED_ERROR = "MSG_LOGIN_UNAUTHORIZED_ERROR"
MSG_FORBIDDEN_ERROR = "MSG_FORBIDDEN_ERROR"
MSG_DASHBOARD_EXCLUSIVE_RESOURCE_ERROR = "MSG_DASHBOARD_EXCLUSIVE_RESOURCE_ERROR"
MSG_TOKEN_EXPIRED_ERROR = "MSG_TOKEN_EXPIRED_ERROR"
MSG_CSRF_VALIDATION_ERROR = "MSG_CSRF_VALIDATION_ERROR"


class StatusReason(str, Enum):
    """Machine-readable reasons a request failed."""

    UNKNOWN = ""
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    ALREADY_EXISTS = "AlreadyExists"
    CONFLICT = "Conflict"
    GONE = "Gone"
    INVALID = "Invalid"
    SERVER_TIMEOUT = "ServerTimeout"
    STORE_READ_ERROR = "StorageReadError"
    TIMEOUT = "Timeout"
    TOO_MANY_REQUESTS = "TooManyRequests"
    BAD_REQUEST = "BadRequest"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    NOT_ACCEPTABLE = "NotAcceptable"
    REQUEST_ENTITY_TOO_LARGE = "RequestEntityTooLarge"
    UNSUPPORTED_MEDIA_TYPE = "UnsupportedMediaType"
    INTERNAL_ERROR = "InternalError"
    EXPIRED = "Expired"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"


_KNOWN_REASONS = frozenset(r.value for r in StatusReason if r is not StatusReason.UNKNOWN)


def _reason_value(reason: Union[StatusReason, str]) -> str:
    return reason.value if isinstance(reason, StatusReason) else reason


def _as_reason(reason: Union[StatusReason, str]) -> Union[StatusReason, str]:
    if isinstance(reason, StatusReason):
        return reason
    try:
        return StatusReason(reason)
    except ValueError:
        return reason


@dataclass(frozen=True)
class StatusCause:
    """One cause of a failure."""

    message: str = ""
    reason: str = ""
    field: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.reason:
            data["reason"] = self.reason
        if self.message:
            data["message"] = self.message
        if self.field:
            data["field"] = self.field
        return data


@dataclass(frozen=True)
class StatusDetails:
    """Extra information about the object a failure concerns."""

    name: str = ""
    group: str = ""
    kind: str = ""
    causes: tuple[StatusCause, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        if self.group:
            data["group"] = self.group
        if self.kind:
            data["kind"] = self.kind
        if self.causes:
            data["causes"] = [cause.to_dict() for cause in self.causes]
        return data


class StatusError(Exception):
    """An error carrying an API status: code, reason and message."""

    def __init__(
        self,
        code: int,
        reason: Union[StatusReason, str] = StatusReason.UNKNOWN,
        message: str = "",
        details: Optional[StatusDetails] = None,
        status: str = STATUS_FAILURE,
    ) -> None:
        super().__init__(message)
        self.code = int(code)
        self.reason = _as_reason(reason)
        self.message = message
        self.details = details
        self.status = status

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"StatusError(code={self.code!r}, reason={_reason_value(self.reason)!r}, "
            f"message={self.message!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatusError):
            return NotImplemented
        return (
            self.code == other.code
            and _reason_value(self.reason) == _reason_value(other.reason)
            and self.message == other.message
            and self.details == other.details
            and self.status == other.status
        )

    def __hash__(self) -> int:
        return hash((self.code, _reason_value(self.reason), self.message))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the status, leaving out empty fields."""
        data: dict[str, Any] = {"metadata": {}}
        if self.status:
            data["status"] = self.status
        if self.message:
            data["message"] = self.message
        reason = _reason_value(self.reason)
        if reason:
            data["reason"] = reason
        if self.details is not None:
            data["details"] = self.details.to_dict()
        if self.code:
            data["code"] = self.code
        return data


def new_unauthorized(reason: str) -> StatusError:
    """The client is not authorized to perform the requested action."""
    return StatusError(
        HTTPStatus.UNAUTHORIZED,
        StatusReason.UNAUTHORIZED,
        reason or "not authorized",
    )


def new_forbidden(name: str, err: Optional[BaseException]) -> StatusError:
    """The client is forbidden from performing the action on ``name``."""
    cause = "<nil>" if err is None else str(err)
    return StatusError(
        HTTPStatus.FORBIDDEN,
        StatusReason.FORBIDDEN,
        f"forbidden: {cause}",
        details=StatusDetails(name=name),
    )


def new_token_expired(reason: str) -> StatusError:
    """The presented token has expired."""
    return StatusError(HTTPStatus.UNAUTHORIZED, StatusReason.EXPIRED, reason)


def new_bad_request(reason: str) -> StatusError:
    """The request is invalid and cannot be processed."""
    return StatusError(HTTPStatus.BAD_REQUEST, StatusReason.BAD_REQUEST, reason)


def new_invalid(reason: str) -> StatusError:
    """The request content was invalid."""
    return StatusError(
        HTTPStatus.INTERNAL_SERVER_ERROR, StatusReason.INVALID, reason
    )


def new_not_found(reason: str) -> StatusError:
    """The requested resource does not exist."""
    return StatusError(HTTPStatus.NOT_FOUND, StatusReason.NOT_FOUND, reason)


def new_internal(reason: str) -> StatusError:
    """An internal server error occurred."""
    return StatusError(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        StatusReason.INTERNAL_ERROR,
        f"Internal error occurred: {reason}",
        details=StatusDetails(causes=(StatusCause(message=reason),)),
    )


# code -> (reason, message); a message of None keeps the server's message.
_GENERIC_RESPONSES: dict[int, tuple[StatusReason, Optional[str]]] = {
    HTTPStatus.NOT_FOUND: (
        StatusReason.NOT_FOUND,
        "the server could not find the requested resource",
    ),
    HTTPStatus.BAD_REQUEST: (
        StatusReason.BAD_REQUEST,
        "the server rejected our request for an unknown reason",
    ),
    HTTPStatus.UNAUTHORIZED: (
        StatusReason.UNAUTHORIZED,
        "the server has asked for the client to provide credentials",
    ),
    HTTPStatus.FORBIDDEN: (StatusReason.FORBIDDEN, None),
    HTTPStatus.CONFLICT: (StatusReason.CONFLICT, None),
    HTTPStatus.NOT_ACCEPTABLE: (StatusReason.NOT_ACCEPTABLE, None),
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: (StatusReason.UNSUPPORTED_MEDIA_TYPE, None),
    HTTPStatus.METHOD_NOT_ALLOWED: (
        StatusReason.METHOD_NOT_ALLOWED,
        "the server does not allow this method on the requested resource",
    ),
    HTTPStatus.UNPROCESSABLE_ENTITY: (
        StatusReason.INVALID,
        "the server rejected our request due to an error in our request",
    ),
    HTTPStatus.SERVICE_UNAVAILABLE: (
        StatusReason.SERVICE_UNAVAILABLE,
        "the server is currently unable to handle the request",
    ),
    HTTPStatus.GATEWAY_TIMEOUT: (
        StatusReason.TIMEOUT,
        "the server was unable to return a response in the time allotted, "
        "but may still be processing the request",
    ),
    HTTPStatus.TOO_MANY_REQUESTS: (
        StatusReason.TOO_MANY_REQUESTS,
        "the server has received too many requests and has asked us to try again later",
    ),
}


def new_generic_response(code: int, server_message: str) -> StatusError:
    """Build a status error for an HTTP response code from a server."""
    code = int(code)
    if code in _GENERIC_RESPONSES:
        reason, message = _GENERIC_RESPONSES[code]
        if message is None:
            message = server_message
    elif code >= 500:
        reason = StatusReason.INTERNAL_ERROR
        quoted = json.dumps(server_message, ensure_ascii=False)
        message = (
            f"an error on the server ({quoted}) has prevented the request "
            "from succeeding"
        )
    else:
        reason = StatusReason.UNKNOWN
        message = (
            f"the server responded with the status code {code} "
            "but did not return more information"
        )
    return StatusError(code, reason, message)


def _find_status_error(err: Optional[BaseException]) -> Optional[StatusError]:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, StatusError):
            return err
        seen.add(id(err))
        err = err.__cause__
    return None


def _has_reason(
    err: Optional[BaseException], reason: StatusReason, code: int
) -> bool:
    status = _find_status_error(err)
    if status is None:
        return False
    value = _reason_value(status.reason)
    if value == reason.value:
        return True
    return value not in _KNOWN_REASONS and status.code == code


def is_token_expired(err: Optional[BaseException]) -> bool:
    """True if the error is a status error whose message marks an expired token."""
    status = _find_status_error(err)
    return status is not None and status.message == MSG_TOKEN_EXPIRED_ERROR


def is_already_exists(err: Optional[BaseException]) -> bool:
    """True if the error says the resource already exists."""
    return _has_reason(err, StatusReason.ALREADY_EXISTS, HTTPStatus.CONFLICT)


def is_unauthorized(err: Optional[BaseException]) -> bool:
    """True if the request needs authentication."""
    return _has_reason(err, StatusReason.UNAUTHORIZED, HTTPStatus.UNAUTHORIZED)


def is_forbidden(err: Optional[BaseException]) -> bool:
    """True if the request needs extra privileges."""
    return _has_reason(err, StatusReason.FORBIDDEN, HTTPStatus.FORBIDDEN)


def is_not_found(err: Optional[BaseException]) -> bool:
    """True if the requested resource was not found."""
    return _has_reason(err, StatusReason.NOT_FOUND, HTTPStatus.NOT_FOUND)
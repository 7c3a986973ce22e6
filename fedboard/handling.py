"""Classify, localize and collect errors met while serving requests."""

from __future__ import annotations

from collections.abc import Iterable
from http import HTTPStatus
from typing import Optional

from fedboard.status import (
    MSG_DEPLOY_EMPTY_NAMESPACE_ERROR,
    MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR,
    MSG_FORBIDDEN_ERROR,
    MSG_LOGIN_UNAUTHORIZED_ERROR,
    StatusError,
    is_forbidden,
    is_unauthorized,
    new_bad_request,
    new_forbidden,
    new_unauthorized,
)

__all__ = [
    "localize_error",
    "handle_error",
    "extract_errors",
    "append_error",
    "merge_errors",
]

# Statuses that can be shown to the user as warnings instead of failing.
_NON_CRITICAL_CODES = frozenset({HTTPStatus.FORBIDDEN.value})

# A distinctive part of a message mapped to the code the frontend localizes.
_PARTIALS_TO_ERRORS = {
    "does not match the namespace": MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR,
    "empty namespace may not be set": MSG_DEPLOY_EMPTY_NAMESPACE_ERROR,
    "the server has asked for the client to provide credentials": MSG_LOGIN_UNAUTHORIZED_ERROR,
}


def localize_error(err: Optional[BaseException]) -> Optional[BaseException]:
    """Replace a recognised error with one carrying a localizable code."""
    if err is None:
        return None
    text = str(err)
    for partial, code in _PARTIALS_TO_ERRORS.items():
        if partial in text:
            if is_unauthorized(err):
                return new_unauthorized(code)
            return new_bad_request(code)
    return err


def handle_error(err: BaseException) -> tuple[int, BaseException]:
    """Return the HTTP status code and the error to report for ``err``."""
    if is_unauthorized(err):
        return HTTPStatus.UNAUTHORIZED.value, new_unauthorized(MSG_LOGIN_UNAUTHORIZED_ERROR)
    if is_forbidden(err):
        return HTTPStatus.FORBIDDEN.value, new_forbidden(MSG_FORBIDDEN_ERROR, err)
    return HTTPStatus.INTERNAL_SERVER_ERROR.value, err


def _is_critical(err: BaseException) -> bool:
    if not isinstance(err, StatusError):
        return True
    return err.code not in _NON_CRITICAL_CODES


def _append_missing(
    errors: list[BaseException], to_append: Iterable[BaseException]
) -> list[BaseException]:
    seen = {str(e) for e in errors}
    for err in to_append:
        key = str(err)
        if key not in seen:
            errors.append(err)
            seen.add(key)
    return errors


def append_error(
    err: Optional[BaseException], non_critical_errors: list[BaseException]
) -> tuple[list[BaseException], Optional[BaseException]]:
    """Sort ``err`` into the non-critical list or return it as critical.

    Returns the (possibly extended) list of non-critical errors and the
    critical error, if any.
    """
    if err is not None:
        if _is_critical(err):
            return non_critical_errors, localize_error(err)
        non_critical_errors = _append_missing(
            non_critical_errors, [localize_error(err)]
        )
    return non_critical_errors, None


def extract_errors(
    err: Optional[BaseException],
) -> tuple[list[BaseException], Optional[BaseException]]:
    """Split a single error into non-critical errors and a critical error."""
    return append_error(err, [])


def merge_errors(*args: Iterable[BaseException]) -> list[BaseException]:
    """Merge lists of non-critical errors, dropping repeated messages."""
    merged: list[BaseException] = []
    for errors in args:
        merged = _append_missing(merged, errors)
    return merged
from http import HTTPStatus

import pytest

from fedboard.handling import (
    append_error,
    extract_errors,
    handle_error,
    localize_error,
    merge_errors,
)
from fedboard.status import (
    MSG_DEPLOY_EMPTY_NAMESPACE_ERROR,
    MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR,
    MSG_FORBIDDEN_ERROR,
    MSG_LOGIN_UNAUTHORIZED_ERROR,
    is_forbidden,
    is_unauthorized,
    new_bad_request,
    new_forbidden,
    new_generic_response,
    new_internal,
    new_invalid,
    new_not_found,
    new_unauthorized,
)


def test_localize_error_none():
    assert localize_error(None) is None


@pytest.mark.parametrize(
    "err, expected",
    [
        (new_internal("some unknown error"), new_internal("some unknown error")),
        (new_invalid("does not match the namespace"),
         new_invalid("MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR")),
        (new_invalid("empty namespace may not be set"),
         new_invalid("MSG_DEPLOY_EMPTY_NAMESPACE_ERROR")),
    ],
)
def test_localize_error(err, expected):
    assert str(localize_error(err)) == str(expected)


def test_localize_error_returns_bad_request_for_partial():
    result = localize_error(ValueError("x does not match the namespace y"))
    assert str(result) == MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR
    assert result.code == HTTPStatus.BAD_REQUEST
    assert str(localize_error(new_invalid("empty namespace may not be set"))) == (
        MSG_DEPLOY_EMPTY_NAMESPACE_ERROR
    )


def test_localize_error_keeps_unauthorized():
    result = localize_error(new_generic_response(HTTPStatus.UNAUTHORIZED, ""))
    assert is_unauthorized(result)
    assert str(result) == MSG_LOGIN_UNAUTHORIZED_ERROR


def test_localize_error_passes_unknown_through():
    err = ValueError("unrelated")
    assert localize_error(err) is err


def test_handle_error_unauthorized():
    code, err = handle_error(new_unauthorized("anything"))
    assert code == HTTPStatus.UNAUTHORIZED
    assert str(err) == MSG_LOGIN_UNAUTHORIZED_ERROR


def test_handle_error_forbidden():
    original = new_forbidden("n", ValueError("denied"))
    code, err = handle_error(original)
    assert code == HTTPStatus.FORBIDDEN
    assert is_forbidden(err)
    assert err.details.name == MSG_FORBIDDEN_ERROR
    assert str(original) in str(err)


def test_handle_error_other():
    original = new_not_found("missing")
    code, err = handle_error(original)
    assert code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert err is original


def test_extract_errors_none():
    assert extract_errors(None) == ([], None)


def test_extract_errors_critical():
    err = new_not_found("missing")
    non_critical, critical = extract_errors(err)
    assert non_critical == []
    assert critical is err


def test_extract_errors_plain_exception_is_critical():
    err = RuntimeError("broken")
    non_critical, critical = extract_errors(err)
    assert non_critical == []
    assert critical is err


def test_extract_errors_forbidden_is_non_critical():
    err = new_forbidden("n", ValueError("denied"))
    non_critical, critical = extract_errors(err)
    assert critical is None
    assert non_critical == [err]


def test_append_error_deduplicates_by_message():
    first = new_forbidden("a", ValueError("denied"))
    second = new_forbidden("b", ValueError("denied"))
    errors, critical = append_error(first, [])
    errors, critical = append_error(second, errors)
    assert critical is None
    assert len(errors) == 1
    assert errors[0] is first


def test_merge_errors():
    a = new_bad_request("a")
    b = new_bad_request("b")
    a_again = new_invalid("a")
    merged = merge_errors([a, b], [a_again], [])
    assert [str(e) for e in merged] == ["a", "b"]
    assert merged[0] is a
    assert merge_errors() == []
    assert merge_errors([new_unauthorized("x")])[0] == new_unauthorized("x")
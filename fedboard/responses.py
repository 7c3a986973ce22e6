"""The envelope every API response is wrapped in."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Optional

from fedboard.api_types import to_json

__all__ = ["RESPONSE_HTTP_STATUS", "BaseResponse", "response", "success", "fail"]

RESPONSE_HTTP_STATUS = HTTPStatus.OK.value
"""Every envelope is sent with this HTTP status; failures show in ``code``."""


@dataclass
class BaseResponse:
    """A business status code, a message and the payload."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the envelope."""
        return {"code": self.code, "message": self.message, "data": to_json(self.data)}


def response(err: Optional[BaseException], data: Any) -> BaseResponse:
    """Wrap ``data``, or report ``err`` when it is given."""
    if err is not None:
        return BaseResponse(code=500, message=str(err), data=data)
    return BaseResponse(code=200, message="success", data=data)


def success(data: Any) -> BaseResponse:
    """A successful response carrying ``data``."""
    return response(None, data)


def fail(err: Optional[BaseException]) -> BaseResponse:
    """A failed response reporting ``err``."""
    return response(err, None)
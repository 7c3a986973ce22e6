"""Version information of this build."""

from __future__ import annotations

__all__ = [
    "VERSION",
    "GIT_VERSION",
    "GIT_COMMIT",
    "GIT_TREE_STATE",
    "BUILD_DATE",
    "is_dev",
    "user_agent",
]

_USER_AGENT = "karmada-dashboard"
_DEV = "0.0.0-dev"

VERSION = _DEV
GIT_VERSION = "v0.0.0-master"
GIT_COMMIT = "unknown"
GIT_TREE_STATE = "unknown"
BUILD_DATE = "unknown"


def is_dev() -> bool:
    """True if this is a development build."""
    return VERSION == _DEV


def user_agent() -> str:
    """Return the user agent naming this build."""
    return f"{_USER_AGENT}:{VERSION}"
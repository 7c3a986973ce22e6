"""Dashboard configuration: registries, menus and the path prefix."""

from __future__ import annotations

import copy
import logging
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

__all__ = [
    "CONFIG_NAME",
    "CONFIG_NAMESPACE",
    "DEFAULT_ENV_NAME",
    "DockerRegistry",
    "ChartRegistry",
    "MenuConfig",
    "DashboardConfig",
    "get_config_key",
    "init_dashboard_config_from_mount_file",
    "set_dashboard_config",
    "get_dashboard_config",
]

logger = logging.getLogger(__name__)

CONFIG_NAME = "karmada-dashboard-configmap"
CONFIG_NAMESPACE = "karmada-system"
DEFAULT_ENV_NAME = "prod"


def _as_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError(f"field {key!r} must be a scalar, got {type(value).__name__}")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer, got {value!r}")
    return value


def _as_bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean, got {value!r}")
    return value


def _as_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {type(value).__name__}")
    return value


def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


@dataclass
class _Registry:
    name: str = ""
    url: str = ""
    user: str = ""
    password: str = ""
    add_time: int = 0

    @classmethod
    def from_dict(cls, data: Any):
        data = _as_mapping(data, "registry")
        return cls(
            name=_as_str(data, "name"),
            url=_as_str(data, "url"),
            user=_as_str(data, "user"),
            password=_as_str(data, "password"),
            add_time=_as_int(data, "add_time"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "user": self.user,
            "password": self.password,
            "add_time": self.add_time,
        }


@dataclass
class DockerRegistry(_Registry):
    """A Docker registry the dashboard can pull images from."""


@dataclass
class ChartRegistry(_Registry):
    """A Helm chart registry."""


@dataclass
class MenuConfig:
    """One entry of the dashboard menu, possibly with nested entries."""

    path: str = ""
    enable: bool = False
    sidebar_key: str = ""
    children: list["MenuConfig"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "MenuConfig":
        data = _as_mapping(data, "menu config")
        return cls(
            path=_as_str(data, "path"),
            enable=_as_bool(data, "enable"),
            sidebar_key=_as_str(data, "sidebar_key"),
            children=[cls.from_dict(child) for child in _as_list(data, "children")],
        )

    def to_dict(self, keep_empty_children: bool = False) -> dict[str, Any]:
        """Return the mapping form; empty children are left out unless asked for."""
        data: dict[str, Any] = {
            "path": self.path,
            "enable": self.enable,
            "sidebar_key": self.sidebar_key,
        }
        if self.children or keep_empty_children:
            data["children"] = [
                child.to_dict(keep_empty_children) for child in self.children
            ]
        return data


@dataclass
class DashboardConfig:
    """The whole dashboard configuration."""

    docker_registries: list[DockerRegistry] = field(default_factory=list)
    chart_registries: list[ChartRegistry] = field(default_factory=list)
    menu_configs: list[MenuConfig] = field(default_factory=list)
    path_prefix: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "DashboardConfig":
        """Build a configuration from a mapping; missing fields take defaults."""
        data = _as_mapping(data, "dashboard config")
        return cls(
            docker_registries=[
                DockerRegistry.from_dict(item)
                for item in _as_list(data, "docker_registries")
            ],
            chart_registries=[
                ChartRegistry.from_dict(item)
                for item in _as_list(data, "chart_registries")
            ],
            menu_configs=[
                MenuConfig.from_dict(item) for item in _as_list(data, "menu_configs")
            ],
            path_prefix=_as_str(data, "path_prefix"),
        )

    def _as_mapping(self, keep_empty_children: bool) -> dict[str, Any]:
        return {
            "docker_registries": [r.to_dict() for r in self.docker_registries],
            "chart_registries": [r.to_dict() for r in self.chart_registries],
            "menu_configs": [
                m.to_dict(keep_empty_children) for m in self.menu_configs
            ],
            "path_prefix": self.path_prefix,
        }

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the configuration."""
        return self._as_mapping(keep_empty_children=False)

    @classmethod
    def from_yaml(cls, text: Union[str, bytes]) -> "DashboardConfig":
        """Parse a YAML document; an empty document gives the default configuration."""
        return cls.from_dict(yaml.safe_load(text))

    def to_yaml(self) -> str:
        """Render the configuration as a YAML document."""
        return yaml.safe_dump(
            self._as_mapping(keep_empty_children=True),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )


_lock = threading.Lock()
_dashboard_config = DashboardConfig()


def get_config_key() -> str:
    """Return the data key for the current environment, from ENV_NAME."""
    env_name = os.environ.get("ENV_NAME") or DEFAULT_ENV_NAME
    return f"{env_name}.yaml"


def set_dashboard_config(config: DashboardConfig) -> None:
    """Replace the current dashboard configuration."""
    global _dashboard_config
    with _lock:
        _dashboard_config = copy.deepcopy(config)


def get_dashboard_config() -> DashboardConfig:
    """Return a copy of the current dashboard configuration."""
    with _lock:
        return copy.deepcopy(_dashboard_config)


def init_dashboard_config_from_mount_file(
    mount_path: Union[str, "os.PathLike[str]"],
) -> DashboardConfig:
    """Load the dashboard configuration from a mounted YAML file.

    The loaded configuration becomes the current one and is returned.
    """
    path = Path(mount_path)
    if not path.exists():
        raise FileNotFoundError(f"{mount_path} not exist")
    content = path.read_text(encoding="utf-8")
    try:
        config = DashboardConfig.from_yaml(content)
    except (yaml.YAMLError, ValueError) as exc:
        logger.error("Failed to unmarshal from content %s", exc)
        raise
    set_dashboard_config(config)
    return get_dashboard_config()


def _current() -> Optional[DashboardConfig]:
    return _dashboard_config
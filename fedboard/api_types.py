"""Request and response bodies of the HTTP API, with JSON conversion."""

from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Optional, Union, get_args, get_origin

from fedboard.kubetypes import ListMeta
from fedboard.settings import ChartRegistry, DockerRegistry, MenuConfig

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "User",
    "ServiceAccount",
    "PostClusterRequest",
    "LabelRequest",
    "TaintRequest",
    "PutClusterRequest",
    "DeleteClusterRequest",
    "Usage",
    "SetDashboardConfigRequest",
    "PostPropagationPolicyRequest",
    "Metadata",
    "ResourceSelector",
    "Placement",
    "ReplicaScheduling",
    "StaticWeight",
    "PutPropagationPolicyRequest",
    "DeletePropagationPolicyRequest",
    "ResourceYaml",
    "ManifestRequest",
    "ResourceList",
    "Resource",
    "PolicyMeta",
    "init_usage",
    "from_json",
    "to_json",
]


def _field(
    *,
    name: Optional[str] = None,
    required: bool = False,
    omitempty: bool = False,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    metadata: dict = {"required": required, "omitempty": omitempty}
    if name is not None:
        metadata["json"] = name
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _json_name(f: Any) -> str:
    explicit = f.metadata.get("json")
    if explicit:
        return explicit
    head, *rest = f.name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass
class LoginRequest:
    """Request for login."""

    token: str = ""


@dataclass
class LoginResponse:
    """Response for login."""

    token: str = ""


@dataclass
class User:
    """The user behind a request."""

    name: str = _field(omitempty=True, default="")
    authenticated: bool = False


@dataclass
class ServiceAccount:
    """A service account's name and UID."""

    name: str = ""
    uid: str = ""


@dataclass
class PostClusterRequest:
    """Request body for joining a member cluster."""

    member_cluster_kubeconfig: str = ""
    sync_mode: str = ""
    member_cluster_name: str = ""
    member_cluster_endpoint: str = ""
    member_cluster_namespace: str = ""
    cluster_provider: str = ""
    cluster_region: str = ""
    cluster_zones: list[str] = field(default_factory=list)
    cluster_id: str = ""
    cluster_ids: list[str] = _field(required=True, default_factory=list)


@dataclass
class LabelRequest:
    """A label to set on a cluster."""

    key: str = ""
    value: str = ""


@dataclass
class TaintRequest:
    """A taint to set on a cluster."""

    effect: str = ""
    key: str = ""
    value: str = ""


@dataclass
class PutClusterRequest:
    """Request body for updating a cluster's labels and taints."""

    labels: Optional[list[LabelRequest]] = None
    taints: Optional[list[TaintRequest]] = None


@dataclass
class DeleteClusterRequest:
    """Request for removing a cluster."""

    cluster_id: str = _field(required=True, default="")


@dataclass
class Usage:
    """CPU and memory usage in percent; -1 means unknown."""

    cpu: float = 0.0
    memory: float = 0.0


def init_usage() -> Usage:
    """Return a usage whose values are not known yet."""
    return Usage(cpu=-1, memory=-1)


@dataclass
class SetDashboardConfigRequest:
    """Request for replacing the dashboard configuration."""

    docker_registries: list[DockerRegistry] = _field(
        name="docker_registries", default_factory=list
    )
    chart_registries: list[ChartRegistry] = _field(
        name="chart_registries", default_factory=list
    )
    menu_configs: list[MenuConfig] = _field(name="menu_configs", default_factory=list)


@dataclass
class StaticWeight:
    """A weight given to a group of target clusters."""

    target_clusters: list[str] = field(default_factory=list)
    weight: int = 0


@dataclass
class ReplicaScheduling:
    """How replicas are spread over clusters."""

    replica_scheduling_type: str = ""
    replica_division_preference: str = ""
    static_weight_list: list[StaticWeight] = field(default_factory=list)


@dataclass
class Placement:
    """Which clusters a policy places resources on."""

    cluster_names: list[str] = field(default_factory=list)
    replica_scheduling: Optional[ReplicaScheduling] = None


@dataclass
class ResourceSelector:
    """Selects the resources a policy applies to."""

    kind: str = _field(required=True, default="")
    namespace: str = ""
    name: str = ""
    label_selectors: list[str] = field(default_factory=list)


@dataclass
class Metadata:
    """Metadata of a policy to create."""

    name: str = _field(required=True, default="")
    namespace: str = ""
    labels: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    preserve_resources_on_deletion: Optional[bool] = None


@dataclass
class PostPropagationPolicyRequest:
    """Request body for creating a propagation policy."""

    metadata: Metadata = _field(required=True, default_factory=Metadata)
    resource_selectors: list[ResourceSelector] = _field(
        required=True, default_factory=list
    )
    placement: Placement = _field(required=True, default_factory=Placement)


@dataclass
class PutPropagationPolicyRequest:
    """Request body for updating a propagation policy."""

    propagation_data: str = _field(required=True, default="")
    is_cluster_scope: bool = False
    namespace: str = ""
    name: str = ""


@dataclass
class DeletePropagationPolicyRequest:
    """Request body for deleting a propagation policy."""

    is_cluster_scope: bool = False
    namespace: str = ""
    name: str = _field(required=True, default="")


@dataclass
class ResourceYaml:
    """A resource rendered as YAML."""

    namespace: str = _field(omitempty=True, default="")
    name: str = ""
    uid: str = ""
    yaml: str = ""


@dataclass
class ManifestRequest:
    """A manifest to apply."""

    data: str = _field(required=True, default="")


@dataclass
class PolicyMeta:
    """The policy that propagates a resource."""

    is_cluster_scope: bool = False
    name: str = ""


@dataclass
class Resource:
    """A resource together with its propagating policy."""

    namespace: str = ""
    name: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    policy: PolicyMeta = field(default_factory=PolicyMeta)


@dataclass
class ResourceList:
    """A page of resources."""

    list_meta: ListMeta = field(default_factory=ListMeta)
    resources: list[Resource] = field(default_factory=list)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _decode(tp: Any, value: Any, where: str) -> Any:
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is Union:
        if value is None:
            return None
        inner = [arg for arg in args if arg is not type(None)]
        return _decode(inner[0], value, where)
    if origin is list:
        if not isinstance(value, list):
            raise ValueError(f"{where}: expected a list, got {type(value).__name__}")
        return [_decode(args[0], item, f"{where}[{i}]") for i, item in enumerate(value)]
    if origin is dict:
        if not isinstance(value, Mapping):
            raise ValueError(f"{where}: expected an object, got {type(value).__name__}")
        return {str(k): _decode(args[1], v, f"{where}.{k}") for k, v in value.items()}
    if isinstance(tp, type) and hasattr(tp, "from_dict"):
        return tp.from_dict(value)
    if isinstance(tp, type) and is_dataclass(tp):
        return _from_json(tp, value, where)
    if tp is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{where}: expected a boolean, got {value!r}")
        return value
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{where}: expected an integer, got {value!r}")
        return value
    if tp is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where}: expected a number, got {value!r}")
        return float(value)
    if tp is str:
        if not isinstance(value, str):
            raise ValueError(f"{where}: expected a string, got {value!r}")
        return value
    return value


def _from_json(cls: type, data: Any, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{where}: expected an object, got {type(data).__name__}")
    kwargs: dict = {}
    for f in fields(cls):
        key = _json_name(f)
        value = data.get(key)
        path = f"{where}.{key}" if where else key
        if f.metadata.get("required") and _is_blank(value):
            raise ValueError(f"{path} is required")
        if value is not None:
            kwargs[f.name] = _decode(f.type, value, path)
    return cls(**kwargs)


def from_json(cls: type, data: Any) -> Any:
    """Build an instance of the dataclass ``cls`` from decoded JSON.

    Missing fields take their defaults; required fields that are missing or
    empty, and values of the wrong type, raise ValueError.
    """
    if not (isinstance(cls, type) and is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a dataclass type")
    return _from_json(cls, data, "")


def to_json(obj: Any) -> Any:
    """Convert an API object into plain JSON-ready values."""
    if is_dataclass(obj) and not isinstance(obj, type):
        to_dict = getattr(obj, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        out: dict = {}
        for f in fields(obj):
            value = getattr(obj, f.name)
            if f.metadata.get("omitempty") and not value:
                continue
            out[_json_name(f)] = to_json(value)
        return out
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return {str(k): to_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json(item) for item in obj]
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return obj
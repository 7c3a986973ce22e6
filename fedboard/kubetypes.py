"""Resource kinds and the metadata shapes shown for each resource."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

__all__ = [
    "ResourceKind",
    "ObjectMeta",
    "TypeMeta",
    "ListMeta",
    "new_object_meta",
    "new_type_meta",
]


class ResourceKind(str, Enum):
    """Unique names for every resource kind supported by the UI."""

    CLUSTER = "cluster"
    PROPAGATION_POLICY = "propagationpolicy"
    CLUSTER_PROPAGATION_POLICY = "clusterpropagationpolicy"
    OVERRIDE_POLICY = "overridepolicy"
    CLUSTER_OVERRIDE_POLICY = "clusteroverridepolicy"
    CONFIG_MAP = "configmap"
    DAEMON_SET = "daemonset"
    DEPLOYMENT = "deployment"
    EVENT = "event"
    HORIZONTAL_POD_AUTOSCALER = "horizontalpodautoscaler"
    INGRESS = "ingress"
    SERVICE_ACCOUNT = "serviceaccount"
    JOB = "job"
    CRON_JOB = "cronjob"
    LIMIT_RANGE = "limitrange"
    NAMESPACE = "namespace"
    NODE = "node"
    PERSISTENT_VOLUME_CLAIM = "persistentvolumeclaim"
    PERSISTENT_VOLUME = "persistentvolume"
    CUSTOM_RESOURCE_DEFINITION = "customresourcedefinition"
    POD = "pod"
    REPLICA_SET = "replicaset"
    REPLICATION_CONTROLLER = "replicationcontroller"
    RESOURCE_QUOTA = "resourcequota"
    SECRET = "secret"
    SERVICE = "service"
    STATEFUL_SET = "statefulset"
    STORAGE_CLASS = "storageclass"
    CLUSTER_ROLE = "clusterrole"
    CLUSTER_ROLE_BINDING = "clusterrolebinding"
    ROLE = "role"
    ROLE_BINDING = "rolebinding"
    ENDPOINT = "endpoint"
    NETWORK_POLICY = "networkpolicy"
    INGRESS_CLASS = "ingressclass"

    def scalable(self) -> bool:
        """Whether resources of this kind can be scaled."""
        return self in _SCALABLE

    def restartable(self) -> bool:
        """Whether resources of this kind can be restarted."""
        return self in _RESTARTABLE


_SCALABLE = frozenset(
    {
        ResourceKind.DEPLOYMENT,
        ResourceKind.REPLICA_SET,
        ResourceKind.REPLICATION_CONTROLLER,
        ResourceKind.STATEFUL_SET,
    }
)
_RESTARTABLE = frozenset({ResourceKind.DEPLOYMENT})


def _parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
        moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _format_timestamp(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class ObjectMeta:
    """Metadata about an instance of a resource.

    Naive creation timestamps are taken to be in UTC.
    """

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    creation_timestamp: Optional[datetime] = None
    uid: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out empty optional fields."""
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        if self.namespace:
            data["namespace"] = self.namespace
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        data["creationTimestamp"] = _format_timestamp(self.creation_timestamp)
        if self.uid:
            data["uid"] = self.uid
        return data


@dataclass
class TypeMeta:
    """The kind of a resource and what can be done with it."""

    kind: Union[ResourceKind, str] = ""
    scalable: bool = False
    restartable: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out empty fields."""
        data: dict[str, Any] = {}
        kind = self.kind.value if isinstance(self.kind, ResourceKind) else self.kind
        if kind:
            data["kind"] = kind
        if self.scalable:
            data["scalable"] = True
        if self.restartable:
            data["restartable"] = True
        return data


@dataclass
class ListMeta:
    """Information about a list of objects used for pagination."""

    total_items: int = 0


def new_object_meta(metadata: Mapping[str, Any]) -> ObjectMeta:
    """Build an ObjectMeta from a resource's metadata mapping."""
    return ObjectMeta(
        name=metadata.get("name") or "",
        namespace=metadata.get("namespace") or "",
        labels=dict(metadata.get("labels") or {}),
        annotations=dict(metadata.get("annotations") or {}),
        creation_timestamp=_parse_timestamp(metadata.get("creationTimestamp")),
        uid=metadata.get("uid") or "",
    )


def new_type_meta(kind: Union[ResourceKind, str]) -> TypeMeta:
    """Build the TypeMeta for a resource kind."""
    try:
        known = ResourceKind(kind)
    except ValueError:
        return TypeMeta(kind=kind)
    return TypeMeta(
        kind=known, scalable=known.scalable(), restartable=known.restartable()
    )
"""Member clusters as shown in lists and detail views."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, Optional, Union

from fedboard.comparable import (
    ComparableValue,
    PropertyName,
    StdComparableString,
    StdComparableTime,
)
from fedboard.handling import extract_errors
from fedboard.kubetypes import (
    ListMeta,
    ObjectMeta,
    ResourceKind,
    TypeMeta,
    new_object_meta,
    new_type_meta,
)
from fedboard.query import DataSelectQuery
from fedboard.selector import DataCell, generic_data_select_with_filter

__all__ = [
    "CONDITION_TRUE",
    "CONDITION_FALSE",
    "CONDITION_UNKNOWN",
    "ClusterAllocatedResources",
    "Cluster",
    "ClusterList",
    "ClusterDetail",
    "ClusterCell",
    "parse_quantity",
    "cluster_allocated_resources",
    "get_cluster_condition_status",
    "to_cluster",
    "to_cluster_list",
    "get_cluster_list",
    "get_cluster_detail",
]

logger = logging.getLogger(__name__)

CONDITION_TRUE = "True"
CONDITION_FALSE = "False"
CONDITION_UNKNOWN = "Unknown"

_MICRO = 10**6

_QUANTITY = re.compile(
    r"^([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))"
    r"(Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE]|[eE][+-]?[0-9]+)?$"
)

_SUFFIXES: dict[str, Fraction] = {
    "": Fraction(1),
    "n": Fraction(1, 10**9),
    "u": Fraction(1, 10**6),
    "m": Fraction(1, 10**3),
    "k": Fraction(10**3),
    "M": Fraction(10**6),
    "G": Fraction(10**9),
    "T": Fraction(10**12),
    "P": Fraction(10**15),
    "E": Fraction(10**18),
    "Ki": Fraction(2**10),
    "Mi": Fraction(2**20),
    "Gi": Fraction(2**30),
    "Ti": Fraction(2**40),
    "Pi": Fraction(2**50),
    "Ei": Fraction(2**60),
}


def parse_quantity(text: Union[str, int, float]) -> Fraction:
    """Parse a resource quantity such as ``500m``, ``8Gi`` or ``1e3`` exactly."""
    if isinstance(text, bool):
        raise ValueError(f"invalid quantity: {text!r}")
    if isinstance(text, (int, float)):
        return Fraction(text)
    match = _QUANTITY.match(text.strip()) if isinstance(text, str) else None
    if match is None:
        raise ValueError(f"invalid quantity: {text!r}")
    number, suffix = match.group(1), match.group(2) or ""
    try:
        value = Fraction(Decimal(number))
    except InvalidOperation as exc:
        raise ValueError(f"invalid quantity: {text!r}") from exc
    if suffix[:1] in ("e", "E") and len(suffix) > 1:
        return value * Fraction(10) ** int(suffix[1:])
    return value * _SUFFIXES[suffix]


def _round_up(value: Fraction) -> int:
    """Round away from zero to a whole number."""
    magnitude = math.ceil(abs(value))
    return magnitude if value >= 0 else -magnitude


def _resource(resources: Optional[Mapping[str, Any]], name: str) -> Fraction:
    if not resources:
        return Fraction(0)
    raw = resources.get(name)
    if raw is None:
        return Fraction(0)
    return parse_quantity(raw)


@dataclass
class ClusterAllocatedResources:
    """Resource summary of a cluster; fractions are percentages."""

    cpu_capacity: int = 0
    cpu_fraction: float = 0.0
    memory_capacity: int = 0
    memory_fraction: float = 0.0
    allocated_pods: int = 0
    pod_capacity: int = 0
    pod_fraction: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form."""
        return {
            "cpuCapacity": self.cpu_capacity,
            "cpuFraction": self.cpu_fraction,
            "memoryCapacity": self.memory_capacity,
            "memoryFraction": self.memory_fraction,
            "allocatedPods": self.allocated_pods,
            "podCapacity": self.pod_capacity,
            "podFraction": self.pod_fraction,
        }


def cluster_allocated_resources(
    cluster: Mapping[str, Any],
) -> ClusterAllocatedResources:
    """Summarise allocatable and allocated CPU, memory and pods of a cluster."""
    status = cluster.get("status") or {}
    summary = status.get("resourceSummary")
    if summary is None:
        return ClusterAllocatedResources()
    allocatable = summary.get("allocatable") or {}
    allocated = summary.get("allocated") or {}

    allocatable_cpu = _resource(allocatable, "cpu")
    allocated_cpu = _resource(allocated, "cpu")
    cpu_capacity = _round_up(allocatable_cpu)
    cpu_fraction = 0.0
    if cpu_capacity > 0:
        cpu_fraction = (
            float(_round_up(allocated_cpu * _MICRO))
            / float(_round_up(allocatable_cpu * _MICRO))
            * 100
        )

    allocatable_memory = _resource(allocatable, "memory")
    allocated_memory = _resource(allocated, "memory")
    memory_capacity = _round_up(allocatable_memory)
    memory_fraction = 0.0
    if memory_capacity > 0:
        memory_fraction = (
            float(_round_up(allocated_memory * _MICRO))
            / float(_round_up(allocatable_memory * _MICRO))
            * 100
        )

    pod_capacity = _round_up(_resource(allocatable, "pods"))
    allocated_pods = _round_up(_resource(allocated, "pods"))
    pod_fraction = 0.0
    if pod_capacity > 0:
        pod_fraction = float(allocated_pods) / float(pod_capacity) * 100

    return ClusterAllocatedResources(
        cpu_capacity=cpu_capacity,
        cpu_fraction=cpu_fraction,
        # The reported memory capacity is the allocated amount.
        memory_capacity=_round_up(allocated_memory),
        memory_fraction=memory_fraction,
        allocated_pods=allocated_pods,
        pod_capacity=pod_capacity,
        pod_fraction=pod_fraction,
    )


@dataclass
class Cluster:
    """A member cluster as shown in the cluster list."""

    object_meta: ObjectMeta = field(default_factory=ObjectMeta)
    type_meta: TypeMeta = field(
        default_factory=lambda: new_type_meta(ResourceKind.CLUSTER)
    )
    ready: str = CONDITION_UNKNOWN
    kubernetes_version: str = ""
    sync_mode: str = ""
    node_summary: Optional[dict[str, Any]] = None
    allocated_resources: ClusterAllocatedResources = field(
        default_factory=ClusterAllocatedResources
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out empty optional fields."""
        data: dict[str, Any] = {
            "objectMeta": self.object_meta.to_dict(),
            "typeMeta": self.type_meta.to_dict(),
            "ready": self.ready,
        }
        if self.kubernetes_version:
            data["kubernetesVersion"] = self.kubernetes_version
        data["syncMode"] = self.sync_mode
        if self.node_summary is not None:
            data["nodeSummary"] = dict(self.node_summary)
        data["allocatedResources"] = self.allocated_resources.to_dict()
        return data


@dataclass
class ClusterList:
    """A page of clusters with the total count and non-critical errors."""

    list_meta: ListMeta = field(default_factory=ListMeta)
    clusters: list[Cluster] = field(default_factory=list)
    errors: list[BaseException] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; errors are given as their messages."""
        return {
            "listMeta": {"totalItems": self.list_meta.total_items},
            "clusters": [cluster.to_dict() for cluster in self.clusters],
            "errors": [str(err) for err in self.errors],
        }


@dataclass
class ClusterDetail(Cluster):
    """A cluster together with its taints."""

    taints: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.taints:
            data["taints"] = [dict(taint) for taint in self.taints]
        return data


@dataclass
class ClusterCell(DataCell):
    """A cluster resource wrapped for data selection."""

    cluster: Mapping[str, Any]

    def _meta(self) -> ObjectMeta:
        return new_object_meta(self.cluster.get("metadata") or {})

    def get_property(
        self, name: Union[PropertyName, str]
    ) -> Optional[ComparableValue]:
        if name == PropertyName.NAME:
            return StdComparableString(self._meta().name)
        if name == PropertyName.CREATION_TIMESTAMP:
            created = self._meta().creation_timestamp
            return StdComparableTime(created if created is not None else _ZERO_TIME)
        if name == PropertyName.NAMESPACE:
            return StdComparableString(self._meta().namespace)
        return None


def _zero_time():
    from datetime import datetime, timezone

    return datetime(1, 1, 1, tzinfo=timezone.utc)


_ZERO_TIME = _zero_time()


def get_cluster_condition_status(
    cluster: Mapping[str, Any], condition_type: str
) -> str:
    """Return ``condition_type`` if any condition has that status, else Unknown."""
    status = cluster.get("status") or {}
    for condition in status.get("conditions") or []:
        if condition.get("status") == condition_type:
            return condition["status"]
    return CONDITION_UNKNOWN


def to_cluster(cluster: Mapping[str, Any]) -> Cluster:
    """Build the list view of a cluster resource."""
    metadata = cluster.get("metadata") or {}
    status = cluster.get("status") or {}
    spec = cluster.get("spec") or {}
    try:
        allocated = cluster_allocated_resources(cluster)
    except ValueError as exc:
        logger.warning(
            "Couldn't get allocated resources of %s cluster: %s",
            metadata.get("name", ""),
            exc,
        )
        allocated = ClusterAllocatedResources()
    node_summary = status.get("nodeSummary")
    return Cluster(
        object_meta=new_object_meta(metadata),
        type_meta=new_type_meta(ResourceKind.CLUSTER),
        ready=get_cluster_condition_status(cluster, CONDITION_TRUE),
        kubernetes_version=status.get("kubernetesVersion") or "",
        sync_mode=spec.get("syncMode") or "",
        node_summary=dict(node_summary) if node_summary is not None else None,
        allocated_resources=allocated,
    )


def to_cluster_list(
    clusters: Iterable[Mapping[str, Any]],
    non_critical_errors: list[BaseException],
    ds_query: DataSelectQuery,
) -> ClusterList:
    """Filter, sort and paginate clusters into a ClusterList."""
    cells = [ClusterCell(cluster) for cluster in clusters]
    selected, filtered_total = generic_data_select_with_filter(cells, ds_query)
    return ClusterList(
        list_meta=ListMeta(total_items=filtered_total),
        clusters=[to_cluster(cell.cluster) for cell in selected],
        errors=list(non_critical_errors),
    )


def get_cluster_list(client: Any, ds_query: DataSelectQuery) -> ClusterList:
    """List clusters through ``client.list_clusters()`` and select a page.

    Non-critical errors from the client are collected in the result;
    critical ones are raised.
    """
    try:
        items = list(client.list_clusters())
        error: Optional[Exception] = None
    except Exception as exc:  # classified below
        items = []
        error = exc
    non_critical, critical = extract_errors(error)
    if critical is not None:
        raise critical
    return to_cluster_list(items, non_critical, ds_query)


def get_cluster_detail(client: Any, cluster_name: str) -> ClusterDetail:
    """Fetch one cluster through ``client.get_cluster(name)`` with its taints."""
    logger.info("Getting details of %s cluster", cluster_name)
    cluster = client.get_cluster(cluster_name)
    summary = to_cluster(cluster)
    spec = cluster.get("spec") or {}
    return ClusterDetail(
        **{f.name: getattr(summary, f.name) for f in fields(Cluster)},
        taints=[dict(taint) for taint in spec.get("taints") or []],
    )
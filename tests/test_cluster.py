from fractions import Fraction

import pytest

from fedboard.cluster import (
    CONDITION_UNKNOWN,
    ClusterAllocatedResources,
    ClusterCell,
    cluster_allocated_resources,
    get_cluster_condition_status,
    get_cluster_detail,
    get_cluster_list,
    parse_quantity,
    to_cluster,
    to_cluster_list,
)
from fedboard.comparable import PropertyName, StdComparableString
from fedboard.kubetypes import ResourceKind
from fedboard.pagination import NO_PAGINATION, PaginationQuery
from fedboard.query import NO_FILTER, NO_SORT, DataSelectQuery, new_filter_query, new_sort_query
from fedboard.status import new_forbidden


def make_cluster(name, created="2020-01-01T00:00:00Z", **extra):
    cluster = {
        "metadata": {"name": name, "uid": f"uid-{name}", "creationTimestamp": created},
        "spec": {"syncMode": "Push"},
        "status": {
            "kubernetesVersion": "v1.30.0",
            "conditions": [{"type": "Ready", "status": "True"}],
            "nodeSummary": {"totalNum": 3, "readyNum": 2},
        },
    }
    cluster.update(extra)
    return cluster


class FakeClient:
    def __init__(self, clusters=(), error=None):
        self.clusters = {c["metadata"]["name"]: c for c in clusters}
        self.error = error

    def list_clusters(self):
        if self.error is not None:
            raise self.error
        return list(self.clusters.values())

    def get_cluster(self, name):
        return self.clusters[name]


def test_parse_quantity_suffixes():
    assert parse_quantity("100m") == Fraction(100, 1000)
    assert parse_quantity("1Ki") == 2**10
    assert parse_quantity("2") == 2
    assert parse_quantity("1e3") == 10**3
    assert parse_quantity("1.5Gi") == Fraction(3, 2) * 2**30


@pytest.mark.parametrize("text", ["", "abc", "1Xi", "--1"])
def test_parse_quantity_rejects(text):
    with pytest.raises(ValueError):
        parse_quantity(text)


def test_allocated_resources_without_summary():
    assert cluster_allocated_resources(make_cluster("a")) == ClusterAllocatedResources()


def test_allocated_resources_fractions():
    cluster = make_cluster("a")
    cluster["status"]["resourceSummary"] = {
        "allocatable": {"cpu": "4", "memory": "8Gi", "pods": "110"},
        "allocated": {"cpu": "2", "memory": "4Gi", "pods": "11"},
    }
    result = cluster_allocated_resources(cluster)
    assert result.cpu_capacity == 4
    assert result.cpu_fraction == pytest.approx(50.0)
    assert result.memory_fraction == pytest.approx(50.0)
    # The memory capacity reports the allocated amount.
    assert result.memory_capacity == parse_quantity("4Gi")
    assert result.pod_capacity == 110
    assert result.allocated_pods == 11
    assert result.pod_fraction == pytest.approx(10.0)


def test_allocated_resources_zero_capacity_gives_zero_fraction():
    cluster = make_cluster("a")
    cluster["status"]["resourceSummary"] = {"allocatable": {}, "allocated": {"cpu": "1"}}
    result = cluster_allocated_resources(cluster)
    assert result.cpu_capacity == 0
    assert result.cpu_fraction == 0.0


def test_condition_status():
    cluster = make_cluster("a")
    assert get_cluster_condition_status(cluster, "True") == "True"
    assert get_cluster_condition_status(cluster, "False") == CONDITION_UNKNOWN


def test_to_cluster_fields():
    result = to_cluster(make_cluster("alpha"))
    assert result.object_meta.name == "alpha"
    assert result.object_meta.uid == "uid-alpha"
    assert result.type_meta.kind == ResourceKind.CLUSTER
    assert result.ready == "True"
    assert result.kubernetes_version == "v1.30.0"
    assert result.sync_mode == "Push"
    assert result.node_summary == {"totalNum": 3, "readyNum": 2}


def test_to_cluster_bad_quantity_falls_back():
    cluster = make_cluster("a")
    cluster["status"]["resourceSummary"] = {"allocatable": {"cpu": "junk"}}
    assert to_cluster(cluster).allocated_resources == ClusterAllocatedResources()


def test_cluster_to_dict_omits_empty_fields():
    cluster = make_cluster("a")
    del cluster["status"]["nodeSummary"]
    cluster["status"]["kubernetesVersion"] = ""
    data = to_cluster(cluster).to_dict()
    assert "nodeSummary" not in data
    assert "kubernetesVersion" not in data
    assert data["typeMeta"] == {"kind": "cluster"}
    assert data["objectMeta"]["name"] == "a"


def test_cell_properties():
    cell = ClusterCell(make_cluster("alpha"))
    assert cell.get_property(PropertyName.NAME) == StdComparableString("alpha")
    assert cell.get_property("namespace") == StdComparableString("")
    assert cell.get_property(PropertyName.STATUS) is None


def test_cell_creation_timestamp_orders():
    older = ClusterCell(make_cluster("a", "2020-01-01T00:00:00Z"))
    newer = ClusterCell(make_cluster("b", "2021-01-01T00:00:00Z"))
    a = older.get_property(PropertyName.CREATION_TIMESTAMP)
    b = newer.get_property(PropertyName.CREATION_TIMESTAMP)
    assert a.compare(b) == -1
    assert b.compare(a) == 1


def test_to_cluster_list_sorts_and_paginates():
    clusters = [make_cluster(n) for n in ("b", "a", "c")]
    query = DataSelectQuery(PaginationQuery(2, 0), new_sort_query(["a", "name"]), NO_FILTER)
    result = to_cluster_list(clusters, [], query)
    assert [c.object_meta.name for c in result.clusters] == ["a", "b"]
    assert result.list_meta.total_items == len(clusters)


def test_to_cluster_list_filter_counts_filtered():
    clusters = [make_cluster(n) for n in ("beta", "alpha", "gamma")]
    query = DataSelectQuery(NO_PAGINATION, NO_SORT, new_filter_query(["name", "et"]))
    result = to_cluster_list(clusters, [], query)
    assert [c.object_meta.name for c in result.clusters] == ["beta"]
    assert result.list_meta.total_items == 1


def test_get_cluster_list_from_client():
    client = FakeClient([make_cluster("x"), make_cluster("y")])
    result = get_cluster_list(client, DataSelectQuery())
    assert sorted(c.object_meta.name for c in result.clusters) == ["x", "y"]
    assert result.errors == []


def test_get_cluster_list_non_critical_error_collected():
    error = new_forbidden("clusters", None)
    result = get_cluster_list(FakeClient(error=error), DataSelectQuery())
    assert result.clusters == []
    assert result.errors == [error]


def test_get_cluster_list_critical_error_raised():
    with pytest.raises(RuntimeError):
        get_cluster_list(FakeClient(error=RuntimeError("boom")), DataSelectQuery())


def test_get_cluster_detail_includes_taints():
    taint = {"key": "dedicated", "value": "gpu", "effect": "NoSchedule"}
    cluster = make_cluster("gpu")
    cluster["spec"]["taints"] = [taint]
    detail = get_cluster_detail(FakeClient([cluster]), "gpu")
    assert detail.taints == [taint]
    assert detail.object_meta.name == "gpu"
    assert detail.to_dict()["taints"] == [taint]


def test_get_cluster_detail_missing_raises():
    with pytest.raises(KeyError):
        get_cluster_detail(FakeClient(), "nowhere")
from datetime import datetime, timezone

import pytest

from fedboard.kubetypes import (
    ObjectMeta,
    ResourceKind,
    TypeMeta,
    new_object_meta,
    new_type_meta,
)

ALL_KINDS = [
    "cluster",
    "propagationpolicy",
    "clusterpropagationpolicy",
    "overridepolicy",
    "clusteroverridepolicy",
    "configmap",
    "daemonset",
    "deployment",
    "event",
    "horizontalpodautoscaler",
    "ingress",
    "serviceaccount",
    "job",
    "cronjob",
    "limitrange",
    "namespace",
    "node",
    "persistentvolumeclaim",
    "persistentvolume",
    "customresourcedefinition",
    "pod",
    "replicaset",
    "replicationcontroller",
    "resourcequota",
    "secret",
    "service",
    "statefulset",
    "storageclass",
    "clusterrole",
    "clusterrolebinding",
    "role",
    "rolebinding",
    "endpoint",
    "networkpolicy",
    "ingressclass",
]

SCALABLE = {"deployment", "replicaset", "replicationcontroller", "statefulset"}


@pytest.mark.parametrize("value", ALL_KINDS)
def test_scalable_matches_source_list(value):
    assert ResourceKind(value).scalable() == (value in SCALABLE)


@pytest.mark.parametrize("value", ALL_KINDS)
def test_only_deployment_is_restartable(value):
    assert ResourceKind(value).restartable() == (value == "deployment")


def test_kind_values_from_strings():
    assert ResourceKind("cluster") is ResourceKind.CLUSTER
    assert ResourceKind("ingressclass") is ResourceKind.INGRESS_CLASS


def test_new_type_meta_for_deployment():
    meta = new_type_meta("deployment")
    assert meta.kind == ResourceKind.DEPLOYMENT
    assert meta.scalable is True
    assert meta.restartable is True
    assert meta.to_dict() == {
        "kind": "deployment",
        "scalable": True,
        "restartable": True,
    }


def test_new_type_meta_for_non_scalable_kind_omits_flags():
    meta = new_type_meta(ResourceKind.CLUSTER)
    assert meta.to_dict() == {"kind": "cluster"}


def test_new_type_meta_for_unknown_kind():
    meta = new_type_meta("widget")
    assert meta.kind == "widget"
    assert not meta.scalable
    assert not meta.restartable


def test_empty_type_meta_dict():
    assert TypeMeta().to_dict() == {}


def test_object_meta_round_trip():
    metadata = {
        "name": "member1",
        "namespace": "karmada-system",
        "labels": {"app": "web"},
        "annotations": {"note": "x"},
        "creationTimestamp": "2024-05-01T12:30:45Z",
        "uid": "uid-1",
    }
    assert new_object_meta(metadata).to_dict() == metadata


def test_object_meta_parses_timestamp():
    meta = new_object_meta({"creationTimestamp": "2024-05-01T12:30:45Z"})
    assert meta.creation_timestamp == datetime(
        2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc
    )


def test_object_meta_timestamp_with_offset_is_shown_in_utc():
    meta = new_object_meta({"creationTimestamp": "2024-05-01T12:00:00+02:00"})
    assert meta.to_dict()["creationTimestamp"] == "2024-05-01T10:00:00Z"


def test_empty_object_meta_keeps_null_timestamp():
    assert ObjectMeta().to_dict() == {"creationTimestamp": None}


def test_new_object_meta_copies_labels():
    labels = {"app": "web"}
    meta = new_object_meta({"name": "a", "labels": labels})
    labels["app"] = "changed"
    assert meta.labels == {"app": "web"}
    assert meta.name == "a"
    assert meta.namespace == ""
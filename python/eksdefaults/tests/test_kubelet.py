"""Tests for merging reservations into the kubelet extra config document."""

from __future__ import annotations

from eksdefaults.models.instance_type import ReservationEntry, ResourceType
from eksdefaults.utils.kubelet import (
    get_kube_reserved,
    merge_kube_reserved,
    merge_reservations,
    missing_reservations,
)


class TestMergeKubeReserved:
    """Tests for merge_kube_reserved."""

    def test_creates_container(self) -> None:
        doc = {}
        assert merge_kube_reserved(doc, ResourceType.cpu, "100m") is True
        assert doc == {"kubeReserved": {"cpu": "100m"}}

    def test_existing_value_is_kept(self) -> None:
        doc = {"kubeReserved": {"memory": "500Mi"}}
        assert merge_kube_reserved(doc, ResourceType.memory, "1.8Mi") is False
        assert doc["kubeReserved"]["memory"] == "500Mi"

    def test_unrelated_keys_untouched(self) -> None:
        doc = {
            "evictionHard": {"memory.available": "200Mi"},
            "featureGates": {"RotateKubeletServerCertificate": True},
            "kubeReserved": {"pid": "1000"},
        }
        merge_kube_reserved(doc, ResourceType.ephemeral_storage, "1Gi")
        assert doc == {
            "evictionHard": {"memory.available": "200Mi"},
            "featureGates": {"RotateKubeletServerCertificate": True},
            "kubeReserved": {"pid": "1000", "ephemeral-storage": "1Gi"},
        }

    def test_existing_container_is_reused(self) -> None:
        reserved = {"cpu": "1"}
        doc = {"kubeReserved": reserved}
        merge_kube_reserved(doc, ResourceType.memory, "1.4Mi")
        assert doc["kubeReserved"] is reserved
        assert reserved == {"cpu": "1", "memory": "1.4Mi"}

    def test_non_mapping_container_is_replaced(self) -> None:
        doc = {"kubeReserved": "cpu=100m"}
        merge_kube_reserved(doc, ResourceType.cpu, "140m")
        assert doc == {"kubeReserved": {"cpu": "140m"}}


class TestHelpers:
    """Tests for get_kube_reserved, merge_reservations and missing_reservations."""

    def test_get_kube_reserved_missing(self) -> None:
        assert get_kube_reserved({}) == {}

    def test_merge_reservations(self) -> None:
        doc = {"kubeReserved": {"memory": "500Mi"}}
        merge_reservations(
            doc,
            [
                ReservationEntry(resource_type=ResourceType.cpu, quantity="100m"),
                ReservationEntry(resource_type=ResourceType.memory, quantity="1.8Mi"),
                ReservationEntry(
                    resource_type=ResourceType.ephemeral_storage, quantity="1.25Gi"
                ),
            ],
        )
        assert doc["kubeReserved"] == {
            "memory": "500Mi",
            "cpu": "100m",
            "ephemeral-storage": "1.25Gi",
        }

    def test_missing_reservations(self) -> None:
        assert missing_reservations({}) == [
            ResourceType.cpu,
            ResourceType.memory,
            ResourceType.ephemeral_storage,
        ]
        assert missing_reservations({"kubeReserved": {"cpu": "1"}}) == [
            ResourceType.memory,
            ResourceType.ephemeral_storage,
        ]
        assert missing_reservations({"kubeReserved": "bogus"}) == list(ResourceType)

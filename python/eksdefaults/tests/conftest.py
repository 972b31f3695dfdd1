"""Shared fixtures: an in-memory instance-type provider and sample facts."""

from __future__ import annotations

from typing import Dict, List, Tuple, Type

import pytest

from eksdefaults.errors import InstanceTypeNotFound
from eksdefaults.models.cluster import ClusterMeta
from eksdefaults.models.instance_type import InstanceTypeFacts


class FakeInstanceTypeInfoProvider:
    """Serves InstanceTypeFacts from a dict and records every lookup."""

    def __init__(self, facts: Dict[str, InstanceTypeFacts]) -> None:
        self.facts = facts
        self.calls: List[Tuple[str, str]] = []

    def describe(self, instance_type: str, region: str = "") -> InstanceTypeFacts:
        self.calls.append((instance_type, region))
        if instance_type not in self.facts:
            raise InstanceTypeNotFound(
                f"No info found for instance type: {instance_type}", instance_type
            )
        return self.facts[instance_type]


SAMPLE_FACTS: Dict[str, InstanceTypeFacts] = {
    "m5.large": InstanceTypeFacts(
        instance_type="m5.large", default_vcpus=2, memory_mib=8192
    ),
    "c5.xlarge": InstanceTypeFacts(
        instance_type="c5.xlarge", default_vcpus=4, memory_mib=8192
    ),
    "m5d.4xlarge": InstanceTypeFacts(
        instance_type="m5d.4xlarge",
        default_vcpus=16,
        memory_mib=65536,
        instance_storage_supported=True,
        instance_storage_total_gb=600,
    ),
    "t3.odd": InstanceTypeFacts(instance_type="t3.odd", default_vcpus=3, memory_mib=6144),
}


@pytest.fixture
def provider() -> FakeInstanceTypeInfoProvider:
    """Provider knowing m5.large, c5.xlarge, m5d.4xlarge and a 3-vCPU shape."""
    return FakeInstanceTypeInfoProvider(dict(SAMPLE_FACTS))


@pytest.fixture
def meta() -> ClusterMeta:
    return ClusterMeta(name="test-cluster", region="us-west-2")


@pytest.fixture
def make_provider() -> Type[FakeInstanceTypeInfoProvider]:
    """Factory for providers serving custom facts."""
    return FakeInstanceTypeInfoProvider

"""
eksdefaults/utils/reservations.py

Derives kubelet resource reservations (kubeReserved) from an instance type's
hardware facts, following the AKS sizing guidance:

  - cpu: fixed millicore amount per vCPU count
  - memory: progressive brackets over total memory
  - ephemeral-storage: 1/16th of available storage, clamped to [1, 15] GB

The three calculations are pure functions over InstanceTypeFacts.
compute_reservations() performs the single lookup per node group and fans
the facts out to them.

See: https://docs.microsoft.com/en-us/azure/aks/concepts-clusters-workloads
"""

from __future__ import annotations

import logging
import struct
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

from eksdefaults.constants import DEFAULT_INSTANCE_STORAGE_GB
from eksdefaults.errors import UnsupportedShape
from eksdefaults.models.cluster import ClusterMeta
from eksdefaults.models.instance_type import (
    InstanceTypeFacts,
    ReservationEntry,
    ResourceType,
)
from eksdefaults.utils.instance_types import InstanceTypeInfoProvider

logger = logging.getLogger(__name__)

# vCPU count => reserved millicores
CPU_ALLOCATIONS: Mapping[int, str] = MappingProxyType(
    {
        1: "60m",
        2: "100m",  # +40
        4: "140m",  # +40
        8: "180m",  # +40
        16: "260m",  # +80
        32: "420m",  # +160
        48: "580m",  # +160
        64: "740m",  # +320
        96: "1040m",  # +320
    }
)

# (upper bound in GiB, fraction of the slice reserved); 65535 stands in for "no limit"
MEMORY_BRACKETS: Tuple[Tuple[float, float], ...] = (
    (4.0, 0.25),
    (8.0, 0.20),
    (16.0, 0.10),
    (128.0, 0.06),
    (65535.0, 0.02),
)

# Ephemeral-storage reservation bounds (GB)
MIN_STORAGE_RESERVATION_GB = 1.0
MAX_STORAGE_RESERVATION_GB = 15.0
STORAGE_RESERVATION_DIVISOR = 16.0

MEMORY_UNIT = "Mi"
STORAGE_UNIT = "Gi"

RESERVATION_ORDER: Tuple[ResourceType, ...] = (
    ResourceType.cpu,
    ResourceType.memory,
    ResourceType.ephemeral_storage,
)


# ----------------------------------------------------------------------
# Formatting
# ----------------------------------------------------------------------


def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _shortest_float32(value: float) -> str:
    """
    Fixed-point text with the fewest decimals that still reads back as the
    same single-precision value. Hides float64 noise like 2.6000000000000001.
    """
    single = _to_float32(value)
    for decimals in range(0, 10):
        text = f"{single:.{decimals}f}"
        if _to_float32(float(text)) == single:
            return text
    return repr(single)


def format_memory(reserved_gib: float) -> str:
    """
    Format a memory reservation: minimal decimals, at least one digit after
    the point, then the unit suffix. 1.4 => '1.4Mi', 2 => '2.0Mi'.
    """
    text = _shortest_float32(reserved_gib)
    if "." not in text:
        text += ".0"
    return text + MEMORY_UNIT


def format_storage_size(size_gb: float) -> str:
    """
    Round to two decimals and strip trailing zeros. 10.0 => '10Gi', 1.25 => '1.25Gi'.
    """
    text = repr(float(f"{size_gb:.2f}"))
    if text.endswith(".0"):
        text = text[:-2]
    return text + STORAGE_UNIT


# ----------------------------------------------------------------------
# Calculations
# ----------------------------------------------------------------------


def cpu_reservation(facts: InstanceTypeFacts) -> str:
    """
    Look up the reserved millicores for the instance type's vCPU count.

    Raises:
        UnsupportedShape: The vCPU count is not in CPU_ALLOCATIONS. No
            interpolation is attempted.
    """
    reserved = CPU_ALLOCATIONS.get(facts.default_vcpus)
    if reserved is None:
        raise UnsupportedShape(
            f"Could not find suggested core reservation for instance type: {facts.instance_type}",
            facts.instance_type,
        )
    return reserved


def memory_gib(facts: InstanceTypeFacts) -> float:
    """Instance memory in GiB, rounded to two decimals."""
    return round(facts.memory_mib / 1024.0, 2)


def reserved_memory(total_gib: float) -> float:
    """
    Apply MEMORY_BRACKETS progressively: each slice of memory between two
    bounds contributes its own fraction.
    """
    lower = 0.0
    reserved = 0.0
    for upper, fraction in MEMORY_BRACKETS:
        if total_gib <= upper:
            reserved += fraction * (total_gib - lower)
            break
        reserved += fraction * (upper - lower)
        lower = upper
    return reserved


def memory_reservation(facts: InstanceTypeFacts) -> str:
    # NOTE: the amount is in GiB but labelled "Mi". Existing configs carry this string.
    return format_memory(reserved_memory(memory_gib(facts)))


def available_storage_gb(facts: InstanceTypeFacts) -> int:
    """Instance-local storage in GB, or DEFAULT_INSTANCE_STORAGE_GB when the type has none."""
    if not facts.instance_storage_supported:
        return DEFAULT_INSTANCE_STORAGE_GB
    return facts.instance_storage_total_gb


def ephemeral_storage_reservation(facts: InstanceTypeFacts) -> str:
    proportional = available_storage_gb(facts) / STORAGE_RESERVATION_DIVISOR
    clamped = min(
        MAX_STORAGE_RESERVATION_GB, max(MIN_STORAGE_RESERVATION_GB, proportional)
    )
    return format_storage_size(clamped)


def reservation_for(resource_type: ResourceType, facts: InstanceTypeFacts) -> str:
    """Compute a single reservation quantity for `resource_type`."""
    if resource_type is ResourceType.cpu:
        return cpu_reservation(facts)
    if resource_type is ResourceType.memory:
        return memory_reservation(facts)
    if resource_type is ResourceType.ephemeral_storage:
        return ephemeral_storage_reservation(facts)
    raise ValueError(f"Unknown resource type: {resource_type!r}")


def reservations_for_facts(
    facts: InstanceTypeFacts,
    resource_types: Iterable[ResourceType] = RESERVATION_ORDER,
) -> List[ReservationEntry]:
    """Compute the requested reservations, failing on the first error."""
    return [
        ReservationEntry(
            resource_type=resource_type,
            quantity=reservation_for(resource_type, facts),
        )
        for resource_type in resource_types
    ]


def compute_reservations(
    instance_type: str,
    meta: ClusterMeta,
    provider: InstanceTypeInfoProvider,
    resource_types: Iterable[ResourceType] = RESERVATION_ORDER,
) -> List[ReservationEntry]:
    """
    Look up `instance_type` once in the cluster's region and compute the
    requested reservations from the result.

    Args:
        instance_type: The EC2 instance type of the node group.
        meta: Cluster metadata; its region scopes the lookup.
        provider: Source of instance-type hardware facts.
        resource_types: Which reservations to compute. Nothing is looked up
            when this is empty.

    Returns:
        One ReservationEntry per requested resource type, in request order.

    Raises:
        ReservationError: Any lookup or calculation failure, unchanged.
    """
    requested = list(resource_types)
    if not requested:
        return []

    facts = provider.describe(instance_type, meta.region)
    entries = reservations_for_facts(facts, requested)
    logger.debug(
        "Reservations for %s: %s",
        instance_type,
        ", ".join(f"{e.resource_type.value}={e.quantity}" for e in entries),
    )
    return entries


__all__ = [
    "CPU_ALLOCATIONS",
    "MEMORY_BRACKETS",
    "RESERVATION_ORDER",
    "format_memory",
    "format_storage_size",
    "cpu_reservation",
    "memory_gib",
    "reserved_memory",
    "memory_reservation",
    "available_storage_gb",
    "ephemeral_storage_reservation",
    "reservation_for",
    "reservations_for_facts",
    "compute_reservations",
]

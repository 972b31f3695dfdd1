"""
eksdefaults/models/instance_type.py

Defines the read-only hardware facts returned by an instance-type lookup and
the reservation entries derived from them.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    """Resource types reserved for the kubelet and system daemons."""

    cpu = "cpu"
    memory = "memory"
    ephemeral_storage = "ephemeral-storage"


class InstanceTypeFacts(BaseModel):
    """Static hardware facts for one EC2 instance type.

    Attributes:
        instance_type: The instance type identifier, e.g. 'm5.large'.
        default_vcpus: Default number of vCPUs.
        memory_mib: Memory size in MiB.
        instance_storage_supported: True if the type has instance-local storage.
        instance_storage_total_gb: Total instance-local storage in GB, if any.
    """

    model_config = ConfigDict(frozen=True)

    instance_type: str
    default_vcpus: int = Field(..., ge=1)
    memory_mib: int = Field(..., ge=0)
    instance_storage_supported: bool = False
    instance_storage_total_gb: int = Field(default=0, ge=0)


class ReservationEntry(BaseModel):
    """A formatted quantity reserved for one resource type, e.g. ('cpu', '80m')."""

    model_config = ConfigDict(frozen=True)

    resource_type: ResourceType
    quantity: str


__all__ = ["ResourceType", "InstanceTypeFacts", "ReservationEntry"]

"""
eksdefaults/errors.py

Exceptions raised while computing kubelet reservations for a node group.
Every reservation failure is fatal for the node group being defaulted; none
of these are retried or replaced with a fallback value.
"""

from __future__ import annotations

from typing import Optional


class ReservationError(Exception):
    """Base class for failures while deriving reservations for an instance type.

    Attributes:
        instance_type (Optional[str]): The instance type being resolved, if known.
    """

    def __init__(self, message: str, instance_type: Optional[str] = None) -> None:
        super().__init__(message)
        self.instance_type = instance_type


class InstanceTypeNotFound(ReservationError):
    """The instance-type lookup returned no facts for the requested type."""


class ProviderError(ReservationError):
    """Transport, authentication or API failure from the instance-type lookup.

    The message is the provider's own, unchanged. The underlying exception is
    chained as ``__cause__``.
    """


class UnsupportedShape(ReservationError):
    """The instance type's vCPU count has no entry in the CPU reservation table."""


__all__ = [
    "ReservationError",
    "InstanceTypeNotFound",
    "ProviderError",
    "UnsupportedShape",
]

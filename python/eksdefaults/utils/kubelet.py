"""
eksdefaults/utils/kubelet.py

Merges computed reservations into a node group's free-form kubelet
configuration document. A value already present under
kubeReserved.<resource> is never overwritten; every other key of the
document is left exactly as it was.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from eksdefaults.constants import KUBE_RESERVED_KEY
from eksdefaults.models.instance_type import ReservationEntry, ResourceType
from eksdefaults.models.nodegroup import KubeletDocument

logger = logging.getLogger(__name__)


def get_kube_reserved(document: KubeletDocument) -> Dict[str, Any]:
    """
    Return the document's kubeReserved mapping, or a fresh empty one if it is
    missing or not a mapping. The caller writes it back.
    """
    kube_reserved = document.get(KUBE_RESERVED_KEY)
    if isinstance(kube_reserved, dict):
        return kube_reserved
    if kube_reserved is not None:
        logger.warning(
            "Replacing non-mapping %s value of type %s",
            KUBE_RESERVED_KEY,
            type(kube_reserved).__name__,
        )
    return {}


def merge_kube_reserved(
    document: KubeletDocument, resource_type: ResourceType, quantity: str
) -> bool:
    """
    Set document["kubeReserved"][resource_type] = quantity unless the key is
    already present.

    Returns:
        True if the value was written, False if a user value was kept.
    """
    kube_reserved = get_kube_reserved(document)
    written = resource_type.value not in kube_reserved
    if written:
        kube_reserved[resource_type.value] = quantity
    document[KUBE_RESERVED_KEY] = kube_reserved
    return written


def merge_reservations(
    document: KubeletDocument, entries: Iterable[ReservationEntry]
) -> None:
    """Merge each entry in turn with merge_kube_reserved()."""
    for entry in entries:
        if merge_kube_reserved(document, entry.resource_type, entry.quantity):
            logger.debug(
                "Set %s.%s=%s",
                KUBE_RESERVED_KEY,
                entry.resource_type.value,
                entry.quantity,
            )


def missing_reservations(document: KubeletDocument) -> List[ResourceType]:
    """Resource types that do not yet have a kubeReserved value in the document."""
    kube_reserved = document.get(KUBE_RESERVED_KEY)
    present = kube_reserved if isinstance(kube_reserved, dict) else {}
    return [rt for rt in ResourceType if rt.value not in present]


__all__ = [
    "get_kube_reserved",
    "merge_kube_reserved",
    "merge_reservations",
    "missing_reservations",
]

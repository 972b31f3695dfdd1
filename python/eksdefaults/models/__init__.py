"""
models/__init__.py

Aggregate imports so the configuration records can be imported directly
from eksdefaults.models.
"""

from eksdefaults.models.cluster import (
    ClusterCloudWatch,
    ClusterConfig,
    ClusterEndpoints,
    ClusterIAM,
    ClusterIAMServiceAccount,
    ClusterLogging,
    ClusterMeta,
    ClusterNAT,
    ClusterVPC,
    FargateProfile,
    FargateProfileSelector,
    NATGateway,
)
from eksdefaults.models.instance_type import (
    InstanceTypeFacts,
    ReservationEntry,
    ResourceType,
)
from eksdefaults.models.nodegroup import (
    KubeletDocument,
    ManagedNodeGroup,
    NodeGroup,
    NodeGroupBase,
    NodeGroupIAM,
    NodeGroupIAMAddonPolicies,
    NodeGroupInstancesDistribution,
    NodeGroupSGs,
    NodeGroupSSH,
    ScalingConfig,
)

__all__ = [
    "ClusterCloudWatch",
    "ClusterConfig",
    "ClusterEndpoints",
    "ClusterIAM",
    "ClusterIAMServiceAccount",
    "ClusterLogging",
    "ClusterMeta",
    "ClusterNAT",
    "ClusterVPC",
    "FargateProfile",
    "FargateProfileSelector",
    "NATGateway",
    "InstanceTypeFacts",
    "ReservationEntry",
    "ResourceType",
    "KubeletDocument",
    "ManagedNodeGroup",
    "NodeGroup",
    "NodeGroupBase",
    "NodeGroupIAM",
    "NodeGroupIAMAddonPolicies",
    "NodeGroupInstancesDistribution",
    "NodeGroupSGs",
    "NodeGroupSSH",
    "ScalingConfig",
]

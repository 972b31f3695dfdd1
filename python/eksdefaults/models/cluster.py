"""
eksdefaults/models/cluster.py

Pydantic models for the cluster-level configuration document:
 - ClusterMeta: name and region of the cluster
 - ClusterIAM, ClusterVPC, ClusterCloudWatch, FargateProfile
 - ClusterConfig: the root record holding node groups of both kinds
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

import yaml
from pydantic import Field

from eksdefaults.models.base import ConfigModel, validate_document
from eksdefaults.models.nodegroup import ManagedNodeGroup, NodeGroup


class ClusterMeta(ConfigModel):
    """Identifies the cluster being configured.

    Attributes:
        name: The cluster name.
        region: AWS region; empty means "use the ambient default".
        tags: Tags applied to cluster-level resources.
    """

    name: str
    region: str = ""
    tags: Optional[Dict[str, str]] = None


class ClusterIAMServiceAccount(ConfigModel):
    """An IAM-backed Kubernetes service account."""

    name: str
    namespace: str = ""
    attach_policy_arns: List[str] = Field(
        default_factory=list, alias="attachPolicyARNs"
    )


class ClusterIAM(ConfigModel):
    """Cluster-wide IAM settings."""

    with_oidc: Optional[bool] = Field(default=None, alias="withOIDC")
    service_accounts: List[ClusterIAMServiceAccount] = Field(default_factory=list)


class NATGateway(str, Enum):
    single = "Single"
    highly_available = "HighlyAvailable"
    disable = "Disable"


class ClusterNAT(ConfigModel):
    gateway: Optional[NATGateway] = None


class ClusterEndpoints(ConfigModel):
    """Access to the Kubernetes API endpoint (tri-states)."""

    private_access: Optional[bool] = None
    public_access: Optional[bool] = None


class ClusterVPC(ConfigModel):
    cidr: Optional[str] = None
    nat: Optional[ClusterNAT] = None
    cluster_endpoints: Optional[ClusterEndpoints] = None


class ClusterLogging(ConfigModel):
    enable_types: List[str] = Field(default_factory=list)


class ClusterCloudWatch(ConfigModel):
    cluster_logging: Optional[ClusterLogging] = None


class FargateProfileSelector(ConfigModel):
    namespace: str
    labels: Optional[Dict[str, str]] = None


class FargateProfile(ConfigModel):
    name: str
    selectors: List[FargateProfileSelector] = Field(default_factory=list)


class ClusterConfig(ConfigModel):
    """Root configuration record for one cluster.

    Attributes:
        metadata: Cluster name and region.
        iam: Cluster IAM / OIDC settings.
        vpc: VPC NAT and API endpoint settings.
        cloud_watch: Control-plane logging settings.
        node_groups: Self-managed node groups.
        managed_node_groups: EKS managed node groups.
        fargate_profiles: Fargate profiles.
    """

    metadata: ClusterMeta
    iam: Optional[ClusterIAM] = None
    vpc: Optional[ClusterVPC] = None
    cloud_watch: Optional[ClusterCloudWatch] = None
    node_groups: List[NodeGroup] = Field(default_factory=list)
    managed_node_groups: List[ManagedNodeGroup] = Field(default_factory=list)
    fargate_profiles: List[FargateProfile] = Field(default_factory=list)

    def has_cluster_cloudwatch_logging(self) -> bool:
        """True if at least one control-plane log type is enabled."""
        return bool(
            self.cloud_watch
            and self.cloud_watch.cluster_logging
            and self.cloud_watch.cluster_logging.enable_types
        )

    def to_yaml(self, *, sort_keys: bool = False) -> str:
        """
        Serialize this config to a YAML string using PyYAML, with camelCase
        keys and unset fields omitted.
        """
        return yaml.safe_dump(self.to_document(), sort_keys=sort_keys)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> ClusterConfig:
        """
        Deserialize a ClusterConfig from a YAML string.

        Raises:
            ValueError: The document is not a valid cluster config.
        """
        data = yaml.safe_load(yaml_str)
        return validate_document(data, cls)


__all__ = [
    "ClusterMeta",
    "ClusterIAMServiceAccount",
    "ClusterIAM",
    "NATGateway",
    "ClusterNAT",
    "ClusterEndpoints",
    "ClusterVPC",
    "ClusterLogging",
    "ClusterCloudWatch",
    "FargateProfileSelector",
    "FargateProfile",
    "ClusterConfig",
]

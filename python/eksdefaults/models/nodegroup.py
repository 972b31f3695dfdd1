"""
eksdefaults/models/nodegroup.py

Pydantic models for worker node groups:
 - NodeGroup: self-managed (unmanaged) node group
 - ManagedNodeGroup: EKS managed node group
 - the SSH, security group, IAM, scaling and instance distribution sub-records

Tri-state flags are Optional[bool]: None means unset and is resolved by the
defaulting pass, True/False are explicit user choices.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from eksdefaults.models.base import ConfigModel

# Free-form kubelet configuration, passed to the node agent verbatim.
KubeletDocument = Dict[str, Any]


class NodeGroupSGs(ConfigModel):
    """Security group settings for a node group.

    Attributes:
        attach_ids: Extra security group IDs to attach.
        with_local: Attach a node-group-local security group.
        with_shared: Attach the cluster-wide shared security group.
    """

    attach_ids: List[str] = Field(default_factory=list, alias="attachIDs")
    with_local: Optional[bool] = None
    with_shared: Optional[bool] = None


class NodeGroupSSH(ConfigModel):
    """SSH access for a node group.

    At most one of the key fields is normally set; ``allow`` is tri-state.
    """

    allow: Optional[bool] = None
    public_key_name: Optional[str] = None
    public_key_path: Optional[str] = None
    public_key: Optional[str] = None

    def key_fields_set(self) -> int:
        """Count the key fields holding a non-empty value."""
        return sum(
            1
            for value in (self.public_key_name, self.public_key_path, self.public_key)
            if value
        )


class NodeGroupIAMAddonPolicies(ConfigModel):
    """Add-on IAM policies attached to the node instance role, one per integration."""

    image_builder: Optional[bool] = None
    auto_scaler: Optional[bool] = None
    external_dns: Optional[bool] = Field(default=None, alias="externalDNS")
    cert_manager: Optional[bool] = None
    alb_ingress: Optional[bool] = None
    xray: Optional[bool] = Field(default=None, alias="xRay")
    cloud_watch: Optional[bool] = None
    ebs: Optional[bool] = None
    fsx: Optional[bool] = None
    efs: Optional[bool] = None


class NodeGroupIAM(ConfigModel):
    """IAM settings for a node group."""

    instance_role_arn: Optional[str] = Field(default=None, alias="instanceRoleARN")
    with_addon_policies: NodeGroupIAMAddonPolicies = Field(
        default_factory=NodeGroupIAMAddonPolicies
    )


class NodeGroupInstancesDistribution(ConfigModel):
    """Mixed-instance (spot/on-demand) policy for an unmanaged node group."""

    instance_types: List[str] = Field(default_factory=list)
    max_price: Optional[float] = None
    on_demand_base_capacity: Optional[int] = None
    on_demand_percentage_above_base_capacity: Optional[int] = None
    spot_instance_pools: Optional[int] = None


class ScalingConfig(ConfigModel):
    """Autoscaling bounds for a managed node group."""

    desired_capacity: Optional[int] = None
    min_size: Optional[int] = None
    max_size: Optional[int] = None


class NodeGroupBase(ConfigModel):
    """Fields shared by unmanaged and managed node groups.

    Attributes:
        name: Node group name, unique within the cluster.
        instance_type: EC2 instance type, or "mixed" for mixed-instance groups.
        ami_family: AMI family used for the nodes.
        security_groups: Security group policy.
        ssh: SSH access policy.
        volume_type: EBS volume type for the root volume.
        iam: IAM policy set.
        labels: Kubernetes node labels.
        tags: AWS resource tags.
        kubelet_extra_config: Free-form kubelet configuration document.
    """

    name: str
    instance_type: Optional[str] = None
    ami_family: Optional[str] = None
    security_groups: Optional[NodeGroupSGs] = None
    ssh: Optional[NodeGroupSSH] = None
    volume_type: Optional[str] = None
    iam: Optional[NodeGroupIAM] = None
    labels: Optional[Dict[str, str]] = None
    tags: Optional[Dict[str, str]] = None
    kubelet_extra_config: Optional[KubeletDocument] = None


class NodeGroup(NodeGroupBase):
    """A self-managed node group."""

    instances_distribution: Optional[NodeGroupInstancesDistribution] = None

    def has_mixed_instances(self) -> bool:
        """True if the group declares a mixed-instance policy with at least one type."""
        return bool(
            self.instances_distribution and self.instances_distribution.instance_types
        )


class ManagedNodeGroup(NodeGroupBase):
    """An EKS managed node group."""

    scaling_config: Optional[ScalingConfig] = None


__all__ = [
    "KubeletDocument",
    "NodeGroupSGs",
    "NodeGroupSSH",
    "NodeGroupIAMAddonPolicies",
    "NodeGroupIAM",
    "NodeGroupInstancesDistribution",
    "ScalingConfig",
    "NodeGroupBase",
    "NodeGroup",
    "ManagedNodeGroup",
]

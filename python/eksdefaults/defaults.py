"""
eksdefaults/defaults.py

Fills in every unset field of a cluster configuration and its node groups.
Each function mutates its argument in place, only touches fields that are
still unset (labels and tags are re-asserted), and is idempotent: running it
again on an already-defaulted record changes nothing.

Node group resolution order:
  1. instance type      5. volume type
  2. AMI family         6. IAM add-on policies
  3. security groups    7. labels
  4. SSH                8. kubelet extra config + kubeReserved
                        9. tags (managed groups only)

Only step 8 can fail (instance-type lookup or an unsupported shape). The
failure is raised to the caller immediately and the remaining steps for that
node group are not run.
"""

from __future__ import annotations

import logging
from typing import Dict, Union

from eksdefaults.constants import (
    ALL_LOG_TYPES_SENTINELS,
    CLUSTER_NAME_LABEL,
    DEFAULT_FARGATE_NAMESPACES,
    DEFAULT_FARGATE_PROFILE_NAME,
    DEFAULT_MANAGED_NODE_IMAGE_FAMILY,
    DEFAULT_NODE_IMAGE_FAMILY,
    DEFAULT_NODE_SSH_PUBLIC_KEY_PATH,
    DEFAULT_NODE_TYPE,
    DEFAULT_NODE_VOLUME_TYPE,
    MIXED_INSTANCE_TYPE,
    NAMESPACE_DEFAULT,
    NODE_GROUP_NAME_LABEL,
    NODE_GROUP_NAME_TAG,
    NODE_GROUP_TYPE_MANAGED,
    NODE_GROUP_TYPE_TAG,
    SUPPORTED_CLUSTER_LOG_TYPES,
)
from eksdefaults.models.cluster import (
    ClusterConfig,
    ClusterEndpoints,
    ClusterIAM,
    ClusterMeta,
    ClusterNAT,
    ClusterVPC,
    FargateProfile,
    FargateProfileSelector,
    NATGateway,
)
from eksdefaults.models.nodegroup import (
    ManagedNodeGroup,
    NodeGroup,
    NodeGroupIAM,
    NodeGroupIAMAddonPolicies,
    NodeGroupSGs,
    NodeGroupSSH,
    ScalingConfig,
)
from eksdefaults.utils.instance_types import InstanceTypeInfoProvider
from eksdefaults.utils.kubelet import merge_reservations, missing_reservations
from eksdefaults.utils.reservations import compute_reservations

logger = logging.getLogger(__name__)

AnyNodeGroup = Union[NodeGroup, ManagedNodeGroup]


# ----------------------------------------------------------------------
# 1) Cluster-level defaults
# ----------------------------------------------------------------------


def default_cluster_nat() -> ClusterNAT:
    """A single shared NAT gateway."""
    return ClusterNAT(gateway=NATGateway.single)


def cluster_endpoint_access_defaults() -> ClusterEndpoints:
    """Public API endpoint only."""
    return ClusterEndpoints(private_access=False, public_access=True)


def set_default_fargate_profile(cfg: ClusterConfig) -> None:
    """
    Replace the cluster's Fargate profiles with a single profile named
    'fp-default' selecting the 'default' and 'kube-system' namespaces.
    """
    cfg.fargate_profiles = [
        FargateProfile(
            name=DEFAULT_FARGATE_PROFILE_NAME,
            selectors=[
                FargateProfileSelector(namespace=namespace)
                for namespace in DEFAULT_FARGATE_NAMESPACES
            ],
        )
    ]


def set_cluster_config_defaults(cfg: ClusterConfig) -> None:
    """
    Cluster-wide defaults: OIDC disabled, service accounts in the 'default'
    namespace, the 'all' / '*' log sentinel expanded, single NAT gateway and
    a public-only API endpoint.
    """
    if cfg.iam is None:
        cfg.iam = ClusterIAM()

    if cfg.iam.with_oidc is None:
        cfg.iam.with_oidc = False

    for sa in cfg.iam.service_accounts:
        if not sa.namespace:
            sa.namespace = NAMESPACE_DEFAULT

    if cfg.has_cluster_cloudwatch_logging():
        logging_cfg = cfg.cloud_watch.cluster_logging  # type: ignore[union-attr]
        enable_types = logging_cfg.enable_types
        if len(enable_types) == 1 and enable_types[0] in ALL_LOG_TYPES_SENTINELS:
            logging_cfg.enable_types = list(SUPPORTED_CLUSTER_LOG_TYPES)

    if cfg.vpc is None:
        cfg.vpc = ClusterVPC()
    if cfg.vpc.nat is None:
        cfg.vpc.nat = default_cluster_nat()
    if cfg.vpc.nat.gateway is None:
        cfg.vpc.nat.gateway = default_cluster_nat().gateway

    if cfg.vpc.cluster_endpoints is None:
        cfg.vpc.cluster_endpoints = cluster_endpoint_access_defaults()
    endpoints = cfg.vpc.cluster_endpoints
    endpoint_defaults = cluster_endpoint_access_defaults()
    if endpoints.private_access is None:
        endpoints.private_access = endpoint_defaults.private_access
    if endpoints.public_access is None:
        endpoints.public_access = endpoint_defaults.public_access


# ----------------------------------------------------------------------
# 2) Node group sub-resolutions
# ----------------------------------------------------------------------


def set_ssh_defaults(ssh: NodeGroupSSH) -> None:
    """
    Resolve the SSH 'allow' tri-state against the configured keys:
      - no key, allow enabled   => use the default public key path
      - no key, otherwise       => allow disabled
      - some key, not disabled  => allow enabled
      - some key, disabled      => left disabled
    """
    if ssh.key_fields_set() == 0:
        if ssh.allow is True:
            ssh.public_key_path = DEFAULT_NODE_SSH_PUBLIC_KEY_PATH
        else:
            ssh.allow = False
    elif ssh.allow is not False:
        ssh.allow = True


def set_iam_defaults(iam: NodeGroupIAM) -> None:
    """Every add-on policy left unset is disabled."""
    policies = iam.with_addon_policies
    unset = [
        name
        for name in NodeGroupIAMAddonPolicies.model_fields
        if getattr(policies, name) is None
    ]
    for name in unset:
        setattr(policies, name, False)


def set_default_node_labels(
    labels: Dict[str, str], cluster_name: str, node_group_name: str
) -> None:
    labels[CLUSTER_NAME_LABEL] = cluster_name
    labels[NODE_GROUP_NAME_LABEL] = node_group_name


def reservation_instance_type(ng: AnyNodeGroup) -> str:
    """
    The instance type whose hardware facts size the group's reservations.
    Mixed-instance groups use the first type of their distribution.
    """
    instance_type = ng.instance_type or DEFAULT_NODE_TYPE
    if (
        instance_type == MIXED_INSTANCE_TYPE
        and isinstance(ng, NodeGroup)
        and ng.has_mixed_instances()
    ):
        return ng.instances_distribution.instance_types[0]  # type: ignore[union-attr]
    return instance_type


def set_kubelet_extra_config_defaults(
    ng: AnyNodeGroup, meta: ClusterMeta, provider: InstanceTypeInfoProvider
) -> None:
    """
    Add cpu, memory and ephemeral-storage kubeReserved values derived from
    the group's instance type, keeping any value the user already set.
    The instance type is only looked up if at least one value is missing.

    Raises:
        ReservationError: The lookup or a calculation failed.
    """
    if ng.kubelet_extra_config is None:
        ng.kubelet_extra_config = {}

    missing = missing_reservations(ng.kubelet_extra_config)
    if not missing:
        return

    entries = compute_reservations(
        reservation_instance_type(ng), meta, provider, missing
    )
    merge_reservations(ng.kubelet_extra_config, entries)
    logger.info(
        "Node group %s: reserved %s",
        ng.name,
        ", ".join(f"{e.resource_type.value}={e.quantity}" for e in entries),
    )


# ----------------------------------------------------------------------
# 3) Node group cascades
# ----------------------------------------------------------------------


def _set_shared_node_group_defaults(
    ng: AnyNodeGroup,
    meta: ClusterMeta,
    provider: InstanceTypeInfoProvider,
    ami_family: str,
) -> None:
    """Steps 2-8, common to unmanaged and managed node groups."""
    if not ng.ami_family:
        ng.ami_family = ami_family

    if ng.security_groups is None:
        ng.security_groups = NodeGroupSGs()
    if ng.security_groups.with_local is None:
        ng.security_groups.with_local = True
    if ng.security_groups.with_shared is None:
        ng.security_groups.with_shared = True

    if ng.ssh is None:
        ng.ssh = NodeGroupSSH(allow=False)
    set_ssh_defaults(ng.ssh)

    if not ng.volume_type:
        ng.volume_type = DEFAULT_NODE_VOLUME_TYPE

    if ng.iam is None:
        ng.iam = NodeGroupIAM()
    set_iam_defaults(ng.iam)

    if ng.labels is None:
        ng.labels = {}
    set_default_node_labels(ng.labels, meta.name, ng.name)

    set_kubelet_extra_config_defaults(ng, meta, provider)


def set_node_group_defaults(
    ng: NodeGroup, meta: ClusterMeta, provider: InstanceTypeInfoProvider
) -> None:
    """
    Fill in an unmanaged node group.

    Raises:
        ReservationError: Kubelet reservations could not be computed.
    """
    if not ng.instance_type:
        ng.instance_type = (
            MIXED_INSTANCE_TYPE if ng.has_mixed_instances() else DEFAULT_NODE_TYPE
        )

    _set_shared_node_group_defaults(ng, meta, provider, DEFAULT_NODE_IMAGE_FAMILY)
    logger.debug("Defaults applied to node group %s", ng.name)


def set_managed_node_group_defaults(
    ng: ManagedNodeGroup, meta: ClusterMeta, provider: InstanceTypeInfoProvider
) -> None:
    """
    Fill in a managed node group, then tag it with its name and type.

    Raises:
        ReservationError: Kubelet reservations could not be computed.
    """
    if not ng.instance_type:
        ng.instance_type = DEFAULT_NODE_TYPE

    if ng.scaling_config is None:
        ng.scaling_config = ScalingConfig()

    _set_shared_node_group_defaults(
        ng, meta, provider, DEFAULT_MANAGED_NODE_IMAGE_FAMILY
    )

    if ng.tags is None:
        ng.tags = {}
    ng.tags[NODE_GROUP_NAME_TAG] = ng.name
    ng.tags[NODE_GROUP_TYPE_TAG] = NODE_GROUP_TYPE_MANAGED
    logger.debug("Defaults applied to managed node group %s", ng.name)


def set_config_defaults(
    cfg: ClusterConfig, provider: InstanceTypeInfoProvider
) -> None:
    """
    Default the cluster and then each of its node groups, in order. Stops at
    the first node group whose reservations cannot be computed.
    """
    set_cluster_config_defaults(cfg)
    for ng in cfg.node_groups:
        set_node_group_defaults(ng, cfg.metadata, provider)
    for mng in cfg.managed_node_groups:
        set_managed_node_group_defaults(mng, cfg.metadata, provider)


__all__ = [
    "default_cluster_nat",
    "cluster_endpoint_access_defaults",
    "set_default_fargate_profile",
    "set_cluster_config_defaults",
    "set_ssh_defaults",
    "set_iam_defaults",
    "set_default_node_labels",
    "reservation_instance_type",
    "set_kubelet_extra_config_defaults",
    "set_node_group_defaults",
    "set_managed_node_group_defaults",
    "set_config_defaults",
]

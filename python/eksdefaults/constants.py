"""
eksdefaults/constants.py

Fixed default values applied to cluster and node group configurations.
"""

from typing import Tuple

DEFAULT_NODE_TYPE = "m5.large"
MIXED_INSTANCE_TYPE = "mixed"

NODE_IMAGE_FAMILY_AMAZON_LINUX2 = "AmazonLinux2"
# Separate defaults for unmanaged and managed groups, both Amazon Linux 2.
DEFAULT_NODE_IMAGE_FAMILY = NODE_IMAGE_FAMILY_AMAZON_LINUX2
DEFAULT_MANAGED_NODE_IMAGE_FAMILY = NODE_IMAGE_FAMILY_AMAZON_LINUX2

DEFAULT_NODE_VOLUME_TYPE = "gp2"
DEFAULT_NODE_SSH_PUBLIC_KEY_PATH = "~/.ssh/id_rsa.pub"

# Kubernetes "default" namespace
NAMESPACE_DEFAULT = "default"

CLUSTER_NAME_LABEL = "alpha.eksctl.io/cluster-name"
NODE_GROUP_NAME_LABEL = "alpha.eksctl.io/nodegroup-name"
NODE_GROUP_NAME_TAG = "alpha.eksctl.io/nodegroup-name"
NODE_GROUP_TYPE_TAG = "alpha.eksctl.io/nodegroup-type"
NODE_GROUP_TYPE_MANAGED = "managed"

SUPPORTED_CLUSTER_LOG_TYPES: Tuple[str, ...] = (
    "api",
    "audit",
    "authenticator",
    "controllerManager",
    "scheduler",
)
ALL_LOG_TYPES_SENTINELS: Tuple[str, ...] = ("all", "*")

DEFAULT_FARGATE_PROFILE_NAME = "fp-default"
DEFAULT_FARGATE_NAMESPACES: Tuple[str, ...] = ("default", "kube-system")

# Instance-local storage assumed when the instance type reports none (GB)
DEFAULT_INSTANCE_STORAGE_GB = 20

KUBE_RESERVED_KEY = "kubeReserved"

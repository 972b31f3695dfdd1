"""
eksdefaults

Fills in unset configuration values for EKS clusters and their worker node
groups, including kubelet resource reservations derived from instance types.
"""

__version__ = "0.1.0"

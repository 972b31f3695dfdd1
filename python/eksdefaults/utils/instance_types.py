"""
eksdefaults/utils/instance_types.py

Looks up static hardware facts (vCPUs, memory, instance storage) for an EC2
instance type. The reservation calculator only depends on the
InstanceTypeInfoProvider protocol; EC2InstanceTypeInfoProvider is the boto3
implementation backed by ec2:DescribeInstanceTypes.

Lookups are neither retried nor cached here. Every failure surfaces as a
ReservationError subclass with the provider's message unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError
from typing_extensions import Protocol

from eksdefaults.errors import InstanceTypeNotFound, ProviderError
from eksdefaults.models.instance_type import InstanceTypeFacts
from eksdefaults.models.settings import AWSSettings

logger = logging.getLogger(__name__)

# EC2 API error code for an instance type that does not exist in the region
INVALID_INSTANCE_TYPE_CODE = "InvalidInstanceType"


class InstanceTypeInfoProvider(Protocol):
    """Anything that can resolve an instance type to its hardware facts."""

    def describe(self, instance_type: str, region: str = "") -> InstanceTypeFacts:
        """
        Return the hardware facts for `instance_type` in `region`.
        An empty region means "use the ambient default".

        Raises:
            InstanceTypeNotFound: No facts exist for the instance type.
            ProviderError: The lookup itself failed.
        """
        ...


def facts_from_instance_type_info(info: Mapping[str, Any]) -> InstanceTypeFacts:
    """
    Convert one entry of DescribeInstanceTypes' `InstanceTypes` list into
    InstanceTypeFacts.
    """
    storage_supported = bool(info.get("InstanceStorageSupported", False))
    storage_info = info.get("InstanceStorageInfo") or {}
    return InstanceTypeFacts(
        instance_type=info["InstanceType"],
        default_vcpus=info["VCpuInfo"]["DefaultVCpus"],
        memory_mib=info["MemoryInfo"]["SizeInMiB"],
        instance_storage_supported=storage_supported,
        instance_storage_total_gb=storage_info.get("TotalSizeInGB", 0),
    )


class EC2InstanceTypeInfoProvider:
    """
    InstanceTypeInfoProvider backed by the EC2 DescribeInstanceTypes API.

    Region resolution: the region passed to describe(), else the `REGION`
    environment variable (AWSSettings), else boto3's own default chain.

    Args:
        client: An EC2 client to use for every call, regardless of region.
            Mainly for tests (botocore Stubber) or custom sessions.
        settings: Ambient AWS settings. Loaded from the environment if omitted.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        settings: Optional[AWSSettings] = None,
    ) -> None:
        self._client = client
        self._settings = settings if settings is not None else AWSSettings()
        self._clients_by_region: Dict[str, Any] = {}

    def _resolve_region(self, region: str) -> Optional[str]:
        return region or self._settings.region or None

    def _client_for(self, region: str) -> Any:
        if self._client is not None:
            return self._client

        resolved = self._resolve_region(region)
        key = resolved or ""
        if key not in self._clients_by_region:
            session = boto3.session.Session(
                region_name=resolved,
                profile_name=self._settings.aws_profile,
            )
            self._clients_by_region[key] = session.client("ec2")
        return self._clients_by_region[key]

    def describe(self, instance_type: str, region: str = "") -> InstanceTypeFacts:
        try:
            client = self._client_for(region)
            logger.debug(
                "Describing instance type %s (region=%r)", instance_type, region
            )
            response = client.describe_instance_types(InstanceTypes=[instance_type])
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code == INVALID_INSTANCE_TYPE_CODE:
                raise InstanceTypeNotFound(str(exc), instance_type) from exc
            raise ProviderError(str(exc), instance_type) from exc
        except BotoCoreError as exc:
            raise ProviderError(str(exc), instance_type) from exc

        infos = response.get("InstanceTypes", [])
        if not infos:
            raise InstanceTypeNotFound(
                f"No info found for instance type: {instance_type}", instance_type
            )
        try:
            return facts_from_instance_type_info(infos[0])
        except (KeyError, TypeError, ValidationError) as exc:
            raise ProviderError(
                f"Malformed info for instance type {instance_type}: {exc}",
                instance_type,
            ) from exc


__all__ = [
    "InstanceTypeInfoProvider",
    "EC2InstanceTypeInfoProvider",
    "facts_from_instance_type_info",
]

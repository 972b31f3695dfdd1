"""Tests for the EC2 DescribeInstanceTypes adapter."""

from __future__ import annotations

import boto3
import pytest
from botocore.stub import Stubber

from eksdefaults.errors import InstanceTypeNotFound, ProviderError
from eksdefaults.models.settings import AWSSettings
from eksdefaults.utils.instance_types import (
    EC2InstanceTypeInfoProvider,
    facts_from_instance_type_info,
)

M5D_LARGE = {
    "InstanceType": "m5d.large",
    "VCpuInfo": {"DefaultVCpus": 2},
    "MemoryInfo": {"SizeInMiB": 8192},
    "InstanceStorageSupported": True,
    "InstanceStorageInfo": {"TotalSizeInGB": 75},
}

M5_LARGE = {
    "InstanceType": "m5.large",
    "VCpuInfo": {"DefaultVCpus": 2},
    "MemoryInfo": {"SizeInMiB": 8192},
    "InstanceStorageSupported": False,
}


@pytest.fixture
def ec2_client():
    return boto3.client(
        "ec2",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubbed(ec2_client):
    with Stubber(ec2_client) as stubber:
        yield ec2_client, stubber
        stubber.assert_no_pending_responses()


class TestFactsFromInstanceTypeInfo:
    """Tests for facts_from_instance_type_info."""

    def test_with_instance_storage(self) -> None:
        facts = facts_from_instance_type_info(M5D_LARGE)
        assert facts.instance_type == "m5d.large"
        assert facts.default_vcpus == 2
        assert facts.memory_mib == 8192
        assert facts.instance_storage_supported is True
        assert facts.instance_storage_total_gb == 75

    def test_without_instance_storage(self) -> None:
        facts = facts_from_instance_type_info(M5_LARGE)
        assert facts.instance_storage_supported is False
        assert facts.instance_storage_total_gb == 0


class TestEC2InstanceTypeInfoProvider:
    """Tests for EC2InstanceTypeInfoProvider.describe."""

    def test_describe(self, stubbed) -> None:
        client, stubber = stubbed
        stubber.add_response(
            "describe_instance_types",
            {"InstanceTypes": [M5D_LARGE]},
            {"InstanceTypes": ["m5d.large"]},
        )
        provider = EC2InstanceTypeInfoProvider(client=client, settings=AWSSettings())
        facts = provider.describe("m5d.large", "us-east-1")
        assert facts.instance_storage_total_gb == 75

    def test_empty_result_is_not_found(self, stubbed) -> None:
        client, stubber = stubbed
        stubber.add_response("describe_instance_types", {"InstanceTypes": []})
        provider = EC2InstanceTypeInfoProvider(client=client, settings=AWSSettings())
        with pytest.raises(InstanceTypeNotFound) as exc_info:
            provider.describe("m5.huge")
        assert str(exc_info.value) == "No info found for instance type: m5.huge"

    def test_invalid_instance_type_is_not_found(self, stubbed) -> None:
        client, stubber = stubbed
        stubber.add_client_error(
            "describe_instance_types",
            service_error_code="InvalidInstanceType",
            service_message="The following supplied instance types do not exist: [m5.huge]",
            http_status_code=400,
        )
        provider = EC2InstanceTypeInfoProvider(client=client, settings=AWSSettings())
        with pytest.raises(InstanceTypeNotFound) as exc_info:
            provider.describe("m5.huge")
        assert "do not exist" in str(exc_info.value)
        assert exc_info.value.instance_type == "m5.huge"

    def test_api_error_is_provider_error(self, stubbed) -> None:
        client, stubber = stubbed
        stubber.add_client_error(
            "describe_instance_types",
            service_error_code="UnauthorizedOperation",
            service_message="You are not authorized to perform this operation.",
            http_status_code=403,
        )
        provider = EC2InstanceTypeInfoProvider(client=client, settings=AWSSettings())
        with pytest.raises(ProviderError) as exc_info:
            provider.describe("m5.large")
        assert "UnauthorizedOperation" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None

    def test_malformed_info_is_provider_error(self, stubbed) -> None:
        client, stubber = stubbed
        stubber.add_response(
            "describe_instance_types",
            {"InstanceTypes": [{"InstanceType": "m5.large"}]},
        )
        provider = EC2InstanceTypeInfoProvider(client=client, settings=AWSSettings())
        with pytest.raises(ProviderError) as exc_info:
            provider.describe("m5.large")
        assert "m5.large" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestRegionResolution:
    """Tests for region fallbacks."""

    def test_explicit_region_wins(self) -> None:
        provider = EC2InstanceTypeInfoProvider(settings=AWSSettings(region="eu-west-1"))
        assert provider._resolve_region("us-east-2") == "us-east-2"

    def test_settings_region_used_when_blank(self) -> None:
        provider = EC2InstanceTypeInfoProvider(settings=AWSSettings(region="eu-west-1"))
        assert provider._resolve_region("") == "eu-west-1"

    def test_no_region_defers_to_boto3(self) -> None:
        provider = EC2InstanceTypeInfoProvider(settings=AWSSettings(region=None))
        assert provider._resolve_region("") is None

    def test_region_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REGION", "ap-south-1")
        assert AWSSettings().region == "ap-south-1"

    def test_client_per_region(self, monkeypatch: pytest.MonkeyPatch) -> None:
        created = []

        class _Session:
            def __init__(self, region_name=None, profile_name=None):
                self.region_name = region_name

            def client(self, service):
                created.append((service, self.region_name))
                return object()

        monkeypatch.setattr(boto3.session, "Session", _Session)
        provider = EC2InstanceTypeInfoProvider(settings=AWSSettings(region=None))
        first = provider._client_for("us-east-1")
        assert provider._client_for("us-east-1") is first
        provider._client_for("eu-west-1")
        assert created == [("ec2", "us-east-1"), ("ec2", "eu-west-1")]

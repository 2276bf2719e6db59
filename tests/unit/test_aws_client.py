"""Unit tests for the AWS EFS provider."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from efs_request_operator.services.aws.client import (
    EfsProvider,
    format_client_error,
    format_provider_error,
)
from efs_request_operator.services.efs.base import (
    FailureKind,
    FileSystemCreated,
    ProviderFailure,
)


class TestEfsProvider:
    """Test EfsProvider implementation."""

    @pytest.fixture
    def provider(self) -> EfsProvider:
        """Create a test provider with a mocked boto3 client."""
        client = MagicMock()
        client.create_file_system.return_value = {"FileSystemId": "fs-123", "LifeCycleState": "creating"}
        return EfsProvider(region="us-east-1", client=client)

    def test_provider_initialization(self) -> None:
        """Test provider initialization builds a boto3 client."""
        provider = EfsProvider(region="eu-west-1", performance_mode="maxIO", encrypted=True)

        assert provider.region == "eu-west-1"
        assert provider.performance_mode == "maxIO"
        assert provider.encrypted is True
        assert provider.client.meta.region_name == "eu-west-1"

    def test_create_returns_file_system_id(self, provider: EfsProvider) -> None:
        """Test a successful creation."""
        result = provider.create_file_system("vol1", "alice")

        assert result == FileSystemCreated("fs-123")

    def test_create_propagates_tags(self, provider: EfsProvider) -> None:
        """Test that name and owner are attached as tags."""
        provider.create_file_system("vol1", "alice")

        kwargs = provider.client.create_file_system.call_args.kwargs
        tags = {tag["Key"]: tag["Value"] for tag in kwargs["Tags"]}
        assert tags == {"Name": "vol1", "Owner": "alice"}
        assert "CreationToken" not in kwargs

    def test_create_sends_creation_token(self, provider: EfsProvider) -> None:
        """Test that the creation token is forwarded when given."""
        provider.create_file_system("vol1", "alice", creation_token="uid-1")

        kwargs = provider.client.create_file_system.call_args.kwargs
        assert kwargs["CreationToken"] == "uid-1"
        assert kwargs["PerformanceMode"] == "generalPurpose"
        assert kwargs["Encrypted"] is False

    def test_create_single_call(self, provider: EfsProvider) -> None:
        """Test that the adapter never retries on its own."""
        provider.client.create_file_system.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"}}, "CreateFileSystem"
        )

        provider.create_file_system("vol1", "alice")

        assert provider.client.create_file_system.call_count == 1

    def test_create_service_error(self, provider: EfsProvider) -> None:
        """Test that service errors are returned, not raised."""
        provider.client.create_file_system.side_effect = ClientError(
            {"Error": {"Code": "FileSystemLimitExceeded", "Message": "quota exceeded"}},
            "CreateFileSystem",
        )

        result = provider.create_file_system("vol1", "alice")

        assert isinstance(result, ProviderFailure)
        assert result.kind is FailureKind.SERVICE
        assert result.code == "FileSystemLimitExceeded"
        assert "quota exceeded" in result.message

    def test_create_opaque_error_body(self, provider: EfsProvider) -> None:
        """Test that an unparsed error body still yields a description."""
        error = ClientError({"Error": {"Code": "Unknown", "Message": ""}}, "CreateFileSystem")
        provider.client.create_file_system.side_effect = error

        result = provider.create_file_system("vol1", "alice")

        assert isinstance(result, ProviderFailure)
        assert result.message == str(error)

    def test_create_already_exists_recovers_id(self, provider: EfsProvider) -> None:
        """Test that a repeated creation token resolves to the existing file system."""
        provider.client.create_file_system.side_effect = ClientError(
            {
                "Error": {"Code": "FileSystemAlreadyExists", "Message": "File system already exists"},
                "FileSystemId": "fs-existing",
            },
            "CreateFileSystem",
        )

        result = provider.create_file_system("vol1", "alice", creation_token="uid-1")

        assert result == FileSystemCreated("fs-existing")

    def test_create_transport_error(self, provider: EfsProvider) -> None:
        """Test that connection errors become transport failures."""
        provider.client.create_file_system.side_effect = EndpointConnectionError(
            endpoint_url="https://elasticfilesystem.us-east-1.amazonaws.com"
        )

        result = provider.create_file_system("vol1", "alice")

        assert isinstance(result, ProviderFailure)
        assert result.kind is FailureKind.TRANSPORT
        assert "Could not connect" in result.message

    def test_create_unexpected_error(self, provider: EfsProvider) -> None:
        """Test that nothing raises past the adapter."""
        provider.client.create_file_system.side_effect = RuntimeError("kaboom")

        result = provider.create_file_system("vol1", "alice")

        assert result == ProviderFailure(FailureKind.UNKNOWN, "kaboom")

    def test_create_missing_id_in_response(self, provider: EfsProvider) -> None:
        """Test that a malformed response is reported as a failure."""
        provider.client.create_file_system.return_value = {}

        result = provider.create_file_system("vol1", "alice")

        assert isinstance(result, ProviderFailure)
        assert result.kind is FailureKind.UNKNOWN

    def test_connectivity(self, provider: EfsProvider) -> None:
        """Test connectivity check."""
        provider.client.describe_file_systems.return_value = {"FileSystems": []}
        assert provider.test_connectivity() is True

        provider.client.describe_file_systems.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DescribeFileSystems"
        )
        assert provider.test_connectivity() is False


class TestFormatErrors:
    """Test cases for provider error flattening."""

    def test_format_client_error_message(self) -> None:
        """Test that the parsed message wins."""
        error = ClientError({"Error": {"Code": "BadRequest", "Message": "bad tag"}}, "CreateFileSystem")
        assert format_client_error(error) == ("bad tag", "BadRequest")

    def test_format_client_error_code_only(self) -> None:
        """Test fallback to the error code."""
        error = ClientError({"Error": {"Code": "InternalServerError"}}, "CreateFileSystem")
        assert format_client_error(error) == ("InternalServerError", "InternalServerError")

    def test_format_provider_error_unknown(self) -> None:
        """Test empty exceptions still get a description."""
        failure = format_provider_error(ValueError())
        assert failure.kind is FailureKind.UNKNOWN
        assert failure.message == "ValueError"

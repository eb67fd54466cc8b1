"""Unit tests for Docker error translation."""

import pytest
from docker.errors import APIError, DockerException, ImageNotFound, NotFound

from lpn.models.errors import (
    ContainerCreateError,
    ContainerNotFoundError,
    ContainerOperationError,
    ContainerStartError,
    ErrorType,
    ImageInspectError,
    ImagePullError,
    PartialFailureError,
    RuntimeUnavailableError,
)
from lpn.utils.error_handlers import handle_docker_error


class TestHandleDockerError:
    """Tests for handle_docker_error function."""

    @pytest.mark.parametrize(
        "operation,expected",
        [
            ("pull", ImagePullError),
            ("create", ContainerCreateError),
            ("start", ContainerStartError),
            ("inspect", ImageInspectError),
        ],
    )
    def test_fatal_operations(self, operation, expected):
        result = handle_docker_error(APIError("boom"), operation, "lpn-ce")

        assert isinstance(result, expected)
        assert result.fatal is True
        assert result.resource == "lpn-ce"

    def test_not_found_container(self):
        result = handle_docker_error(NotFound("gone"), "stop", "lpn-ce")

        assert isinstance(result, ContainerNotFoundError)
        assert result.fatal is False

    def test_image_not_found(self):
        result = handle_docker_error(ImageNotFound("gone"), "remove image", "liferay/portal:7.1")

        assert result.error_type is ErrorType.IMAGE_INSPECT_FAILED
        assert result.fatal is False

    def test_api_error(self):
        result = handle_docker_error(APIError("conflict"), "stop", "lpn-ce")

        assert isinstance(result, ContainerOperationError)
        assert result.operation == "stop"

    def test_docker_exception(self):
        result = handle_docker_error(DockerException("socket"), "list")

        assert isinstance(result, RuntimeUnavailableError)

    def test_log_fields(self):
        fields = handle_docker_error(APIError("boom"), "stop", "lpn-ce").to_log_fields()

        assert fields["operation"] == "stop"
        assert fields["resource"] == "lpn-ce"
        assert fields["error_type"] == "container_operation_failed"


class TestPartialFailureError:
    """Tests for PartialFailureError."""

    def test_keeps_every_failure(self):
        errors = [
            ContainerOperationError("db-ce", "stop", "a"),
            ContainerOperationError("lpn-ce", "stop", "b"),
        ]

        error = PartialFailureError("stop", errors)

        assert error.errors == errors
        assert error.last_error.resource == "lpn-ce"
        assert "db-ce, lpn-ce" in error.message
        assert error.fatal is False

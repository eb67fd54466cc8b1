"""Error models and exception classes for lpn."""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorType(str, Enum):
    """Error type enumeration."""

    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    IMAGE_PULL_FAILED = "image_pull_failed"
    IMAGE_INSPECT_FAILED = "image_inspect_failed"
    CONTAINER_CREATE_FAILED = "container_create_failed"
    CONTAINER_START_FAILED = "container_start_failed"
    CONTAINER_NOT_FOUND = "container_not_found"
    CONTAINER_OPERATION_FAILED = "container_operation_failed"
    PARTIAL_FAILURE = "partial_failure"
    CONFIGURATION = "configuration"
    EXTERNAL_SERVICE = "external_service"


# Custom Exception Classes


class LpnException(Exception):
    """Base exception for lpn.

    ``fatal`` errors abort the invocation; the others are reported and the
    process exits without a traceback.
    """

    fatal: bool = False

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.CONTAINER_OPERATION_FAILED,
        operation: Optional[str] = None,
        resource: Optional[str] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.operation = operation
        self.resource = resource
        super().__init__(message)

    def to_log_fields(self) -> Dict[str, Any]:
        """Structured context for log entries."""
        fields: Dict[str, Any] = {
            "error_type": self.error_type.value,
            "error": self.message,
        }
        if self.operation:
            fields["operation"] = self.operation
        if self.resource:
            fields["resource"] = self.resource
        return fields


class FatalError(LpnException):
    """Errors after which no further operation is meaningful."""

    fatal = True


class RuntimeUnavailableError(FatalError):
    """The Docker engine cannot be reached."""

    def __init__(self, message: str = "Could not get Docker client", **kwargs):
        super().__init__(
            message=message, error_type=ErrorType.RUNTIME_UNAVAILABLE, **kwargs
        )


class ImagePullError(FatalError):
    """An image could not be pulled."""

    def __init__(self, image: str, reason: str = "", **kwargs):
        message = f"The image could not be pulled: {image}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            message=message,
            error_type=ErrorType.IMAGE_PULL_FAILED,
            operation="pull",
            resource=image,
            **kwargs,
        )


class ImageInspectError(FatalError):
    """An image or container could not be inspected."""

    def __init__(self, resource: str, reason: str = "", **kwargs):
        message = f"Could not inspect {resource}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_type=ErrorType.IMAGE_INSPECT_FAILED,
            operation="inspect",
            resource=resource,
            **kwargs,
        )


class ContainerCreateError(FatalError):
    """The engine refused to create a container."""

    def __init__(self, container: str, reason: str = "", **kwargs):
        message = f"Could not create container {container}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_type=ErrorType.CONTAINER_CREATE_FAILED,
            operation="create",
            resource=container,
            **kwargs,
        )


class ContainerStartError(FatalError):
    """A freshly created container could not be started."""

    def __init__(self, container: str, reason: str = "", **kwargs):
        message = f"Could not start container {container}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_type=ErrorType.CONTAINER_START_FAILED,
            operation="start",
            resource=container,
            **kwargs,
        )


class UnsupportedVariantError(FatalError):
    """An image or database variant outside the supported set."""

    def __init__(self, variant: str, supported: Optional[List[str]] = None):
        message = f"Non supported type: {variant}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(
            message=message, error_type=ErrorType.CONFIGURATION, resource=variant
        )


class ContainerNotFoundError(LpnException):
    """No container carries the expected ownership label."""

    def __init__(self, container: str, label: Optional[str] = None, **kwargs):
        self.label = label
        super().__init__(
            message=f"Error response from daemon: No such container: {container}",
            error_type=ErrorType.CONTAINER_NOT_FOUND,
            resource=container,
            **kwargs,
        )


class ContainerOperationError(LpnException):
    """A single container operation failed."""

    def __init__(self, container: str, operation: str, reason: str = ""):
        message = f"Could not {operation} container {container}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            error_type=ErrorType.CONTAINER_OPERATION_FAILED,
            operation=operation,
            resource=container,
        )


class PartialFailureError(LpnException):
    """Some matches of a multi-container operation failed.

    Every failure is kept in ``errors``; ``last_error`` is the most recent.
    """

    def __init__(self, operation: str, errors: List[LpnException]):
        self.errors = list(errors)
        names = ", ".join(e.resource or "?" for e in self.errors)
        super().__init__(
            message=f"{operation} failed for {len(self.errors)} container(s): {names}",
            error_type=ErrorType.PARTIAL_FAILURE,
            operation=operation,
        )

    @property
    def last_error(self) -> LpnException:
        return self.errors[-1]


class ExternalServiceError(LpnException):
    """External service integration errors."""

    def __init__(self, service: str, message: str = None, **kwargs):
        error_message = message or f"External service error: {service}"
        super().__init__(
            message=error_message,
            error_type=ErrorType.EXTERNAL_SERVICE,
            resource=service,
            **kwargs,
        )

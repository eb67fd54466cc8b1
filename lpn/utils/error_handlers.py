"""Translation of Docker errors into lpn exceptions."""

# Third-party imports
import structlog
from docker.errors import APIError, DockerException, ImageNotFound, NotFound

# Local application imports
from ..models.errors import (
    ContainerCreateError,
    ContainerNotFoundError,
    ContainerOperationError,
    ContainerStartError,
    ErrorType,
    ImageInspectError,
    ImagePullError,
    LpnException,
    RuntimeUnavailableError,
)

logger = structlog.get_logger(__name__)


def _reason(error: Exception) -> str:
    if isinstance(error, APIError) and error.explanation:
        return str(error.explanation)
    return str(error)


def handle_docker_error(
    error: Exception, operation: str = "container operation", resource: str = ""
) -> LpnException:
    """Convert Docker errors to the matching lpn exception.

    ``operation`` picks the exception family (``pull``, ``create``, ``start``,
    ``inspect``); any other operation on a container becomes a
    ContainerOperationError.
    """
    reason = _reason(error)

    if isinstance(error, LpnException):
        return error
    if operation == "pull":
        return ImagePullError(resource, reason)
    if operation == "create":
        return ContainerCreateError(resource, reason)
    if operation == "start":
        return ContainerStartError(resource, reason)
    if operation == "inspect":
        if isinstance(error, (ImageNotFound, NotFound)):
            return ImageInspectError(resource, "not found")
        return ImageInspectError(resource, reason)
    if isinstance(error, ImageNotFound):
        return LpnException(
            f"No such image: {resource}",
            ErrorType.IMAGE_INSPECT_FAILED,
            operation=operation,
            resource=resource,
        )
    if isinstance(error, NotFound):
        return ContainerNotFoundError(resource, operation=operation)
    if isinstance(error, APIError):
        return ContainerOperationError(resource, operation, reason)
    if isinstance(error, DockerException):
        return RuntimeUnavailableError(
            f"Docker service error during {operation}: {reason}",
            operation=operation,
            resource=resource or None,
        )
    return ContainerOperationError(resource, operation, reason)


def log_error(error: LpnException, event: str, **fields) -> None:
    """Log an lpn exception with its structured context."""
    log = logger.error if error.fatal else logger.warning
    log(event, **error.to_log_fields(), **fields)

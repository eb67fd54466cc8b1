"""Data models for lpn."""

from .container import (
    ContainerRecord,
    ContainerSpec,
    ContainerStatus,
    RunOptions,
    DB_TYPE_LABEL,
    DEPENDS_ON_LABEL,
    LPN_TYPE_LABEL,
)
from .database import (
    DB_ALIAS,
    DatabaseImage,
    EnvVariables,
    JDBCConnection,
    MySQL,
    PostgreSQL,
    get_database,
    get_supported_databases,
)
from .errors import (
    ContainerCreateError,
    ContainerNotFoundError,
    ContainerOperationError,
    ContainerStartError,
    ErrorType,
    ExternalServiceError,
    FatalError,
    ImageInspectError,
    ImagePullError,
    LpnException,
    PartialFailureError,
    RuntimeUnavailableError,
    UnsupportedVariantError,
)
from .image import Image, ImageType, VARIANTS, get_image, get_supported_variants
from .tags import TagRow, TagsPage, TagsResponse

__all__ = [
    # Container models
    "ContainerRecord",
    "ContainerSpec",
    "ContainerStatus",
    "RunOptions",
    "DB_TYPE_LABEL",
    "DEPENDS_ON_LABEL",
    "LPN_TYPE_LABEL",
    # Images
    "Image",
    "ImageType",
    "VARIANTS",
    "get_image",
    "get_supported_variants",
    # Databases
    "DB_ALIAS",
    "DatabaseImage",
    "EnvVariables",
    "JDBCConnection",
    "MySQL",
    "PostgreSQL",
    "get_database",
    "get_supported_databases",
    # Tags
    "TagRow",
    "TagsPage",
    "TagsResponse",
    # Errors
    "ContainerCreateError",
    "ContainerNotFoundError",
    "ContainerOperationError",
    "ContainerStartError",
    "ErrorType",
    "ExternalServiceError",
    "FatalError",
    "ImageInspectError",
    "ImagePullError",
    "LpnException",
    "PartialFailureError",
    "RuntimeUnavailableError",
    "UnsupportedVariantError",
]

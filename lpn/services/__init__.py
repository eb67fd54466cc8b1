"""Services for lpn."""

from .container import (
    ContainerDiscovery,
    ContainerExecutor,
    ContainerManager,
    DockerClientFactory,
    ImagePuller,
)
from .orchestrator import StackOrchestrator, jdbc_environment, liferay_env_name
from .tags import TagsClient

__all__ = [
    "ContainerDiscovery",
    "ContainerExecutor",
    "ContainerManager",
    "DockerClientFactory",
    "ImagePuller",
    "StackOrchestrator",
    "TagsClient",
    "jdbc_environment",
    "liferay_env_name",
]

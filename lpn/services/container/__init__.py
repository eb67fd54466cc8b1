"""Container management services.

This package provides Docker container management functionality split into:
- client.py: Docker client factory and initialization
- images.py: Image presence checks, pulls and removals
- discovery.py: Label based lookup and start/stop ordering
- manager.py: Container lifecycle management
- executor.py: Commands, file deployment and logs
"""

from .client import DockerClientFactory
from .discovery import ContainerDiscovery, order_for_start, order_for_stop
from .executor import ContainerExecutor
from .images import ImagePuller
from .manager import ContainerManager

__all__ = [
    "ContainerManager",
    "ContainerDiscovery",
    "ContainerExecutor",
    "DockerClientFactory",
    "ImagePuller",
    "order_for_start",
    "order_for_stop",
]

"""Data models for containers managed by lpn.

These models describe what the engine reports about a container and what
lpn asks the engine to create.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .image import DEBUG_PORT, GOGO_SHELL_PORT, HTTP_PORT

# Ownership labels
LPN_TYPE_LABEL = "lpn-type"
DB_TYPE_LABEL = "db-type"
DEPENDS_ON_LABEL = "lpn-depends-on"


class ContainerStatus(str, Enum):
    """Status of a container as reported by Docker."""

    CREATED = "created"
    RUNNING = "running"
    PAUSED = "paused"
    RESTARTING = "restarting"
    EXITED = "exited"
    REMOVING = "removing"
    DEAD = "dead"
    UNKNOWN = "unknown"


@dataclass
class ContainerRecord:
    """Read-only view of a container, re-read from the engine on every query."""

    id: str
    name: str
    status: ContainerStatus = ContainerStatus.UNKNOWN
    image: str = ""
    labels: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_container(cls, container: Any) -> "ContainerRecord":
        """Build a record from a ``docker.models.containers.Container``."""
        try:
            status = ContainerStatus(getattr(container, "status", "unknown"))
        except ValueError:
            status = ContainerStatus.UNKNOWN

        image = ""
        attrs = getattr(container, "attrs", None) or {}
        if isinstance(attrs, dict):
            image = attrs.get("Config", {}).get("Image") or attrs.get("Image", "")

        return cls(
            id=container.id,
            name=container.name.lstrip("/"),
            status=status,
            image=image,
            labels=dict(container.labels or {}),
        )

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def depends_on(self) -> List[str]:
        """Names of the containers this one links to."""
        value = self.labels.get(DEPENDS_ON_LABEL, "")
        return [name for name in value.split(",") if name]


@dataclass
class RunOptions:
    """Caller-provided options for running a Liferay stack."""

    http_port: int = HTTP_PORT
    gogo_port: int = GOGO_SHELL_PORT
    debug: bool = False
    debug_port: int = DEBUG_PORT
    memory: str = ""


@dataclass
class ContainerSpec:
    """Everything the engine needs to create one container.

    Built fresh for every create call, never stored.
    """

    name: str
    image: str
    environment: List[str] = field(default_factory=list)
    exposed_ports: List[int] = field(default_factory=list)
    port_bindings: Dict[int, Tuple[str, int]] = field(default_factory=dict)
    mounts: List[Any] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    links: Dict[str, str] = field(default_factory=dict)
    user: Optional[str] = None

    def expose(self, container_port: int, host_port: Optional[int] = None,
               host_ip: str = "0.0.0.0") -> None:
        """Expose a tcp port, binding it on the host when host_port is set."""
        if container_port not in self.exposed_ports:
            self.exposed_ports.append(container_port)
        if host_port is not None:
            self.port_bindings[container_port] = (host_ip, host_port)

    @property
    def exposed_port_names(self) -> List[str]:
        return [f"{port}/tcp" for port in self.exposed_ports]

    def env_dict(self) -> Dict[str, str]:
        return dict(item.split("=", 1) for item in self.environment)

    def to_log_fields(self) -> Dict[str, Any]:
        return {
            "container": self.name,
            "image": self.image,
            "env": self.environment,
            "ports": self.exposed_port_names,
            "port_bindings": {
                f"{port}/tcp": f"{ip}:{host}"
                for port, (ip, host) in self.port_bindings.items()
            },
            "mounts": [m.get("Target") for m in self.mounts],
            "links": self.links,
        }

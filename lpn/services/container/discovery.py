"""Container discovery by ownership label.

Labels, never names, tell which containers belong to a variant: a stack
holds the Liferay container and the database it links to.
"""

from typing import Dict, List, Optional

import structlog
from docker import DockerClient
from docker.errors import DockerException

from ...models.container import LPN_TYPE_LABEL, ContainerRecord
from ...utils.error_handlers import handle_docker_error

logger = structlog.get_logger(__name__)


def lpn_type_label(lpn_type: str) -> str:
    """Label selector for the containers of a variant."""
    return f"{LPN_TYPE_LABEL}={lpn_type}"


class ContainerDiscovery:
    """Finds containers through the engine on every call."""

    def __init__(self, docker_client: DockerClient):
        self.client = docker_client

    def find_by_label(self, label: str) -> List[ContainerRecord]:
        """List all containers, running or not, carrying ``key=value``.

        Returns an empty list when nothing matches.
        """
        try:
            containers = self.client.containers.list(all=True, filters={"label": label})
        except DockerException as e:
            raise handle_docker_error(e, "list", label) from e

        records = [ContainerRecord.from_container(c) for c in containers]
        logger.debug("Containers found by label", label=label, count=len(records))
        return records

    def find_by_name(self, name: str) -> Optional[ContainerRecord]:
        """Exact-name lookup among all containers."""
        try:
            containers = self.client.containers.list(all=True, filters={"name": name})
        except DockerException as e:
            raise handle_docker_error(e, "list", name) from e

        # The name filter matches substrings
        for container in containers:
            if container.name.lstrip("/") == name:
                return ContainerRecord.from_container(container)
        return None


def order_for_start(records: List[ContainerRecord], app_name: str) -> List[ContainerRecord]:
    """Order a stack so every container starts after the ones it depends on.

    Edges come from the ``lpn-depends-on`` label. A canonical application
    container without that label is treated as depending on every other
    container of the stack, so it is always started last.
    """
    by_name: Dict[str, ContainerRecord] = {r.name: r for r in records}
    dependencies: Dict[str, List[str]] = {}
    for record in records:
        deps = [d for d in record.depends_on if d in by_name]
        if record.name == app_name and not record.depends_on:
            deps = [r.name for r in records if r.name != app_name]
        dependencies[record.name] = deps

    ordered: List[ContainerRecord] = []
    visited: Dict[str, bool] = {}

    def visit(name: str) -> None:
        state = visited.get(name)
        if state is True:
            return
        if state is False:
            # Cycle: keep discovery order for the remaining edge
            return
        visited[name] = False
        for dep in dependencies[name]:
            visit(dep)
        visited[name] = True
        ordered.append(by_name[name])

    # Application container is visited last to keep it at the end on ties
    for record in sorted(records, key=lambda r: r.name == app_name):
        visit(record.name)

    return ordered


def order_for_stop(records: List[ContainerRecord], app_name: str) -> List[ContainerRecord]:
    """Dependents stop before the containers they link to."""
    return list(reversed(order_for_start(records, app_name)))

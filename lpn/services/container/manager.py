"""Container lifecycle management."""

import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import structlog
from docker import DockerClient
from docker.errors import DockerException
from docker.types import Mount

from ...config import settings
from ...models.container import (
    DB_TYPE_LABEL,
    LPN_TYPE_LABEL,
    ContainerRecord,
    ContainerSpec,
)
from ...models.database import DatabaseImage
from ...models.errors import (
    ContainerNotFoundError,
    ImageInspectError,
    LpnException,
    PartialFailureError,
)
from ...models.image import HTTP_PORT, Image
from ...utils.error_handlers import handle_docker_error
from .discovery import ContainerDiscovery, lpn_type_label, order_for_start, order_for_stop
from .images import ImagePuller

logger = structlog.get_logger(__name__)


class ContainerManager:
    """Drives create, start, stop and remove against the Docker engine."""

    def __init__(
        self,
        docker_client: DockerClient,
        workspace: Optional[Path] = None,
        puller: Optional[ImagePuller] = None,
        discovery: Optional[ContainerDiscovery] = None,
    ):
        self.client = docker_client
        self.workspace = Path(workspace) if workspace is not None else settings.docker.workspace
        self.puller = puller or ImagePuller(docker_client)
        self.discovery = discovery or ContainerDiscovery(docker_client)

    def exists(self, name: str) -> bool:
        """Check if a container with exactly that name exists, in any status."""
        return self.discovery.find_by_name(name) is not None

    def create_and_start(self, spec: ContainerSpec) -> str:
        """Create a container from its spec and start it.

        Returns the container id.

        Raises:
            ContainerCreateError: the engine refused the container
            ContainerStartError: the container could not be started
        """
        host_config = self.client.api.create_host_config(
            port_bindings=dict(spec.port_bindings),
            mounts=list(spec.mounts),
            links=dict(spec.links) or None,
        )

        try:
            response = self.client.api.create_container(
                image=spec.image,
                name=spec.name,
                environment=list(spec.environment),
                ports=list(spec.exposed_ports),
                labels=dict(spec.labels),
                user=spec.user,
                host_config=host_config,
                detach=True,
            )
        except DockerException as e:
            error = handle_docker_error(e, "create", spec.name)
            logger.error("Could not create container", **spec.to_log_fields(), error=str(e))
            raise error from e

        container_id = response["Id"]

        try:
            self.client.api.start(container_id)
        except DockerException as e:
            error = handle_docker_error(e, "start", spec.name)
            logger.error("Could not start container", **spec.to_log_fields(), error=str(e))
            raise error from e

        logger.debug("Container has been started", id=container_id[:12], **spec.to_log_fields())
        return container_id

    def build_database_spec(self, database: DatabaseImage) -> ContainerSpec:
        """Runtime spec for a database container with its data on the host.

        Data lives in ``<workspace>/<container>/<db type>``.
        """
        data_path = self.workspace / database.container_name / database.type
        logger.debug(
            "Mounting database data folder",
            container=database.container_name,
            volume=str(data_path),
        )
        os.makedirs(data_path, exist_ok=True)

        spec = ContainerSpec(
            name=database.container_name,
            image=database.fully_qualified_name,
            environment=[
                database.env_variables.database,
                database.env_variables.password,
            ],
            labels={
                DB_TYPE_LABEL: database.type,
                LPN_TYPE_LABEL: database.lpn_type,
            },
            mounts=[
                Mount(
                    target=database.data_folder,
                    source=str(data_path),
                    type="bind",
                )
            ],
        )
        spec.expose(database.port)
        return spec

    def run_database(self, database: DatabaseImage) -> bool:
        """Ensure the database container exists and was started.

        Returns False when the container already existed and nothing was done.
        A container of another database type under the same name is removed
        and replaced.
        """
        record = self.discovery.find_by_name(database.container_name)
        if record is not None and record.labels.get(DB_TYPE_LABEL) != database.type:
            logger.warning(
                "Replacing database container of another type",
                container=database.container_name,
                found=record.labels.get(DB_TYPE_LABEL),
                wanted=database.type,
            )
            self.remove_by_name(database.container_name)
        elif record is not None:
            logger.debug(
                "Not starting a new container because it's already running",
                container=database.container_name,
            )
            return False

        spec = self.build_database_spec(database)
        self.puller.pull(database.fully_qualified_name)
        self.create_and_start(spec)
        logger.info("Database container has been started", container=database.container_name)
        return True

    def _resolve(self, image: Image) -> List[ContainerRecord]:
        label = lpn_type_label(image.lpn_type)
        records = self.discovery.find_by_label(label)
        if not records:
            error = ContainerNotFoundError(image.container_name, label=label)
            logger.warning(
                "Could not filter container by label",
                container=image.container_name,
                label=label,
                error=error.message,
            )
            raise error
        return records

    def _for_each(
        self,
        operation: str,
        records: List[ContainerRecord],
        action: Callable[[str], None],
        done_message: str,
    ) -> None:
        """Apply an action to every record, continuing past failures."""
        errors: List[LpnException] = []

        for record in records:
            try:
                action(record.name)
            except DockerException as e:
                error = handle_docker_error(e, operation, record.name)
                logger.warning(
                    f"Could not {operation} container", container=record.name, error=str(e)
                )
                errors.append(error)
                continue

            logger.info(done_message, container=record.name)

        if errors:
            raise PartialFailureError(operation, errors)

    def start(self, image: Image) -> None:
        """Start every container of the variant, the Liferay container last.

        Raises:
            ContainerNotFoundError: no container carries the variant label
            PartialFailureError: some containers failed to start
        """
        records = order_for_start(self._resolve(image), image.container_name)
        self._for_each(
            "start",
            records,
            lambda name: self.client.api.start(name),
            "Container has been started",
        )

    def stop(self, image: Image) -> None:
        """Stop every container of the variant.

        Raises:
            ContainerNotFoundError: no container carries the variant label
            PartialFailureError: some containers failed to stop
        """
        records = order_for_stop(self._resolve(image), image.container_name)
        self._for_each(
            "stop",
            records,
            lambda name: self.client.api.stop(name),
            "Container has been stopped",
        )

    def remove(self, image: Image) -> None:
        """Force-remove every container of the variant with its volumes.

        Raises:
            ContainerNotFoundError: no container carries the variant label
            PartialFailureError: some containers could not be removed
        """
        records = order_for_stop(self._resolve(image), image.container_name)
        self._for_each(
            "remove",
            records,
            lambda name: self.client.api.remove_container(name, v=True, force=True),
            "Container has been removed",
        )

    def remove_by_name(self, name: str) -> None:
        """Force-remove a single container by its exact name."""
        try:
            self.client.api.remove_container(name, v=True, force=True)
        except DockerException as e:
            logger.warning("Could not remove container", container=name, error=str(e))
            raise handle_docker_error(e, "remove", name) from e

        logger.info("Container has been removed", container=name)

    def get_image_of_container(self, image: Image) -> Optional[str]:
        """Image reference the variant's container was created from."""
        record = self.discovery.find_by_name(image.container_name)
        if record is None:
            logger.debug(
                "We could not find the container among the running containers",
                container=image.container_name,
            )
            return None

        logger.debug("Container found!", container=image.container_name)
        return record.image

    def inspect(self, name: str) -> dict:
        """Low level inspection of a container.

        Raises:
            ImageInspectError: the container could not be inspected
        """
        try:
            return self.client.api.inspect_container(name)
        except DockerException as e:
            logger.error("The container could not be inspected", container=name, error=str(e))
            raise handle_docker_error(e, "inspect", name) from e

    def get_http_port(self, image: Image) -> str:
        """Host port bound to the Liferay HTTP port."""
        attrs = self.inspect(image.container_name)
        bindings = (attrs.get("HostConfig") or {}).get("PortBindings") or {}
        http_bindings = bindings.get(f"{HTTP_PORT}/tcp") or []
        if not http_bindings:
            raise ImageInspectError(image.container_name, "HTTP port is not bound")
        return http_bindings[0]["HostPort"]

    def version(self) -> Tuple[str, dict]:
        """Client API version and the server's version report."""
        try:
            server_version = self.client.version()
        except DockerException as e:
            raise handle_docker_error(e, "version", "docker") from e
        return self.client.api.api_version, server_version

"""Command execution, file deployment and log streaming in containers."""

import codecs
import io
import sys
import tarfile
from pathlib import Path
from typing import List, Optional, TextIO

import structlog
from docker import DockerClient
from docker.errors import DockerException

from ...models.errors import LpnException
from ...models.image import Image
from ...utils.error_handlers import handle_docker_error

logger = structlog.get_logger(__name__)


def build_tar_for_deployment(path: Path) -> bytes:
    """Pack one file into an in-memory tar archive."""
    tar_buffer = io.BytesIO()
    with tarfile.open(fileobj=tar_buffer, mode="w") as tar:
        tarinfo = tarfile.TarInfo(name=path.name)
        tarinfo.size = path.stat().st_size
        tarinfo.mode = 0o777
        with open(path, "rb") as f:
            tar.addfile(tarinfo, f)
    return tar_buffer.getvalue()


class ContainerExecutor:
    """Handles commands and files inside running Liferay containers."""

    def __init__(self, docker_client: DockerClient):
        self.client = docker_client

    def exec_detached(self, container_name: str, cmd: List[str], user: str = "root") -> str:
        """Run a command in the background inside the container.

        Returns the exec id.
        """
        try:
            exec_instance = self.client.api.exec_create(
                container_name,
                cmd,
                stdout=False,
                stderr=False,
                stdin=False,
                tty=False,
                user=user,
            )
        except DockerException as e:
            logger.error(
                "Could not create command in the container",
                container=container_name,
                cmd=cmd,
                error=str(e),
            )
            raise handle_docker_error(e, "exec", container_name) from e

        exec_id = exec_instance["Id"]
        try:
            self.client.api.exec_start(exec_id, detach=True, tty=False)
        except DockerException as e:
            logger.error(
                "Could not start command in the container",
                container=container_name,
                cmd=cmd,
                detach=True,
                tty=False,
                error=str(e),
            )
            raise handle_docker_error(e, "exec", container_name) from e

        return exec_id

    def copy_file(self, image: Image, path: Path) -> None:
        """Copy a host file into the deploy folder and hand it to the image user."""
        container_name = image.container_name
        target = image.deploy_folder

        logger.debug(f"Deploying [{path}] to {target}", file=str(path), target=target)

        try:
            data = build_tar_for_deployment(path)
        except OSError as e:
            logger.error("Could not open file to deploy", file=str(path), error=str(e))
            raise LpnException(
                f"Could not open file to deploy: {path}",
                operation="deploy",
                resource=str(path),
            ) from e

        try:
            self.client.api.put_archive(container_name, target, data)
        except DockerException as e:
            logger.error(
                "Could not copy file to container",
                container=container_name,
                deploy_dir=target,
                error=str(e),
            )
            raise handle_docker_error(e, "deploy", container_name) from e

        owner = image.user
        target_file = f"{target.rstrip('/')}/{path.name}"
        self.exec_detached(container_name, ["chown", f"{owner}:{owner}", target_file])
        logger.info("File deployed", file=str(path), container=container_name, target=target_file)

    def deploy(self, image: Image, paths: List[str]) -> List[Path]:
        """Deploy files, or every regular file of a directory, into the container.

        Returns the deployed files.
        """
        deployed: List[Path] = []
        for raw_path in paths:
            path = Path(raw_path).expanduser()
            if path.is_dir():
                files = sorted(p for p in path.iterdir() if p.is_file())
            else:
                files = [path]

            for file_path in files:
                self.copy_file(image, file_path)
                deployed.append(file_path)

        return deployed

    def follow_logs(self, image: Image, out: Optional[TextIO] = None) -> None:
        """Stream combined stdout/stderr of the container until it stops."""
        out = out or sys.stdout
        container_name = image.container_name

        try:
            stream = self.client.api.logs(
                container_name, stdout=True, stderr=True, stream=True, follow=True
            )
        except DockerException as e:
            logger.error("Could not get container logs", container=container_name, error=str(e))
            raise handle_docker_error(e, "inspect", container_name) from e

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            for chunk in stream:
                out.write(decoder.decode(chunk))
                out.flush()
            out.write(decoder.decode(b"", final=True))
        except DockerException as e:
            logger.error("Error following container logs", container=container_name, error=str(e))
            raise handle_docker_error(e, "logs", container_name) from e


__all__ = ["ContainerExecutor", "build_tar_for_deployment"]

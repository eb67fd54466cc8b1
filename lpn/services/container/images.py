"""Image presence checks, pulls and removals."""

from typing import Any, Dict, Iterable

import structlog
from docker import DockerClient
from docker.errors import APIError, DockerException, ImageNotFound
from docker.utils import parse_repository_tag

from ...utils.error_handlers import handle_docker_error

logger = structlog.get_logger(__name__)

DOCKER_IO_PREFIX = "docker.io/"


def strip_registry(reference: str) -> str:
    """Local image tags never carry the default registry prefix."""
    return reference.replace(DOCKER_IO_PREFIX, "", 1)


class ImagePuller:
    """Ensures images are present in the local engine."""

    def __init__(self, docker_client: DockerClient):
        self.client = docker_client

    def exists(self, reference: str) -> bool:
        """Check if the exact reference is among the local image tags."""
        reference = strip_registry(reference)
        try:
            image = self.client.images.get(reference)
        except ImageNotFound:
            return False
        except APIError as e:
            logger.debug("Could not inspect image", image=reference, error=str(e))
            return False

        return reference in (image.tags or [])

    def pull(self, reference: str) -> None:
        """Pull an image unless it is already present.

        Raises:
            ImagePullError: the engine refused to start the pull
        """
        if self.exists(reference):
            logger.debug("Image already present", image=reference)
            return

        logger.debug("Pulling Docker image", image=reference)
        repository, tag = parse_repository_tag(reference)

        try:
            stream = self.client.api.pull(repository, tag=tag, stream=True, decode=True)
        except DockerException as e:
            error = handle_docker_error(e, "pull", reference)
            logger.error("The image could not be pulled", image=reference, error=str(e))
            raise error from e

        self._consume_pull_stream(reference, stream)

    def _consume_pull_stream(self, reference: str, stream: Iterable[Dict[str, Any]]) -> None:
        """Log every progress event until the stream ends."""
        try:
            for event in stream:
                if "error" in event:
                    logger.warning(
                        "Image pull reported an error",
                        image=reference,
                        error=event.get("error"),
                    )
                    break

                logger.info(
                    f"{event.get('id', '')} {event.get('status', '')} {event.get('progress', '')}".strip(),
                    id=event.get("id", ""),
                    status=event.get("status", ""),
                    progress=event.get("progress", ""),
                )
        except (DockerException, ValueError) as e:
            # A broken stream only ends the progress output
            logger.warning("Image pull stream ended", image=reference, error=str(e))

    def remove(self, reference: str) -> None:
        """Force-remove an image."""
        try:
            self.client.images.remove(strip_registry(reference), force=True)
        except DockerException as e:
            logger.warning("Impossible to remove the image", image=reference, error=str(e))
            raise handle_docker_error(e, "remove image", reference) from e

        logger.info("Image has been removed", image=reference)


__all__ = ["ImagePuller", "strip_registry"]

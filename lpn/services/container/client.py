"""Docker client factory and initialization."""

import threading
from typing import Optional

import docker
import structlog
from docker.errors import DockerException

from ...config import settings
from ...models.errors import RuntimeUnavailableError

logger = structlog.get_logger(__name__)


class DockerClientFactory:
    """Creates the Docker client once and hands out the same connection.

    Construct one factory per invocation and pass it (or the client it
    returns) to every component that talks to the engine.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        self.client: Optional[docker.DockerClient] = None
        self._base_url = base_url if base_url is not None else settings.docker.base_url
        self._timeout = timeout if timeout is not None else settings.docker.timeout
        self._initialization_error: Optional[str] = None
        self._lock = threading.Lock()

    def _create_client(self) -> docker.DockerClient:
        if self._base_url:
            logger.debug("Connecting to Docker", base_url=self._base_url)
            return docker.DockerClient(base_url=self._base_url, timeout=self._timeout)

        logger.debug("Connecting to Docker from environment")
        return docker.from_env(timeout=self._timeout)

    def _ensure_client(self) -> docker.DockerClient:
        if self.client is not None:
            return self.client

        with self._lock:
            if self.client is not None:
                return self.client

            try:
                client = self._create_client()
                client.ping()
            except DockerException as e:
                self._initialization_error = str(e)
                logger.error("Could not get Docker client", error=str(e))
                raise RuntimeUnavailableError(
                    f"Could not get Docker client: {e}", operation="connect"
                ) from e

            self._initialization_error = None
            self.client = client
            logger.debug("Docker client initialized")
            return client

    def get_client(self) -> docker.DockerClient:
        """Get the Docker client, creating it on first use.

        Raises:
            RuntimeUnavailableError: the engine cannot be reached
        """
        return self._ensure_client()

    def is_available(self) -> bool:
        """Check if Docker is available."""
        try:
            self._ensure_client()
        except RuntimeUnavailableError:
            return False
        return True

    def get_initialization_error(self) -> Optional[str]:
        """Get Docker initialization error if any."""
        return self._initialization_error

    def close(self) -> None:
        """Close Docker client connection."""
        with self._lock:
            if self.client is None:
                return
            try:
                self.client.close()
            except DockerException as e:
                logger.warning("Error closing Docker client", error=str(e))
            self.client = None

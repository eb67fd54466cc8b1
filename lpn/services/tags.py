"""Docker Hub tag listing."""

from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from ..config import settings
from ..models.errors import ExternalServiceError
from ..models.tags import TagRow, TagsPage, TagsResponse, convert_to_human

logger = structlog.get_logger(__name__)


class TagsClient:
    """Reads the available tags of a repository from Docker Hub."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.docker_hub_url).rstrip("/")
        self._http_client = http_client or httpx.Client(
            timeout=timeout if timeout is not None else settings.http_timeout
        )

    def tags_url(self, repository: str) -> str:
        return f"{self.base_url}/v2/repositories/{repository}/tags/"

    def list_tags(self, repository: str, page: int = 1, size: Optional[int] = None) -> TagsPage:
        """Fetch one page of tags.

        An unknown page yields an empty TagsPage.

        Raises:
            ExternalServiceError: Docker Hub is unreachable or answered garbage
        """
        size = size or settings.tags_page_size
        tags_page = TagsPage(repository=repository, page=page, size=size)

        try:
            response = self._http_client.get(
                self.tags_url(repository), params={"page_size": size, "page": page}
            )
        except httpx.HTTPError as e:
            logger.error("Error getting response from the server", error=str(e))
            raise ExternalServiceError(
                "Docker Hub", f"Error getting response from the server: {e}"
            ) from e

        if response.status_code == 404:
            logger.warning(
                "There are no available tags for that pagination. "
                "Please use --page and --size arguments to filter properly",
                status_code=response.status_code,
            )
            return tags_page

        if response.status_code != 200:
            logger.error(
                "Error getting response from the server",
                status=response.reason_phrase,
                status_code=response.status_code,
            )
            raise ExternalServiceError(
                "Docker Hub", f"Docker Hub answered {response.status_code} for {repository}"
            )

        try:
            payload = TagsResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("Error decoding response from the server", error=str(e))
            raise ExternalServiceError(
                "Docker Hub", f"Error decoding response from the server: {e}"
            ) from e

        tags_page.count = payload.count
        tags_page.rows = [
            TagRow(image_tag=f"{repository}:{tag.name}", size=convert_to_human(tag.size))
            for tag in payload.results
        ]

        if tags_page.rows:
            logger.info(
                f"There are {tags_page.count} images, showing {tags_page.shown} elements "
                f"in page {page} of {tags_page.total_pages}",
                images=tags_page.count,
                elements=tags_page.shown,
                current_page=page,
                total_pages=tags_page.total_pages,
            )
        return tags_page

    def close(self) -> None:
        self._http_client.close()

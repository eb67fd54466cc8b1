"""Docker Hub tag listing models."""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field


class HubImage(BaseModel):
    """Per-architecture image of a tag."""

    size: int = Field(default=0)
    architecture: Optional[str] = None
    variant: Optional[str] = None
    os: Optional[str] = None


class HubTag(BaseModel):
    """One tag of a repository."""

    name: str
    full_size: Optional[int] = None
    images: List[HubImage] = Field(default_factory=list)
    last_updated: Optional[str] = None

    @property
    def size(self) -> int:
        if self.images:
            return self.images[0].size
        return self.full_size or 0


class TagsResponse(BaseModel):
    """Paginated tags response from the Docker Hub v2 API."""

    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[HubTag] = Field(default_factory=list)


@dataclass(frozen=True)
class TagRow:
    """A row of the tags table."""

    image_tag: str
    size: str


@dataclass
class TagsPage:
    """A page of tags ready to render."""

    repository: str
    page: int
    size: int
    count: int = 0
    rows: List[TagRow] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        if self.count == 0:
            return 0
        return math.ceil(self.count / self.size)

    @property
    def shown(self) -> int:
        return min(self.size, self.count)


def convert_to_human(size_in_bytes: int) -> str:
    """Render a byte count in megabytes."""
    return f"{size_in_bytes // 1000000} MB"

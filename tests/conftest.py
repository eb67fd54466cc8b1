"""Pytest configuration and shared fixtures."""

import os
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from docker import DockerClient

# Set test environment before importing config
os.environ["LPN_LOG_LEVEL"] = "DEBUG"
os.environ["LPN_LOG_FORMAT"] = "console"

from lpn.models.image import Image, ImageType
from lpn.models.database import MySQL


def make_container(
    name: str,
    labels: Optional[Dict[str, str]] = None,
    status: str = "running",
    image: str = "liferay/portal:7.0.6-ga7",
    container_id: Optional[str] = None,
) -> MagicMock:
    """Mock of ``docker.models.containers.Container``."""
    container = MagicMock()
    container.id = container_id or f"{name}-id-0123456789abcdef"
    container.name = name
    container.status = status
    container.labels = dict(labels or {})
    container.attrs = {"Name": f"/{name}", "Config": {"Image": image, "Labels": container.labels}}
    return container


class FakeEngine:
    """In-memory container store backing the mocked Docker client."""

    def __init__(self):
        self.containers: List[MagicMock] = []

    def add(self, name: str, labels: Optional[Dict[str, str]] = None, status: str = "running",
            image: str = "liferay/portal:7.0.6-ga7") -> MagicMock:
        container = make_container(name, labels, status, image)
        self.containers.append(container)
        return container

    def get(self, name: str) -> Optional[MagicMock]:
        for container in self.containers:
            if container.name == name or container.id == name:
                return container
        return None

    def list(self, all: bool = False, filters: Optional[Dict[str, str]] = None):
        filters = filters or {}
        result = [c for c in self.containers if all or c.status == "running"]
        if "label" in filters:
            key, _, value = filters["label"].partition("=")
            result = [c for c in result if c.labels.get(key) == value]
        if "name" in filters:
            result = [c for c in result if filters["name"] in c.name]
        return result

    def create_container(self, image, name=None, labels=None, **kwargs):
        container = make_container(name, labels, status="created", image=image)
        self.containers.append(container)
        return {"Id": container.id, "Warnings": []}

    def start(self, container):
        self.get(container).status = "running"

    def stop(self, container):
        self.get(container).status = "exited"

    def remove_container(self, container, v=False, force=False):
        self.containers.remove(self.get(container))


@pytest.fixture
def engine():
    """Empty in-memory engine."""
    return FakeEngine()


@pytest.fixture
def mock_docker(engine):
    """Mock Docker client wired to the in-memory engine."""
    mock_client = MagicMock(spec=DockerClient)
    mock_client.api = MagicMock()

    mock_client.containers.list.side_effect = engine.list
    mock_client.api.create_container.side_effect = engine.create_container
    mock_client.api.start.side_effect = engine.start
    mock_client.api.stop.side_effect = engine.stop
    mock_client.api.remove_container.side_effect = engine.remove_container
    mock_client.api.create_host_config.side_effect = lambda **kwargs: kwargs
    mock_client.api.pull.return_value = iter([])
    mock_client.api.api_version = "1.43"

    # Every image is present unless a test says otherwise
    mock_client.images.get.side_effect = lambda ref: _image_with_tag(ref)

    return mock_client


def _image_with_tag(reference: str) -> MagicMock:
    image = MagicMock()
    image.tags = [reference]
    return image


@pytest.fixture
def ce_image():
    return Image(type=ImageType.CE)


@pytest.fixture
def release_image():
    return Image(type=ImageType.RELEASE)


@pytest.fixture
def dxp_image():
    return Image(type=ImageType.DXP)


@pytest.fixture
def mysql_ce():
    return MySQL(lpn_type="ce")

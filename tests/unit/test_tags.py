"""Unit tests for the Docker Hub tags client."""

import httpx
import pytest

from lpn.models.errors import ExternalServiceError
from lpn.models.tags import TagsPage, convert_to_human
from lpn.services.tags import TagsClient

HUB_RESPONSE = {
    "count": 60,
    "next": "https://hub.docker.com/v2/repositories/liferay/portal/tags/?page=2&page_size=25",
    "previous": None,
    "results": [
        {"name": "7.1.0-ga1", "full_size": 790000000, "images": [{"size": 789000000, "architecture": "amd64"}]},
        {"name": "7.0.6-ga7", "full_size": 650000000, "images": []},
    ],
}


def make_client(handler):
    return TagsClient(
        base_url="https://hub.example.com/",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestListTags:
    """Tests for list_tags."""

    def test_parses_page(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=HUB_RESPONSE)

        page = make_client(handler).list_tags("liferay/portal", page=1, size=25)

        assert str(requests[0].url).startswith("https://hub.example.com/v2/repositories/liferay/portal/tags/")
        assert requests[0].url.params["page_size"] == "25"
        assert requests[0].url.params["page"] == "1"
        assert page.count == 60
        assert page.total_pages == 3
        assert [(r.image_tag, r.size) for r in page.rows] == [
            ("liferay/portal:7.1.0-ga1", "789 MB"),
            ("liferay/portal:7.0.6-ga7", "650 MB"),
        ]

    def test_not_found_is_empty_page(self):
        page = make_client(lambda request: httpx.Response(404)).list_tags("liferay/portal", page=99)

        assert page.rows == []
        assert page.total_pages == 0

    def test_server_error(self):
        with pytest.raises(ExternalServiceError):
            make_client(lambda request: httpx.Response(500)).list_tags("liferay/portal")

    def test_garbage_body(self):
        with pytest.raises(ExternalServiceError):
            make_client(lambda request: httpx.Response(200, text="<html>")).list_tags("liferay/portal")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(ExternalServiceError):
            make_client(handler).list_tags("liferay/portal")


class TestTagsPage:
    """Tests for TagsPage helpers."""

    def test_shown_is_capped_by_count(self):
        page = TagsPage(repository="liferay/dxp", page=1, size=25, count=4)

        assert page.shown == 4
        assert page.total_pages == 1

    def test_convert_to_human(self):
        assert convert_to_human(1999999) == "1 MB"

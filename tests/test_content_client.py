"""
Tests for the content backend HTTP client using httpx.MockTransport.
"""
import json

import httpx
import pytest

from services.content_client import ContentAPIClient, ContentAPIError

BASE_URL = "http://content.test/api"


def _client(handler, token=None):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ContentAPIClient(BASE_URL, token=token, client=http), http


class TestContentAPIClient:

    @pytest.mark.asyncio
    async def test_generate_ideas(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ideas": ["a", "b"]})

        client, http = _client(handler)
        async with http:
            ideas = await client.generate_ideas("cats")

        assert ideas == ["a", "b"]
        assert seen == {"method": "POST", "url": f"{BASE_URL}/content/ideas", "body": {"topic": "cats"}}

    @pytest.mark.asyncio
    async def test_generate_draft(self):
        def handler(request):
            assert request.url.path == "/api/content/draft"
            assert json.loads(request.content) == {"prompt": "Cats at work"}
            return httpx.Response(200, json={"draft": "Cats are great"})

        client, http = _client(handler)
        async with http:
            assert await client.generate_draft("Cats at work") == "Cats are great"

    @pytest.mark.asyncio
    async def test_suggest_images_sends_query_param(self):
        def handler(request):
            assert request.method == "GET"
            assert request.url.params["query"] == "sunset"
            return httpx.Response(200, json={"images": [{"id": "1"}]})

        client, http = _client(handler)
        async with http:
            assert await client.suggest_images("sunset") == [{"id": "1"}]

    @pytest.mark.asyncio
    async def test_bearer_token_header(self):
        def handler(request):
            assert request.headers["Authorization"] == "Bearer secret"
            return httpx.Response(200, json={"ideas": []})

        client, http = _client(handler, token="secret")
        async with http:
            assert await client.generate_ideas("x") == []

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(503, text="backend down")

        client, http = _client(handler)
        async with http:
            with pytest.raises(ContentAPIError) as exc_info:
                await client.generate_ideas("cats")

        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "/content/ideas"
        assert "backend down" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        client, http = _client(lambda request: httpx.Response(200, json={"text": "x"}))
        async with http:
            with pytest.raises(ContentAPIError, match="missing 'draft'"):
                await client.generate_draft("p")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        client, http = _client(lambda request: httpx.Response(200, text="<html>"))
        async with http:
            with pytest.raises(ContentAPIError, match="not JSON"):
                await client.suggest_images("q")

    @pytest.mark.asyncio
    async def test_wrong_payload_type_raises(self):
        client, http = _client(lambda request: httpx.Response(200, json={"ideas": "one idea"}))
        async with http:
            with pytest.raises(ContentAPIError, match="not a list"):
                await client.generate_ideas("cats")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, http = _client(handler)
        async with http:
            with pytest.raises(ContentAPIError) as exc_info:
                await client.generate_ideas("cats")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self):
        client, http = _client(lambda request: httpx.Response(200, json={"ideas": []}))

        await client.close()

        assert not http.is_closed
        await http.aclose()

    def test_base_url_trailing_slash_stripped(self):
        client = ContentAPIClient(BASE_URL + "/")
        assert client._base_url == BASE_URL

"""Tests for the Shopify GraphQL Admin API client."""

import json

import httpx
import pytest

from shopify_admin_mcp.config.settings import Settings
from shopify_admin_mcp.services.errors import ConfigurationError, ShopifyTransportError
from shopify_admin_mcp.services.shopify_graphql import (
    ShopifyGraphQLClient,
    normalize_shop_domain,
)


def make_client(settings, handler):
    return ShopifyGraphQLClient(settings, transport=httpx.MockTransport(handler))


class TestClientConfiguration:
    """Endpoint, headers and configuration checks."""

    def test_normalize_shop_domain(self):
        assert normalize_shop_domain("https://shop.myshopify.com/") == "shop.myshopify.com"
        assert normalize_shop_domain("  http://shop.myshopify.com ") == "shop.myshopify.com"
        assert normalize_shop_domain("shop.myshopify.com") == "shop.myshopify.com"

    def test_endpoint_uses_domain_and_version(self, test_settings):
        test_settings.shopify.shop_domain = "https://test-shop.myshopify.com/"
        test_settings.shopify.api_version = "2024-10"
        client = ShopifyGraphQLClient(test_settings)

        assert client.endpoint == "https://test-shop.myshopify.com/admin/api/2024-10/graphql.json"
        assert client.headers["X-Shopify-Access-Token"] == "shpat_test_token_12345"

    def test_missing_credentials_raise_configuration_error(self):
        config = Settings()
        config.shopify.access_token = ""
        config.shopify.shop_domain = ""

        with pytest.raises(ConfigurationError) as exc_info:
            ShopifyGraphQLClient(config)

        assert "SHOPIFY_ACCESS_TOKEN" in str(exc_info.value)
        assert "MYSHOPIFY_DOMAIN" in str(exc_info.value)


class TestExecuteQuery:
    """One request in, ``data`` or ShopifyTransportError out."""

    @pytest.mark.asyncio
    async def test_returns_data_and_sends_variables(self, test_settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["token"] = request.headers["X-Shopify-Access-Token"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"shop": {"name": "Test"}}})

        async with make_client(test_settings, handler) as client:
            data = await client.execute_query("query { shop { name } }", {"first": 5})

        assert data == {"shop": {"name": "Test"}}
        assert seen["url"].endswith("/admin/api/2025-01/graphql.json")
        assert seen["token"] == "shpat_test_token_12345"
        assert seen["body"] == {"query": "query { shop { name } }", "variables": {"first": 5}}

    @pytest.mark.asyncio
    async def test_empty_variables_are_omitted(self, test_settings):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {}})

        async with make_client(test_settings, handler) as client:
            await client.execute_query("query { shop { name } }")

        assert "variables" not in bodies[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_authentication_failure(self, test_settings, status):
        async with make_client(test_settings, lambda r: httpx.Response(status)) as client:
            with pytest.raises(ShopifyTransportError) as exc_info:
                await client.execute_query("query { shop { name } }")

        assert exc_info.value.status_code == status
        assert "authentication" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_server_error(self, test_settings):
        handler = lambda r: httpx.Response(502, text="Bad Gateway")
        async with make_client(test_settings, handler) as client:
            with pytest.raises(ShopifyTransportError) as exc_info:
                await client.execute_query("query { shop { name } }")

        assert exc_info.value.status_code == 502
        assert "HTTP 502" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error(self, test_settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(test_settings, handler) as client:
            with pytest.raises(ShopifyTransportError) as exc_info:
                await client.execute_query("query { shop { name } }")

        assert "Network error" in str(exc_info.value)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json(self, test_settings):
        handler = lambda r: httpx.Response(200, text="<html>maintenance</html>")
        async with make_client(test_settings, handler) as client:
            with pytest.raises(ShopifyTransportError, match="not valid JSON"):
                await client.execute_query("query { shop { name } }")

    @pytest.mark.asyncio
    async def test_graphql_errors_are_joined(self, test_settings):
        body = {
            "errors": [
                {"message": "Field 'foo' doesn't exist on type 'Shop'"},
                {"message": "Throttled"},
            ]
        }
        async with make_client(test_settings, lambda r: httpx.Response(200, json=body)) as client:
            with pytest.raises(ShopifyTransportError) as exc_info:
                await client.execute_query("query { shop { foo } }")

        assert "Field 'foo' doesn't exist on type 'Shop'; Throttled" in str(exc_info.value)
        assert len(exc_info.value.graphql_errors) == 2

    @pytest.mark.asyncio
    async def test_string_errors_member(self, test_settings):
        body = {"errors": "[API] Invalid API key or access token"}
        async with make_client(test_settings, lambda r: httpx.Response(200, json=body)) as client:
            with pytest.raises(ShopifyTransportError, match="Invalid API key"):
                await client.execute_query("query { shop { name } }")

    @pytest.mark.asyncio
    async def test_missing_data(self, test_settings):
        async with make_client(test_settings, lambda r: httpx.Response(200, json={})) as client:
            with pytest.raises(ShopifyTransportError, match="no data"):
                await client.execute_query("query { shop { name } }")

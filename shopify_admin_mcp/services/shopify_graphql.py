"""
Shopify GraphQL Admin API client.

The single channel every tool uses to reach Shopify. It sends one query or
mutation per call and hands back the ``data`` member of the response.
It knows nothing about tools. It does not retry, validate input or inspect
``userErrors``; those are business results interpreted by each tool.

Anything that prevents a well-formed ``data`` member from coming back is
raised as ``ShopifyTransportError``.
"""

from typing import Optional, Dict, Any

import httpx

from shopify_admin_mcp.config.settings import Settings
from shopify_admin_mcp.services.errors import ConfigurationError, ShopifyTransportError
from shopify_admin_mcp.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_shop_domain(domain: str) -> str:
    """Strip protocol and trailing slashes from a shop domain."""
    domain = domain.strip()
    return domain.replace("https://", "").replace("http://", "").rstrip("/")


class ShopifyGraphQLClient:
    """Async Shopify GraphQL Admin API client."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        missing = settings.validate()
        if missing:
            raise ConfigurationError(
                f"Shopify client is not configured; missing: {', '.join(missing)}"
            )

        self.shop_domain = normalize_shop_domain(settings.shopify.shop_domain)
        self.access_token = settings.shopify.access_token
        self.api_version = settings.shopify.api_version
        self.endpoint = (
            f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"
        )
        self.headers = {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }
        # transport is only overridden by tests (httpx.MockTransport)
        self._client = httpx.AsyncClient(
            timeout=settings.shopify.timeout_seconds,
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=40),
            transport=transport,
        )
        logger.info(
            "ShopifyGraphQLClient initialized",
            shop_domain=self.shop_domain,
            api_version=self.api_version,
        )

    async def close(self):
        """Close the underlying HTTPX client."""
        await self._client.aclose()

    async def __aenter__(self) -> "ShopifyGraphQLClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def execute_query(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Execute a GraphQL query or mutation against the Shopify Admin API.

        Args:
            query: GraphQL document.
            variables: Variable map; omitted from the payload when empty.

        Returns:
            The ``data`` member of the GraphQL response.

        Raises:
            ShopifyTransportError: On network failure, non-2xx status,
                malformed JSON, top-level GraphQL errors or missing data.
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        logger.debug("Executing GraphQL request", variables=variables)

        try:
            response = await self._client.post(
                self.endpoint,
                headers=self.headers,
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error("Shopify request failed", error=str(e))
            raise ShopifyTransportError(f"Network error calling Shopify: {e}") from e

        if response.status_code in (401, 403):
            raise ShopifyTransportError(
                f"Shopify authentication failed ({response.status_code}). "
                "Check the access token and its API scopes.",
                status_code=response.status_code,
            )
        if response.is_error:
            raise ShopifyTransportError(
                f"Shopify returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ShopifyTransportError(
                "Shopify returned a response that is not valid JSON",
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise ShopifyTransportError("Shopify returned an unexpected response shape")

        if data.get("errors"):
            errors = data["errors"]
            if not isinstance(errors, list):
                errors = [{"message": str(errors)}]
            error_messages = [
                e.get("message", str(e)) if isinstance(e, dict) else str(e)
                for e in errors
            ]
            logger.error("GraphQL errors", errors=error_messages)
            raise ShopifyTransportError(
                f"GraphQL errors: {'; '.join(error_messages)}",
                status_code=response.status_code,
                graphql_errors=errors,
            )

        result = data.get("data")
        if result is None:
            raise ShopifyTransportError(
                "Shopify response contained no data", status_code=response.status_code
            )
        return result

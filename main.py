"""
Shopify Admin MCP Server - Main Entry Point

Serves Shopify GraphQL Admin API tools (metafields, metaobjects, products,
collections, menus and more) to an MCP client over stdio.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from shopify_admin_mcp.config.settings import Settings, settings
from shopify_admin_mcp.services.errors import ShopifyToolError
from shopify_admin_mcp.services.mcp_server import create_server, serve_stdio
from shopify_admin_mcp.services.shopify_graphql import ShopifyGraphQLClient
from shopify_admin_mcp.services.tools.registry import build_registry
from shopify_admin_mcp.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="shopify-admin-mcp",
        description="MCP server for the Shopify GraphQL Admin API",
    )
    parser.add_argument("--accessToken", dest="access_token", help="Shopify Admin API access token")
    parser.add_argument("--domain", help="Shop domain, e.g. your-store.myshopify.com")
    parser.add_argument("--apiVersion", dest="api_version", help="Admin API version, e.g. 2025-01")
    return parser.parse_args(argv)


def apply_overrides(config: Settings, args: argparse.Namespace) -> Settings:
    """Command-line flags take precedence over the environment."""
    if args.access_token:
        config.shopify.access_token = args.access_token
    if args.domain:
        config.shopify.shop_domain = args.domain
    if args.api_version:
        config.shopify.api_version = args.api_version
    return config


async def run(config: Settings) -> None:
    async with ShopifyGraphQLClient(config) as client:
        registry = build_registry(client)
        logger.info("Tool registry ready", tools=len(registry))
        server = create_server(registry, name=config.server.name)
        await serve_stdio(server)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point."""
    config = apply_overrides(settings, parse_args(argv))

    # stdout belongs to the MCP transport; every human-facing message goes to stderr
    missing = config.validate()
    if missing:
        print(
            f"Missing required configuration: {', '.join(missing)}. "
            "Set them in the environment, in .env, or pass --accessToken/--domain.",
            file=sys.stderr,
        )
        sys.exit(1)

    setup_logging(level=config.logging.level, log_file=config.logging.log_file)
    logger.info(
        "Starting Shopify Admin MCP server",
        shop_domain=config.shopify.shop_domain,
        api_version=config.shopify.api_version,
    )

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except ShopifyToolError as e:
        logger.error("Fatal error", error=str(e))
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

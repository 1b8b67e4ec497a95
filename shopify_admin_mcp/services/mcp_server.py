"""
MCP server adapter.

Exposes a ``ToolRegistry`` over the Model Context Protocol using the SDK's
low-level ``Server``. Tool results are returned as one JSON text block.
Exceptions are left to propagate: the SDK turns them into an error result
carrying the exception message, which is what the MCP client shows.
"""

import json
from typing import Any, Dict

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from shopify_admin_mcp.services.tools.registry import ToolRegistry
from shopify_admin_mcp.utils.logger import get_logger

logger = get_logger(__name__)


def to_mcp_tool(descriptor: Dict[str, Any]) -> Tool:
    return Tool(
        name=descriptor["name"],
        description=descriptor["description"],
        inputSchema=descriptor["input_schema"],
    )


def create_server(registry: ToolRegistry, name: str = "shopify") -> Server:
    """Build an MCP server that lists and calls the tools in ``registry``."""
    server = Server(name)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [to_mcp_tool(descriptor) for descriptor in registry.list_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> list[TextContent]:
        result = await registry.call(name, arguments)
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    return server


async def serve_stdio(server: Server) -> None:
    """Run ``server`` over stdin/stdout until the client disconnects."""
    logger.info("MCP server listening on stdio", server=server.name)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

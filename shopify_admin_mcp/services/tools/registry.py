"""Tool registry: the name-indexed catalogue of every tool the server exposes."""

from typing import Any, Dict, Iterable, List, Optional

from shopify_admin_mcp.services.errors import DuplicateToolError, UnknownToolError
from shopify_admin_mcp.utils.logger import get_logger

from .base import BaseTool
from .collections import CreateCollectionTool
from .files import CreateFileTool
from .inventory import AdjustInventoryTool
from .menus import CreateMenuTool, DeleteMenuTool, GetMenusTool, UpdateMenuTool
from .metafield_definitions import (
    CreateMetafieldDefinitionTool,
    DeleteMetafieldDefinitionTool,
    GetMetafieldDefinitionsTool,
    UpdateMetafieldDefinitionTool,
)
from .metafields import (
    CreateProductMetafieldTool,
    DeleteProductMetafieldTool,
    GetProductMetafieldsTool,
    UpdateProductMetafieldTool,
)
from .metaobject_definitions import (
    CreateMetaobjectDefinitionTool,
    DeleteMetaobjectDefinitionTool,
    GetMetaobjectDefinitionsTool,
    UpdateMetaobjectDefinitionTool,
)
from .metaobjects import (
    CreateMetaobjectTool,
    DeleteMetaobjectTool,
    GetMetaobjectTool,
    GetMetaobjectsTool,
    UpdateMetaobjectTool,
)
from .pages import UpdatePageTool
from .products import CreateProductTool, DeleteProductTool
from .redirects import CreateUrlRedirectTool
from .themes import GetThemesTool
from .translations import RegisterTranslationsTool

logger = get_logger(__name__)


def all_tools() -> List[BaseTool]:
    """Fresh, unbound instances of every tool, in catalogue order."""
    return [
        # Structured data: definitions
        CreateMetafieldDefinitionTool(),
        GetMetafieldDefinitionsTool(),
        UpdateMetafieldDefinitionTool(),
        DeleteMetafieldDefinitionTool(),
        CreateMetaobjectDefinitionTool(),
        GetMetaobjectDefinitionsTool(),
        UpdateMetaobjectDefinitionTool(),
        DeleteMetaobjectDefinitionTool(),
        # Structured data: instances
        GetProductMetafieldsTool(),
        CreateProductMetafieldTool(),
        UpdateProductMetafieldTool(),
        DeleteProductMetafieldTool(),
        GetMetaobjectsTool(),
        GetMetaobjectTool(),
        CreateMetaobjectTool(),
        UpdateMetaobjectTool(),
        DeleteMetaobjectTool(),
        # Store resources
        CreateProductTool(),
        DeleteProductTool(),
        CreateCollectionTool(),
        UpdatePageTool(),
        GetMenusTool(),
        CreateMenuTool(),
        UpdateMenuTool(),
        DeleteMenuTool(),
        AdjustInventoryTool(),
        CreateFileTool(),
        CreateUrlRedirectTool(),
        GetThemesTool(),
        RegisterTranslationsTool(),
    ]


class ToolRegistry:
    """Holds tools by name and dispatches calls to them."""

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None):
        self._tools: Dict[str, BaseTool] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Add a tool.

        Raises:
            DuplicateToolError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise DuplicateToolError(f"A tool named {tool.name!r} is already registered")
        self._tools[tool.name] = tool

    def bind(self, client) -> None:
        """Bind every registered tool to ``client``."""
        for tool in self._tools.values():
            tool.bind(client)
        logger.info("Tools bound to Shopify client", count=len(self._tools))

    def get(self, name: str) -> BaseTool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(f"Unknown tool: {name}") from None

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> List[Dict[str, Any]]:
        """Descriptor dicts (name, description, input_schema) for every tool."""
        return [tool.to_dict() for tool in self._tools.values()]

    async def call(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Run the named tool with raw ``arguments``."""
        return await self.get(name).run(arguments)


def build_registry(client) -> ToolRegistry:
    """Register the full catalogue and bind it to ``client``."""
    registry = ToolRegistry(all_tools())
    registry.bind(client)
    return registry

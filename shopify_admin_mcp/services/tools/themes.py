from typing import Any, Dict, Optional

from pydantic import Field

from .base import BaseTool, ToolInput
from .normalize import flatten_connection


class GetThemesInput(ToolInput):
    first: int = Field(10, ge=1, le=50, description="Number of themes to return (default: 10, max: 50)")
    after: Optional[str] = Field(None, description="Cursor for pagination (pageInfo.endCursor from a previous call)")


class GetThemesTool(BaseTool):
    input_model = GetThemesInput

    @property
    def name(self) -> str:
        return "get-themes"

    @property
    def description(self) -> str:
        return (
            "List the store's online store themes, including which one is live (role MAIN). "
            "Use the returned theme IDs when working with theme content. "
            "Pass pageInfo.endCursor back as 'after' for the next page."
        )

    async def execute(self, params: GetThemesInput) -> Dict[str, Any]:
        query = """
        query GetThemes($first: Int!, $after: String) {
            themes(first: $first, after: $after) {
                edges {
                    node {
                        id
                        name
                        role
                        createdAt
                        updatedAt
                        processing
                        processingFailed
                        themeStoreId
                    }
                }
                pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
            }
        }
        """
        data = await self._request(query, params.to_variables())
        nodes, page_info = flatten_connection(data["themes"])
        themes = [{**node, "isLive": node.get("role") == "MAIN"} for node in nodes]
        # Only the page being returned is searched for the live theme
        live_theme = next((theme for theme in themes if theme["isLive"]), None)
        return {
            "themes": themes,
            "liveTheme": live_theme,
            "totalCount": len(themes),
            "pageInfo": page_info,
        }

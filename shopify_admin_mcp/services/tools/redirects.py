from typing import Any, Dict

from pydantic import Field

from .base import BaseTool, ToolInput


class CreateUrlRedirectInput(ToolInput):
    path: str = Field(
        min_length=1, description="The old path to redirect from (e.g., '/old-product')"
    )
    target: str = Field(
        min_length=1,
        description="The destination path or URL to redirect to (e.g., '/products/new-product')",
    )


class CreateUrlRedirectTool(BaseTool):
    input_model = CreateUrlRedirectInput

    @property
    def name(self) -> str:
        return "create-url-redirect"

    @property
    def description(self) -> str:
        return "Create a URL redirect so visitors to an old path are sent to a new location."

    async def execute(self, params: CreateUrlRedirectInput) -> Dict[str, Any]:
        mutation = """
        mutation urlRedirectCreate($urlRedirect: UrlRedirectInput!) {
            urlRedirectCreate(urlRedirect: $urlRedirect) {
                urlRedirect {
                    id
                    path
                    target
                }
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, {"urlRedirect": params.to_variables()})
        redirect = self._payload(data, "urlRedirectCreate", "urlRedirect", "create URL redirect")
        return {"success": True, "urlRedirect": redirect}

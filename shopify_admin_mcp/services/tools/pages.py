from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from .base import BaseTool, ToolInput


class UpdatePageInput(ToolInput):
    page_id: str = Field(
        min_length=1,
        description='The GID of the page to update (e.g., "gid://shopify/Page/1234567890")',
    )
    title: Optional[str] = Field(None, description="The new title for the page")
    body: Optional[str] = Field(None, description="The new HTML body content for the page")
    is_published: Optional[bool] = Field(
        None, description="Whether the page should be published or unpublished"
    )

    @model_validator(mode="after")
    def _has_changes(self):
        if self.title is None and self.body is None and self.is_published is None:
            raise ValueError("Provide at least one of title, body or isPublished")
        return self


class UpdatePageTool(BaseTool):
    input_model = UpdatePageInput

    @property
    def name(self) -> str:
        return "update-page"

    @property
    def description(self) -> str:
        return "Updates a page's details including title, body content, and publish status"

    async def execute(self, params: UpdatePageInput) -> Dict[str, Any]:
        mutation = """
        mutation pageUpdate($id: ID!, $page: PageUpdateInput!) {
            pageUpdate(id: $id, page: $page) {
                page {
                    id
                    title
                    handle
                    body
                    bodySummary
                    updatedAt
                    publishedAt
                    createdAt
                }
                userErrors { field message }
            }
        }
        """
        page_input = params.model_dump(by_alias=True, exclude_none=True, exclude={"page_id"})
        data = await self._request(mutation, {"id": params.page_id, "page": page_input})
        page = self._payload(data, "pageUpdate", "page", "update page")
        return {"success": True, "page": page}

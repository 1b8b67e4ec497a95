from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import BaseTool, ToolInput


class FileInput(ToolInput):
    original_source: str = Field(
        min_length=1, description="The URL of the file to upload (must be publicly accessible)"
    )
    alt: Optional[str] = Field(None, description="Alt text for the file (for accessibility)")
    content_type: Optional[Literal["FILE", "IMAGE", "VIDEO"]] = Field(
        None, description="The type of file being uploaded"
    )
    filename: Optional[str] = Field(None, description="The filename to use for the uploaded file")


class CreateFileInput(ToolInput):
    files: List[FileInput] = Field(min_length=1, description="Array of files to upload")


def format_file(node: Dict[str, Any]) -> Dict[str, Any]:
    formatted = {
        "id": node.get("id"),
        "alt": node.get("alt"),
        "createdAt": node.get("createdAt"),
        "fileStatus": node.get("fileStatus"),
        "type": node.get("__typename"),
    }
    if node.get("image"):
        formatted["url"] = node["image"].get("url")
        formatted["width"] = node["image"].get("width")
        formatted["height"] = node["image"].get("height")
    elif node.get("url"):
        formatted["url"] = node["url"]
    if node.get("mimeType"):
        formatted["mimeType"] = node["mimeType"]
    if node.get("sources"):
        formatted["sources"] = node["sources"]
    return formatted


class CreateFileTool(BaseTool):
    input_model = CreateFileInput

    @property
    def name(self) -> str:
        return "create-file"

    @property
    def description(self) -> str:
        return (
            "Upload files to Shopify from external URLs. Supports images, videos, and other "
            "file types. Files are processed asynchronously, so fileStatus may be UPLOADED "
            "or PROCESSING at first."
        )

    async def execute(self, params: CreateFileInput) -> Dict[str, Any]:
        mutation = """
        mutation fileCreate($files: [FileCreateInput!]!) {
            fileCreate(files: $files) {
                files {
                    __typename
                    id
                    alt
                    createdAt
                    fileStatus
                    ... on MediaImage {
                        image { url width height }
                    }
                    ... on GenericFile {
                        url
                        mimeType
                    }
                    ... on Video {
                        sources { url mimeType format height width }
                    }
                }
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, params.to_variables())
        files = self._payload(data, "fileCreate", "files", "create file")
        return {"success": True, "files": [format_file(node) for node in files]}

"""Tools reading and writing metaobject entries.

Every returned entry carries its fields twice: ``fieldsArray`` keeps
Shopify's ordered list and ``fields`` indexes the same values by key.
``displayName`` comes from Shopify, which derives it from the definition's
``displayNameKey`` field.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from .base import BaseTool, ToolInput
from .normalize import fields_by_key, flatten_connection
from .schemas import MAX_PAGE_SIZE, MetaobjectCapabilities
from shopify_admin_mcp.services.errors import ResourceNotFoundError

METAOBJECT_FIELDS = """
    id
    handle
    type
    displayName
    updatedAt
    fields {
        key
        value
        type
    }
    capabilities {
        publishable {
            status
        }
    }
"""


def format_metaobject(node: Dict[str, Any]) -> Dict[str, Any]:
    fields = node.get("fields") or []
    publishable = (node.get("capabilities") or {}).get("publishable") or {}
    return {
        "id": node["id"],
        "handle": node.get("handle"),
        "type": node.get("type"),
        "displayName": node.get("displayName"),
        "updatedAt": node.get("updatedAt"),
        # None for types that are not publishable
        "publishStatus": publishable.get("status"),
        "fields": fields_by_key(fields),
        "fieldsArray": fields,
    }


class MetaobjectFieldInput(ToolInput):
    key: str = Field(min_length=1, description="The field key as defined in the metaobject definition")
    value: str = Field(description="The value for the field")


# ── get-metaobjects ────────────────────────────────────────────────────


class GetMetaobjectsInput(ToolInput):
    type: str = Field(
        min_length=1,
        description=(
            'The metaobject type to fetch (e.g., "custom_type", "lookbook"). This is the '
            "type handle defined in your Shopify admin."
        ),
    )
    limit: int = Field(
        20, ge=1, le=MAX_PAGE_SIZE,
        description="Maximum number of metaobjects to return (default: 20, max: 250)",
    )
    after: Optional[str] = Field(
        None, description="Cursor for pagination - fetch items after this cursor"
    )
    reverse: bool = Field(False, description="Reverse the order of results")


class GetMetaobjectsTool(BaseTool):
    input_model = GetMetaobjectsInput

    @property
    def name(self) -> str:
        return "get-metaobjects"

    @property
    def description(self) -> str:
        return (
            "Get metaobjects by type. Metaobjects are custom data structures defined in "
            "Shopify admin under Settings > Custom data."
        )

    async def execute(self, params: GetMetaobjectsInput) -> Dict[str, Any]:
        query = f"""
        query GetMetaobjects($type: String!, $first: Int!, $after: String, $reverse: Boolean) {{
            metaobjects(type: $type, first: $first, after: $after, reverse: $reverse) {{
                edges {{
                    cursor
                    node {{ {METAOBJECT_FIELDS} }}
                }}
                pageInfo {{ hasNextPage hasPreviousPage startCursor endCursor }}
            }}
        }}
        """
        variables = {"type": params.type, "first": params.limit, "reverse": params.reverse}
        if params.after:
            variables["after"] = params.after

        data = await self._request(query, variables)
        nodes, page_info = flatten_connection(data["metaobjects"], include_cursor=True)

        metaobjects = []
        for node in nodes:
            metaobject = format_metaobject(node)
            metaobject["cursor"] = node.get("cursor")
            metaobjects.append(metaobject)

        return {
            "metaobjects": metaobjects,
            "pageInfo": page_info,
            "totalCount": len(metaobjects),
        }


# ── get-metaobject ─────────────────────────────────────────────────────


class GetMetaobjectInput(ToolInput):
    id: str = Field(
        min_length=1,
        description='The GID of the metaobject (e.g., "gid://shopify/Metaobject/1234567890")',
    )


class GetMetaobjectTool(BaseTool):
    input_model = GetMetaobjectInput

    @property
    def name(self) -> str:
        return "get-metaobject"

    @property
    def description(self) -> str:
        return "Get a single metaobject entry by its ID, including all of its fields."

    async def execute(self, params: GetMetaobjectInput) -> Dict[str, Any]:
        query = f"""
        query GetMetaobject($id: ID!) {{
            metaobject(id: $id) {{ {METAOBJECT_FIELDS} }}
        }}
        """
        data = await self._request(query, {"id": params.id})
        node = data.get("metaobject")
        if not node:
            raise ResourceNotFoundError("Metaobject", params.id)
        return {"metaobject": format_metaobject(node)}


# ── create-metaobject ──────────────────────────────────────────────────


class CreateMetaobjectInput(ToolInput):
    type: str = Field(
        min_length=1,
        description=(
            'The metaobject definition type (e.g., "custom_type"). Must match an existing '
            "metaobject definition."
        ),
    )
    handle: Optional[str] = Field(
        None,
        description="Optional handle for the metaobject. If not provided, Shopify will generate one.",
    )
    fields: List[MetaobjectFieldInput] = Field(
        min_length=1, description="Array of field key-value pairs to set on the metaobject"
    )
    capabilities: Optional[MetaobjectCapabilities] = Field(
        None, description="Optional capabilities settings (e.g., publish status)"
    )


class CreateMetaobjectTool(BaseTool):
    input_model = CreateMetaobjectInput

    @property
    def name(self) -> str:
        return "create-metaobject"

    @property
    def description(self) -> str:
        return (
            "Create a new metaobject of a specific type. The metaobject type must already be "
            "defined (see create-metaobject-definition)."
        )

    async def execute(self, params: CreateMetaobjectInput) -> Dict[str, Any]:
        mutation = f"""
        mutation MetaobjectCreate($metaobject: MetaobjectCreateInput!) {{
            metaobjectCreate(metaobject: $metaobject) {{
                metaobject {{ {METAOBJECT_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        data = await self._request(mutation, {"metaobject": params.to_variables()})
        metaobject = self._payload(data, "metaobjectCreate", "metaobject", "create metaobject")
        return {"success": True, "metaobject": format_metaobject(metaobject)}


# ── update-metaobject ──────────────────────────────────────────────────


class UpdateMetaobjectInput(ToolInput):
    id: str = Field(
        min_length=1,
        description='The GID of the metaobject to update (e.g., "gid://shopify/Metaobject/1234567890")',
    )
    handle: Optional[str] = Field(None, description="New handle for the metaobject")
    fields: Optional[List[MetaobjectFieldInput]] = Field(
        None, description="Array of field key-value pairs to update"
    )
    capabilities: Optional[MetaobjectCapabilities] = Field(
        None,
        description="Optional capabilities settings; publishable.status moves an entry between DRAFT and ACTIVE",
    )

    @model_validator(mode="after")
    def _has_changes(self):
        capabilities = self.capabilities.to_variables() if self.capabilities else {}
        if not self.handle and not self.fields and not capabilities:
            raise ValueError(
                "No fields provided to update. Please provide handle, fields, or capabilities."
            )
        return self


class UpdateMetaobjectTool(BaseTool):
    input_model = UpdateMetaobjectInput

    @property
    def name(self) -> str:
        return "update-metaobject"

    @property
    def description(self) -> str:
        return "Update an existing metaobject's fields, handle, or capabilities"

    async def execute(self, params: UpdateMetaobjectInput) -> Dict[str, Any]:
        mutation = f"""
        mutation MetaobjectUpdate($id: ID!, $metaobject: MetaobjectUpdateInput!) {{
            metaobjectUpdate(id: $id, metaobject: $metaobject) {{
                metaobject {{ {METAOBJECT_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        metaobject_input = params.model_dump(by_alias=True, exclude_none=True, exclude={"id"})
        if not metaobject_input.get("handle"):
            metaobject_input.pop("handle", None)
        if not metaobject_input.get("fields"):
            metaobject_input.pop("fields", None)
        if not metaobject_input.get("capabilities"):
            metaobject_input.pop("capabilities", None)

        data = await self._request(mutation, {"id": params.id, "metaobject": metaobject_input})
        metaobject = self._payload(data, "metaobjectUpdate", "metaobject", "update metaobject")
        return {"success": True, "metaobject": format_metaobject(metaobject)}


# ── delete-metaobject ──────────────────────────────────────────────────


class DeleteMetaobjectInput(ToolInput):
    id: str = Field(
        min_length=1,
        description="The GID of the metaobject to delete (e.g., 'gid://shopify/Metaobject/123456')",
    )


class DeleteMetaobjectTool(BaseTool):
    input_model = DeleteMetaobjectInput

    @property
    def name(self) -> str:
        return "delete-metaobject"

    @property
    def description(self) -> str:
        return (
            "Delete a metaobject entry. This permanently removes the metaobject and cannot "
            "be undone."
        )

    async def execute(self, params: DeleteMetaobjectInput) -> Dict[str, Any]:
        mutation = """
        mutation MetaobjectDelete($id: ID!) {
            metaobjectDelete(id: $id) {
                deletedId
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, {"id": params.id})
        deleted_id = self._payload(data, "metaobjectDelete", "deletedId", "delete metaobject")
        return {"success": True, "deletedId": deleted_id}

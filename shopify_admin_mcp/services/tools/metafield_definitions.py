"""Tools managing metafield definitions: the schemas custom fields are validated against."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import BaseTool, ToolInput
from .normalize import flatten_connection, type_name
from .schemas import (
    MAX_PAGE_SIZE,
    METAFIELD_TYPE_EXAMPLES,
    MetafieldOwnerType,
    ValidationRule,
)

METAFIELD_DEFINITION_FIELDS = """
    id
    name
    namespace
    key
    description
    type {
        name
    }
    ownerType
    pinnedPosition
    validations {
        name
        value
    }
"""


def format_metafield_definition(node: Dict[str, Any]) -> Dict[str, Any]:
    formatted = {
        "id": node["id"],
        "name": node.get("name"),
        "namespace": node.get("namespace"),
        "key": node.get("key"),
        "fullKey": f"{node.get('namespace')}.{node.get('key')}",
        "description": node.get("description"),
        "type": type_name(node),
        "ownerType": node.get("ownerType"),
        "pinnedPosition": node.get("pinnedPosition"),
        "validations": node.get("validations") or [],
    }
    if "metafieldsCount" in node:
        formatted["metafieldsCount"] = node["metafieldsCount"]
    return formatted


# ── create-metafield-definition ────────────────────────────────────────


class CreateMetafieldDefinitionInput(ToolInput):
    name: str = Field(min_length=1, description="The human-readable name for the metafield definition")
    namespace: str = Field(min_length=1, description="The namespace for the metafield (e.g., 'custom', 'my_app')")
    key: str = Field(
        min_length=1,
        description="The key for the metafield (combined with namespace forms the unique identifier)",
    )
    type: str = Field(min_length=1, description=f"The metafield type ({METAFIELD_TYPE_EXAMPLES})")
    owner_type: MetafieldOwnerType = Field(description="The resource type this metafield definition applies to")
    description: Optional[str] = Field(None, description="Description of what this metafield stores")
    pin: Optional[bool] = Field(None, description="Whether to pin this metafield in the Shopify admin UI")
    validations: Optional[List[ValidationRule]] = Field(
        None, description="Validation rules for this metafield"
    )


class CreateMetafieldDefinitionTool(BaseTool):
    """Create a metafield definition for a resource type."""

    input_model = CreateMetafieldDefinitionInput

    @property
    def name(self) -> str:
        return "create-metafield-definition"

    @property
    def description(self) -> str:
        return (
            "Create a new metafield definition (schema) for a resource type like Product, "
            "Variant, Collection, Customer, Order, etc. This defines the structure and "
            "validation for metafields on that resource type."
        )

    async def execute(self, params: CreateMetafieldDefinitionInput) -> Dict[str, Any]:
        mutation = f"""
        mutation MetafieldDefinitionCreate($definition: MetafieldDefinitionInput!) {{
            metafieldDefinitionCreate(definition: $definition) {{
                createdDefinition {{ {METAFIELD_DEFINITION_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        data = await self._request(mutation, {"definition": params.to_variables()})
        definition = self._payload(
            data, "metafieldDefinitionCreate", "createdDefinition",
            "create metafield definition",
        )
        return {"success": True, "metafieldDefinition": format_metafield_definition(definition)}


# ── get-metafield-definitions ──────────────────────────────────────────


class GetMetafieldDefinitionsInput(ToolInput):
    owner_type: MetafieldOwnerType = Field(description="The resource type to get metafield definitions for")
    namespace: Optional[str] = Field(None, description="Optional: Filter by namespace")
    first: int = Field(
        50, ge=1, le=MAX_PAGE_SIZE,
        description="Number of definitions to return (default: 50, max: 250)",
    )
    after: Optional[str] = Field(None, description="Cursor for pagination")


class GetMetafieldDefinitionsTool(BaseTool):
    """List metafield definitions for one owner type."""

    input_model = GetMetafieldDefinitionsInput

    @property
    def name(self) -> str:
        return "get-metafield-definitions"

    @property
    def description(self) -> str:
        return (
            "Get all metafield definitions for a specific resource type (Product, Variant, "
            "Collection, Customer, Order, etc.). Optionally filter by namespace. "
            "Pass pageInfo.endCursor back as 'after' with the same filters for the next page."
        )

    async def execute(self, params: GetMetafieldDefinitionsInput) -> Dict[str, Any]:
        query = f"""
        query GetMetafieldDefinitions(
            $ownerType: MetafieldOwnerType!, $namespace: String, $first: Int!, $after: String
        ) {{
            metafieldDefinitions(
                ownerType: $ownerType, namespace: $namespace, first: $first, after: $after
            ) {{
                edges {{
                    node {{
                        {METAFIELD_DEFINITION_FIELDS}
                        metafieldsCount
                    }}
                    cursor
                }}
                pageInfo {{ hasNextPage hasPreviousPage startCursor endCursor }}
            }}
        }}
        """
        data = await self._request(query, params.to_variables())
        nodes, page_info = flatten_connection(data["metafieldDefinitions"], include_cursor=True)

        definitions = []
        for node in nodes:
            definition = format_metafield_definition(node)
            definition["cursor"] = node.get("cursor")
            definitions.append(definition)

        return {
            "definitions": definitions,
            "pageInfo": page_info,
            "totalCount": len(definitions),
        }


# ── update-metafield-definition ────────────────────────────────────────


class UpdateMetafieldDefinitionInput(ToolInput):
    id: str = Field(
        min_length=1,
        description="The GID of the metafield definition to update (e.g., 'gid://shopify/MetafieldDefinition/123456')",
    )
    name: Optional[str] = Field(None, description="The new human-readable name for the metafield definition")
    description: Optional[str] = Field(None, description="The new description of what this metafield stores")
    pin: Optional[bool] = Field(None, description="Whether to pin this metafield in the Shopify admin UI")
    validations: Optional[List[ValidationRule]] = Field(
        None, description="New validation rules (replaces existing validations)"
    )


class UpdateMetafieldDefinitionTool(BaseTool):
    """Patch the mutable attributes of a metafield definition."""

    input_model = UpdateMetafieldDefinitionInput

    @property
    def name(self) -> str:
        return "update-metafield-definition"

    @property
    def description(self) -> str:
        return (
            "Update an existing metafield definition. You can change the name, description, "
            "pin status, and validations. Note: namespace, key, type, and ownerType cannot "
            "be changed after creation."
        )

    async def execute(self, params: UpdateMetafieldDefinitionInput) -> Dict[str, Any]:
        mutation = f"""
        mutation MetafieldDefinitionUpdate($definition: MetafieldDefinitionUpdateInput!) {{
            metafieldDefinitionUpdate(definition: $definition) {{
                updatedDefinition {{ {METAFIELD_DEFINITION_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        data = await self._request(mutation, {"definition": params.to_variables()})
        definition = self._payload(
            data, "metafieldDefinitionUpdate", "updatedDefinition",
            "update metafield definition",
        )
        return {"success": True, "metafieldDefinition": format_metafield_definition(definition)}


# ── delete-metafield-definition ────────────────────────────────────────


class DeleteMetafieldDefinitionInput(ToolInput):
    id: str = Field(
        min_length=1,
        description="The GID of the metafield definition to delete (e.g., 'gid://shopify/MetafieldDefinition/123456')",
    )
    delete_all_associated_metafields: Optional[bool] = Field(
        None,
        description=(
            "Whether to also delete all metafield values associated with this definition. "
            "Defaults to false, which will fail if metafields exist."
        ),
    )


class DeleteMetafieldDefinitionTool(BaseTool):
    """Delete a metafield definition; values survive unless cascading is requested."""

    input_model = DeleteMetafieldDefinitionInput

    @property
    def name(self) -> str:
        return "delete-metafield-definition"

    @property
    def description(self) -> str:
        return (
            "Delete a metafield definition. Optionally delete all associated metafield "
            "values. Warning: This is permanent and cannot be undone."
        )

    async def execute(self, params: DeleteMetafieldDefinitionInput) -> Dict[str, Any]:
        mutation = """
        mutation MetafieldDefinitionDelete($id: ID!, $deleteAllAssociatedMetafields: Boolean) {
            metafieldDefinitionDelete(
                id: $id, deleteAllAssociatedMetafields: $deleteAllAssociatedMetafields
            ) {
                deletedDefinitionId
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, params.to_variables())
        deleted_id = self._payload(
            data, "metafieldDefinitionDelete", "deletedDefinitionId",
            "delete metafield definition",
        )
        return {"success": True, "deletedDefinitionId": deleted_id}

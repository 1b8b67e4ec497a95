"""Tools managing metaobject definitions: fully custom entity types."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import BaseTool, ToolInput
from .field_changes import field_changes_to_variables, tag_field_changes
from .normalize import flatten_connection, format_field_definition
from .schemas import (
    MAX_PAGE_SIZE,
    FieldDefinitionCreate,
    FieldDefinitionUpdate,
    MetaobjectAccess,
    MetaobjectDefinitionCapabilities,
)

METAOBJECT_DEFINITION_FIELDS = """
    id
    type
    name
    description
    displayNameKey
    fieldDefinitions {
        key
        name
        description
        type {
            name
        }
        required
        validations {
            name
            value
        }
    }
    access {
        storefront
    }
    capabilities {
        publishable {
            enabled
        }
        translatable {
            enabled
        }
    }
"""


def format_metaobject_definition(node: Dict[str, Any]) -> Dict[str, Any]:
    formatted = {
        "id": node["id"],
        "type": node.get("type"),
        "name": node.get("name"),
        "description": node.get("description"),
        "displayNameKey": node.get("displayNameKey"),
        "fieldDefinitions": [
            format_field_definition(field) for field in node.get("fieldDefinitions") or []
        ],
        "access": node.get("access"),
        "capabilities": node.get("capabilities"),
    }
    if "metaobjectsCount" in node:
        formatted["metaobjectsCount"] = node["metaobjectsCount"]
    return formatted


# ── create-metaobject-definition ───────────────────────────────────────


class CreateMetaobjectDefinitionInput(ToolInput):
    type: str = Field(
        min_length=1,
        description="The type identifier for this metaobject definition (e.g., 'author', 'faq', 'testimonial')",
    )
    name: Optional[str] = Field(None, description="The display name for this metaobject definition")
    description: Optional[str] = Field(None, description="Description of this metaobject definition")
    field_definitions: List[FieldDefinitionCreate] = Field(
        min_length=1, description="Array of field definitions for this metaobject type"
    )
    access: Optional[MetaobjectAccess] = Field(
        None, description="Access settings for this metaobject definition"
    )
    capabilities: Optional[MetaobjectDefinitionCapabilities] = Field(
        None, description="Capabilities for this metaobject definition"
    )
    display_name_key: Optional[str] = Field(
        None, description="The field key to use as the display name for entries"
    )


class CreateMetaobjectDefinitionTool(BaseTool):
    input_model = CreateMetaobjectDefinitionInput

    @property
    def name(self) -> str:
        return "create-metaobject-definition"

    @property
    def description(self) -> str:
        return (
            "Create a new metaobject definition (schema) that defines the structure for "
            "custom data types. This defines the fields and their types that metaobjects "
            "of this type will have."
        )

    async def execute(self, params: CreateMetaobjectDefinitionInput) -> Dict[str, Any]:
        mutation = f"""
        mutation MetaobjectDefinitionCreate($definition: MetaobjectDefinitionCreateInput!) {{
            metaobjectDefinitionCreate(definition: $definition) {{
                metaobjectDefinition {{ {METAOBJECT_DEFINITION_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        data = await self._request(mutation, {"definition": params.to_variables()})
        definition = self._payload(
            data, "metaobjectDefinitionCreate", "metaobjectDefinition",
            "create metaobject definition",
        )
        return {"success": True, "metaobjectDefinition": format_metaobject_definition(definition)}


# ── get-metaobject-definitions ─────────────────────────────────────────


class GetMetaobjectDefinitionsInput(ToolInput):
    first: int = Field(
        50, ge=1, le=MAX_PAGE_SIZE,
        description="Number of definitions to return (default: 50, max: 250)",
    )
    after: Optional[str] = Field(None, description="Cursor for pagination")


class GetMetaobjectDefinitionsTool(BaseTool):
    input_model = GetMetaobjectDefinitionsInput

    @property
    def name(self) -> str:
        return "get-metaobject-definitions"

    @property
    def description(self) -> str:
        return (
            "Get all metaobject definitions (schemas) in the store. Returns type, fields, "
            "access settings, and entry counts."
        )

    async def execute(self, params: GetMetaobjectDefinitionsInput) -> Dict[str, Any]:
        query = f"""
        query GetMetaobjectDefinitions($first: Int!, $after: String) {{
            metaobjectDefinitions(first: $first, after: $after) {{
                edges {{
                    node {{
                        {METAOBJECT_DEFINITION_FIELDS}
                        metaobjectsCount
                    }}
                    cursor
                }}
                pageInfo {{ hasNextPage hasPreviousPage startCursor endCursor }}
            }}
        }}
        """
        data = await self._request(query, params.to_variables())
        nodes, page_info = flatten_connection(data["metaobjectDefinitions"], include_cursor=True)

        definitions = []
        for node in nodes:
            definition = format_metaobject_definition(node)
            definition["cursor"] = node.get("cursor")
            definitions.append(definition)

        return {
            "definitions": definitions,
            "pageInfo": page_info,
            "totalCount": len(definitions),
        }


# ── update-metaobject-definition ───────────────────────────────────────


class UpdateMetaobjectDefinitionInput(ToolInput):
    id: str = Field(
        min_length=1,
        description="The GID of the metaobject definition to update (e.g., 'gid://shopify/MetaobjectDefinition/123456')",
    )
    name: Optional[str] = Field(None, description="The display name for this metaobject definition")
    description: Optional[str] = Field(None, description="Description of this metaobject definition")
    field_definitions_to_update: Optional[List[FieldDefinitionUpdate]] = Field(
        None, description="Existing field definitions to update"
    )
    field_definitions_to_create: Optional[List[FieldDefinitionCreate]] = Field(
        None, description="New field definitions to add"
    )
    field_definitions_to_delete: Optional[List[str]] = Field(
        None, description="Keys of field definitions to delete"
    )
    access: Optional[MetaobjectAccess] = Field(
        None, description="Access settings for this metaobject definition"
    )
    capabilities: Optional[MetaobjectDefinitionCapabilities] = Field(
        None, description="Capabilities for this metaobject definition"
    )
    display_name_key: Optional[str] = Field(
        None, description="The field key to use as the display name for entries"
    )
    reset_field_order: Optional[bool] = Field(
        None, description="Reset field order based on the order in fieldDefinitionsToUpdate"
    )


class UpdateMetaobjectDefinitionTool(BaseTool):
    """Patch a metaobject definition.

    The three field change lists are tagged into a single ``fieldDefinitions``
    list and sent in one mutation, so Shopify applies them atomically.
    """

    input_model = UpdateMetaobjectDefinitionInput

    @property
    def name(self) -> str:
        return "update-metaobject-definition"

    @property
    def description(self) -> str:
        return (
            "Update an existing metaobject definition. You can modify field definitions, "
            "add new fields, delete fields, change access settings, and update capabilities."
        )

    async def execute(self, params: UpdateMetaobjectDefinitionInput) -> Dict[str, Any]:
        mutation = f"""
        mutation MetaobjectDefinitionUpdate($id: ID!, $definition: MetaobjectDefinitionUpdateInput!) {{
            metaobjectDefinitionUpdate(id: $id, definition: $definition) {{
                metaobjectDefinition {{ {METAOBJECT_DEFINITION_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        definition_input = params.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={
                "id",
                "field_definitions_to_update",
                "field_definitions_to_create",
                "field_definitions_to_delete",
            },
        )
        changes = tag_field_changes(
            params.field_definitions_to_update,
            params.field_definitions_to_create,
            params.field_definitions_to_delete,
        )
        if changes:
            definition_input["fieldDefinitions"] = field_changes_to_variables(changes)

        data = await self._request(mutation, {"id": params.id, "definition": definition_input})
        definition = self._payload(
            data, "metaobjectDefinitionUpdate", "metaobjectDefinition",
            "update metaobject definition",
        )
        return {"success": True, "metaobjectDefinition": format_metaobject_definition(definition)}


# ── delete-metaobject-definition ───────────────────────────────────────


class DeleteMetaobjectDefinitionInput(ToolInput):
    id: str = Field(
        min_length=1,
        description="The GID of the metaobject definition to delete (e.g., 'gid://shopify/MetaobjectDefinition/123456')",
    )
    delete_all_associated_metaobjects: Optional[bool] = Field(
        None,
        description=(
            "Whether to also delete all metaobject entries of this type. Defaults to "
            "false, which will fail if entries exist."
        ),
    )


class DeleteMetaobjectDefinitionTool(BaseTool):
    input_model = DeleteMetaobjectDefinitionInput

    @property
    def name(self) -> str:
        return "delete-metaobject-definition"

    @property
    def description(self) -> str:
        return (
            "Delete a metaobject definition (schema). Optionally delete all metaobject "
            "entries of this type. Warning: This is permanent and cannot be undone."
        )

    async def execute(self, params: DeleteMetaobjectDefinitionInput) -> Dict[str, Any]:
        mutation = """
        mutation MetaobjectDefinitionDelete($id: ID!, $deleteAllAssociatedMetaobjects: Boolean) {
            metaobjectDefinitionDelete(
                id: $id, deleteAllAssociatedMetaobjects: $deleteAllAssociatedMetaobjects
            ) {
                deletedId
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, params.to_variables())
        deleted_id = self._payload(
            data, "metaobjectDefinitionDelete", "deletedId", "delete metaobject definition"
        )
        return {"success": True, "deletedId": deleted_id}

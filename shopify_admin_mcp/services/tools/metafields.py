"""Tools reading and writing metafield values on products.

Writes go through ``metafieldsSet``, which upserts by
``(ownerId, namespace, key)``: callers never need to know whether a value
already exists.
"""

from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from .base import BaseTool, ToolInput
from .normalize import flatten_connection, metafields_by_key
from .schemas import MAX_PAGE_SIZE, METAFIELD_TYPE_EXAMPLES
from shopify_admin_mcp.services.errors import ResourceNotFoundError

METAFIELDS_SET_MUTATION = """
mutation MetafieldsSet($metafields: [MetafieldsSetInput!]!) {
    metafieldsSet(metafields: $metafields) {
        metafields {
            id
            namespace
            key
            value
            type
            createdAt
            updatedAt
        }
        userErrors { field message code }
    }
}
"""

PRODUCT_ID_DESCRIPTION = 'The GID of the product (e.g., "gid://shopify/Product/1234567890")'


def format_metafield(node: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": node["id"],
        "namespace": node.get("namespace"),
        "key": node.get("key"),
        "value": node.get("value"),
        "type": node.get("type"),
        "description": node.get("description"),
        "createdAt": node.get("createdAt"),
        "updatedAt": node.get("updatedAt"),
    }


class _MetafieldUpsertTool(BaseTool):
    """Shared upsert path for the create and update tools."""

    action = "set metafield"

    async def _upsert(self, params) -> Dict[str, Any]:
        metafield_input = {
            "ownerId": params.product_id,
            "namespace": params.namespace,
            "key": params.key,
            "value": params.value,
        }
        # type is only needed when creating or re-typing a value
        if params.type:
            metafield_input["type"] = params.type

        data = await self._request(METAFIELDS_SET_MUTATION, {"metafields": [metafield_input]})
        metafields = self._payload(data, "metafieldsSet", "metafields", self.action)
        metafield = format_metafield(metafields[0])
        metafield.pop("description")
        return {"success": True, "metafield": metafield}


# ── get-product-metafields ─────────────────────────────────────────────


class GetProductMetafieldsInput(ToolInput):
    product_id: str = Field(min_length=1, description=PRODUCT_ID_DESCRIPTION)
    namespace: Optional[str] = Field(None, description="Filter metafields by namespace")
    limit: int = Field(
        20, ge=1, le=MAX_PAGE_SIZE,
        description="Maximum number of metafields to return (default: 20, max: 250)",
    )
    after: Optional[str] = Field(
        None, description="Cursor for pagination - fetch metafields after this cursor"
    )


class GetProductMetafieldsTool(BaseTool):
    input_model = GetProductMetafieldsInput

    @property
    def name(self) -> str:
        return "get-product-metafields"

    @property
    def description(self) -> str:
        return "Get metafields for a specific product, optionally filtered by namespace"

    async def execute(self, params: GetProductMetafieldsInput) -> Dict[str, Any]:
        query = """
        query GetProductMetafields($id: ID!, $first: Int!, $namespace: String, $after: String) {
            product(id: $id) {
                id
                title
                metafields(first: $first, namespace: $namespace, after: $after) {
                    edges {
                        node {
                            id
                            namespace
                            key
                            value
                            type
                            description
                            createdAt
                            updatedAt
                        }
                    }
                    pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
                }
            }
        }
        """
        variables = {"id": params.product_id, "first": params.limit}
        if params.namespace:
            variables["namespace"] = params.namespace
        if params.after:
            variables["after"] = params.after

        data = await self._request(query, variables)
        product = data.get("product")
        if not product:
            raise ResourceNotFoundError("Product", params.product_id)

        nodes, page_info = flatten_connection(product["metafields"])
        metafields = [format_metafield(node) for node in nodes]
        return {
            "productId": product["id"],
            "productTitle": product.get("title"),
            "metafields": metafields,
            "metafieldsByKey": metafields_by_key(metafields),
            "pageInfo": page_info,
        }


# ── create-product-metafield ───────────────────────────────────────────


class CreateProductMetafieldInput(ToolInput):
    product_id: str = Field(min_length=1, description=PRODUCT_ID_DESCRIPTION)
    namespace: str = Field(min_length=1, description='The namespace for the metafield (e.g., "custom", "my_app")')
    key: str = Field(min_length=1, description="The key for the metafield within the namespace")
    value: str = Field(min_length=1, description="The value of the metafield")
    type: str = Field(min_length=1, description=f"The metafield type ({METAFIELD_TYPE_EXAMPLES})")


class CreateProductMetafieldTool(_MetafieldUpsertTool):
    input_model = CreateProductMetafieldInput
    action = "create product metafield"

    @property
    def name(self) -> str:
        return "create-product-metafield"

    @property
    def description(self) -> str:
        return (
            "Create a new metafield on a product. If a metafield with the same namespace "
            "and key already exists on the product its value is replaced. Common types: "
            "single_line_text_field, multi_line_text_field, number_integer, number_decimal, "
            "json, boolean, date, date_time, url, color, rich_text_field"
        )

    async def execute(self, params: CreateProductMetafieldInput) -> Dict[str, Any]:
        return await self._upsert(params)


# ── update-product-metafield ───────────────────────────────────────────


class UpdateProductMetafieldInput(ToolInput):
    product_id: str = Field(min_length=1, description=PRODUCT_ID_DESCRIPTION)
    namespace: str = Field(min_length=1, description="The namespace of the metafield to update")
    key: str = Field(min_length=1, description="The key of the metafield to update")
    value: str = Field(min_length=1, description="The new value for the metafield")
    type: Optional[str] = Field(
        None,
        description=(
            "The metafield type (required if changing the type, e.g., "
            '"single_line_text_field", "number_integer", "json")'
        ),
    )


class UpdateProductMetafieldTool(_MetafieldUpsertTool):
    input_model = UpdateProductMetafieldInput
    action = "update product metafield"

    @property
    def name(self) -> str:
        return "update-product-metafield"

    @property
    def description(self) -> str:
        return (
            "Update a metafield on a product by namespace and key. The value is set "
            "whether or not it existed before; pass type only when changing it."
        )

    async def execute(self, params: UpdateProductMetafieldInput) -> Dict[str, Any]:
        return await self._upsert(params)


# ── delete-product-metafield ───────────────────────────────────────────


class DeleteProductMetafieldInput(ToolInput):
    metafield_id: Optional[str] = Field(
        None,
        min_length=1,
        description='The GID of the metafield to delete (e.g., "gid://shopify/Metafield/1234567890")',
    )
    product_id: Optional[str] = Field(
        None, min_length=1,
        description="The GID of the owning product (use with namespace and key instead of metafieldId)",
    )
    namespace: Optional[str] = Field(None, min_length=1, description="Namespace of the metafield to delete")
    key: Optional[str] = Field(None, min_length=1, description="Key of the metafield to delete")

    @model_validator(mode="after")
    def _one_identifier(self):
        triple = (self.product_id, self.namespace, self.key)
        if self.metafield_id is None and not all(triple):
            raise ValueError("provide metafieldId, or productId together with namespace and key")
        if self.metafield_id is not None and any(triple):
            raise ValueError("provide either metafieldId or productId/namespace/key, not both")
        return self


class DeleteProductMetafieldTool(BaseTool):
    input_model = DeleteProductMetafieldInput

    @property
    def name(self) -> str:
        return "delete-product-metafield"

    @property
    def description(self) -> str:
        return (
            "Delete a product metafield, either by its ID or by productId + namespace + key. "
            "Use get-product-metafields first to find the metafield ID."
        )

    async def execute(self, params: DeleteProductMetafieldInput) -> Dict[str, Any]:
        if params.metafield_id:
            return await self._delete_by_id(params.metafield_id)
        return await self._delete_by_key(params.product_id, params.namespace, params.key)

    async def _delete_by_id(self, metafield_id: str) -> Dict[str, Any]:
        mutation = """
        mutation MetafieldDelete($input: MetafieldDeleteInput!) {
            metafieldDelete(input: $input) {
                deletedId
                userErrors { field message }
            }
        }
        """
        data = await self._request(mutation, {"input": {"id": metafield_id}})
        deleted_id = self._payload(data, "metafieldDelete", "deletedId", "delete product metafield")
        return {
            "success": True,
            "deletedId": deleted_id,
            "message": "Metafield successfully deleted",
        }

    async def _delete_by_key(self, product_id: str, namespace: str, key: str) -> Dict[str, Any]:
        mutation = """
        mutation MetafieldsDelete($metafields: [MetafieldIdentifierInput!]!) {
            metafieldsDelete(metafields: $metafields) {
                deletedMetafields { ownerId namespace key }
                userErrors { field message }
            }
        }
        """
        variables = {"metafields": [{"ownerId": product_id, "namespace": namespace, "key": key}]}
        data = await self._request(mutation, variables)
        deleted = self._payload(
            data, "metafieldsDelete", "deletedMetafields", "delete product metafield"
        )
        # Shopify returns null entries for identifiers that matched nothing
        if deleted[0] is None:
            raise ResourceNotFoundError("Metafield", f"{product_id} {namespace}.{key}")
        return {
            "success": True,
            "deletedMetafield": deleted[0],
            "message": "Metafield successfully deleted",
        }

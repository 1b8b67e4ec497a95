from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import BaseTool, ToolInput
from .normalize import flatten_connection
from .schemas import SEOInput


class VariantInput(ToolInput):
    price: str = Field(description="The price of the variant")
    title: Optional[str] = Field(None, description="The title of the variant (e.g., 'Small', 'Blue')")
    compare_at_price: Optional[str] = Field(None, description="Compare at price for showing a markdown")
    sku: Optional[str] = Field(None, description="Stock keeping unit (SKU)")
    barcode: Optional[str] = Field(None, description="Barcode (ISBN, UPC, GTIN, etc.)")
    inventory_policy: Optional[Literal["DENY", "CONTINUE"]] = Field(
        None, description="What happens when a variant is out of stock"
    )
    weight: Optional[float] = Field(None, description="Weight of the variant")
    weight_unit: Optional[Literal["KILOGRAMS", "GRAMS", "POUNDS", "OUNCES"]] = Field(
        None, description="Unit of weight measurement"
    )
    requires_shipping: Optional[bool] = Field(None, description="Whether the variant requires shipping")
    taxable: Optional[bool] = Field(None, description="Whether the variant is taxable")
    options: Optional[List[str]] = Field(
        None, description="The option values for this variant (e.g., ['Small', 'Blue'])"
    )


class CreateProductInput(ToolInput):
    title: str = Field(min_length=1, description="The title/name of the product")
    description_html: Optional[str] = Field(None, description="The HTML description of the product")
    vendor: Optional[str] = Field(None, description="The vendor or manufacturer of the product")
    product_type: Optional[str] = Field(None, description="The type or category of the product")
    tags: Optional[List[str]] = Field(None, description="Array of tags to categorize the product")
    status: Optional[Literal["ACTIVE", "ARCHIVED", "DRAFT"]] = Field(
        None, description="Product status (defaults to DRAFT)"
    )
    seo: Optional[SEOInput] = Field(None, description="SEO information for the product")
    options: Optional[List[str]] = Field(None, description="Product option names (e.g., ['Size', 'Color'])")
    variants: Optional[List[VariantInput]] = Field(
        None, description="Product variants with pricing and inventory options"
    )
    gift_card: Optional[bool] = Field(None, description="Whether this is a gift card product")
    requires_selling_plan: Optional[bool] = Field(
        None, description="Whether the product can only be purchased with a selling plan"
    )
    template_suffix: Optional[str] = Field(None, description="The theme template suffix for this product")


class CreateProductTool(BaseTool):
    input_model = CreateProductInput

    @property
    def name(self) -> str:
        return "create-product"

    @property
    def description(self) -> str:
        return (
            "Create a new product in the Shopify store. You can specify title, description, "
            "variants, pricing, and more."
        )

    async def execute(self, params: CreateProductInput) -> Dict[str, Any]:
        mutation = """
        mutation productCreate($input: ProductInput!) {
            productCreate(input: $input) {
                product {
                    id
                    title
                    handle
                    descriptionHtml
                    vendor
                    productType
                    tags
                    status
                    createdAt
                    seo { title description }
                    options { id name values }
                    variants(first: 50) {
                        edges {
                            node {
                                id
                                title
                                price
                                compareAtPrice
                                sku
                                barcode
                                inventoryPolicy
                                inventoryQuantity
                            }
                        }
                    }
                }
                userErrors { field message }
            }
        }
        """
        data = await self._request(mutation, {"input": params.to_variables()})
        product = self._payload(data, "productCreate", "product", "create product")
        variants, _ = flatten_connection(product.get("variants"))
        return {"success": True, "product": {**product, "variants": variants}}


class DeleteProductInput(ToolInput):
    product_id: str = Field(
        min_length=1,
        description="The GID of the product to delete (e.g., 'gid://shopify/Product/123456')",
    )


class DeleteProductTool(BaseTool):
    """Delete a product. Its metafields go with it."""

    input_model = DeleteProductInput

    @property
    def name(self) -> str:
        return "delete-product"

    @property
    def description(self) -> str:
        return (
            "Delete a product from the Shopify store. This permanently removes the product "
            "and all its variants and metafields. This action cannot be undone."
        )

    async def execute(self, params: DeleteProductInput) -> Dict[str, Any]:
        mutation = """
        mutation productDelete($input: ProductDeleteInput!) {
            productDelete(input: $input) {
                deletedProductId
                userErrors { field message }
            }
        }
        """
        data = await self._request(mutation, {"input": {"id": params.product_id}})
        deleted_id = self._payload(data, "productDelete", "deletedProductId", "delete product")
        return {"success": True, "deletedProductId": deleted_id}

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import BaseTool, ToolInput
from .schemas import SEOInput


class RuleCondition(ToolInput):
    column: Literal[
        "TAG",
        "TITLE",
        "TYPE",
        "VENDOR",
        "VARIANT_PRICE",
        "VARIANT_COMPARE_AT_PRICE",
        "VARIANT_WEIGHT",
        "VARIANT_INVENTORY",
        "VARIANT_TITLE",
        "IS_PRICE_REDUCED",
    ] = Field(description="The property to match against")
    relation: Literal[
        "EQUALS",
        "NOT_EQUALS",
        "GREATER_THAN",
        "LESS_THAN",
        "STARTS_WITH",
        "ENDS_WITH",
        "CONTAINS",
        "NOT_CONTAINS",
        "IS_SET",
        "IS_NOT_SET",
    ] = Field(description="The relationship between the column and the condition")
    condition: str = Field(description="The value to match against")


class RuleSet(ToolInput):
    applied_disjunctively: bool = Field(
        description="If true, products match any rule (OR). If false, products must match all rules (AND)."
    )
    rules: List[RuleCondition] = Field(
        min_length=1, description="The rules that define which products belong to this collection"
    )


class CollectionImage(ToolInput):
    src: str = Field(description="The URL of the image")
    alt_text: Optional[str] = Field(None, description="Alt text for the image")


class CreateCollectionInput(ToolInput):
    title: str = Field(min_length=1, description="The title of the collection")
    description_html: Optional[str] = Field(None, description="The HTML description of the collection")
    handle: Optional[str] = Field(
        None, description="The URL handle for the collection (auto-generated from title if not provided)"
    )
    seo: Optional[SEOInput] = Field(None, description="SEO information for the collection")
    image: Optional[CollectionImage] = Field(None, description="Featured image for the collection")
    template_suffix: Optional[str] = Field(None, description="The theme template suffix for this collection")
    sort_order: Optional[Literal[
        "ALPHA_ASC",
        "ALPHA_DESC",
        "BEST_SELLING",
        "CREATED",
        "CREATED_DESC",
        "MANUAL",
        "PRICE_ASC",
        "PRICE_DESC",
    ]] = Field(None, description="How products in the collection are sorted")
    rule_set: Optional[RuleSet] = Field(
        None,
        description=(
            "Rules for a smart collection. If provided, creates a smart collection; "
            "otherwise creates a manual collection."
        ),
    )
    products: Optional[List[str]] = Field(
        None,
        description=(
            "Array of product GIDs to add to a manual collection (only for manual "
            "collections, not smart collections)"
        ),
    )


class CreateCollectionTool(BaseTool):
    input_model = CreateCollectionInput

    @property
    def name(self) -> str:
        return "create-collection"

    @property
    def description(self) -> str:
        return (
            "Create a new collection in the Shopify store. You can create either a manual "
            "collection (where you add products manually) or a smart collection (where "
            "products are automatically added based on rules)."
        )

    async def execute(self, params: CreateCollectionInput) -> Dict[str, Any]:
        mutation = """
        mutation collectionCreate($input: CollectionInput!) {
            collectionCreate(input: $input) {
                collection {
                    id
                    title
                    handle
                    descriptionHtml
                    sortOrder
                    templateSuffix
                    productsCount { count }
                    seo { title description }
                    image { url altText }
                    ruleSet {
                        appliedDisjunctively
                        rules { column relation condition }
                    }
                }
                userErrors { field message }
            }
        }
        """
        collection_input = params.to_variables()
        # Smart collections pick their own products; an explicit list only applies to manual ones
        if params.rule_set or not params.products:
            collection_input.pop("products", None)

        data = await self._request(mutation, {"input": collection_input})
        collection = self._payload(data, "collectionCreate", "collection", "create collection")

        products_count = collection.get("productsCount")
        if isinstance(products_count, dict):
            products_count = products_count.get("count")
        return {
            "success": True,
            "collection": {
                **collection,
                "productsCount": products_count,
                "isSmartCollection": collection.get("ruleSet") is not None,
            },
        }

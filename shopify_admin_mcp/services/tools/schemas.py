"""Input models shared by several tools."""

from typing import List, Literal, Optional

from pydantic import Field

from .base import ToolInput

# Largest page Shopify serves for a connection
MAX_PAGE_SIZE = 250

MetafieldOwnerType = Literal[
    "PRODUCT",
    "PRODUCTVARIANT",
    "COLLECTION",
    "CUSTOMER",
    "ORDER",
    "DRAFTORDER",
    "LOCATION",
    "PAGE",
    "BLOG",
    "ARTICLE",
    "MARKET",
    "SHOP",
]

METAFIELD_TYPE_EXAMPLES = (
    "e.g., 'single_line_text_field', 'multi_line_text_field', 'number_integer', "
    "'number_decimal', 'boolean', 'date', 'date_time', 'json', 'color', 'url', "
    "'file_reference', 'product_reference', 'collection_reference', "
    "'metaobject_reference', 'list.single_line_text_field', 'rich_text_field', "
    "'money', 'rating', 'dimension', 'volume', 'weight'"
)


class ValidationRule(ToolInput):
    name: str = Field(description="Validation rule name (e.g., 'min', 'max', 'regex', 'choices')")
    value: str = Field(description="Validation rule value")


class FieldDefinitionCreate(ToolInput):
    """A full field declaration inside a metaobject definition."""

    key: str = Field(min_length=1, description="The key for this field (used in code/API)")
    type: str = Field(min_length=1, description=f"The metafield type ({METAFIELD_TYPE_EXAMPLES})")
    name: Optional[str] = Field(None, description="The display name for this field")
    description: Optional[str] = Field(None, description="Description of what this field stores")
    required: Optional[bool] = Field(None, description="Whether this field is required")
    validations: Optional[List[ValidationRule]] = Field(
        None, description="Validation rules for this field"
    )


class FieldDefinitionUpdate(ToolInput):
    """A partial patch to an existing field, addressed by key. The type is immutable."""

    key: str = Field(min_length=1, description="The key of the field to update (must match existing field)")
    name: Optional[str] = Field(None, description="The display name for this field")
    description: Optional[str] = Field(None, description="Description of what this field stores")
    required: Optional[bool] = Field(None, description="Whether this field is required")
    validations: Optional[List[ValidationRule]] = Field(
        None, description="Validation rules for this field"
    )


class MetaobjectAccess(ToolInput):
    storefront: Optional[Literal["NONE", "PUBLIC_READ"]] = Field(
        None, description="Storefront API access level"
    )


class CapabilityToggle(ToolInput):
    enabled: bool


class MetaobjectDefinitionCapabilities(ToolInput):
    publishable: Optional[CapabilityToggle] = Field(
        None, description="Whether entries can be published/unpublished"
    )
    translatable: Optional[CapabilityToggle] = Field(
        None, description="Whether entries can be translated"
    )


class PublishableStatus(ToolInput):
    status: Literal["ACTIVE", "DRAFT"] = Field(description="Publish status of the entry")


class MetaobjectCapabilities(ToolInput):
    publishable: Optional[PublishableStatus] = None


class SEOInput(ToolInput):
    title: Optional[str] = Field(None, description="SEO-optimized title")
    description: Optional[str] = Field(None, description="SEO meta description")

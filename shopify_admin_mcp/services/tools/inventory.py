from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, StrictInt

from .base import BaseTool, ToolInput

AdjustmentReason = Literal[
    "CORRECTION",
    "CYCLE_COUNT_AVAILABLE",
    "DAMAGED",
    "MOVEMENT_CREATED",
    "MOVEMENT_UPDATED",
    "MOVEMENT_RECEIVED",
    "MOVEMENT_CANCELED",
    "OTHER",
    "PROMOTION",
    "QUALITY_CONTROL",
    "RECEIVED",
    "RESERVATION_CREATED",
    "RESERVATION_DELETED",
    "RESERVATION_UPDATED",
    "RESTOCK",
    "SAFETY_STOCK",
    "SHRINKAGE",
]


class InventoryChange(ToolInput):
    inventory_item_id: str = Field(
        min_length=1,
        description="The GID of the inventory item (e.g., 'gid://shopify/InventoryItem/123456')",
    )
    location_id: str = Field(
        min_length=1, description="The GID of the location (e.g., 'gid://shopify/Location/123456')"
    )
    delta: StrictInt = Field(
        description="The quantity adjustment. Positive to increase, negative to decrease."
    )


class AdjustInventoryInput(ToolInput):
    reason: AdjustmentReason = Field(description="The reason for the inventory adjustment")
    name: str = Field(
        min_length=1,
        description="A name or reference for this adjustment (e.g., 'Weekly inventory count')",
    )
    changes: List[InventoryChange] = Field(min_length=1, description="Array of inventory changes to make")
    reference_document_uri: Optional[str] = Field(
        None, description="Optional URI to a reference document for this adjustment"
    )


class AdjustInventoryTool(BaseTool):
    """Apply several inventory deltas as one adjustment group."""

    input_model = AdjustInventoryInput

    @property
    def name(self) -> str:
        return "adjust-inventory"

    @property
    def description(self) -> str:
        return (
            "Adjust inventory quantities at specific locations. Use this to increase or "
            "decrease stock levels for inventory items. All changes are applied in one call."
        )

    async def execute(self, params: AdjustInventoryInput) -> Dict[str, Any]:
        mutation = """
        mutation inventoryAdjustQuantities($input: InventoryAdjustQuantitiesInput!) {
            inventoryAdjustQuantities(input: $input) {
                inventoryAdjustmentGroup {
                    id
                    reason
                    referenceDocumentUri
                    changes {
                        name
                        delta
                        quantityAfterChange
                        item { id sku }
                        location { id name }
                    }
                }
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, {"input": params.to_variables()})
        group = self._payload(
            data, "inventoryAdjustQuantities", "inventoryAdjustmentGroup", "adjust inventory"
        )
        return {
            "success": True,
            "adjustmentGroup": {
                "id": group["id"],
                "reason": group.get("reason"),
                "referenceDocumentUri": group.get("referenceDocumentUri"),
                "changes": [
                    {
                        "name": change.get("name"),
                        "delta": change.get("delta"),
                        "quantityAfterChange": change.get("quantityAfterChange"),
                        "inventoryItem": change.get("item"),
                        "location": change.get("location"),
                    }
                    for change in group.get("changes") or []
                ],
            },
        }

"""Navigation menu tools.

Menus are trees. ``create-menu`` sends the whole item tree in one mutation and
``update-menu`` folds its item changes into one ``items`` list.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import BaseTool, ToolInput
from .normalize import flatten_connection

MENU_FIELDS = """
    id
    title
    handle
    items {
        id
        title
        url
        resource {
            __typename
        }
        items {
            id
            title
            url
        }
    }
"""


def format_menu(menu: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": menu["id"],
        "title": menu.get("title"),
        "handle": menu.get("handle"),
        "items": [
            {
                "id": item.get("id"),
                "title": item.get("title"),
                "url": item.get("url"),
                "resourceType": (item.get("resource") or {}).get("__typename"),
                "items": [
                    {"id": sub.get("id"), "title": sub.get("title"), "url": sub.get("url")}
                    for sub in item.get("items") or []
                ],
            }
            for item in menu.get("items") or []
        ],
    }


class MenuItemInput(ToolInput):
    title: str = Field(min_length=1, description="The title/label of the menu item")
    url: Optional[str] = Field(
        None, description="The URL the menu item links to (use this OR resourceId, not both)"
    )
    resource_id: Optional[str] = Field(
        None,
        description=(
            "The GID of a Shopify resource to link to (e.g., 'gid://shopify/Product/123'). "
            "Use this OR url, not both."
        ),
    )
    items: Optional[List["MenuItemInput"]] = Field(None, description="Nested child menu items")


MenuItemInput.model_rebuild()


# ── get-menus ──────────────────────────────────────────────────────────


class GetMenusInput(ToolInput):
    first: int = Field(20, ge=1, le=50, description="Number of menus to return (default: 20, max: 50)")
    after: Optional[str] = Field(None, description="Cursor for pagination (pageInfo.endCursor from a previous call)")


class GetMenusTool(BaseTool):
    input_model = GetMenusInput

    @property
    def name(self) -> str:
        return "get-menus"

    @property
    def description(self) -> str:
        return (
            "Get navigation menus in the Shopify store with their menu items and nested structure. "
            "Pass pageInfo.endCursor back as 'after' for the next page."
        )

    async def execute(self, params: GetMenusInput) -> Dict[str, Any]:
        query = """
        query GetMenus($first: Int!, $after: String) {
            menus(first: $first, after: $after) {
                edges {
                    node {
                        id
                        title
                        handle
                        itemsCount
                        items {
                            id
                            title
                            url
                            type
                            resourceId
                            items {
                                id
                                title
                                url
                                type
                            }
                        }
                    }
                }
                pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
            }
        }
        """
        data = await self._request(query, params.to_variables())
        menus, page_info = flatten_connection(data["menus"])
        return {"menus": menus, "totalCount": len(menus), "pageInfo": page_info}


# ── create-menu ────────────────────────────────────────────────────────


class CreateMenuInput(ToolInput):
    title: str = Field(min_length=1, description="The title of the menu (e.g., 'Main Menu', 'Footer Menu')")
    handle: str = Field(min_length=1, description="The handle/slug for the menu (e.g., 'main-menu', 'footer')")
    items: Optional[List[MenuItemInput]] = Field(
        None, description="Array of menu items to add to the menu"
    )


class CreateMenuTool(BaseTool):
    input_model = CreateMenuInput

    @property
    def name(self) -> str:
        return "create-menu"

    @property
    def description(self) -> str:
        return (
            "Create a new navigation menu for the online store. Menus can include links to "
            "pages, collections, products, or custom URLs, and can have nested sub-menus."
        )

    async def execute(self, params: CreateMenuInput) -> Dict[str, Any]:
        mutation = f"""
        mutation menuCreate($title: String!, $handle: String!, $items: [MenuItemCreateInput!]) {{
            menuCreate(title: $title, handle: $handle, items: $items) {{
                menu {{ {MENU_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        data = await self._request(mutation, params.to_variables())
        menu = self._payload(data, "menuCreate", "menu", "create menu")
        return {"success": True, "menu": format_menu(menu)}


# ── update-menu ────────────────────────────────────────────────────────


class MenuItemUpdate(ToolInput):
    id: str = Field(min_length=1, description="The GID of the menu item to update")
    title: Optional[str] = Field(None, description="The new title for the menu item")
    url: Optional[str] = Field(None, description="The new URL for the menu item")
    resource_id: Optional[str] = Field(None, description="The new resource GID to link to")


class MenuItemAdd(ToolInput):
    title: str = Field(min_length=1, description="The title of the new menu item")
    url: Optional[str] = Field(None, description="The URL the menu item links to")
    resource_id: Optional[str] = Field(None, description="The GID of a Shopify resource to link to")


class UpdateMenuInput(ToolInput):
    id: str = Field(min_length=1, description="The GID of the menu to update (e.g., 'gid://shopify/Menu/123456')")
    title: Optional[str] = Field(None, description="The new title for the menu")
    handle: Optional[str] = Field(None, description="The new handle/slug for the menu")
    items_to_update: Optional[List[MenuItemUpdate]] = Field(None, description="Existing menu items to update")
    items_to_add: Optional[List[MenuItemAdd]] = Field(None, description="New menu items to add")
    items_to_remove: Optional[List[str]] = Field(None, description="GIDs of menu items to remove")


def menu_item_changes(params: UpdateMenuInput) -> List[Dict[str, Any]]:
    """Fold updates, additions and removals into Shopify's single ``items`` list.

    Updates carry an ``id``, additions do not, removals carry ``remove: true``.
    """
    items = [item.to_variables() for item in params.items_to_update or ()]
    items += [item.to_variables() for item in params.items_to_add or ()]
    items += [{"id": item_id, "remove": True} for item_id in params.items_to_remove or ()]
    return items


class UpdateMenuTool(BaseTool):
    input_model = UpdateMenuInput

    @property
    def name(self) -> str:
        return "update-menu"

    @property
    def description(self) -> str:
        return (
            "Update an existing navigation menu. You can modify the menu title/handle, "
            "update existing items, add new items, or remove items."
        )

    async def execute(self, params: UpdateMenuInput) -> Dict[str, Any]:
        mutation = f"""
        mutation menuUpdate($id: ID!, $title: String, $handle: String, $items: [MenuItemUpdateInput!]) {{
            menuUpdate(id: $id, title: $title, handle: $handle, items: $items) {{
                menu {{ {MENU_FIELDS} }}
                userErrors {{ field message code }}
            }}
        }}
        """
        variables = params.to_variables()
        for key in ("itemsToUpdate", "itemsToAdd", "itemsToRemove"):
            variables.pop(key, None)
        items = menu_item_changes(params)
        if items:
            variables["items"] = items

        data = await self._request(mutation, variables)
        menu = self._payload(data, "menuUpdate", "menu", "update menu")
        return {"success": True, "menu": format_menu(menu)}


# ── delete-menu ────────────────────────────────────────────────────────


class DeleteMenuInput(ToolInput):
    id: str = Field(min_length=1, description="The GID of the menu to delete (e.g., 'gid://shopify/Menu/123456')")


class DeleteMenuTool(BaseTool):
    input_model = DeleteMenuInput

    @property
    def name(self) -> str:
        return "delete-menu"

    @property
    def description(self) -> str:
        return (
            "Delete a navigation menu. This permanently removes the menu and all its items. "
            "This action cannot be undone."
        )

    async def execute(self, params: DeleteMenuInput) -> Dict[str, Any]:
        mutation = """
        mutation MenuDelete($id: ID!) {
            menuDelete(id: $id) {
                deletedMenuId
                userErrors { field message code }
            }
        }
        """
        data = await self._request(mutation, {"id": params.id})
        deleted_id = self._payload(data, "menuDelete", "deletedMenuId", "delete menu")
        return {"success": True, "deletedMenuId": deleted_id}

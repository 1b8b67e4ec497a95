"""Pytest configuration and shared fixtures for Shopify Admin MCP tests."""

import itertools
import re
from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import AsyncMock

from shopify_admin_mcp.config.settings import Settings


@pytest.fixture
def test_settings():
    """Return a fully configured Settings object independent of the environment."""
    config = Settings()
    config.shopify.access_token = "shpat_test_token_12345"
    config.shopify.shop_domain = "test-shop.myshopify.com"
    config.shopify.api_version = "2025-01"
    config.shopify.timeout_seconds = 5.0
    return config


@pytest.fixture
def mock_graphql_client():
    """Return a mock ShopifyGraphQLClient for testing without external dependencies.

    Uses AsyncMock to support async methods. Tests set
    ``execute_query.return_value`` to the ``data`` member they want back.
    """
    client = AsyncMock()
    client.execute_query = AsyncMock(return_value={})
    return client


@pytest.fixture
def fake_shopify():
    """In-memory stand-in for the Shopify Admin API.

    Implements the subset of mutations and queries the structured-data
    tools send, keyed on the root field of each document.
    """
    return FakeShopify()


def user_error(field: List[str], message: str, code: Optional[str] = None) -> Dict[str, Any]:
    return {"field": field, "message": message, "code": code}


def connection(nodes: List[Dict[str, Any]], first: int, after: Optional[str] = None) -> Dict[str, Any]:
    """Slice ``nodes`` into a Relay connection. Cursors are 1-based positions."""
    start = int(after) if after else 0
    page = nodes[start:start + first]
    edges = [
        {"cursor": str(start + i + 1), "node": dict(node)}
        for i, node in enumerate(page)
    ]
    return {
        "edges": edges,
        "pageInfo": {
            "hasNextPage": start + first < len(nodes),
            "hasPreviousPage": start > 0,
            "startCursor": edges[0]["cursor"] if edges else None,
            "endCursor": edges[-1]["cursor"] if edges else None,
        },
    }


class FakeShopify:
    """A tiny Shopify: products, metafields, metafield/metaobject definitions, metaobjects."""

    _ROOT_FIELD = re.compile(r"\{\s*(\w+)")

    def __init__(self):
        self.calls: List[tuple] = []
        self.products: Dict[str, Dict[str, Any]] = {}
        self.metafields: Dict[tuple, Dict[str, Any]] = {}
        self.metafield_definitions: Dict[str, Dict[str, Any]] = {}
        self.metaobject_definitions: Dict[str, Dict[str, Any]] = {}
        self.metaobjects: Dict[str, Dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)
        self._handlers = {
            "product": self.get_product,
            "productCreate": self.create_product,
            "productDelete": self.delete_product,
            "metafieldsSet": self.set_metafields,
            "metafieldDelete": self.delete_metafield,
            "metafieldsDelete": self.delete_metafields,
            "metafieldDefinitionCreate": self.create_metafield_definition,
            "metafieldDefinitionDelete": self.delete_metafield_definition,
            "metafieldDefinitions": self.list_metafield_definitions,
            "metaobjectDefinitionCreate": self.create_metaobject_definition,
            "metaobjectDefinitionUpdate": self.update_metaobject_definition,
            "metaobjectDefinitionDelete": self.delete_metaobject_definition,
            "metaobject": self.get_metaobject,
            "metaobjects": self.list_metaobjects,
            "metaobjectCreate": self.create_metaobject,
            "metaobjectUpdate": self.update_metaobject,
            "metaobjectDelete": self.delete_metaobject,
        }

    async def execute_query(self, query: str, variables: Optional[Dict[str, Any]] = None):
        root = self._ROOT_FIELD.search(query).group(1)
        variables = variables or {}
        self.calls.append((root, variables))
        return {root: self._handlers[root](variables)}

    def _gid(self, kind: str) -> str:
        return f"gid://shopify/{kind}/{next(self._ids)}"

    def _timestamp(self) -> str:
        return f"2026-01-01T00:00:{next(self._clock):02d}Z"

    def add_product(self, title: str = "Test Product") -> str:
        product_id = self._gid("Product")
        self.products[product_id] = {"id": product_id, "title": title}
        return product_id

    # ── Products ────────────────────────────────────────────────────

    def get_product(self, variables):
        product = self.products.get(variables["id"])
        if product is None:
            return None
        nodes = [
            m for (owner, namespace, _), m in self.metafields.items()
            if owner == product["id"]
            and (not variables.get("namespace") or namespace == variables["namespace"])
        ]
        return {
            **product,
            "metafields": connection(nodes, variables["first"], variables.get("after")),
        }

    def create_product(self, variables):
        product_id = self.add_product(variables["input"]["title"])
        return {
            "product": {**self.products[product_id], "variants": {"edges": []}},
            "userErrors": [],
        }

    def delete_product(self, variables):
        product_id = variables["input"]["id"]
        if self.products.pop(product_id, None) is None:
            return {
                "deletedProductId": None,
                "userErrors": [user_error(["id"], "Product does not exist")],
            }
        for identifier in [k for k in self.metafields if k[0] == product_id]:
            del self.metafields[identifier]
        return {"deletedProductId": product_id, "userErrors": []}

    # ── Metafields ──────────────────────────────────────────────────

    def set_metafields(self, variables):
        written = []
        for index, entry in enumerate(variables["metafields"]):
            identifier = (entry["ownerId"], entry["namespace"], entry["key"])
            if entry["ownerId"] not in self.products:
                return {
                    "metafields": [],
                    "userErrors": [user_error(
                        ["metafields", str(index), "ownerId"], "Owner does not exist", "INVALID_VALUE"
                    )],
                }
            existing = self.metafields.get(identifier)
            if existing is None and "type" not in entry:
                return {
                    "metafields": [],
                    "userErrors": [user_error(
                        ["metafields", str(index), "type"], "Type can't be blank", "BLANK"
                    )],
                }
            now = self._timestamp()
            if existing is None:
                existing = {
                    "id": self._gid("Metafield"),
                    "namespace": entry["namespace"],
                    "key": entry["key"],
                    "description": None,
                    "createdAt": now,
                }
                self.metafields[identifier] = existing
            existing["value"] = entry["value"]
            existing["type"] = entry.get("type", existing.get("type"))
            existing["updatedAt"] = now
            written.append(dict(existing))
        return {"metafields": written, "userErrors": []}

    def delete_metafield(self, variables):
        metafield_id = variables["input"]["id"]
        for identifier, metafield in self.metafields.items():
            if metafield["id"] == metafield_id:
                del self.metafields[identifier]
                return {"deletedId": metafield_id, "userErrors": []}
        return {"deletedId": None, "userErrors": [user_error(["id"], "Metafield not found")]}

    def delete_metafields(self, variables):
        deleted = []
        for entry in variables["metafields"]:
            identifier = (entry["ownerId"], entry["namespace"], entry["key"])
            deleted.append(dict(entry) if self.metafields.pop(identifier, None) else None)
        return {"deletedMetafields": deleted, "userErrors": []}

    # ── Metafield definitions ───────────────────────────────────────

    def create_metafield_definition(self, variables):
        definition = variables["definition"]
        for existing in self.metafield_definitions.values():
            if (existing["ownerType"], existing["namespace"], existing["key"]) == (
                definition["ownerType"], definition["namespace"], definition["key"]
            ):
                return {
                    "createdDefinition": None,
                    "userErrors": [user_error(
                        ["definition", "key"], "Key is in use for Product metafields on the 'custom' namespace.", "TAKEN"
                    )],
                }
        node = {
            "id": self._gid("MetafieldDefinition"),
            "name": definition["name"],
            "namespace": definition["namespace"],
            "key": definition["key"],
            "description": definition.get("description"),
            "type": {"name": definition["type"]},
            "ownerType": definition["ownerType"],
            "pinnedPosition": 1 if definition.get("pin") else None,
            "validations": definition.get("validations", []),
        }
        self.metafield_definitions[node["id"]] = node
        return {"createdDefinition": dict(node), "userErrors": []}

    def _definition_values(self, definition):
        return [
            identifier for identifier in self.metafields
            if identifier[1:] == (definition["namespace"], definition["key"])
        ]

    def delete_metafield_definition(self, variables):
        definition = self.metafield_definitions.get(variables["id"])
        if definition is None:
            return {
                "deletedDefinitionId": None,
                "userErrors": [user_error(["id"], "Definition not found.", "NOT_FOUND")],
            }
        values = self._definition_values(definition)
        if values and not variables.get("deleteAllAssociatedMetafields"):
            return {
                "deletedDefinitionId": None,
                "userErrors": [user_error(
                    ["id"], "Definition has associated metafields.", "IN_USE"
                )],
            }
        for identifier in values:
            del self.metafields[identifier]
        del self.metafield_definitions[definition["id"]]
        return {"deletedDefinitionId": definition["id"], "userErrors": []}

    def list_metafield_definitions(self, variables):
        nodes = [
            {**d, "metafieldsCount": len(self._definition_values(d))}
            for d in self.metafield_definitions.values()
            if d["ownerType"] == variables["ownerType"]
            and (not variables.get("namespace") or d["namespace"] == variables["namespace"])
        ]
        return connection(nodes, variables["first"], variables.get("after"))

    # ── Metaobject definitions ──────────────────────────────────────

    def _definition_by_id(self, definition_id):
        for definition in self.metaobject_definitions.values():
            if definition["id"] == definition_id:
                return definition
        return None

    @staticmethod
    def _field_definition(field):
        return {
            "key": field["key"],
            "name": field.get("name", field["key"]),
            "description": field.get("description"),
            "type": {"name": field["type"]},
            "required": field.get("required", False),
            "validations": field.get("validations", []),
        }

    def create_metaobject_definition(self, variables):
        definition = variables["definition"]
        if definition["type"] in self.metaobject_definitions:
            return {
                "metaobjectDefinition": None,
                "userErrors": [user_error(["definition", "type"], "Type has already been taken", "TAKEN")],
            }
        node = {
            "id": self._gid("MetaobjectDefinition"),
            "type": definition["type"],
            "name": definition.get("name", definition["type"]),
            "description": definition.get("description"),
            "displayNameKey": definition.get("displayNameKey"),
            "fieldDefinitions": [
                self._field_definition(f) for f in definition["fieldDefinitions"]
            ],
            "access": definition.get("access", {"storefront": "NONE"}),
            "capabilities": definition.get("capabilities", {}),
        }
        self.metaobject_definitions[node["type"]] = node
        return {"metaobjectDefinition": dict(node), "userErrors": []}

    def update_metaobject_definition(self, variables):
        definition = self._definition_by_id(variables["id"])
        if definition is None:
            return {
                "metaobjectDefinition": None,
                "userErrors": [user_error(["id"], "Record not found", "RECORD_NOT_FOUND")],
            }
        patch = variables["definition"]
        for attribute in ("name", "description", "displayNameKey", "access", "capabilities"):
            if attribute in patch:
                definition[attribute] = patch[attribute]
        fields = definition["fieldDefinitions"]
        for change in patch.get("fieldDefinitions", []):
            if "update" in change:
                body = change["update"]
                target = next(f for f in fields if f["key"] == body["key"])
                target.update({k: v for k, v in body.items() if k != "key"})
            elif "create" in change:
                fields.append(self._field_definition(change["create"]))
            elif "delete" in change:
                fields[:] = [f for f in fields if f["key"] != change["delete"]["key"]]
        return {"metaobjectDefinition": dict(definition), "userErrors": []}

    def delete_metaobject_definition(self, variables):
        definition = self._definition_by_id(variables["id"])
        if definition is None:
            return {
                "deletedId": None,
                "userErrors": [user_error(["id"], "Record not found", "RECORD_NOT_FOUND")],
            }
        entries = [m_id for m_id, m in self.metaobjects.items() if m["type"] == definition["type"]]
        if entries and not variables.get("deleteAllAssociatedMetaobjects"):
            return {
                "deletedId": None,
                "userErrors": [user_error(
                    ["id"], "Definition has metaobject entries.", "IN_USE"
                )],
            }
        for m_id in entries:
            del self.metaobjects[m_id]
        del self.metaobject_definitions[definition["type"]]
        return {"deletedId": definition["id"], "userErrors": []}

    # ── Metaobjects ─────────────────────────────────────────────────

    def _render_metaobject(self, entry):
        definition = self.metaobject_definitions[entry["type"]]
        values = entry["values"]
        display_key = definition.get("displayNameKey")
        return {
            "id": entry["id"],
            "handle": entry["handle"],
            "type": entry["type"],
            "displayName": values.get(display_key) if display_key else entry["handle"],
            "updatedAt": entry["updatedAt"],
            "fields": [
                {"key": f["key"], "value": values.get(f["key"]), "type": f["type"]["name"]}
                for f in definition["fieldDefinitions"]
            ],
            "capabilities": {"publishable": {"status": entry["status"]}} if entry["status"] else {},
        }

    def _field_errors(self, definition, fields):
        known = {f["key"] for f in definition["fieldDefinitions"]}
        return [
            user_error(["metaobject", "fields", str(i)], f"Field definition \"{f['key']}\" does not exist", "UNDEFINED_OBJECT_FIELD")
            for i, f in enumerate(fields)
            if f["key"] not in known
        ]

    def create_metaobject(self, variables):
        metaobject = variables["metaobject"]
        definition = self.metaobject_definitions.get(metaobject["type"])
        if definition is None:
            return {
                "metaobject": None,
                "userErrors": [user_error(
                    ["metaobject", "type"], "No metaobject definition exists for type", "UNDEFINED_OBJECT_TYPE"
                )],
            }
        errors = self._field_errors(definition, metaobject["fields"])
        values = {f["key"]: f["value"] for f in metaobject["fields"]}
        for field in definition["fieldDefinitions"]:
            if field["required"] and not values.get(field["key"]):
                errors.append(user_error(
                    ["metaobject", "fields"], f"{field['name']} can't be blank", "OBJECT_FIELD_REQUIRED"
                ))
        if errors:
            return {"metaobject": None, "userErrors": errors}

        entry = {
            "id": self._gid("Metaobject"),
            "type": metaobject["type"],
            "handle": metaobject.get("handle") or f"{metaobject['type']}-{len(self.metaobjects) + 1}",
            "values": values,
            "status": metaobject.get("capabilities", {}).get("publishable", {}).get("status"),
            "updatedAt": self._timestamp(),
        }
        self.metaobjects[entry["id"]] = entry
        return {"metaobject": self._render_metaobject(entry), "userErrors": []}

    def update_metaobject(self, variables):
        entry = self.metaobjects.get(variables["id"])
        if entry is None:
            return {
                "metaobject": None,
                "userErrors": [user_error(["id"], "Record not found", "RECORD_NOT_FOUND")],
            }
        patch = variables["metaobject"]
        definition = self.metaobject_definitions[entry["type"]]
        errors = self._field_errors(definition, patch.get("fields", []))
        if errors:
            return {"metaobject": None, "userErrors": errors}
        entry["values"].update({f["key"]: f["value"] for f in patch.get("fields", [])})
        if "handle" in patch:
            entry["handle"] = patch["handle"]
        status = patch.get("capabilities", {}).get("publishable", {}).get("status")
        if status:
            entry["status"] = status
        entry["updatedAt"] = self._timestamp()
        return {"metaobject": self._render_metaobject(entry), "userErrors": []}

    def delete_metaobject(self, variables):
        if self.metaobjects.pop(variables["id"], None) is None:
            return {
                "deletedId": None,
                "userErrors": [user_error(["id"], "Record not found", "RECORD_NOT_FOUND")],
            }
        return {"deletedId": variables["id"], "userErrors": []}

    def get_metaobject(self, variables):
        entry = self.metaobjects.get(variables["id"])
        return self._render_metaobject(entry) if entry else None

    def list_metaobjects(self, variables):
        nodes = [
            self._render_metaobject(entry)
            for entry in self.metaobjects.values()
            if entry["type"] == variables["type"]
        ]
        if variables.get("reverse"):
            nodes.reverse()
        return connection(nodes, variables["first"], variables.get("after"))

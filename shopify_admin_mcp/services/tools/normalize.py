"""Helpers that reshape raw Shopify GraphQL responses into flatter results."""

from typing import Any, Dict, List, Optional, Tuple


def flatten_connection(
    connection: Optional[Dict[str, Any]], include_cursor: bool = False
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Turn a Relay connection (``edges { node cursor }``) into a plain list.

    Args:
        connection: The connection object, e.g. ``data["metaobjects"]``.
        include_cursor: Copy each edge's cursor onto its node as ``cursor``.

    Returns:
        ``(nodes, page_info)``; ``page_info`` is ``{}`` when not requested.
    """
    if not connection:
        return [], {}

    nodes = []
    for edge in connection.get("edges") or []:
        node = dict(edge.get("node") or {})
        if include_cursor and "cursor" in edge:
            node["cursor"] = edge["cursor"]
        nodes.append(node)
    return nodes, connection.get("pageInfo") or {}


def fields_by_key(fields: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Index metaobject fields by key: ``{key: {"value": ..., "type": ...}}``."""
    return {
        field["key"]: {"value": field.get("value"), "type": field.get("type")}
        for field in fields
    }


def metafields_by_key(metafields: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Index metafields by ``namespace.key``."""
    return {
        f"{m['namespace']}.{m['key']}": {"value": m.get("value"), "type": m.get("type")}
        for m in metafields
    }


def type_name(definition: Dict[str, Any]) -> Optional[str]:
    """Unwrap ``type { name }`` to the bare type name."""
    value = definition.get("type")
    if isinstance(value, dict):
        return value.get("name")
    return value


def format_field_definition(field: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a metaobject field definition node."""
    formatted = {
        "key": field.get("key"),
        "name": field.get("name"),
        "description": field.get("description"),
        "type": type_name(field),
        "required": field.get("required"),
    }
    if "validations" in field:
        formatted["validations"] = field["validations"]
    return formatted

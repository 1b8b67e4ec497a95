"""Exception hierarchy shared by the GraphQL client, the tools and the registry.

Three failure kinds reach a tool caller and are kept disjoint:

- ``ToolInputError``: the arguments broke a declared constraint. Raised
  before any remote call.
- ``ShopifyUserError``: Shopify answered but rejected the request through its
  ``userErrors`` list.
- ``ShopifyOperationError``: anything else went wrong (transport, protocol,
  or a response that carried no errors and no payload either).
"""

from typing import Any, Dict, List, Optional


class ShopifyToolError(Exception):
    """Base class for every error raised by this package."""


# ── Startup / wiring errors ────────────────────────────────────────────


class ConfigurationError(ShopifyToolError):
    """Required connection settings (domain, access token) are missing."""


class ToolBindingError(ShopifyToolError):
    """A tool was invoked before being bound, or re-bound to another client."""


class DuplicateToolError(ShopifyToolError):
    """Two tools were registered under the same name."""


class UnknownToolError(ShopifyToolError):
    """No tool is registered under the requested name."""


# ── Kind 1: input validation ───────────────────────────────────────────


class ToolInputError(ShopifyToolError, ValueError):
    """Tool arguments failed schema validation."""

    def __init__(self, tool_name: str, errors: List[Dict[str, str]]):
        self.tool_name = tool_name
        self.errors = errors
        details = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Invalid input for {tool_name}: {details}")

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]


# ── Kind 2: Shopify user errors ────────────────────────────────────────


class ShopifyUserError(ShopifyToolError):
    """Shopify rejected the request with one or more ``userErrors``."""

    def __init__(self, action: str, user_errors: List[Dict[str, Any]]):
        self.action = action
        self.user_errors = user_errors
        super().__init__(f"Failed to {action}: {format_user_errors(user_errors)}")

    @property
    def codes(self) -> List[str]:
        return [e["code"] for e in self.user_errors if e.get("code")]


def format_user_errors(user_errors: List[Dict[str, Any]]) -> str:
    """Join user errors as ``message (CODE)``, leaving out codes Shopify omitted."""
    parts = []
    for error in user_errors:
        message = error.get("message") or "Unknown error"
        code = error.get("code")
        parts.append(f"{message} ({code})" if code else message)
    return ", ".join(parts)


# ── Kind 3: transport / empty results ──────────────────────────────────


class ShopifyOperationError(ShopifyToolError):
    """The operation failed for a reason not attributable to the input."""


class ShopifyTransportError(ShopifyOperationError):
    """Network, HTTP, authentication or GraphQL protocol failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        graphql_errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.graphql_errors = graphql_errors or []


class EmptyResultError(ShopifyOperationError):
    """Shopify reported no user errors but returned no payload either."""


class ResourceNotFoundError(ShopifyOperationError):
    """A lookup by ID returned null."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} with ID {resource_id} not found")

from typing import Dict, Any, Optional, Type
from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from shopify_admin_mcp.services.errors import (
    EmptyResultError,
    ShopifyOperationError,
    ShopifyToolError,
    ShopifyUserError,
    ToolBindingError,
    ToolInputError,
)
from shopify_admin_mcp.utils.logger import get_logger, new_correlation_id

logger = get_logger(__name__)


class ToolInput(BaseModel):
    """Base for tool argument models.

    Python attributes are snake_case; the external schema and the variables
    sent to Shopify use camelCase aliases. Unknown arguments are rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    def to_variables(self, **overrides: Any) -> Dict[str, Any]:
        """Dump to a GraphQL variable map, omitting every field left unset."""
        variables = self.model_dump(by_alias=True, exclude_none=True)
        variables.update({k: v for k, v in overrides.items() if v is not None})
        return variables


class BaseTool(ABC):
    """Abstract base class for all tools.

    A tool validates its arguments against ``input_model`` before anything
    else happens, then runs ``execute`` against the bound GraphQL client.
    """

    input_model: Type[ToolInput] = ToolInput

    def __init__(self, client=None):
        self._client = None
        if client is not None:
            self.bind(client)

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description."""
        pass

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON schema for tool input."""
        return self.input_model.model_json_schema(by_alias=True)

    def to_dict(self) -> Dict[str, Any]:
        """Return the dictionary representation of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema
        }

    # ── Client binding ──────────────────────────────────────────────

    @property
    def is_bound(self) -> bool:
        return self._client is not None

    def bind(self, client) -> None:
        """Bind the GraphQL client. Re-binding the same client is a no-op."""
        if self._client is client:
            return
        if self._client is not None:
            raise ToolBindingError(f"Tool {self.name} is already bound to a client")
        self._client = client

    def _require_client(self):
        if self._client is None:
            raise ToolBindingError(
                f"Tool {self.name} is not bound to a Shopify client; "
                "register it with the tool registry before calling it"
            )
        return self._client

    # ── Invocation ──────────────────────────────────────────────────

    def validate(self, input_data: Dict[str, Any]) -> ToolInput:
        """Validate input data against schema.

        Args:
            input_data: Tool input parameters

        Returns:
            The parsed input model

        Raises:
            ToolInputError: If validation fails, naming every offending field
        """
        try:
            return self.input_model.model_validate(input_data or {})
        except ValidationError as e:
            errors = [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "input",
                    "message": err["msg"],
                }
                for err in e.errors()
            ]
            raise ToolInputError(self.name, errors) from None

    async def run(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Validate ``arguments`` and execute the tool.

        Input is validated before the client is even looked at, so a bad
        call never reaches the network.
        """
        new_correlation_id()
        params = self.validate(arguments)
        self._require_client()

        logger.info("Tool invoked", tool=self.name)
        try:
            result = await self.execute(params)
        except ShopifyToolError as e:
            logger.error(
                "Tool failed", tool=self.name, error=str(e), error_type=type(e).__name__
            )
            raise
        except (KeyError, TypeError) as e:
            logger.error("Unexpected response shape", tool=self.name, error=repr(e))
            raise ShopifyOperationError(
                f"Unexpected response shape from Shopify in {self.name}: {e!r}"
            ) from e
        logger.info("Tool completed", tool=self.name)
        return result

    @abstractmethod
    async def execute(self, params: Any) -> Dict[str, Any]:
        """Run the tool against Shopify with already-validated input."""
        pass

    # ── Helpers for subclasses ──────────────────────────────────────

    async def _request(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send exactly one GraphQL request through the bound client."""
        client = self._require_client()
        logger.debug("Sending Shopify operation", tool=self.name)
        return await client.execute_query(query, variables)

    def _payload(
        self, data: Dict[str, Any], root: str, result_key: str, action: str
    ) -> Any:
        """Pull ``result_key`` out of a mutation payload.

        Args:
            data: ``data`` member of the response.
            root: Mutation field, e.g. ``metaobjectCreate``.
            result_key: Payload field holding the result, e.g. ``metaobject``.
            action: Human phrase used in error messages ("create metaobject").

        Raises:
            ShopifyUserError: If ``userErrors`` is non-empty.
            EmptyResultError: If no user errors but the result is null/empty.
        """
        body = data.get(root)
        if body is None:
            raise EmptyResultError(f"Failed to {action}: Shopify returned no {root} payload")

        user_errors = body.get("userErrors") or []
        if user_errors:
            raise ShopifyUserError(action, user_errors)

        result = body.get(result_key)
        if result is None or result == []:
            raise EmptyResultError(f"Failed to {action}: Shopify returned no {result_key}")
        return result

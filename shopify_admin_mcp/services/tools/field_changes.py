"""Tagged change lists for partial updates of nested definitions.

Shopify's ``metaobjectDefinitionUpdate`` takes one ``fieldDefinitions`` list
where every entry carries exactly one of ``update``, ``create`` or
``delete``. Callers supply the three change sets separately; this module only
tags and concatenates them. Reconciling them (say, a key both updated and
deleted) is left to Shopify.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from .base import ToolInput


class ChangeKind(str, Enum):
    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"


class FieldChange(NamedTuple):
    kind: ChangeKind
    body: Dict[str, Any]

    def to_variables(self) -> Dict[str, Any]:
        return {self.kind.value: self.body}


def tag_field_changes(
    to_update: Optional[Iterable[ToolInput]] = None,
    to_create: Optional[Iterable[ToolInput]] = None,
    to_delete: Optional[Iterable[str]] = None,
) -> List[FieldChange]:
    """Merge the three change sets into one ordered list: updates, creates, deletes."""
    changes = [FieldChange(ChangeKind.UPDATE, f.to_variables()) for f in to_update or ()]
    changes += [FieldChange(ChangeKind.CREATE, f.to_variables()) for f in to_create or ()]
    changes += [FieldChange(ChangeKind.DELETE, {"key": key}) for key in to_delete or ()]
    return changes


def field_changes_to_variables(changes: List[FieldChange]) -> List[Dict[str, Any]]:
    return [change.to_variables() for change in changes]

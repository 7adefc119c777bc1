"""Document records exposed to the query layer through named-field access."""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, runtime_checkable

# Identifier values accepted by identity lookups
RecordId = str | uuid.UUID


@runtime_checkable
class DocumentLike(Protocol):
    """
    Anything the query layer can evaluate: a record with named-field read access.
    """
    def field(self, name: str, default: Any = None) -> Any:
        ...


@dataclass
class Document:
    """A dict-backed document.

    Attributes:
        fields: Field values keyed by field name. Nested mappings can be reached
            with dotted names, e.g. ``"address.city"``.
    """
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, **fields) -> "Document":
        return cls(fields=dict(fields))

    def field(self, name: str, default: Any = None) -> Any:
        """Return the value stored under ``name`` or ``default`` when absent."""
        if name in self.fields:
            return self.fields[name]

        current: Any = self.fields
        for part in name.split('.'):
            if not isinstance(current, Mapping) or part not in current:
                return default
            current = current[part]
        return current


def id_variants(record_id: RecordId) -> List[Any]:
    """Every form a stored id equal to ``record_id`` may take.

    A UUID also matches its string form, and a UUID string also matches the
    UUID object, so ids stored either way are found by either kind of lookup.
    """
    if isinstance(record_id, uuid.UUID):
        return [record_id, str(record_id)]
    if isinstance(record_id, str):
        try:
            return [record_id, uuid.UUID(record_id)]
        except ValueError:
            pass
    return [record_id]

"""
    Evaluates a field-equality selector against a document.

    Input: document (DocumentLike) + selector (Mapping[field, expected])

    For each (field, expected) pair:
      • expected is {"$in": [...]}  -> field value must equal one of the listed values
      • anything else               -> field value must equal expected

    A field the document does not carry never matches, not even an expected
    value of None. An empty selector matches every document.
"""
from typing import Any, Mapping

from docquery_data_model.document import DocumentLike

# Stand-in for a field the document does not carry
_MISSING = object()


class SelectorMatcher:
    """Decides whether a document satisfies a selector by field equality."""

    def matches(self, document: DocumentLike, selector: Mapping[str, Any]) -> bool:
        for field_name, expected in selector.items():
            value = document.field(field_name, _MISSING)
            if value is _MISSING:
                return False

            if self._is_in_condition(expected):
                if not any(value == candidate for candidate in expected["$in"]):
                    return False
            elif value != expected:
                return False

        return True

    @staticmethod
    def _is_in_condition(expected: Any) -> bool:
        return (isinstance(expected, Mapping)
                and len(expected) == 1
                and "$in" in expected
                and isinstance(expected["$in"], (list, tuple, set, frozenset)))

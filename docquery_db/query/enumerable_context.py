"""
EnumerableContext Workflow
==========================

Query execution over documents that are already materialized in memory.

    Criteria (selector, options, extras, documents)
           │  snapshot at construction
           ▼
    ┌──────────────────────────────────────┐
    │  MATCH   SelectorMatcher.matches()   │  stable: source order is kept
    └──────────────────────────────────────┘
           │
           ├──▶ count / exists / group / aggregate / sum / min / max / avg / distinct
           │       (always the whole matched set, skip/limit ignored)
           ▼
    ┌──────────────────────────────────────┐
    │  ORDER   options.sort, if given      │
    └──────────────────────────────────────┘
           │
           ├──▶ first / last / one       (ordered matched set, no slicing)
           ▼
    ┌──────────────────────────────────────┐
    │  SLICE   options.skip/limit          │──▶ execute / iterate
    │          or page/per_page            │──▶ paginate
    └──────────────────────────────────────┘
"""
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from docquery_data_model.document import DocumentLike
from docquery_data_model.paginated_result import PaginatedResult
from docquery_db.query.criteria import Criteria, is_id_collection
from docquery_db.query.selector_matcher import SelectorMatcher
from docquery_exception_model.exception import DocumentNotFoundError


def _to_native(value: Any) -> Any:
    return value.item() if isinstance(value, np.generic) else value


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


class EnumerableContext:
    """
    Evaluates a query against an in-memory document sequence.

    The context takes an immutable snapshot of the criteria it is built from;
    none of its operations modify the selector, options or documents.

    Attributes:
        criteria: The builder this context was created from, used to narrow
            identity lookups.
        selector: Read-only field-equality selector.
        options: Skip, limit, sort and projection options.
        extras: Pagination extras.
        documents: The source documents, in source order.
    """
    def __init__(self, criteria: Criteria, logger: Optional[logging.Logger] = None):
        self.criteria = criteria
        self.selector = MappingProxyType(dict(criteria.selector))
        self.options = criteria.options
        self.extras = criteria.query_extras
        self.documents = tuple(criteria.documents)
        self._settings = criteria.settings
        self._matcher = SelectorMatcher()
        self._logger = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Filtering & retrieval
    # ------------------------------------------------------------------

    def execute(self) -> List[DocumentLike]:
        """Matching documents, ordered, with the skip and limit options applied."""
        matched = self._matched()
        results = self._slice(self._order(matched), self.options.skip or 0, self.options.limit)
        self._logger.debug(f"Executed query on {len(self.documents)} documents: "
                           f"{len(matched)} matched, {len(results)} returned")
        return results

    def iterate(self, callback: Callable[[DocumentLike], Any]) -> None:
        for document in self.execute():
            callback(document)

    def first(self) -> Optional[DocumentLike]:
        ordered = self._order(self._matched())
        return ordered[0] if ordered else None

    def last(self) -> Optional[DocumentLike]:
        ordered = self._order(self._matched())
        return ordered[-1] if ordered else None

    def one(self) -> Optional[DocumentLike]:
        return self.first()

    def count(self) -> int:
        """Size of the matched set; skip and limit are not applied."""
        return len(self._matched())

    def exists(self) -> bool:
        return any(self._matcher.matches(doc, self.selector) for doc in self.documents)

    def is_empty(self) -> bool:
        return not self.exists()

    # ------------------------------------------------------------------
    # Aggregation & grouping
    # ------------------------------------------------------------------

    def group(self) -> Dict[Any, List[DocumentLike]]:
        """Matched documents keyed by the value of the first projection field."""
        key_field = self.options.grouping_field
        groups: Dict[Any, List[DocumentLike]] = {}
        for document in self._matched():
            key = document.field(key_field) if key_field else None
            groups.setdefault(key, []).append(document)
        return groups

    def aggregate(self) -> Dict[Any, int]:
        return {key: len(documents) for key, documents in self.group().items()}

    def sum(self, field: str) -> Any:
        values = self._values(field)
        if not values:
            return 0
        # object dtype keeps Python ints unbounded instead of wrapping at int64
        return _to_native(np.sum(np.asarray(values, dtype=object)))

    def min(self, field: str) -> Any:
        values = self._values(field)
        return min(values) if values else None

    def max(self, field: str) -> Any:
        values = self._values(field)
        return max(values) if values else None

    def avg(self, field: str) -> Optional[float]:
        """Mean of the field over the matched set, or None when nothing matches."""
        count = self.count()
        if count == 0:
            return None
        return self.sum(field) / count

    def distinct(self, field: str) -> List[Any]:
        """Unique field values in the order they are first seen.

        Values of different types stay distinct even when they compare equal,
        so 1, 1.0 and True are three values.
        """
        seen = set()
        seen_unhashable = []
        values = []
        for document in self._matched():
            value = document.field(field)
            key = (type(value), value)
            try:
                if key in seen:
                    continue
                seen.add(key)
            except TypeError:
                if key in seen_unhashable:
                    continue
                seen_unhashable.append(key)
            values.append(value)
        return values

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def page(self) -> int:
        page = self.extras.page
        if page is not None and page > 0:
            return page

        skip, limit = self.options.skip, self.options.limit
        if skip is not None and limit is not None:
            return (skip + limit) // limit
        return 1

    def per_page(self) -> int:
        return self.options.limit or self._settings.default_per_page

    def paginate(self) -> PaginatedResult:
        """Slice the ordered matches by page and per_page, overriding skip and limit."""
        current_page = self.page()
        per_page = self.per_page()
        matched = self._matched()
        entries = self._slice(self._order(matched), (current_page - 1) * per_page, per_page)
        self._logger.debug(f"Paginated query: page {current_page}, per_page {per_page}, "
                           f"{len(entries)} of {len(matched)} matches")
        return PaginatedResult(
            entries=entries,
            current_page=current_page,
            per_page=per_page,
            total_count=len(matched)
        )

    # ------------------------------------------------------------------
    # Identity lookup
    # ------------------------------------------------------------------

    def id_criteria(self, ids: Any) -> DocumentLike | List[DocumentLike]:
        """Find documents by id.

        Args:
            ids: A single id, or a list/tuple/set of ids. Ids may be raw values or
                identifier objects such as ``uuid.UUID``.

        Returns:
            The matching document for a single id, or the list of documents found
            for a collection of ids. Ids without a document are left out.

        Raises:
            DocumentNotFoundError: If a single id has no (or a blank) document, or
                none of the ids in a collection has one.
        """
        narrowed = self.criteria.for_ids(ids).context(logger=self._logger)

        if is_id_collection(ids):
            documents = narrowed.execute()
            if not documents:
                self._raise_not_found(ids)
            return documents

        document = narrowed.one()
        if _is_blank(document):
            self._raise_not_found(ids)
        return document

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _raise_not_found(self, ids: Any) -> None:
        error_message = "Document not found"
        self._logger.error(f"{error_message} for ids {ids} in collection {self.criteria.collection}")
        raise DocumentNotFoundError(error_message, ids=ids, collection=self.criteria.collection)

    def _matched(self) -> List[DocumentLike]:
        return [doc for doc in self.documents if self._matcher.matches(doc, self.selector)]

    def _order(self, documents: List[DocumentLike]) -> List[DocumentLike]:
        if self.options.sort is None:
            return documents
        return list(self.options.sort(documents))

    def _values(self, field: str) -> List[Any]:
        return [value for value in (doc.field(field) for doc in self._matched()) if value is not None]

    @staticmethod
    def _slice(documents: Sequence[DocumentLike], skip: int, limit: Optional[int]) -> List[DocumentLike]:
        end = None if limit is None else skip + limit
        return list(documents[skip:end])

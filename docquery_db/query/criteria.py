from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from docquery_data_model.document import DocumentLike, id_variants
from docquery_data_model.query_options import Ordering, QueryExtras, QueryOptions
from docquery_db.config import Settings, settings as default_settings


def is_id_collection(ids: Any) -> bool:
    return isinstance(ids, (list, tuple, set, frozenset))


@dataclass(frozen=True)
class Criteria:
    """
    Criteria accumulates the selector, options and extras of a query over an
    in-memory document sequence. Every builder call returns a new Criteria, so a
    context built from one instance is never affected by later calls.
    """
    documents: Tuple[DocumentLike, ...] = ()
    selector: Dict[str, Any] = field(default_factory=dict)
    options: QueryOptions = field(default_factory=QueryOptions)
    query_extras: QueryExtras = field(default_factory=QueryExtras)
    collection: Optional[str] = None
    settings: Settings = field(default_factory=lambda: default_settings, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'documents', tuple(self.documents))
        object.__setattr__(self, 'selector', dict(self.selector))

    def where(self, selector: Optional[Mapping[str, Any]] = None, **fields) -> 'Criteria':
        merged = dict(self.selector)
        merged.update(selector or {})
        merged.update(fields)
        return replace(self, selector=merged)

    def only(self, *fields: str) -> 'Criteria':
        return replace(self, options=replace(self.options, fields=tuple(fields)))

    def skip(self, value: int) -> 'Criteria':
        return replace(self, options=replace(self.options, skip=value))

    def limit(self, value: int) -> 'Criteria':
        return replace(self, options=replace(self.options, limit=value))

    def order_by(self, ordering: Ordering) -> 'Criteria':
        return replace(self, options=replace(self.options, sort=ordering))

    def extras(self, extras: Mapping[str, Any]) -> 'Criteria':
        return replace(self, query_extras=QueryExtras.from_dict(extras))

    def paginate(self, page: int, per_page: Optional[int] = None) -> 'Criteria':
        narrowed = replace(self, query_extras=QueryExtras(page=page))
        if per_page is not None:
            narrowed = narrowed.limit(per_page)
        return narrowed

    def with_documents(self, documents: Iterable[DocumentLike]) -> 'Criteria':
        return replace(self, documents=tuple(documents))

    def for_ids(self, ids: Any) -> 'Criteria':
        """Narrow to the documents whose id field equals the id, or any of the ids."""
        id_field = self.settings.id_field
        candidates = []
        for record_id in (ids if is_id_collection(ids) else [ids]):
            for variant in id_variants(record_id):
                if variant not in candidates:
                    candidates.append(variant)

        if len(candidates) == 1 and not is_id_collection(ids):
            return self.where({id_field: candidates[0]})
        return self.where({id_field: {"$in": candidates}})

    def context(self, logger=None):
        from docquery_db.query.enumerable_context import EnumerableContext
        return EnumerableContext(self, logger=logger)

"""Data structures for the options and pagination extras of a query."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from docquery_data_model.document import DocumentLike
from docquery_exception_model.exception import InvalidQueryOptionsException

# A pre-built ordering: receives the matched documents, returns them reordered
Ordering = Callable[[Iterable[DocumentLike]], Iterable[DocumentLike]]


def _is_integer(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class QueryOptions:
    """Options controlling ordering, slicing and projection of a query.

    Attributes:
        skip: Number of matched documents to drop from the front.
        limit: Maximum number of documents returned after ``skip``.
        sort: Ordering applied to the matched documents before skip/limit.
        fields: Projection field names; the first one is the grouping key.
    """
    skip: Optional[int] = None
    limit: Optional[int] = None
    sort: Optional[Ordering] = None
    fields: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.skip is not None and (not _is_integer(self.skip) or self.skip < 0):
            raise InvalidQueryOptionsException("skip must be a non-negative integer",
                                               option="skip", value=self.skip)

        if self.limit is not None and (not _is_integer(self.limit) or self.limit <= 0):
            raise InvalidQueryOptionsException("limit must be a positive integer",
                                               option="limit", value=self.limit)

        if self.sort is not None and not callable(self.sort):
            raise InvalidQueryOptionsException("sort must be a callable ordering",
                                               option="sort", value=self.sort)

        # frozen dataclass, so bypass __setattr__ to normalize the projection
        object.__setattr__(self, 'fields', tuple(self.fields))

    @property
    def grouping_field(self) -> Optional[str]:
        return self.fields[0] if self.fields else None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.skip is not None:
            d['skip'] = self.skip
        if self.limit is not None:
            d['limit'] = self.limit
        if self.sort is not None:
            d['sort'] = self.sort
        if self.fields:
            d['fields'] = list(self.fields)
        return d

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> 'QueryOptions':
        d = dict(d or {})
        unknown = set(d) - {'skip', 'limit', 'sort', 'fields'}
        if unknown:
            raise InvalidQueryOptionsException("Unrecognized query option",
                                               option=", ".join(sorted(unknown)))
        return cls(
            skip=d.get('skip'),
            limit=d.get('limit'),
            sort=d.get('sort'),
            fields=tuple(d.get('fields') or ())
        )


@dataclass(frozen=True)
class QueryExtras:
    """Pagination hints carried separately from the query options.

    A non-positive ``page`` is kept as given; the query context treats it as absent.
    """
    page: Optional[int] = None

    def __post_init__(self):
        if self.page is not None and not _is_integer(self.page):
            raise InvalidQueryOptionsException("page must be an integer",
                                               option="page", value=self.page)

    def to_dict(self) -> Dict[str, Any]:
        return {} if self.page is None else {'page': self.page}

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> 'QueryExtras':
        d = dict(d or {})
        unknown = set(d) - {'page'}
        if unknown:
            raise InvalidQueryOptionsException("Unrecognized pagination extra",
                                               option=", ".join(sorted(unknown)))
        return cls(page=d.get('page'))

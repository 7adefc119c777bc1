import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from docquery_data_model.document import DocumentLike


@dataclass(frozen=True)
class PaginatedResult:
    """
    One page of query results plus the totals needed to navigate the rest.

    Attributes:
        entries: Documents on the current page, in query order.
        current_page: 1-based page number.
        per_page: Page size used to slice the results.
        total_count: Number of documents matching the query across all pages.
    """
    entries: List[DocumentLike] = field(default_factory=list)
    current_page: int = 1
    per_page: int = 20
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.per_page) if self.per_page else 0

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.per_page

    @property
    def previous_page(self) -> Optional[int]:
        return self.current_page - 1 if self.current_page > 1 else None

    @property
    def next_page(self) -> Optional[int]:
        return self.current_page + 1 if self.current_page < self.total_pages else None

    @property
    def out_of_bounds(self) -> bool:
        return self.current_page > self.total_pages

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entries': list(self.entries),
            'current_page': self.current_page,
            'per_page': self.per_page,
            'total_count': self.total_count,
            'total_pages': self.total_pages,
        }

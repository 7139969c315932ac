"""Search data types.

Value objects shared by the query builder, the arXiv client and the fetch
state machine. Everything here is immutable: criteria and queries are
compared by value, and papers are only ever stored by reference.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_RESULTS = 1
MAX_RESULTS = 100


def clamp_max_results(value: int) -> int:
    """Clamp a requested result count into [MIN_RESULTS, MAX_RESULTS]."""
    return max(MIN_RESULTS, min(MAX_RESULTS, value))


class SortField(str, Enum):
    """Field the arXiv API sorts results by.

    Values match the arXiv API ``sortBy`` parameter.
    """

    RELEVANCE = "relevance"
    SUBMITTED_DATE = "submittedDate"
    LAST_UPDATED_DATE = "lastUpdatedDate"


class SortOrder(str, Enum):
    """Direction of the sort."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


class ClauseKind(str, Enum):
    """Kind of filter clause inside a query."""

    CATEGORY = "category"
    TEXT = "text"


class SearchCriteria(BaseModel):
    """User-supplied search parameters before normalization.

    Attributes:
        term: Free text, may be empty
        category: arXiv taxonomy code such as "cs.AI"; None or "" means no filter
        sort_field: Requested sort field
        sort_order: Requested sort direction
        max_results: Result bound, clamped into [1, 100]
    """

    model_config = ConfigDict(frozen=True)

    term: str = ""
    category: Optional[str] = None
    sort_field: SortField = SortField.RELEVANCE
    sort_order: SortOrder = SortOrder.DESCENDING
    max_results: int = 20

    @field_validator("max_results", mode="before")
    @classmethod
    def clamp_results(cls, v: int) -> int:
        """Clamp out-of-range values instead of rejecting them."""
        try:
            number = int(v)
        except (TypeError, ValueError):
            raise ValueError(f"max_results must be a whole number, got {v!r}") from None
        return clamp_max_results(number)


class QueryClause(BaseModel):
    """One filter clause. Its textual encoding belongs to the fetch client."""

    model_config = ConfigDict(frozen=True)

    kind: ClauseKind
    value: str = Field(min_length=1)


class Query(BaseModel):
    """Normalized, executable form of SearchCriteria.

    ``clauses`` are conjoined in order; the category clause, when present,
    always comes first. An empty tuple is an unfiltered listing.
    """

    model_config = ConfigDict(frozen=True)

    clauses: tuple[QueryClause, ...] = ()
    sort_field: SortField
    sort_order: SortOrder
    max_results: int = Field(ge=MIN_RESULTS, le=MAX_RESULTS)

    @property
    def category_clause(self) -> Optional[QueryClause]:
        return next((c for c in self.clauses if c.kind == ClauseKind.CATEGORY), None)

    @property
    def text_clause(self) -> Optional[QueryClause]:
        return next((c for c in self.clauses if c.kind == ClauseKind.TEXT), None)

    @property
    def is_unfiltered(self) -> bool:
        return not self.clauses


class PaperSummary(BaseModel):
    """A paper as returned by the fetch client.

    Attributes:
        id: arXiv identifier including version, e.g. "2301.00001v1"
        title: Paper title
        abstract: Paper abstract
        authors: Author names in listing order
        published_at: First submission time
        updated_at: Time of the latest revision
        primary_category: Primary taxonomy code, if any
        categories: All taxonomy codes the paper is listed under
        pdf_url: Direct PDF link, if any
        comment: Author comment (page counts, venue, ...)
        journal_ref: Journal reference, if published
        doi: DOI, if assigned
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    abstract: str = ""
    authors: tuple[str, ...] = ()
    published_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    primary_category: Optional[str] = None
    categories: frozenset[str] = frozenset()
    pdf_url: Optional[str] = None
    comment: Optional[str] = None
    journal_ref: Optional[str] = None
    doi: Optional[str] = None

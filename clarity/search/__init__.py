"""Search criteria, queries and query construction."""

from clarity.search.categories import AVAILABLE_CATEGORIES
from clarity.search.models import (
    ClauseKind,
    PaperSummary,
    Query,
    QueryClause,
    SearchCriteria,
    SortField,
    SortOrder,
)
from clarity.search.query_builder import build_query, random_term_picker

__all__ = [
    "AVAILABLE_CATEGORIES",
    "ClauseKind",
    "PaperSummary",
    "Query",
    "QueryClause",
    "SearchCriteria",
    "SortField",
    "SortOrder",
    "build_query",
    "random_term_picker",
]

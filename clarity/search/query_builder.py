"""Query construction.

Pure functions turning SearchCriteria into a Query. No I/O, no logging,
never raises for any criteria: bad input is normalized.

Combination rules:
- category + term: category clause AND text clause, requested sort
- category only:  category clause, newest submissions first
- term only:      text clause across all fields, requested sort
- neither:        discovery term if a picker is supplied, else unfiltered;
                  newest submissions first either way
"""

import random
import re
from typing import Callable, Optional, Sequence

from clarity.search.models import (
    ClauseKind,
    Query,
    QueryClause,
    SearchCriteria,
    SortField,
    SortOrder,
    clamp_max_results,
)

TermPicker = Callable[[], str]

_WHITESPACE = re.compile(r"\s+")


def normalize_term(term: Optional[str]) -> str:
    """Trim a search term and collapse internal whitespace runs."""
    if not term:
        return ""
    return _WHITESPACE.sub(" ", term).strip()


def normalize_category(category: Optional[str]) -> str:
    """Trim a category code; None becomes ""."""
    return category.strip() if category else ""


def build_query(
    criteria: SearchCriteria,
    *,
    pick_default_term: Optional[TermPicker] = None,
) -> Query:
    """Build the executable query for a set of criteria.

    Args:
        criteria: User-supplied search parameters
        pick_default_term: Optional discovery strategy used when both the
            term and the category are empty

    Returns:
        Normalized Query. Equal criteria (and an equal picker result)
        always give equal queries.
    """
    term = normalize_term(criteria.term)
    category = normalize_category(criteria.category)

    sort_field = criteria.sort_field
    sort_order = criteria.sort_order
    clauses: list[QueryClause] = []

    if category:
        clauses.append(QueryClause(kind=ClauseKind.CATEGORY, value=category))

    if term:
        clauses.append(QueryClause(kind=ClauseKind.TEXT, value=term))
    else:
        # Browsing rather than searching: relevance is meaningless here
        sort_field = SortField.SUBMITTED_DATE
        sort_order = SortOrder.DESCENDING
        if not category and pick_default_term is not None:
            default_term = normalize_term(pick_default_term())
            if default_term:
                clauses.append(QueryClause(kind=ClauseKind.TEXT, value=default_term))

    return Query(
        clauses=tuple(clauses),
        sort_field=sort_field,
        sort_order=sort_order,
        max_results=clamp_max_results(criteria.max_results),
    )


def random_term_picker(
    terms: Sequence[str],
    rng: Optional[random.Random] = None,
) -> TermPicker:
    """Create a discovery strategy that picks one of ``terms`` at random.

    Args:
        terms: Candidate discovery terms
        rng: Random source; pass a seeded ``random.Random`` for repeatable picks

    Returns:
        Zero-argument callable returning a term

    Raises:
        ValueError: If no non-blank term is given
    """
    candidates = [normalize_term(t) for t in terms if normalize_term(t)]
    if not candidates:
        raise ValueError("At least one discovery term is required")

    source = rng if rng is not None else random.Random()

    def pick() -> str:
        return source.choice(candidates)

    return pick

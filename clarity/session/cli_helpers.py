"""Terminal rendering of the search session.

A rendering layer only reads FetchState: these helpers turn a snapshot
into text and print it. They never mutate state.
"""

from clarity.search.categories import AVAILABLE_CATEGORIES, category_name
from clarity.search.models import PaperSummary
from clarity.session.state import FetchState, FetchStatus

RULE = "=" * 70


def format_paper(index: int, paper: PaperSummary, abstract_length: int = 200) -> str:
    """Format one paper as a numbered list entry.

    Example Output:
        1. Attention Is All You Need  [cs.CL]
           Ashish Vaswani, Noam Shazeer, ... (8 authors) · 2017-06-12
           The dominant sequence transduction models are based on...
    """
    header = f"{index}. {paper.title}"
    if paper.primary_category:
        header += f"  [{paper.primary_category}]"

    authors = ", ".join(paper.authors[:3])
    if len(paper.authors) > 3:
        authors += f", ... ({len(paper.authors)} authors)"
    byline = authors or "Unknown authors"
    if paper.published_at:
        byline += f" · {paper.published_at:%Y-%m-%d}"

    lines = [header, f"   {byline}"]

    if paper.abstract:
        abstract = paper.abstract
        if len(abstract) > abstract_length:
            abstract = abstract[:abstract_length].rstrip() + "..."
        lines.append(f"   {abstract}")

    return "\n".join(lines)


def format_state(state: FetchState) -> str:
    """Format a snapshot the way the paper list screen shows it."""
    lines = [RULE, f"📚 CLARITY · {_describe_criteria(state)}", RULE]

    if state.status == FetchStatus.LOADING:
        lines.append("⏳ Loading papers...")
    elif state.status == FetchStatus.ERROR:
        lines.append(f"❌ Error: {state.error_message}")
        if state.results:
            lines.append(f"   Showing {len(state.results)} papers from the previous search")
    elif state.is_empty:
        lines.append("🔍 No papers found")
        lines.append("   Try adjusting your search or category filter")
    elif state.status == FetchStatus.IDLE and not state.results:
        lines.append("Nothing loaded yet")

    for idx, paper in enumerate(state.results, start=1):
        lines.append("")
        lines.append(format_paper(idx, paper))

    lines.append(RULE)
    return "\n".join(lines)


def format_categories() -> str:
    """Format the category picker entries."""
    return "\n".join(f"{code:<16} {name}" for code, name in AVAILABLE_CATEGORIES)


def display_state(state: FetchState) -> None:
    """Print a snapshot to stdout."""
    print(format_state(state))


def _describe_criteria(state: FetchState) -> str:
    criteria = state.last_criteria
    if criteria is None:
        return "no search yet"

    parts = []
    term = criteria.term.strip()
    if term:
        parts.append(f'"{term}"')
    if criteria.category:
        name = category_name(criteria.category)
        parts.append(f"in {criteria.category}" + (f" ({name})" if name else ""))
    if not term:
        parts.insert(0, "latest")
    return " ".join(parts)

"""arXiv result normalization.

Pure data transformation from ``arxiv.Result`` objects to PaperSummary.
NO filtering by relevance, ranking or deduplication.
"""

import re
from typing import Any, Iterable

from clarity.search.models import PaperSummary

_WHITESPACE = re.compile(r"\s+")


def _clean(text: Any) -> str:
    """Collapse the hard line breaks arXiv puts in titles and abstracts."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", str(text)).strip()


def _short_id(result: Any) -> str:
    """Return "2301.00001v1" from an entry id like http://arxiv.org/abs/2301.00001v1."""
    entry_id = _clean(getattr(result, "entry_id", ""))
    if "/abs/" in entry_id:
        return entry_id.split("/abs/", 1)[1]
    return entry_id


def normalize_arxiv(results: Iterable[Any]) -> list[PaperSummary]:
    """Normalize arXiv results.

    Args:
        results: ``arxiv.Result`` objects in the order the API returned them

    Returns:
        PaperSummary list in the same order; entries without an id or a
        title are skipped
    """
    normalized = []
    for result in results:
        paper_id = _short_id(result)
        title = _clean(getattr(result, "title", ""))

        if not paper_id or not title:
            continue

        authors = tuple(
            _clean(getattr(author, "name", author))
            for author in (getattr(result, "authors", None) or [])
        )

        normalized.append(
            PaperSummary(
                id=paper_id,
                title=title,
                abstract=_clean(getattr(result, "summary", "")),
                authors=tuple(a for a in authors if a),
                published_at=getattr(result, "published", None),
                updated_at=getattr(result, "updated", None),
                primary_category=getattr(result, "primary_category", None) or None,
                categories=frozenset(getattr(result, "categories", None) or []),
                pdf_url=getattr(result, "pdf_url", None) or None,
                comment=_clean(getattr(result, "comment", None)) or None,
                journal_ref=_clean(getattr(result, "journal_ref", None)) or None,
                doi=getattr(result, "doi", None) or None,
            )
        )

    return normalized

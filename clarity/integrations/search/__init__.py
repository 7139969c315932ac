"""Search source clients for fetching papers from external APIs."""

from clarity.integrations.search.arxiv_client import ArxivClient, build_search, render_query
from clarity.integrations.search.normalizer import normalize_arxiv

__all__ = [
    "ArxivClient",
    "build_search",
    "normalize_arxiv",
    "render_query",
]

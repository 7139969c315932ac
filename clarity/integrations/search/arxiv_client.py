"""arXiv papers client.

Runs a Query against arXiv through the ``arxiv`` library.
"""

import asyncio
import logging
from typing import Optional

import arxiv

from clarity.integrations.search.normalizer import normalize_arxiv
from clarity.search.models import PaperSummary, Query, SortField, SortOrder
from clarity.session.error_handling import ErrorContext, NetworkError, QueryError
from clarity.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

SORT_CRITERIA = {
    SortField.RELEVANCE: arxiv.SortCriterion.Relevance,
    SortField.SUBMITTED_DATE: arxiv.SortCriterion.SubmittedDate,
    SortField.LAST_UPDATED_DATE: arxiv.SortCriterion.LastUpdatedDate,
}

SORT_ORDERS = {
    SortOrder.ASCENDING: arxiv.SortOrder.Ascending,
    SortOrder.DESCENDING: arxiv.SortOrder.Descending,
}


def render_query(query: Query) -> str:
    """Render a Query in arXiv's query language.

    Examples:
        category + text -> 'cat:cs.AI AND (quantum computing)'
        category only   -> 'cat:cs.AI'
        text only       -> 'quantum computing'
        unfiltered      -> ''
    """
    category = query.category_clause
    text = query.text_clause

    if category and text:
        return f"cat:{category.value} AND ({text.value})"
    if category:
        return f"cat:{category.value}"
    if text:
        return text.value
    return ""


def build_search(query: Query) -> arxiv.Search:
    """Create the ``arxiv.Search`` for a Query."""
    return arxiv.Search(
        query=render_query(query),
        max_results=query.max_results,
        sort_by=SORT_CRITERIA[query.sort_field],
        sort_order=SORT_ORDERS[query.sort_order],
    )


class ArxivClient:
    """Fetch collaborator backed by ``arxiv.Client``.

    The library is synchronous, so each search runs in a worker thread and
    the event loop stays free. Library and transport errors are converted
    to NetworkError or QueryError.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[arxiv.Client] = None,
    ) -> None:
        settings = settings if settings is not None else get_settings()
        self._client = client if client is not None else arxiv.Client(
            page_size=settings.ARXIV_PAGE_SIZE,
            delay_seconds=settings.ARXIV_DELAY_SECONDS,
            num_retries=settings.ARXIV_NUM_RETRIES,
        )

    async def search(self, query: Query) -> list[PaperSummary]:
        """Fetch papers matching query.

        Args:
            query: Normalized query

        Returns:
            Papers in the order arXiv returned them (may be empty)

        Raises:
            QueryError: If arXiv rejected the query
            NetworkError: If arXiv could not be reached or failed
        """
        search = build_search(query)

        with ErrorContext("arxiv.search", query=search.query, max_results=query.max_results):
            results = await asyncio.to_thread(self._fetch, search)

        papers = normalize_arxiv(results)
        logger.debug(f"arXiv returned {len(papers)} papers for '{search.query}'")
        return papers

    def _fetch(self, search: arxiv.Search) -> list:
        try:
            return list(self._client.results(search))
        except arxiv.HTTPError as e:
            if 400 <= e.status < 500:
                raise QueryError(
                    f"arXiv rejected the query (HTTP {e.status})", query=search.query
                ) from e
            raise NetworkError(
                f"arXiv is unavailable (HTTP {e.status})", status_code=e.status
            ) from e
        except arxiv.UnexpectedEmptyPageError as e:
            raise NetworkError("arXiv returned an unexpected empty page") from e
        except arxiv.ArxivError as e:
            raise NetworkError(f"arXiv request failed: {e.message}") from e
        except OSError as e:
            # requests' ConnectionError and Timeout, socket timeouts
            raise NetworkError(f"Could not reach arXiv: {e}") from e

"""Fetch state machine.

Owns the FetchState of one search session and reconciles asynchronous
fetch outcomes into it.

Status transitions:
    IDLE -> LOADING -> SUCCESS | ERROR
    SUCCESS -> LOADING      (new search, refresh)
    ERROR -> LOADING        (retry, new search)
    ERROR -> IDLE           (error dismissed)

Every request gets a token from a monotonically increasing counter. Only
the completion carrying the latest token may commit; completions of
superseded requests are dropped. All transitions run on the event loop
that owns the machine, and the token check happens in the same
synchronous step as the transition, so no lock is needed.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, Sequence

from pydantic import ValidationError

from clarity.search.models import PaperSummary, Query, SearchCriteria, SortField, SortOrder
from clarity.search.query_builder import TermPicker, build_query, normalize_term
from clarity.session.error_handling import StateTransitionError, describe_error
from clarity.session.state import FetchState, FetchStatus
from clarity.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

StateListener = Callable[[FetchState], None]

MALFORMED_RESPONSE_MESSAGE = "arXiv returned a malformed response"


class PaperFetcher(Protocol):
    """Anything that can run a Query, e.g. ``ArxivClient``."""

    async def search(self, query: Query) -> Sequence[PaperSummary]: ...


class FetchStateMachine:
    """Single owner of a search session's FetchState.

    The rendering layer creates one machine per session, reads ``state``
    and calls the intent methods. Fetch errors never escape: they end up
    in ``state.error_message``.

    Args:
        fetcher: Fetch collaborator
        settings: Application settings (defaults to ``get_settings()``)
        pick_default_term: Discovery strategy used when a request has
            neither a term nor a category
        cancel_superseded: Cancel the task of a superseded request
    """

    def __init__(
        self,
        fetcher: PaperFetcher,
        *,
        settings: Optional[Settings] = None,
        pick_default_term: Optional[TermPicker] = None,
        cancel_superseded: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings if settings is not None else get_settings()
        self._pick_default_term = pick_default_term
        self._cancel_superseded = cancel_superseded

        self._state = FetchState()
        self._token = 0
        self._task: Optional[asyncio.Task] = None
        self._listeners: list[StateListener] = []

        # Inputs bound to the search field and the category picker
        self.search_text: str = ""
        self.selected_category: str = self._settings.DEFAULT_CATEGORY

    @property
    def state(self) -> FetchState:
        """Current snapshot."""
        return self._state

    @property
    def current_token(self) -> int:
        """Token of the most recently issued request (0 before any)."""
        return self._token

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with every new snapshot.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Core transitions
    # ------------------------------------------------------------------

    def request_search(self, criteria: SearchCriteria) -> asyncio.Task:
        """Start a fetch for ``criteria``, superseding any request in flight.

        Must be called from the event loop that owns the machine.

        Returns:
            Task running the fetch; it never raises fetch errors
        """
        loop = asyncio.get_running_loop()
        query = build_query(criteria, pick_default_term=self._pick_default_term)

        self._token += 1
        token = self._token
        previous = self._task

        self._commit(
            status=FetchStatus.LOADING,
            error_message=None,
            last_criteria=criteria,
            token=token,
        )
        logger.debug(
            f"Search #{token} started",
            extra={"extra_fields": {"token": token, "query": query.model_dump(mode="json")}},
        )

        if self._cancel_superseded and previous is not None and not previous.done():
            logger.debug(f"Cancelling superseded search #{token - 1}")
            previous.cancel()

        self._task = loop.create_task(self._run_fetch(token, query), name=f"clarity-search-{token}")
        return self._task

    def on_fetch_succeeded(self, token: int, results: Sequence[PaperSummary]) -> bool:
        """Commit a successful completion if ``token`` is still current.

        Results that do not validate as papers commit an Error instead.

        Returns:
            True if the state changed, False for a stale completion
        """
        if not self._is_current(token):
            logger.debug(f"Discarding stale results of search #{token}")
            return False

        try:
            self._commit(status=FetchStatus.SUCCESS, results=tuple(results), error_message=None)
        except (StateTransitionError, TypeError) as e:
            # A malformed response is a failed fetch
            logger.warning(
                f"Search #{token} returned malformed results: {describe_error(e)}",
                extra={"extra_fields": {"token": token}},
            )
            self._commit(status=FetchStatus.ERROR, error_message=MALFORMED_RESPONSE_MESSAGE)
            return True

        logger.info(f"Search #{token} returned {len(self._state.results)} papers")
        return True

    def on_fetch_failed(self, token: int, message: str) -> bool:
        """Commit a failed completion if ``token`` is still current.

        Previous results stay visible.

        Returns:
            True if the state changed, False for a stale completion
        """
        if not self._is_current(token):
            logger.debug(f"Discarding stale failure of search #{token}: {message}")
            return False

        self._commit(status=FetchStatus.ERROR, error_message=message or "Unknown error")
        logger.warning(f"Search #{token} failed: {message}")
        return True

    def retry(self) -> asyncio.Task:
        """Re-issue the last request; before any request, load the latest listing."""
        if self._state.last_criteria is None:
            return self.load_latest()
        return self.request_search(self._state.last_criteria)

    def clear_error(self) -> bool:
        """Dismiss the current error without fetching again.

        Returns:
            True if an error was cleared, False if there was none
        """
        if self._state.status != FetchStatus.ERROR:
            return False
        self._commit(status=FetchStatus.IDLE, error_message=None)
        return True

    # ------------------------------------------------------------------
    # UI intents
    # ------------------------------------------------------------------

    def submit_search(self, text: Optional[str] = None) -> asyncio.Task:
        """Search field submitted. A blank field shows the latest papers instead."""
        if text is not None:
            self.search_text = text

        if not normalize_term(self.search_text):
            return self.load_latest()

        return self.request_search(
            SearchCriteria(
                term=self.search_text,
                category=self.selected_category,
                sort_field=SortField.RELEVANCE,
                sort_order=SortOrder.DESCENDING,
                max_results=self._settings.SEARCH_MAX_RESULTS,
            )
        )

    def select_category(self, category: str) -> asyncio.Task:
        """Category picked: list the newest papers in it."""
        self.selected_category = category
        return self.load_latest()

    def load_latest(self) -> asyncio.Task:
        """Newest submissions in the selected category."""
        return self.request_search(
            SearchCriteria(
                category=self.selected_category,
                sort_field=SortField.SUBMITTED_DATE,
                sort_order=SortOrder.DESCENDING,
                max_results=self._settings.LATEST_MAX_RESULTS,
            )
        )

    def discover(self) -> asyncio.Task:
        """Discovery feed: no term, no category, newest first."""
        return self.request_search(SearchCriteria(max_results=self._settings.LATEST_MAX_RESULTS))

    def refresh(self) -> asyncio.Task:
        """Pull-to-refresh."""
        return self.retry()

    async def search(self, criteria: SearchCriteria) -> FetchState:
        """Request a search and wait until its task finishes.

        Returns:
            The snapshot current once the task is done. If a newer request
            superseded this one, that may still be a LOADING snapshot.
        """
        task = self.request_search(criteria)
        await asyncio.wait({task})
        return self._state

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_fetch(self, token: int, query: Query) -> None:
        try:
            results = await self._fetcher.search(query)
        except asyncio.CancelledError:
            logger.debug(f"Search #{token} cancelled")
            raise
        except Exception as e:
            self.on_fetch_failed(token, describe_error(e))
            return

        self.on_fetch_succeeded(token, results)

    def _is_current(self, token: int) -> bool:
        return token == self._token and self._state.status == FetchStatus.LOADING

    def _commit(self, **changes) -> None:
        data = {name: getattr(self._state, name) for name in FetchState.model_fields}
        data.update(changes)
        data["updated_at"] = datetime.now(timezone.utc)

        try:
            snapshot = FetchState(**data)
        except ValidationError as e:
            raise StateTransitionError(
                f"Invalid transition {self._state.status.value} -> {data['status']}",
                errors=e.errors(),
            ) from e

        logger.debug(f"State {self._state.status.value} -> {snapshot.status.value}")
        self._state = snapshot

        # The snapshot is already committed; a failing listener must not undo it
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"State listener {listener!r} failed on {snapshot.status.value}")

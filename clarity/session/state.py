"""Fetch state definitions.

This module defines what the rendering layer reads: one immutable
FetchState snapshot per transition. It holds no transition logic; the
state machine builds every snapshot.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from clarity.search.models import PaperSummary, SearchCriteria


class FetchStatus(str, Enum):
    """Fetch status of the search session.

    Attributes:
        IDLE: Nothing requested yet, or an error was dismissed
        LOADING: A fetch is in flight
        SUCCESS: The latest fetch completed (possibly with zero results)
        ERROR: The latest fetch failed
    """

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class FetchState(BaseModel):
    """Snapshot of everything the UI should currently show.

    Attributes:
        status: Current fetch status
        results: Papers in the order the fetch returned them
        error_message: User-facing error message when status is ERROR
        last_criteria: Criteria of the most recent request
        token: Token of the request that produced this snapshot (0 before any)
        updated_at: When this snapshot was created (UTC)

    Invariants:
        - LOADING and SUCCESS never carry an error message
        - ERROR always carries a non-empty error message
        - ERROR keeps the results of the previous snapshot
    """

    model_config = ConfigDict(frozen=True)

    status: FetchStatus = FetchStatus.IDLE
    results: tuple[PaperSummary, ...] = ()
    error_message: Optional[str] = None
    last_criteria: Optional[SearchCriteria] = None
    token: int = Field(default=0, ge=0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def check_error_message(self) -> "FetchState":
        if self.status in (FetchStatus.LOADING, FetchStatus.SUCCESS) and self.error_message is not None:
            raise ValueError(f"{self.status.value} state cannot carry an error message")
        if self.status == FetchStatus.ERROR and not self.error_message:
            raise ValueError("error state requires an error message")
        return self

    @property
    def is_loading(self) -> bool:
        return self.status == FetchStatus.LOADING

    @property
    def has_error(self) -> bool:
        return self.status == FetchStatus.ERROR

    @property
    def is_empty(self) -> bool:
        """True for a completed fetch that found no papers."""
        return self.status == FetchStatus.SUCCESS and not self.results

    @field_serializer("updated_at", when_used="json")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize the timestamp to an ISO format string."""
        return value.isoformat()

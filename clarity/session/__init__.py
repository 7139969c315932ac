"""Search session state and its state machine."""

from clarity.session.error_handling import (
    ClarityError,
    NetworkError,
    QueryError,
    StateTransitionError,
    describe_error,
)
from clarity.session.state import FetchState, FetchStatus
from clarity.session.state_machine import FetchStateMachine, PaperFetcher

__all__ = [
    "ClarityError",
    "FetchState",
    "FetchStateMachine",
    "FetchStatus",
    "NetworkError",
    "PaperFetcher",
    "QueryError",
    "StateTransitionError",
    "describe_error",
]

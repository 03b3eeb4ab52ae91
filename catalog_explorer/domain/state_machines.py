"""Page state machine.

Every page view moves through one deterministic state machine instead of
scattered loading/error flags. The state object rejects invalid field
combinations, and a single transition function applies load events.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from catalog_explorer.domain.exceptions import InvalidStateTransitionError

T = TypeVar("T")


# ============================================================================
# Page Status
# ============================================================================


class PageStatus(str, Enum):
    """Page lifecycle states.

    State diagram:
        IDLE
          │
          │ load
          ▼
        LOADING ──────────────┐
          │   ▲  │ supersede  │ fail
          │   └──┘            ▼
          │ succeed         ERROR
          ▼                   │
        SUCCESS               │ retry
          │                   │
          └──── reload ──► LOADING ◄┘
    """

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"

    def can_transition_to(self, target: "PageStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _PAGE_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["PageStatus"]:
        """Get list of valid target states.

        Returns:
            List of states that can be transitioned to.
        """
        return sorted(_PAGE_TRANSITIONS.get(self, set()), key=lambda s: s.value)

    def is_settled(self) -> bool:
        """Check if the last load has finished (successfully or not)."""
        return self in {PageStatus.SUCCESS, PageStatus.ERROR}


# Page state transitions (defined outside enum to avoid Enum restrictions)
_PAGE_TRANSITIONS: dict[PageStatus, set[PageStatus]] = {
    PageStatus.IDLE: {PageStatus.LOADING},
    PageStatus.LOADING: {PageStatus.LOADING, PageStatus.SUCCESS, PageStatus.ERROR},
    PageStatus.SUCCESS: {PageStatus.LOADING},
    PageStatus.ERROR: {PageStatus.LOADING},
}


def validate_page_transition(current: PageStatus, target: PageStatus) -> None:
    """Validate a page status transition.

    Args:
        current: Current status.
        target: Target status.

    Raises:
        InvalidStateTransitionError: If transition is not allowed.
    """
    if not current.can_transition_to(target):
        raise InvalidStateTransitionError(
            entity_type="Page",
            current_state=current.value,
            target_state=target.value,
            allowed_transitions=[s.value for s in current.allowed_transitions()],
        )


# ============================================================================
# Page Errors
# ============================================================================


class PageErrorKind(str, Enum):
    """Why a page failed to load."""

    FETCH_FAILED = "fetch_failed"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class PageError:
    """Error shown in place of page content.

    Attributes:
        kind: Failure category.
        message: User-facing message (e.g., "Failed to load brand details").
        details: Extra context from the underlying exception.
    """

    kind: PageErrorKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        """Fetch failures can be retried; missing entities and crashes cannot."""
        return self.kind == PageErrorKind.FETCH_FAILED


# ============================================================================
# Page State
# ============================================================================


@dataclass(frozen=True)
class PageState(Generic[T]):
    """Snapshot of a page's load state.

    Only SUCCESS carries data and only ERROR carries an error, so a page
    can never be loading and failed at the same time.

    Attributes:
        status: Current status.
        generation: Load generation that produced this state.
        data: Loaded page data (SUCCESS only).
        error: Load error (ERROR only).
    """

    status: PageStatus = PageStatus.IDLE
    generation: int = 0
    data: T | None = None
    error: PageError | None = None

    def __post_init__(self) -> None:
        if self.status == PageStatus.ERROR:
            if self.error is None:
                raise ValueError("ERROR state requires an error")
        elif self.error is not None:
            raise ValueError(f"{self.status.value} state cannot carry an error")
        if self.status != PageStatus.SUCCESS and self.data is not None:
            raise ValueError(f"{self.status.value} state cannot carry data")


# ============================================================================
# Load Events
# ============================================================================


@dataclass(frozen=True)
class LoadStarted:
    """A new load was issued."""

    generation: int


@dataclass(frozen=True)
class LoadSucceeded(Generic[T]):
    """A load completed with data."""

    generation: int
    data: T


@dataclass(frozen=True)
class LoadFailed:
    """A load completed with an error."""

    generation: int
    error: PageError


PageEvent = LoadStarted | LoadSucceeded[Any] | LoadFailed


def transition(state: PageState[T], event: PageEvent) -> PageState[T]:
    """Apply a load event to a page state.

    Completions that belong to an older generation than the current one
    are stale and leave the state untouched.

    Args:
        state: Current page state.
        event: Load event.

    Returns:
        The next page state.

    Raises:
        InvalidStateTransitionError: If the event is not valid in the
            current state.
    """
    if isinstance(event, LoadStarted):
        validate_page_transition(state.status, PageStatus.LOADING)
        if event.generation <= state.generation:
            raise ValueError(
                f"Load generation must increase: {event.generation} <= {state.generation}"
            )
        return PageState(status=PageStatus.LOADING, generation=event.generation)

    if event.generation != state.generation:
        return state

    if isinstance(event, LoadSucceeded):
        validate_page_transition(state.status, PageStatus.SUCCESS)
        return PageState(
            status=PageStatus.SUCCESS,
            generation=event.generation,
            data=event.data,
        )

    validate_page_transition(state.status, PageStatus.ERROR)
    return PageState(
        status=PageStatus.ERROR,
        generation=event.generation,
        error=event.error,
    )

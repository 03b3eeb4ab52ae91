"""Domain layer - page state machine and domain exceptions.

Example usage:
    from catalog_explorer.domain import LoadStarted, PageState, transition

    state = transition(PageState(), LoadStarted(generation=1))
    assert state.status is PageStatus.LOADING
"""

from catalog_explorer.domain.exceptions import (
    CatalogError,
    CatalogFetchError,
    DomainError,
    EntityNotFoundError,
    InvalidStateTransitionError,
)
from catalog_explorer.domain.state_machines import (
    LoadFailed,
    LoadStarted,
    LoadSucceeded,
    PageError,
    PageErrorKind,
    PageState,
    PageStatus,
    transition,
    validate_page_transition,
)

__all__ = [
    # Exceptions
    "CatalogError",
    "CatalogFetchError",
    "DomainError",
    "EntityNotFoundError",
    "InvalidStateTransitionError",
    # State machine
    "LoadFailed",
    "LoadStarted",
    "LoadSucceeded",
    "PageError",
    "PageErrorKind",
    "PageState",
    "PageStatus",
    "transition",
    "validate_page_transition",
]

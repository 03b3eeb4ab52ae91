"""Domain exceptions.

All domain-level errors raised by the catalog client, the page state
machine and the page services. The join and search engines never raise:
they only operate on catalog data that was already fetched successfully.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid page state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of stateful object (e.g., "Page").
            current_state: Current state.
            target_state: Attempted target state.
            allowed_transitions: States reachable from the current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type} "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(DomainError):
    """Base class for remote catalog errors."""

    pass


class CatalogFetchError(CatalogError):
    """Raised when a catalog resource could not be fetched.

    Covers network errors, timeouts, non-2xx responses and payloads
    that do not parse into catalog records. Retrying means re-invoking
    the fetch.
    """

    def __init__(
        self,
        resource: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize catalog fetch error.

        Args:
            resource: Resource path that failed (e.g., "/brands").
            message: Description of the failure.
            status_code: HTTP status code, if a response was received.
        """
        super().__init__(
            f"Failed to fetch {resource}: {message}",
            details={
                "resource": resource,
                "status_code": status_code,
            },
        )
        self.resource = resource
        self.status_code = status_code


class EntityNotFoundError(CatalogError):
    """Raised when a single catalog entity does not exist remotely."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        """Initialize entity not found error.

        Args:
            entity_type: Kind of entity (e.g., "Brand").
            entity_id: Requested identifier.
        """
        super().__init__(
            f"{entity_type} {entity_id} not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id

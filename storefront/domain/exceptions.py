"""Domain exceptions.

Errors raised by value objects, FilterState and the fetch state machine
when invariants are violated or invalid operations are attempted.
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
    """Raised when an invalid state transition is attempted."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "Fetch").
            entity_id: ID of the entity (e.g., the generation number).
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Filter Errors
# ============================================================================


class FilterError(DomainError):
    """Base class for filter-related errors."""

    pass


class InvalidFilterError(FilterError):
    """Raised when a filter field holds a value outside its domain."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        """Initialize invalid filter error.

        Args:
            field: Name of the offending filter field.
            value: The rejected value.
            reason: Explanation of why the value is invalid.
        """
        super().__init__(
            f"Invalid value {value!r} for filter '{field}': {reason}",
            details={"field": field, "value": repr(value), "reason": reason},
        )


class InvalidPriceRangeError(FilterError):
    """Raised when a price range has its minimum above its maximum."""

    def __init__(self, min_price: float, max_price: float) -> None:
        """Initialize invalid price range error.

        Args:
            min_price: Lower bound of the range.
            max_price: Upper bound of the range.
        """
        super().__init__(
            f"Price range minimum {min_price} exceeds maximum {max_price}",
            details={"min_price": min_price, "max_price": max_price},
        )

"""State machine for catalog fetch generations.

Each filter change starts a new generation. The visible status follows
the newest generation only; superseded generations never move it.
"""

from enum import Enum

from storefront.domain.exceptions import InvalidStateTransitionError


class FetchStatus(str, Enum):
    """Catalog fetch lifecycle states.

    State diagram:
        IDLE
          │
          │ load
          ▼
        LOADING ◄──────────────┬──────────────┐
          │       │            │              │
          │       │ fail       │ load         │ load
          │       ▼            │              │
          │     FAILED ────────┘              │
          │                                   │
          │ settle                            │
          ▼                                   │
        SETTLED ──────────────────────────────┘

    LOADING → LOADING happens when a newer generation supersedes one
    that is still in flight.
    """

    IDLE = "idle"
    LOADING = "loading"
    SETTLED = "settled"
    FAILED = "failed"

    def can_transition_to(self, target: "FetchStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _FETCH_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["FetchStatus"]:
        """Get list of valid target states.

        Returns:
            List of states that can be transitioned to.
        """
        return list(_FETCH_TRANSITIONS.get(self, set()))

    def is_busy(self) -> bool:
        """Check if a generation is in flight."""
        return self is FetchStatus.LOADING

    def is_outcome(self) -> bool:
        """Check if a generation has finished, successfully or not."""
        return self in {FetchStatus.SETTLED, FetchStatus.FAILED}


# Fetch state transitions (defined outside enum to avoid Enum restrictions)
_FETCH_TRANSITIONS: dict[FetchStatus, set[FetchStatus]] = {
    FetchStatus.IDLE: {FetchStatus.LOADING},
    FetchStatus.LOADING: {FetchStatus.LOADING, FetchStatus.SETTLED, FetchStatus.FAILED},
    FetchStatus.SETTLED: {FetchStatus.LOADING},
    FetchStatus.FAILED: {FetchStatus.LOADING},
}


def validate_fetch_transition(
    generation: int,
    current_status: FetchStatus,
    target_status: FetchStatus,
) -> None:
    """Validate and raise if a fetch state transition is invalid.

    Args:
        generation: Generation number for the error message.
        current_status: Current fetch status.
        target_status: Target fetch status.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_status.can_transition_to(target_status):
        raise InvalidStateTransitionError(
            entity_type="Fetch",
            entity_id=str(generation),
            current_state=current_status.value,
            target_state=target_status.value,
            allowed_transitions=[s.value for s in current_status.allowed_transitions()],
        )

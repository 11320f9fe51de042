"""Tests for the fetch state machine."""

import pytest

from storefront.domain import FetchStatus, InvalidStateTransitionError, validate_fetch_transition


class TestFetchStatus:
    """Tests for FetchStatus state machine."""

    def test_idle_can_only_load(self) -> None:
        """IDLE can only transition to LOADING."""
        assert FetchStatus.IDLE.allowed_transitions() == [FetchStatus.LOADING]

    def test_loading_can_settle_or_fail(self) -> None:
        """LOADING can transition to SETTLED or FAILED."""
        assert FetchStatus.LOADING.can_transition_to(FetchStatus.SETTLED)
        assert FetchStatus.LOADING.can_transition_to(FetchStatus.FAILED)

    def test_loading_can_be_superseded(self) -> None:
        """A newer generation may start while one is loading."""
        assert FetchStatus.LOADING.can_transition_to(FetchStatus.LOADING)

    def test_outcomes_can_reload(self) -> None:
        """SETTLED and FAILED can start a new generation."""
        assert FetchStatus.SETTLED.can_transition_to(FetchStatus.LOADING)
        assert FetchStatus.FAILED.can_transition_to(FetchStatus.LOADING)

    def test_settled_cannot_fail(self) -> None:
        """A settled generation cannot fail afterwards."""
        assert not FetchStatus.SETTLED.can_transition_to(FetchStatus.FAILED)

    def test_idle_cannot_settle(self) -> None:
        """Nothing settles without loading first."""
        assert not FetchStatus.IDLE.can_transition_to(FetchStatus.SETTLED)

    def test_busy_and_outcome(self) -> None:
        """Only LOADING is busy; SETTLED and FAILED are outcomes."""
        assert FetchStatus.LOADING.is_busy()
        assert not FetchStatus.IDLE.is_busy()
        assert FetchStatus.SETTLED.is_outcome()
        assert FetchStatus.FAILED.is_outcome()
        assert not FetchStatus.LOADING.is_outcome()


class TestValidateFetchTransition:
    """Tests for validate_fetch_transition."""

    def test_valid_transition_passes(self) -> None:
        """Valid transitions do not raise."""
        validate_fetch_transition(1, FetchStatus.IDLE, FetchStatus.LOADING)

    def test_invalid_transition_raises(self) -> None:
        """Invalid transitions raise with context."""
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            validate_fetch_transition(7, FetchStatus.IDLE, FetchStatus.SETTLED)

        error = exc_info.value
        assert error.details["entity_type"] == "Fetch"
        assert error.details["entity_id"] == "7"
        assert error.details["current_state"] == "idle"
        assert error.details["target_state"] == "settled"
        assert error.details["allowed_transitions"] == ["loading"]

"""Unit tests for the AuthenticationStatus state machine"""

import pytest

from domain.documents import (
    ALLOWED_TRANSITIONS,
    AuthenticationStatus,
    can_transition,
    status_for_result,
    transition,
)
from domain.documents.authentication_status import get_allowed_transitions, is_valid_status
from domain.documents.errors import ValidationError

UNAUTHENTICATED = AuthenticationStatus.UNAUTHENTICATED
AUTHENTICATING = AuthenticationStatus.AUTHENTICATING
AUTHENTICATED = AuthenticationStatus.AUTHENTICATED


class TestAuthenticationStatusStateMachine:
    """Test AuthenticationStatus enum and state transition validation"""

    def test_enum_values(self):
        """Values are lowercase on the wire and in storage"""
        assert UNAUTHENTICATED.value == "unauthenticated"
        assert AUTHENTICATING.value == "authenticating"
        assert AUTHENTICATED.value == "authenticated"
        assert str(AUTHENTICATING) == "authenticating"

    def test_initial_state_transition(self):
        """New documents start UNAUTHENTICATED"""
        assert can_transition(None, UNAUTHENTICATED) is True
        assert can_transition(None, AUTHENTICATING) is False
        assert can_transition(None, AUTHENTICATED) is False

    def test_unauthenticated_to_authenticating(self):
        assert can_transition(UNAUTHENTICATED, AUTHENTICATING) is True

    def test_unauthenticated_invalid_transitions(self):
        assert can_transition(UNAUTHENTICATED, UNAUTHENTICATED) is False
        assert can_transition(UNAUTHENTICATED, AUTHENTICATED) is False

    def test_authenticating_transitions(self):
        """Re-request, success and rejection are all allowed while AUTHENTICATING"""
        assert can_transition(AUTHENTICATING, AUTHENTICATING) is True
        assert can_transition(AUTHENTICATING, AUTHENTICATED) is True
        assert can_transition(AUTHENTICATING, UNAUTHENTICATED) is True

    def test_authenticated_is_terminal(self):
        for target in AuthenticationStatus:
            assert can_transition(AUTHENTICATED, target) is False
        assert get_allowed_transitions(AUTHENTICATED) == []

    def test_all_statuses_have_transition_rules(self):
        for status in AuthenticationStatus:
            assert status in ALLOWED_TRANSITIONS


class TestTransition:

    def test_returns_target_status(self):
        assert transition(UNAUTHENTICATED, AUTHENTICATING) == AUTHENTICATING

    def test_illegal_move_raises(self):
        with pytest.raises(ValidationError) as exc:
            transition(AUTHENTICATED, AUTHENTICATING)

        assert "authenticated -> authenticating" in str(exc.value)

    def test_illegal_move_from_none(self):
        with pytest.raises(ValidationError) as exc:
            transition(None, AUTHENTICATED)

        assert "none -> authenticated" in str(exc.value)


def test_status_for_result():
    assert status_for_result(True) == AUTHENTICATED
    assert status_for_result(False) == UNAUTHENTICATED


@pytest.mark.parametrize(
    "value,expected",
    [
        ("unauthenticated", True),
        ("authenticated", True),
        (AUTHENTICATING, True),
        ("AUTHENTICATED", False),
        ("pending", False),
        (None, False),
    ],
)
def test_is_valid_status(value, expected):
    assert is_valid_status(value) is expected

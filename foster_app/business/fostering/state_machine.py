"""
State machine for the foster request lifecycle

Encodes valid transitions only. Persistence happens in RequestManager.
"""

from typing import Dict, Set
from foster_app.business.fostering.errors import ValidationError


class RequestStateMachine:
    """
    State machine for FosterRequest.status transitions.

    Requests are created pending. Every other status is terminal.
    """

    PENDING = 'pending'
    CANCELLED = 'cancelled'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    ALL = (PENDING, CANCELLED, FULFILLED, REJECTED)

    TERMINAL_STATES = {CANCELLED, FULFILLED, REJECTED}

    TRANSITIONS: Dict[str, Set[str]] = {
        PENDING: {CANCELLED, FULFILLED, REJECTED},
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """
        Raises:
            ValidationError: If the transition is not allowed
        """
        if not cls.can_transition(from_status, to_status):
            raise ValidationError(
                f"Invalid foster request transition: {from_status} → {to_status}",
                details={'from_status': from_status, 'to_status': to_status},
            )

    @classmethod
    def get_allowed_transitions(cls, from_status: str) -> Set[str]:
        if from_status in cls.TERMINAL_STATES:
            return set()
        return cls.TRANSITIONS.get(from_status, set())

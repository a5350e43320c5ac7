"""
Domain exceptions for foster assignment business logic

These exceptions represent business rule violations and store failures.
Each carries a details dict so callers can render an actionable message
without parsing the text.
"""

from typing import Any, Dict, List, Optional


class FosterDomainError(Exception):
    """Base exception for all fostering domain errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error': type(self).__name__,
            'message': self.message,
            'details': self.details,
        }


class ValidationError(FosterDomainError):
    """Raised when input or referenced data is malformed"""
    pass


class EmptyGroupError(ValidationError):
    """Raised when a group with no members is assigned"""
    pass


class GroupMembershipError(FosterDomainError):
    """Raised when a grouped animal is assigned or unassigned on its own"""
    pass


class ConflictError(GroupMembershipError):
    """Raised when an animal's group is already assigned to a different foster"""
    pass


class AlreadyPendingError(FosterDomainError):
    """Raised when the requester already has a pending request for the target"""
    pass


class AlreadyAssignedError(FosterDomainError):
    """Raised when the target is not open for foster requests"""
    pass


class NotAssignedError(FosterDomainError):
    """Raised when unassigning something that has no foster"""
    pass


class NotFoundError(FosterDomainError):
    """Raised when an entity does not exist in the organization"""
    pass


class NotAuthorizedError(FosterDomainError):
    """Raised when the acting profile may not change the record"""
    pass


class StoreError(FosterDomainError):
    """Raised when the database rejects a read or write for a named step"""
    pass


class NetworkError(StoreError):
    """Raised when the store could not be reached or did not confirm a write"""
    pass


class PartialCompletionError(FosterDomainError):
    """
    Raised when a multi-step operation fails after at least one step committed.

    completed_steps names the committed writes, failed_step the one that
    broke, and remaining holds the batch command still to be applied.
    """

    def __init__(
        self,
        message: str,
        completed_steps: List[str],
        failed_step: str,
        remaining=None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        details = dict(details or {})
        details.update({
            'completed_steps': list(completed_steps),
            'failed_step': failed_step,
            'remaining': remaining.to_dict() if remaining is not None else None,
        })
        super().__init__(message, details)
        self.completed_steps = list(completed_steps)
        self.failed_step = failed_step
        self.remaining = remaining
        self.cause = cause


class DegradedSuccess(FosterDomainError):
    """
    Notification side effect failed after the primary transition committed.

    Attached to the operation result, never raised out of the engine.
    stage is "message" when nothing was written, "tag" when the message
    exists without its link.
    """

    MESSAGE = 'message'
    TAG = 'tag'

    def __init__(self, stage: str, message: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details['stage'] = stage
        super().__init__(message, details)
        self.stage = stage

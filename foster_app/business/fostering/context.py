"""
FosterContext - Domain Facade for foster assignment and requests

Binds an organization and an acting profile, then exposes the fostering
operations. Mutation work is delegated to AssignmentManager and
RequestManager; notifications go through NotificationDispatcher.
"""

from typing import Optional
from foster_app.business.fostering.assignment_manager import AssignmentManager
from foster_app.business.fostering.notification_dispatcher import NotificationDispatcher
from foster_app.business.fostering.policies import GroupConflictDetector
from foster_app.business.fostering.request_manager import RequestManager
from foster_app.business.fostering.results import ConflictCheck, TransitionResult
from foster_app.business.fostering.targets import RequestTarget
from foster_app.business.fostering.visibility import StatusVisibilityMapper


class FosterContext:
    """
    Domain Facade for the fostering aggregate.

    Every lookup and write made through a context is restricted to its
    organization. actor_id is required: it is recorded as the sender of
    notifications the actor triggers and decides who may cancel a request.

    Pattern: Domain Facade / Aggregate Controller
    """

    def __init__(self, organization_id: str, actor_id: str):
        if not organization_id:
            raise ValueError("organization_id is required")
        if not actor_id:
            raise ValueError("actor_id is required")

        self.organization_id = organization_id
        self.actor_id = actor_id

        self.notifications = NotificationDispatcher(self)
        self.assignment_manager = AssignmentManager(self)
        self.request_manager = RequestManager(self)

    @classmethod
    def for_profile(cls, profile) -> 'FosterContext':
        """Context acting as the given profile inside its organization"""
        return cls(profile.organization_id, actor_id=profile.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def visibility_for(status: str) -> str:
        return StatusVisibilityMapper.visibility_for(status)

    def check_group_conflict(self, animal_id: str, candidate_foster_id: Optional[str]) -> ConflictCheck:
        return GroupConflictDetector.find_conflict(self.organization_id, animal_id, candidate_foster_id)

    # ------------------------------------------------------------------
    # Assignment (coordinator)
    # ------------------------------------------------------------------

    def assign_animal(self, animal_id: str, foster_id: str, message: Optional[str] = None) -> TransitionResult:
        return self.assignment_manager.assign_animal(animal_id, foster_id, message)

    def assign_group(self, group_id: str, foster_id: str, message: Optional[str] = None) -> TransitionResult:
        return self.assignment_manager.assign_group(group_id, foster_id, message)

    def unassign_animal(
        self,
        animal_id: str,
        new_status: str,
        new_visibility: str,
        message: Optional[str] = None,
    ) -> TransitionResult:
        return self.assignment_manager.unassign_animal(animal_id, new_status, new_visibility, message)

    def unassign_group(
        self,
        group_id: str,
        new_status: str,
        new_visibility: str,
        message: Optional[str] = None,
    ) -> TransitionResult:
        return self.assignment_manager.unassign_group(group_id, new_status, new_visibility, message)

    # ------------------------------------------------------------------
    # Requests (foster)
    # ------------------------------------------------------------------

    def create_request(
        self,
        target: RequestTarget,
        requester_id: str,
        message: Optional[str] = None,
    ) -> TransitionResult:
        return self.request_manager.create_request(target, requester_id, message)

    def cancel_request(self, request_id: str, message: Optional[str] = None) -> TransitionResult:
        return self.request_manager.cancel_request(request_id, message)

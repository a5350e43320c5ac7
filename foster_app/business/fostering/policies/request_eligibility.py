"""
Request Eligibility Policy

A target can be requested only while it is publicly open for fostering
and not already placed with the requester.
"""

from typing import List, Optional
from foster_app.data.animals.animal import FosterVisibility
from foster_app.business.fostering.errors import AlreadyAssignedError


class RequestEligibilityPolicy:

    @staticmethod
    def effective_visibility(entity, members: Optional[List] = None) -> str:
        """
        Visibility of an animal, or of a group via its first member.

        An empty group counts as available_now.
        """
        if members is None:
            return entity.foster_visibility
        if not members:
            return FosterVisibility.AVAILABLE_NOW
        return members[0].foster_visibility

    @classmethod
    def check(cls, entity, requester_id: str, members: Optional[List] = None) -> None:
        """
        Args:
            entity: Animal or AnimalGroup being requested
            requester_id: Profile asking to foster
            members: Group members in order, None for an animal target

        Raises:
            AlreadyAssignedError: If the target is not open for requests
        """
        visibility = cls.effective_visibility(entity, members)
        if entity.current_foster_id and entity.current_foster_id == requester_id:
            raise AlreadyAssignedError(
                f"{entity.display_name} is already assigned to you",
                details={'target_id': entity.id, 'foster_id': requester_id},
            )
        if visibility in FosterVisibility.UNREQUESTABLE:
            raise AlreadyAssignedError(
                f"{entity.display_name} is not available for foster requests ({visibility})",
                details={'target_id': entity.id, 'foster_visibility': visibility},
            )

"""
Group Conflict Specification

An animal that belongs to a group follows its group's foster. Assigning it
individually to someone else would split the group.
"""

from typing import Optional
from foster_app.data.animals.animal_group import AnimalGroup
from foster_app.business.fostering.errors import ConflictError
from foster_app.business.fostering.lookups import require_animal
from foster_app.business.fostering.results import ConflictCheck
from foster_app.business.fostering.store import store_call
from foster_app.utils.logger import get_logger

logger = get_logger("foster_app.business.fostering.policies.group_conflict")


class GroupConflictDetector:
    """
    Specification for detecting group assignment conflicts.

    The check reads current rows only. A clear result does not reserve
    anything, a concurrent group assignment can still land before the
    caller's write.
    """

    @classmethod
    def check(cls, organization_id: str, animal_id: str, candidate_foster_id: Optional[str]) -> None:
        """
        Raises:
            NotFoundError: If the animal does not exist in the organization
            ConflictError: If the animal's group is assigned to another foster
        """
        result = cls.find_conflict(organization_id, animal_id, candidate_foster_id)
        if result.conflict:
            raise ConflictError(
                f"Attempted to assign animal {animal_id} individually, but its group "
                f"{result.group_id} is assigned to foster {result.group_foster_id}",
                details=result.to_dict() | {'animal_id': animal_id},
            )

    @classmethod
    def find_conflict(cls, organization_id: str, animal_id: str, candidate_foster_id: Optional[str]) -> ConflictCheck:
        animal = require_animal(organization_id, animal_id)
        if not animal.group_id:
            return ConflictCheck(conflict=False)

        with store_call('load group'):
            group = AnimalGroup.get_scoped(organization_id, animal.group_id)

        if group is None:
            logger.warning(
                f"Animal {animal_id} references group {animal.group_id} which does not exist "
                f"in organization {organization_id}"
            )
            return ConflictCheck(conflict=False, group_id=animal.group_id)

        if group.current_foster_id and group.current_foster_id != candidate_foster_id:
            return ConflictCheck(
                conflict=True,
                group_id=group.id,
                group_foster_id=group.current_foster_id,
            )

        return ConflictCheck(conflict=False, group_id=group.id, group_foster_id=group.current_foster_id)

    @classmethod
    def has_conflict(cls, organization_id: str, animal_id: str, candidate_foster_id: Optional[str]) -> bool:
        return cls.find_conflict(organization_id, animal_id, candidate_foster_id).conflict

"""
AssignmentManager - Domain service for placing animals and groups with fosters

Each write is committed on its own. Group operations are two-step sagas:
the failing step is reported with enough state to resume, and nothing is
compensated.
"""

from typing import Optional, TYPE_CHECKING
from foster_app import db
from foster_app.data.animals.animal import AnimalStatus, FosterVisibility
from foster_app.business.fostering.batch import AnimalBatch
from foster_app.business.fostering.errors import (
    EmptyGroupError,
    NotAssignedError,
    PartialCompletionError,
    StoreError,
)
from foster_app.business.fostering.lookups import (
    require_animal,
    require_group,
    require_profile,
    resolve_members,
)
from foster_app.business.fostering.narrator import FosterNarrator
from foster_app.business.fostering.policies import GroupConflictDetector, GroupMembershipPolicy
from foster_app.business.fostering.results import TransitionResult
from foster_app.business.fostering.store import commit, store_call
from foster_app.business.fostering.targets import MessageTag
from foster_app.business.fostering.visibility import StatusVisibilityMapper
from foster_app.utils.logger import get_logger

if TYPE_CHECKING:
    from foster_app.business.fostering.context import FosterContext

logger = get_logger("foster_app.business.fostering.assignment_manager")


class AssignmentManager:
    """
    Domain service for coordinator-driven assignment.

    Responsibilities:
    - Refuse individual moves of grouped animals
    - Keep every member of a group on the group's foster
    - Notify the affected foster once the change is committed
    """

    STEP_ANIMAL = 'animal'
    STEP_GROUP = 'group'
    STEP_MEMBERS = 'members'

    def __init__(self, ctx: 'FosterContext'):
        self.ctx = ctx
        self.organization_id = ctx.organization_id

    def assign_animal(self, animal_id: str, foster_id: str, message: Optional[str] = None) -> TransitionResult:
        GroupConflictDetector.check(self.organization_id, animal_id, foster_id)

        animal = require_animal(self.organization_id, animal_id)
        GroupMembershipPolicy.check(animal, 'assign')
        foster = require_profile(self.organization_id, foster_id)

        animal_name = animal.display_name
        foster_name = foster.display_name

        animal.current_foster_id = foster.id
        animal.status = AnimalStatus.IN_FOSTER
        animal.foster_visibility = FosterVisibility.NOT_VISIBLE
        commit(self.STEP_ANIMAL)

        logger.info(f"Animal {animal_id} assigned to foster {foster_id} by {self.ctx.actor_id}")

        text = FosterNarrator.choose(message, FosterNarrator.assigned(foster_name, animal_name))
        notification = self.ctx.notifications.notify(foster_id, text, MessageTag.animal(animal_id))

        return TransitionResult(
            operation='assign_animal',
            entity_type='animal',
            entity_id=animal_id,
            foster_id=foster_id,
            affected_animal_ids=(animal_id,),
            notification=notification,
        )

    def assign_group(self, group_id: str, foster_id: str, message: Optional[str] = None) -> TransitionResult:
        group = require_group(self.organization_id, group_id)
        if not group.member_ids:
            raise EmptyGroupError(
                f"Group '{group.display_name}' has no animals to assign",
                details={'group_id': group_id},
            )
        # Validates membership only; member group_id values are left as they are
        resolve_members(self.organization_id, group)
        foster = require_profile(self.organization_id, foster_id)

        group_name = group.display_name
        foster_name = foster.display_name
        batch = AnimalBatch.uniform(
            group.member_ids,
            AnimalStatus.IN_FOSTER,
            FosterVisibility.NOT_VISIBLE,
            foster.id,
        )

        group.current_foster_id = foster.id
        commit(self.STEP_GROUP)

        self._apply_members(
            batch,
            completed_steps=[self.STEP_GROUP],
            description=f"Group {group_id} was assigned to foster {foster_id} but its animals were not updated. "
                        f"Run the group assignment again to finish.",
            details={'group_id': group_id, 'foster_id': foster_id},
        )

        logger.info(
            f"Group {group_id} and {len(batch)} animals assigned to foster {foster_id} by {self.ctx.actor_id}"
        )

        text = FosterNarrator.choose(message, FosterNarrator.assigned(foster_name, group_name))
        notification = self.ctx.notifications.notify(foster_id, text, MessageTag.group(group_id))

        return TransitionResult(
            operation='assign_group',
            entity_type='group',
            entity_id=group_id,
            foster_id=foster_id,
            affected_animal_ids=tuple(batch.animal_ids),
            notification=notification,
        )

    def unassign_animal(
        self,
        animal_id: str,
        new_status: str,
        new_visibility: str,
        message: Optional[str] = None,
    ) -> TransitionResult:
        StatusVisibilityMapper.validate_status(new_status)
        StatusVisibilityMapper.validate_visibility(new_visibility)

        animal = require_animal(self.organization_id, animal_id)
        GroupMembershipPolicy.check(animal, 'unassign')
        if not animal.current_foster_id:
            raise NotAssignedError(
                f"{animal.display_name} is not assigned to a foster",
                details={'animal_id': animal_id},
            )
        previous_foster = require_profile(self.organization_id, animal.current_foster_id)

        previous_foster_id = previous_foster.id
        animal_name = animal.display_name
        foster_name = previous_foster.display_name

        # Caller-supplied status and visibility are stored as given
        animal.current_foster_id = None
        animal.status = new_status
        animal.foster_visibility = new_visibility
        commit(self.STEP_ANIMAL)

        logger.info(
            f"Animal {animal_id} unassigned from foster {previous_foster_id} by {self.ctx.actor_id} "
            f"(status={new_status}, visibility={new_visibility})"
        )

        text = FosterNarrator.choose(message, FosterNarrator.unassigned(foster_name, animal_name))
        notification = self.ctx.notifications.notify(previous_foster_id, text, MessageTag.animal(animal_id))

        return TransitionResult(
            operation='unassign_animal',
            entity_type='animal',
            entity_id=animal_id,
            foster_id=previous_foster_id,
            affected_animal_ids=(animal_id,),
            notification=notification,
        )

    def unassign_group(
        self,
        group_id: str,
        new_status: str,
        new_visibility: str,
        message: Optional[str] = None,
    ) -> TransitionResult:
        StatusVisibilityMapper.validate_status(new_status)
        StatusVisibilityMapper.validate_visibility(new_visibility)

        group = require_group(self.organization_id, group_id)
        if not group.current_foster_id:
            raise NotAssignedError(
                f"Group '{group.display_name}' is not assigned to a foster",
                details={'group_id': group_id},
            )
        resolve_members(self.organization_id, group)
        previous_foster = require_profile(self.organization_id, group.current_foster_id)

        previous_foster_id = previous_foster.id
        group_name = group.display_name
        foster_name = previous_foster.display_name
        batch = AnimalBatch.uniform(group.member_ids, new_status, new_visibility, None)

        completed_steps = []
        if batch:
            self._apply_members(
                batch,
                completed_steps=[],
                description=f"Animals of group {group_id} could not be unassigned",
                details={'group_id': group_id},
            )
            completed_steps.append(self.STEP_MEMBERS)

        # Group row last: a retry after a failure here still sees the group as assigned
        try:
            group.current_foster_id = None
            commit(self.STEP_GROUP)
        except StoreError as exc:
            if not completed_steps:
                raise
            logger.error(f"Group {group_id} unassignment stopped after member update: {exc}")
            raise PartialCompletionError(
                f"Animals of group {group_id} were unassigned but the group still lists foster "
                f"{previous_foster_id}. Run the group unassignment again to finish.",
                completed_steps=completed_steps,
                failed_step=self.STEP_GROUP,
                details={'group_id': group_id, 'foster_id': previous_foster_id},
                cause=exc,
            ) from exc

        logger.info(
            f"Group {group_id} and {len(batch)} animals unassigned from foster {previous_foster_id} "
            f"by {self.ctx.actor_id}"
        )

        text = FosterNarrator.choose(message, FosterNarrator.unassigned(foster_name, group_name))
        notification = self.ctx.notifications.notify(previous_foster_id, text, MessageTag.group(group_id))

        return TransitionResult(
            operation='unassign_group',
            entity_type='group',
            entity_id=group_id,
            foster_id=previous_foster_id,
            affected_animal_ids=tuple(batch.animal_ids),
            notification=notification,
        )

    def _apply_members(self, batch: AnimalBatch, completed_steps, description: str, details: dict) -> None:
        """
        Apply and commit a member batch as one step.

        With earlier steps committed a failure becomes PartialCompletionError,
        otherwise the store error propagates unchanged.
        """
        try:
            with store_call(self.STEP_MEMBERS):
                batch.apply(self.organization_id)
                db.session.commit()
        except StoreError as exc:
            if not completed_steps:
                raise
            logger.error(f"{description} ({exc})")
            raise PartialCompletionError(
                description,
                completed_steps=completed_steps,
                failed_step=self.STEP_MEMBERS,
                remaining=batch,
                details=details,
                cause=exc,
            ) from exc

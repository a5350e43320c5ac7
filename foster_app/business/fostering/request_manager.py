"""
RequestManager - Domain service for foster-initiated requests

Creates and cancels "request to foster" records and keeps the target's
public visibility in step with them. Coordinators hear about both through
the organization's coordinator conversation.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING
from foster_app import db
from foster_app.data.animals.animal import Animal, FosterVisibility
from foster_app.data.animals.animal_group import AnimalGroup
from foster_app.data.core.organization_scoped_base import new_id, utc_now
from foster_app.data.requests.foster_request import FosterRequest
from foster_app.business.fostering.batch import VisibilityBatch
from foster_app.business.fostering.errors import NotAuthorizedError, PartialCompletionError, StoreError
from foster_app.business.fostering.lookups import (
    require_animal,
    require_group,
    require_pending_request,
    require_profile,
    resolve_members,
)
from foster_app.business.fostering.narrator import FosterNarrator
from foster_app.business.fostering.policies import PendingRequestPolicy, RequestEligibilityPolicy
from foster_app.business.fostering.results import TransitionResult
from foster_app.business.fostering.state_machine import RequestStateMachine
from foster_app.business.fostering.store import commit, store_call
from foster_app.business.fostering.targets import MessageTag, RequestTarget
from foster_app.business.fostering.visibility import StatusVisibilityMapper
from foster_app.utils.logger import get_logger

if TYPE_CHECKING:
    from foster_app.business.fostering.context import FosterContext

logger = get_logger("foster_app.business.fostering.request_manager")


class RequestManager:
    """
    Domain service for the foster request lifecycle.

    Responsibilities:
    - Redirect requests for grouped animals to their group
    - Enforce one pending request per target and requester
    - Move the target to foster_pending and back
    - Apply RequestStateMachine transitions
    """

    STEP_REQUEST = 'request'
    STEP_VISIBILITY = 'visibility'

    def __init__(self, ctx: 'FosterContext'):
        self.ctx = ctx
        self.organization_id = ctx.organization_id

    def create_request(
        self,
        target: RequestTarget,
        requester_id: str,
        message: Optional[str] = None,
    ) -> TransitionResult:
        require_profile(self.organization_id, requester_id)
        target, entity, members = self._resolve_target(target)

        PendingRequestPolicy.check(self.organization_id, target, requester_id)
        RequestEligibilityPolicy.check(entity, requester_id, members)

        entity_name = entity.display_name
        affected_ids = [member.id for member in members] if members is not None else [entity.id]
        batch = VisibilityBatch.uniform(affected_ids, FosterVisibility.FOSTER_PENDING)

        request_id = new_id()
        db.session.add(FosterRequest(
            id=request_id,
            organization_id=self.organization_id,
            requester_id=requester_id,
            status=RequestStateMachine.PENDING,
            message=self._clean(message),
            **target.columns(),
        ))
        commit(self.STEP_REQUEST)

        self._apply_visibility(
            batch,
            description=f"Foster request {request_id} was created but {entity_name} was not marked as pending",
            details={'request_id': request_id, f'{target.kind}_id': target.target_id},
        )

        logger.info(
            f"Foster request {request_id} created by {requester_id} for {target.kind} {target.target_id}"
        )

        text = FosterNarrator.choose(message, FosterNarrator.request_created(entity_name))
        notification = self.ctx.notifications.notify_coordinators(
            text,
            MessageTag.for_request_target(target),
            sender_id=requester_id,
        )

        return TransitionResult(
            operation='create_request',
            entity_type=target.kind,
            entity_id=target.target_id,
            foster_id=requester_id,
            request_id=request_id,
            affected_animal_ids=tuple(affected_ids),
            notification=notification,
        )

    def cancel_request(self, request_id: str, message: Optional[str] = None) -> TransitionResult:
        foster_request = require_pending_request(self.organization_id, request_id)
        requester_id = foster_request.requester_id
        if requester_id != self.ctx.actor_id:
            logger.warning(f"Profile {self.ctx.actor_id} tried to cancel request {request_id} of {requester_id}")
            raise NotAuthorizedError(
                "Only the requester can cancel a foster request",
                details={'request_id': request_id},
            )
        RequestStateMachine.validate_transition(foster_request.status, RequestStateMachine.CANCELLED)

        target = RequestTarget(animal_id=foster_request.animal_id, group_id=foster_request.group_id)
        entity_name, animals = self._load_for_cancel(target)

        # Computed before any write so an unmappable status aborts cleanly
        batch = VisibilityBatch(tuple(
            (animal.id, StatusVisibilityMapper.visibility_for(animal.status))
            for animal in animals
        ))

        foster_request.status = RequestStateMachine.CANCELLED
        foster_request.resolved_at = utc_now()
        commit(self.STEP_REQUEST)

        self._apply_visibility(
            batch,
            description=f"Foster request {request_id} was cancelled but {entity_name} still shows as pending",
            details={'request_id': request_id, f'{target.kind}_id': target.target_id},
        )

        logger.info(f"Foster request {request_id} cancelled by {self.ctx.actor_id}")

        text = FosterNarrator.choose(message, FosterNarrator.request_cancelled(entity_name))
        notification = self.ctx.notifications.notify_coordinators(text, MessageTag.for_request_target(target))

        return TransitionResult(
            operation='cancel_request',
            entity_type=target.kind,
            entity_id=target.target_id,
            foster_id=requester_id,
            request_id=request_id,
            affected_animal_ids=tuple(batch.animal_ids),
            notification=notification,
        )

    def _resolve_target(self, target: RequestTarget) -> Tuple[RequestTarget, object, Optional[List[Animal]]]:
        """
        Load the requested entity. Grouped animals are upgraded to their group.

        Returns (target, entity, members); members is None for an animal target.
        """
        if target.is_group:
            group = require_group(self.organization_id, target.group_id)
            return target, group, resolve_members(self.organization_id, group)

        animal = require_animal(self.organization_id, target.animal_id)
        if animal.group_id:
            with store_call('load group'):
                group = AnimalGroup.get_scoped(self.organization_id, animal.group_id)
            if group is not None:
                logger.info(f"Request for grouped animal {animal.id} redirected to group {group.id}")
                return RequestTarget.group(group.id), group, resolve_members(self.organization_id, group)
            logger.warning(f"Animal {animal.id} references missing group {animal.group_id}; requesting the animal")

        return target, animal, None

    def _load_for_cancel(self, target: RequestTarget) -> Tuple[str, List[Animal]]:
        """Display name and the animals whose visibility is restored"""
        with store_call('load request target'):
            if target.is_group:
                group = AnimalGroup.get_scoped(self.organization_id, target.group_id)
                if group is None:
                    logger.warning(f"Cancelling request for missing group {target.group_id}")
                    return "Unnamed Group", []
                member_ids = group.member_ids
                rows = Animal.scoped(self.organization_id).filter(Animal.id.in_(member_ids)).all() if member_ids else []
                by_id = {animal.id: animal for animal in rows}
                return group.display_name, [by_id[i] for i in member_ids if i in by_id]

            animal = Animal.get_scoped(self.organization_id, target.animal_id)
            if animal is None:
                logger.warning(f"Cancelling request for missing animal {target.animal_id}")
                return "Unnamed Animal", []
            return animal.display_name, [animal]

    def _apply_visibility(self, batch: VisibilityBatch, description: str, details: dict) -> None:
        """Second step of both sagas; the request row is already committed"""
        if not batch:
            return
        try:
            with store_call(self.STEP_VISIBILITY):
                batch.apply(self.organization_id)
                db.session.commit()
        except StoreError as exc:
            logger.error(f"{description} ({exc})")
            raise PartialCompletionError(
                description,
                completed_steps=[self.STEP_REQUEST],
                failed_step=self.STEP_VISIBILITY,
                remaining=batch,
                details=details,
                cause=exc,
            ) from exc

    @staticmethod
    def _clean(message: Optional[str]) -> Optional[str]:
        if message is None:
            return None
        return message.strip() or None

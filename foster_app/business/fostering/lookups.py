"""
Organization-scoped lookups shared by the fostering managers

All reads go through store_call so a lost connection is reported as
NetworkError rather than as a missing row.
"""

from typing import List
from foster_app.data.animals.animal import Animal
from foster_app.data.animals.animal_group import AnimalGroup
from foster_app.data.core.profile import FosterProfile
from foster_app.data.requests.foster_request import FosterRequest
from foster_app.business.fostering.errors import NotFoundError, ValidationError
from foster_app.business.fostering.state_machine import RequestStateMachine
from foster_app.business.fostering.store import store_call


def require_animal(organization_id: str, animal_id: str) -> Animal:
    with store_call('load animal'):
        animal = Animal.get_scoped(organization_id, animal_id)
    if animal is None:
        raise NotFoundError(f"Animal {animal_id} not found", details={'animal_id': animal_id})
    return animal


def require_group(organization_id: str, group_id: str) -> AnimalGroup:
    with store_call('load group'):
        group = AnimalGroup.get_scoped(organization_id, group_id)
    if group is None:
        raise NotFoundError(f"Animal group {group_id} not found", details={'group_id': group_id})
    return group


def require_profile(organization_id: str, profile_id: str) -> FosterProfile:
    with store_call('load profile'):
        profile = FosterProfile.get_scoped(organization_id, profile_id)
    if profile is None:
        raise NotFoundError(
            f"Foster profile {profile_id} not found",
            details={'foster_profile_id': profile_id},
        )
    return profile


def require_pending_request(organization_id: str, request_id: str) -> FosterRequest:
    foster_request = None
    if request_id:
        with store_call('load request'):
            foster_request = FosterRequest.scoped(organization_id).filter_by(
                id=request_id,
                status=RequestStateMachine.PENDING,
            ).first()
    if foster_request is None:
        raise NotFoundError(
            f"No pending foster request {request_id}",
            details={'request_id': request_id},
        )
    return foster_request


def resolve_members(organization_id: str, group: AnimalGroup) -> List[Animal]:
    """
    Member animals in animal_ids order.

    Raises:
        ValidationError: If any listed id does not resolve in the organization
    """
    member_ids = group.member_ids
    if not member_ids:
        return []
    with store_call('load group members'):
        rows = Animal.scoped(organization_id).filter(Animal.id.in_(member_ids)).all()
    by_id = {animal.id: animal for animal in rows}
    missing = [animal_id for animal_id in member_ids if animal_id not in by_id]
    if missing:
        raise ValidationError(
            f"Group '{group.display_name}' lists animals that do not exist: {', '.join(missing)}",
            details={'group_id': group.id, 'missing_animal_ids': missing},
        )
    return [by_id[animal_id] for animal_id in member_ids]

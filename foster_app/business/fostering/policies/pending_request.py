"""
Pending Request Uniqueness Policy

One pending request per (target, requester). Enforced by querying before
insert, there is no unique index behind it.
"""

from typing import Optional
from foster_app.data.requests.foster_request import FosterRequest
from foster_app.business.fostering.errors import AlreadyPendingError
from foster_app.business.fostering.state_machine import RequestStateMachine
from foster_app.business.fostering.store import store_call


class PendingRequestPolicy:

    @classmethod
    def check(cls, organization_id: str, target, requester_id: str) -> None:
        """
        Raises:
            AlreadyPendingError: If the requester already has a pending request for target
        """
        existing = cls.find_pending(organization_id, target, requester_id)
        if existing is not None:
            raise AlreadyPendingError(
                f"You already have a pending request for this {target.kind}",
                details={
                    'request_id': existing.id,
                    f'{target.kind}_id': target.target_id,
                    'requester_id': requester_id,
                },
            )

    @classmethod
    def find_pending(cls, organization_id: str, target, requester_id: str) -> Optional[FosterRequest]:
        with store_call('load pending requests'):
            return FosterRequest.scoped(organization_id).filter_by(
                requester_id=requester_id,
                status=RequestStateMachine.PENDING,
                **target.columns(),
            ).first()

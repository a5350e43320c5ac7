"""
NotificationDispatcher - Best-effort chat messages after a transition

Runs only after the primary change has committed. Failures here are
reported on the result as DegradedSuccess and never undo the transition.
"""

from typing import Optional, TYPE_CHECKING
from sqlalchemy.exc import SQLAlchemyError
from foster_app import db
from foster_app.data.core.organization_scoped_base import new_id
from foster_app.data.core.profile import FosterProfile, ProfileRole
from foster_app.data.messaging.conversation import Conversation, ConversationType
from foster_app.data.messaging.message import Message, MessageLink
from foster_app.business.fostering.errors import DegradedSuccess
from foster_app.business.fostering.results import NotificationOutcome
from foster_app.business.fostering.targets import MessageTag
from foster_app.utils.logger import get_logger

if TYPE_CHECKING:
    from foster_app.business.fostering.context import FosterContext

logger = get_logger("foster_app.business.fostering.notification_dispatcher")


class NotificationDispatcher:
    """
    Posts a message into the right conversation and optionally tags it.

    Routing:
    - foster profile: that foster's foster_chat
    - coordinator profile: the organization's coordinator_group
    """

    def __init__(self, ctx: 'FosterContext'):
        self.ctx = ctx
        self.organization_id = ctx.organization_id

    def notify(
        self,
        foster_id: str,
        message: str,
        tag: Optional[MessageTag] = None,
        sender_id: Optional[str] = None,
    ) -> NotificationOutcome:
        try:
            profile = FosterProfile.get_scoped(self.organization_id, foster_id)
            if profile is None:
                logger.warning(
                    f"Notification skipped: profile {foster_id} not found in organization {self.organization_id}"
                )
                return NotificationOutcome(status=NotificationOutcome.SKIPPED)

            if profile.role == ProfileRole.COORDINATOR:
                conversation = self._coordinator_conversation()
            else:
                conversation = self._foster_conversation(profile.id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            return self._degraded(DegradedSuccess.MESSAGE, f"Could not resolve conversation: {exc}")

        if conversation is None:
            logger.warning(
                f"Notification skipped: no conversation for profile {foster_id} "
                f"in organization {self.organization_id}"
            )
            return NotificationOutcome(status=NotificationOutcome.SKIPPED)

        return self._post(conversation, message, tag, sender_id)

    def notify_coordinators(
        self,
        message: str,
        tag: Optional[MessageTag] = None,
        sender_id: Optional[str] = None,
    ) -> NotificationOutcome:
        try:
            conversation = self._coordinator_conversation()
        except SQLAlchemyError as exc:
            db.session.rollback()
            return self._degraded(DegradedSuccess.MESSAGE, f"Could not resolve conversation: {exc}")

        if conversation is None:
            logger.warning(
                f"Notification skipped: organization {self.organization_id} has no coordinator conversation"
            )
            return NotificationOutcome(status=NotificationOutcome.SKIPPED)

        return self._post(conversation, message, tag, sender_id)

    def _foster_conversation(self, profile_id: str) -> Optional[Conversation]:
        return Conversation.scoped(self.organization_id).filter_by(
            type=ConversationType.FOSTER_CHAT,
            foster_profile_id=profile_id,
        ).first()

    def _coordinator_conversation(self) -> Optional[Conversation]:
        return Conversation.scoped(self.organization_id).filter_by(
            type=ConversationType.COORDINATOR_GROUP,
        ).first()

    def _post(
        self,
        conversation: Conversation,
        message: str,
        tag: Optional[MessageTag],
        sender_id: Optional[str],
    ) -> NotificationOutcome:
        conversation_id = conversation.id
        message_id = new_id()

        try:
            db.session.add(Message(
                id=message_id,
                conversation_id=conversation_id,
                sender_id=sender_id or self.ctx.actor_id,
                content=message.strip(),
            ))
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            return self._degraded(
                DegradedSuccess.MESSAGE,
                f"Message could not be saved: {exc}",
                conversation_id=conversation_id,
            )

        if tag is not None:
            try:
                db.session.add(MessageLink(message_id=message_id, **tag.columns()))
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                return self._degraded(
                    DegradedSuccess.TAG,
                    f"Message saved but tag could not be added: {exc}",
                    conversation_id=conversation_id,
                    message_id=message_id,
                )

        logger.info(f"Notification {message_id} posted to conversation {conversation_id}")
        return NotificationOutcome(
            status=NotificationOutcome.SENT,
            conversation_id=conversation_id,
            message_id=message_id,
        )

    def _degraded(
        self,
        stage: str,
        text: str,
        conversation_id: Optional[str] = None,
        message_id: Optional[str] = None,
    ) -> NotificationOutcome:
        logger.warning(f"Notification degraded at stage '{stage}': {text}")
        return NotificationOutcome(
            status=NotificationOutcome.DEGRADED,
            conversation_id=conversation_id,
            message_id=message_id,
            degraded=DegradedSuccess(
                stage,
                text,
                details={'conversation_id': conversation_id, 'message_id': message_id},
            ),
        )

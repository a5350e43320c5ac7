from foster_app import db
from foster_app.data.core.organization_scoped_base import OrganizationScopedBase


class ConversationType:
    FOSTER_CHAT = 'foster_chat'
    COORDINATOR_GROUP = 'coordinator_group'

    ALL = (FOSTER_CHAT, COORDINATOR_GROUP)


class Conversation(OrganizationScopedBase):
    __tablename__ = 'conversations'
    __table_args__ = (
        db.CheckConstraint(
            "(type = 'foster_chat' AND foster_profile_id IS NOT NULL) OR "
            "(type = 'coordinator_group' AND foster_profile_id IS NULL)",
            name='foster_chat_requires_profile',
        ),
    )

    type = db.Column(db.String(30), nullable=False, index=True)
    foster_profile_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=True, index=True)

    foster_profile = db.relationship('FosterProfile', foreign_keys=[foster_profile_id])

    def __repr__(self):
        return f'<Conversation {self.type} {self.foster_profile_id or self.organization_id}>'

from foster_app import db
from foster_app.business.core.data_insertion_mixin import DataInsertionMixin
from foster_app.data.core.organization_scoped_base import new_id, utc_now


class Message(db.Model, DataInsertionMixin):
    __tablename__ = 'messages'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    conversation_id = db.Column(db.String(36), db.ForeignKey('conversations.id'), nullable=False, index=True)
    sender_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now)

    conversation = db.relationship('Conversation', backref='messages')
    links = db.relationship('MessageLink', backref='message')

    def __repr__(self):
        preview = self.content if len(self.content) <= 50 else self.content[:50] + "..."
        return f'<Message {self.id}: {preview}>'


class MessageLink(db.Model, DataInsertionMixin):
    """Tag from a message to exactly one animal, group or foster profile"""
    __tablename__ = 'message_links'
    __table_args__ = (
        db.CheckConstraint(
            '(animal_id IS NOT NULL AND group_id IS NULL AND foster_profile_id IS NULL) OR '
            '(animal_id IS NULL AND group_id IS NOT NULL AND foster_profile_id IS NULL) OR '
            '(animal_id IS NULL AND group_id IS NULL AND foster_profile_id IS NOT NULL)',
            name='message_links_exactly_one_target',
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    message_id = db.Column(db.String(36), db.ForeignKey('messages.id'), nullable=False, index=True)
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id'), nullable=True, index=True)
    group_id = db.Column(db.String(36), db.ForeignKey('animal_groups.id'), nullable=True, index=True)
    foster_profile_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=True, index=True)

    @property
    def target_id(self):
        return self.animal_id or self.group_id or self.foster_profile_id

    def __repr__(self):
        return f'<MessageLink message={self.message_id} target={self.target_id}>'

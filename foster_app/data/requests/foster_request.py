from foster_app import db
from foster_app.data.core.organization_scoped_base import OrganizationScopedBase


class FosterRequest(OrganizationScopedBase):
    __tablename__ = 'foster_requests'
    __table_args__ = (
        db.CheckConstraint(
            '(animal_id IS NOT NULL AND group_id IS NULL) OR (animal_id IS NULL AND group_id IS NOT NULL)',
            name='foster_requests_animal_or_group',
        ),
    )

    # Exactly one target column is set
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id'), nullable=True, index=True)
    group_id = db.Column(db.String(36), db.ForeignKey('animal_groups.id'), nullable=True, index=True)

    requester_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    message = db.Column(db.Text, nullable=True)
    resolved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    requester = db.relationship('FosterProfile', foreign_keys=[requester_id])

    @property
    def target_type(self):
        return 'group' if self.group_id else 'animal'

    @property
    def target_id(self):
        return self.group_id or self.animal_id

    def __repr__(self):
        return f'<FosterRequest {self.id} {self.target_type}={self.target_id} status={self.status}>'

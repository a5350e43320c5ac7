from foster_app import db
from foster_app.data.core.organization_scoped_base import OrganizationScopedBase


class AnimalStatus:
    """Internal shelter status of an animal"""
    IN_SHELTER = 'in_shelter'
    IN_FOSTER = 'in_foster'
    ADOPTED = 'adopted'
    MEDICAL_HOLD = 'medical_hold'
    TRANSFERRING = 'transferring'

    ALL = (IN_SHELTER, IN_FOSTER, ADOPTED, MEDICAL_HOLD, TRANSFERRING)


class FosterVisibility:
    """Public availability flag shown on the fosters-needed listing"""
    AVAILABLE_NOW = 'available_now'
    AVAILABLE_FUTURE = 'available_future'
    FOSTER_PENDING = 'foster_pending'
    NOT_VISIBLE = 'not_visible'

    ALL = (AVAILABLE_NOW, AVAILABLE_FUTURE, FOSTER_PENDING, NOT_VISIBLE)

    # A target in one of these states cannot take a new foster request
    UNREQUESTABLE = (FOSTER_PENDING, NOT_VISIBLE)


class Animal(OrganizationScopedBase):
    __tablename__ = 'animals'

    name = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(30), nullable=False, default=AnimalStatus.IN_SHELTER)
    foster_visibility = db.Column(db.String(30), nullable=False, default=FosterVisibility.AVAILABLE_NOW)

    # Written only by the assignment engine
    current_foster_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=True, index=True)
    group_id = db.Column(db.String(36), db.ForeignKey('animal_groups.id'), nullable=True, index=True)

    current_foster = db.relationship('FosterProfile', foreign_keys=[current_foster_id])

    @property
    def display_name(self):
        return self.name or "Unnamed Animal"

    @property
    def is_grouped(self):
        return self.group_id is not None

    def __repr__(self):
        return f'<Animal {self.display_name} status={self.status} visibility={self.foster_visibility}>'

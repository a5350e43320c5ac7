from flask_login import UserMixin
from foster_app import db, login_manager
from foster_app.data.core.organization_scoped_base import OrganizationScopedBase


class ProfileRole:
    FOSTER = 'foster'
    COORDINATOR = 'coordinator'

    ALL = (FOSTER, COORDINATOR)


class FosterProfile(UserMixin, OrganizationScopedBase):
    __tablename__ = 'profiles'

    role = db.Column(db.String(20), nullable=False, default=ProfileRole.FOSTER)
    full_name = db.Column(db.String(255), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    @property
    def display_name(self):
        return self.full_name or self.email or "Foster"

    @property
    def is_coordinator(self):
        return self.role == ProfileRole.COORDINATOR

    def __repr__(self):
        return f'<FosterProfile {self.display_name} ({self.role})>'


@login_manager.user_loader
def load_user(profile_id):
    return db.session.get(FosterProfile, profile_id)

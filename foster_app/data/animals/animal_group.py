from foster_app import db
from foster_app.data.core.organization_scoped_base import OrganizationScopedBase


class AnimalGroup(OrganizationScopedBase):
    __tablename__ = 'animal_groups'

    name = db.Column(db.String(255), nullable=True)

    # Ordered member ids. Reassign the list rather than mutating it in place,
    # the JSON column does not track in-place changes.
    animal_ids = db.Column(db.JSON, nullable=False, default=list)

    current_foster_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=True, index=True)

    current_foster = db.relationship('FosterProfile', foreign_keys=[current_foster_id])

    @property
    def display_name(self):
        return self.name or "Unnamed Group"

    @property
    def member_ids(self):
        """Member ids in order, duplicates dropped"""
        seen = set()
        ordered = []
        for animal_id in self.animal_ids or []:
            if animal_id not in seen:
                seen.add(animal_id)
                ordered.append(animal_id)
        return ordered

    def __repr__(self):
        return f'<AnimalGroup {self.display_name} members={len(self.animal_ids or [])}>'

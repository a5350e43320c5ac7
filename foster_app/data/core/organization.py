from foster_app import db
from foster_app.business.core.data_insertion_mixin import DataInsertionMixin
from foster_app.data.core.organization_scoped_base import new_id, utc_now


class Organization(db.Model, DataInsertionMixin):
    __tablename__ = 'organizations'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now)
    updated_at = db.Column(db.DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f'<Organization {self.name}>'

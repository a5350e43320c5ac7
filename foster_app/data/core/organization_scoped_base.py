import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import declared_attr
from foster_app import db
from foster_app.business.core.data_insertion_mixin import DataInsertionMixin


def new_id():
    return str(uuid.uuid4())


def utc_now():
    return datetime.now(timezone.utc)


class OrganizationScopedBase(db.Model, DataInsertionMixin):
    """Abstract base class for every tenant-owned row"""

    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now)
    updated_at = db.Column(db.DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    # Tenant boundary: every engine lookup filters on this column
    @declared_attr
    def organization_id(cls):
        return db.Column(db.String(36), db.ForeignKey('organizations.id'), nullable=False, index=True)

    @classmethod
    def scoped(cls, organization_id):
        """Query restricted to one organization"""
        return cls.query.filter(cls.organization_id == organization_id)

    @classmethod
    def get_scoped(cls, organization_id, row_id):
        """Fetch one row by id inside an organization, or None"""
        if not row_id:
            return None
        return cls.scoped(organization_id).filter(cls.id == row_id).first()

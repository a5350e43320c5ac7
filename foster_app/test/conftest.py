"""
Pytest configuration and fixtures for the fostering engine

Each test gets a fresh in-memory database with one organization, a
coordinator, two fosters and their conversations.
"""
import pytest
from flask import g
from foster_app import create_app
from foster_app import db as _db
from foster_app.build import ensure_conversations
from foster_app.data.animals.animal import Animal, AnimalStatus, FosterVisibility
from foster_app.data.animals.animal_group import AnimalGroup
from foster_app.data.core.organization import Organization
from foster_app.data.core.profile import FosterProfile, ProfileRole
from foster_app.data.messaging.conversation import Conversation, ConversationType


@pytest.fixture(scope='function')
def app():
    """Create Flask application for testing"""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SESSION_COOKIE_SECURE': False,
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def db(app):
    return _db


def _with_id(row_id):
    return {'id': row_id} if row_id else {}


class Seeder:
    """Small factory for rows inside one organization"""

    def __init__(self, organization):
        self.organization = organization
        self.org_id = organization.id

    def profile(self, full_name=None, role=ProfileRole.FOSTER, email=None, profile_id=None):
        profile = FosterProfile(
            **_with_id(profile_id),
            organization_id=self.org_id,
            role=role,
            full_name=full_name,
            email=email,
        )
        _db.session.add(profile)
        _db.session.commit()
        return profile

    def animal(self, name=None, status=AnimalStatus.IN_SHELTER, visibility=None,
               group=None, foster=None, animal_id=None):
        animal = Animal(
            **_with_id(animal_id),
            organization_id=self.org_id,
            name=name,
            status=status,
            foster_visibility=visibility or FosterVisibility.AVAILABLE_NOW,
            group_id=group.id if group is not None else None,
            current_foster_id=foster.id if foster is not None else None,
        )
        _db.session.add(animal)
        _db.session.commit()
        return animal

    def group(self, name=None, members=(), foster=None, group_id=None, animal_ids=None):
        """Group whose members point back at it; animal_ids overrides the member list"""
        group = AnimalGroup(
            **_with_id(group_id),
            organization_id=self.org_id,
            name=name,
            animal_ids=[],
            current_foster_id=foster.id if foster is not None else None,
        )
        _db.session.add(group)
        _db.session.flush()
        for member in members:
            member.group_id = group.id
            if foster is not None:
                member.current_foster_id = foster.id
        group.animal_ids = list(animal_ids) if animal_ids is not None else [m.id for m in members]
        _db.session.commit()
        return group

    def foster_chat(self, profile):
        return Conversation.scoped(self.org_id).filter_by(
            type=ConversationType.FOSTER_CHAT,
            foster_profile_id=profile.id,
        ).first()

    def coordinator_group(self):
        return Conversation.scoped(self.org_id).filter_by(
            type=ConversationType.COORDINATOR_GROUP,
        ).first()


@pytest.fixture(scope='function')
def seed(app):
    """Organization with coordinator C, fosters F1 and F2, and their conversations"""
    organization = Organization(name='Test Rescue')
    _db.session.add(organization)
    _db.session.commit()

    seeder = Seeder(organization)
    seeder.coordinator = seeder.profile('Casey Coordinator', role=ProfileRole.COORDINATOR,
                                        email='casey@example.org', profile_id='C')
    seeder.f1 = seeder.profile('Frankie One', email='f1@example.org', profile_id='F1')
    seeder.f2 = seeder.profile(None, email='f2@example.org', profile_id='F2')
    ensure_conversations(organization.id)
    return seeder


@pytest.fixture(scope='function')
def other_org(seed):
    """Second organization with foster X1, animal XA1 and group XG1"""
    organization = Organization(name='Other Rescue')
    _db.session.add(organization)
    _db.session.commit()

    seeder = Seeder(organization)
    seeder.foster = seeder.profile('Xavi Elsewhere', email='x1@example.org', profile_id='X1')
    seeder.stray = seeder.animal('Stray', animal_id='XA1')
    seeder.litter = seeder.group('Other Litter', members=[seeder.animal('Far', animal_id='XA2')], group_id='XG1')
    ensure_conversations(organization.id)
    return seeder


@pytest.fixture(scope='function')
def ctx(seed):
    """FosterContext acting as the coordinator"""
    from foster_app.business.fostering.context import FosterContext
    return FosterContext(seed.org_id, actor_id=seed.coordinator.id)


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    # The app fixture keeps one app context pushed, so g outlives a request;
    # drop Flask-Login's cached user so each request reloads it from the session
    @app.before_request
    def _forget_cached_user():
        g.pop('_login_user', None)

    return app.test_client()


def login_as(client, profile):
    """Put the profile into the Flask-Login session"""
    with client.session_transaction() as sess:
        sess['_user_id'] = profile.id
        sess['_fresh'] = True
    return client


@pytest.fixture(scope='function')
def coordinator_client(client, seed):
    return login_as(client, seed.coordinator)


@pytest.fixture(scope='function')
def foster_client(client, seed):
    return login_as(client, seed.f1)

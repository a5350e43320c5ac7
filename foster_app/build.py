"""
Database build and demo data for the foster application
"""

from foster_app import create_app, db
from foster_app.utils.logger import get_logger

logger = get_logger("foster_app.build")

DEMO_ORGANIZATION_NAME = 'Demo Rescue'

DEMO_PROFILES = [
    {'role': 'coordinator', 'full_name': 'Casey Coordinator', 'email': 'coordinator@example.org'},
    {'role': 'foster', 'full_name': 'Frankie Foster', 'email': 'foster@example.org'},
]


def ensure_conversations(organization_id):
    """
    Create missing conversations for an organization.

    One coordinator_group per organization and one foster_chat per foster
    profile. Existing conversations are left alone.

    Returns:
        int: Number of conversations created
    """
    from foster_app.data.core.profile import FosterProfile, ProfileRole
    from foster_app.data.messaging.conversation import Conversation, ConversationType

    created = 0

    coordinator_group = Conversation.scoped(organization_id).filter_by(
        type=ConversationType.COORDINATOR_GROUP
    ).first()
    if coordinator_group is None:
        db.session.add(Conversation(
            organization_id=organization_id,
            type=ConversationType.COORDINATOR_GROUP,
        ))
        created += 1

    existing_chats = {
        conversation.foster_profile_id
        for conversation in Conversation.scoped(organization_id).filter_by(type=ConversationType.FOSTER_CHAT)
    }
    fosters = FosterProfile.scoped(organization_id).filter_by(role=ProfileRole.FOSTER).all()
    for foster in fosters:
        if foster.id not in existing_chats:
            db.session.add(Conversation(
                organization_id=organization_id,
                type=ConversationType.FOSTER_CHAT,
                foster_profile_id=foster.id,
            ))
            created += 1

    db.session.commit()
    if created:
        logger.info(f"Created {created} conversations for organization {organization_id}")
    return created


def insert_demo_data():
    """Seed one organization with a coordinator, a foster, two animals and a group"""
    from foster_app.data.core.organization import Organization
    from foster_app.data.core.profile import FosterProfile
    from foster_app.data.animals.animal import Animal, AnimalStatus, FosterVisibility
    from foster_app.data.animals.animal_group import AnimalGroup

    organization = Organization.query.filter_by(name=DEMO_ORGANIZATION_NAME).first()
    if organization is not None:
        logger.info("Demo data already present, skipping")
        return organization

    organization = Organization.create_from_dict({'name': DEMO_ORGANIZATION_NAME}, commit=False)

    org_id = organization.id
    for profile_data in DEMO_PROFILES:
        FosterProfile.create_from_dict(dict(profile_data, organization_id=org_id), commit=False)

    kittens = AnimalGroup(organization_id=org_id, name='Bottle Babies')
    db.session.add(kittens)
    db.session.flush()

    members = [
        Animal(organization_id=org_id, name=name, group_id=kittens.id,
               status=AnimalStatus.IN_SHELTER, foster_visibility=FosterVisibility.AVAILABLE_NOW)
        for name in ('Pip', 'Moss')
    ]
    db.session.add_all(members)
    db.session.add(Animal(organization_id=org_id, name='Biscuit',
                          status=AnimalStatus.MEDICAL_HOLD, foster_visibility=FosterVisibility.AVAILABLE_FUTURE))
    db.session.flush()
    kittens.animal_ids = [animal.id for animal in members]

    db.session.commit()
    ensure_conversations(org_id)

    logger.info(f"Demo organization '{DEMO_ORGANIZATION_NAME}' created ({org_id})")
    return organization


def build_database(seed_demo=False, app=None):
    """
    Create all tables and optionally insert demo data.

    Args:
        seed_demo (bool): Insert the demo organization
        app: Existing Flask app, a new one is created when omitted
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (demo data: {seed_demo})")
        db.create_all()
        logger.info("All tables created")

        if seed_demo:
            insert_demo_data()

        logger.info("Database build complete")

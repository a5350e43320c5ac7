"""
Tests for assigning and unassigning animals and groups
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from foster_app.business.fostering import assignment_manager, store
from foster_app.business.fostering.batch import AnimalBatch
from foster_app.business.fostering.context import FosterContext
from foster_app.business.fostering.errors import (
    ConflictError,
    EmptyGroupError,
    GroupMembershipError,
    NetworkError,
    NotAssignedError,
    NotFoundError,
    PartialCompletionError,
    StoreError,
    ValidationError,
)
from foster_app.data.animals.animal import Animal, AnimalStatus, FosterVisibility
from foster_app.data.animals.animal_group import AnimalGroup
from foster_app.data.messaging.message import Message, MessageLink


def _reload(db, model, row_id):
    db.session.expire_all()
    return db.session.get(model, row_id)


def _messages(conversation):
    return Message.query.filter_by(conversation_id=conversation.id).all()


# ----------------------------------------------------------------------
# assign_animal
# ----------------------------------------------------------------------

def test_assign_animal_a101(ctx, seed, db):
    seed.animal('Biscuit', animal_id='A101')

    result = ctx.assign_animal('A101', 'F1')

    animal = _reload(db, Animal, 'A101')
    assert animal.current_foster_id == 'F1'
    assert animal.status == AnimalStatus.IN_FOSTER
    assert animal.foster_visibility == FosterVisibility.NOT_VISIBLE

    messages = _messages(seed.foster_chat(seed.f1))
    assert len(messages) == 1
    assert messages[0].content == "Hi Frankie One, Biscuit has been assigned to you."
    assert messages[0].sender_id == 'C'

    links = MessageLink.query.filter_by(message_id=messages[0].id).all()
    assert len(links) == 1
    assert links[0].animal_id == 'A101'
    assert links[0].group_id is None

    assert result.notification.status == 'sent'
    assert not result.is_degraded


def test_assign_animal_overrides_visibility(ctx, seed, db):
    seed.animal('Biscuit', animal_id='A1', status=AnimalStatus.MEDICAL_HOLD,
                visibility=FosterVisibility.AVAILABLE_FUTURE)

    ctx.assign_animal('A1', 'F2')

    animal = _reload(db, Animal, 'A1')
    assert animal.foster_visibility == FosterVisibility.NOT_VISIBLE
    assert animal.status == AnimalStatus.IN_FOSTER


def test_assign_animal_uses_custom_message(ctx, seed):
    seed.animal('Biscuit', animal_id='A1')

    ctx.assign_animal('A1', 'F1', message='  Pick-up is at 5pm  ')

    assert [m.content for m in _messages(seed.foster_chat(seed.f1))] == ['Pick-up is at 5pm']


def test_assign_animal_falls_back_to_email_and_unnamed(ctx, seed):
    seed.animal(None, animal_id='A1')

    ctx.assign_animal('A1', 'F2')

    contents = [m.content for m in _messages(seed.foster_chat(seed.f2))]
    assert contents == ["Hi f2@example.org, Unnamed Animal has been assigned to you."]


def test_assign_grouped_animal_is_refused(ctx, seed, db):
    pip = seed.animal('Pip', animal_id='A1')
    seed.group('Bottle Babies', members=[pip])

    with pytest.raises(GroupMembershipError):
        ctx.assign_animal('A1', 'F1')

    assert _reload(db, Animal, 'A1').current_foster_id is None
    assert Message.query.count() == 0


def test_assign_grouped_animal_to_other_foster_is_conflict(ctx, seed, db):
    pip = seed.animal('Pip', animal_id='A1')
    seed.group('Bottle Babies', members=[pip], foster=seed.f1, group_id='G1')

    with pytest.raises(ConflictError) as excinfo:
        ctx.assign_animal('A1', 'F2')

    assert isinstance(excinfo.value, GroupMembershipError)
    assert excinfo.value.details['group_id'] == 'G1'
    assert excinfo.value.details['group_foster_id'] == 'F1'
    assert _reload(db, Animal, 'A1').current_foster_id == 'F1'


def test_assign_animal_to_missing_foster(ctx, seed, db):
    seed.animal('Biscuit', animal_id='A1')

    with pytest.raises(NotFoundError):
        ctx.assign_animal('A1', 'nobody')

    assert _reload(db, Animal, 'A1').status == AnimalStatus.IN_SHELTER


def test_assign_missing_animal(ctx, seed):
    with pytest.raises(NotFoundError):
        ctx.assign_animal('missing', 'F1')


def test_assign_animal_to_foster_of_other_organization(ctx, seed, db, other_org):
    seed.animal('Biscuit', animal_id='A1')

    with pytest.raises(NotFoundError):
        ctx.assign_animal('A1', 'X1')

    assert _reload(db, Animal, 'A1').current_foster_id is None


def test_assign_animal_of_other_organization(ctx, seed, other_org):
    with pytest.raises(NotFoundError):
        ctx.assign_animal('XA1', 'F1')


def test_context_needs_an_actor(seed):
    with pytest.raises(ValueError):
        FosterContext(seed.org_id)
    with pytest.raises(ValueError):
        FosterContext(seed.org_id, actor_id='')


def test_rejected_write_is_store_error(ctx, seed, db):
    seed.animal('Biscuit', animal_id='A1')
    db.session.expunge_all()
    db.session.add(Animal(id='A1', organization_id=seed.org_id, name='Twin'))

    with pytest.raises(StoreError) as excinfo:
        store.commit('animal')

    assert not isinstance(excinfo.value, NetworkError)
    assert isinstance(excinfo.value.__cause__, IntegrityError)
    assert excinfo.value.details['step'] == 'animal'
    assert excinfo.value.to_dict()['error'] == 'StoreError'
    assert _reload(db, Animal, 'A1').name == 'Biscuit'


# ----------------------------------------------------------------------
# assign_group
# ----------------------------------------------------------------------

def test_assign_group_updates_all_members(ctx, seed, db):
    members = [seed.animal(f'Kitten {i}', animal_id=f'A{i}') for i in range(1, 4)]
    seed.group('Litter', members=members, group_id='G1')

    result = ctx.assign_group('G1', 'F1')

    assert _reload(db, AnimalGroup, 'G1').current_foster_id == 'F1'
    for animal in Animal.query.filter(Animal.id.in_(['A1', 'A2', 'A3'])):
        assert animal.current_foster_id == 'F1'
        assert animal.status == AnimalStatus.IN_FOSTER
        assert animal.foster_visibility == FosterVisibility.NOT_VISIBLE
    assert result.affected_animal_ids == ('A1', 'A2', 'A3')

    messages = _messages(seed.foster_chat(seed.f1))
    assert [m.content for m in messages] == ["Hi Frankie One, Litter has been assigned to you."]
    link = MessageLink.query.filter_by(message_id=messages[0].id).one()
    assert link.group_id == 'G1'


def test_assign_group_g1_touches_only_listed_members(ctx, seed, db):
    a1 = seed.animal('One', animal_id='A1')
    seed.animal('Two', animal_id='A2')
    group = seed.group('G1 litter', members=[a1], group_id='G1', animal_ids=['A1', 'A2'])
    # A3 points at G1 but is not listed; A2 is listed but does not point back
    seed.animal('Three', animal_id='A3', group=group)

    ctx.assign_group('G1', 'F1')

    a1, a2, a3 = (_reload(db, Animal, i) for i in ('A1', 'A2', 'A3'))
    assert a1.current_foster_id == 'F1'
    assert a2.current_foster_id == 'F1'
    assert a2.status == AnimalStatus.IN_FOSTER
    assert a2.group_id is None
    assert a3.current_foster_id is None
    assert a3.status == AnimalStatus.IN_SHELTER
    assert a3.foster_visibility == FosterVisibility.AVAILABLE_NOW


def test_assign_empty_group(ctx, seed, db):
    seed.group('Nobody', group_id='G1')

    with pytest.raises(EmptyGroupError) as excinfo:
        ctx.assign_group('G1', 'F1')

    assert isinstance(excinfo.value, ValidationError)
    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None


def test_assign_group_with_unresolved_member(ctx, seed, db):
    a1 = seed.animal('One', animal_id='A1')
    seed.group('Broken', members=[a1], group_id='G1', animal_ids=['A1', 'ghost'])

    with pytest.raises(ValidationError) as excinfo:
        ctx.assign_group('G1', 'F1')

    assert excinfo.value.details['missing_animal_ids'] == ['ghost']
    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None
    assert _reload(db, Animal, 'A1').current_foster_id is None


def test_assign_missing_group(ctx, seed):
    with pytest.raises(NotFoundError):
        ctx.assign_group('nope', 'F1')


def test_assign_group_listing_animal_of_other_organization(ctx, seed, db, other_org):
    a1 = seed.animal('One', animal_id='A1')
    seed.group('Mixed', members=[a1], group_id='G1', animal_ids=['A1', 'XA1'])

    with pytest.raises(ValidationError) as excinfo:
        ctx.assign_group('G1', 'F1')

    assert excinfo.value.details['missing_animal_ids'] == ['XA1']
    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None
    assert _reload(db, Animal, 'XA1').current_foster_id is None


def test_assign_group_of_other_organization(ctx, seed, db, other_org):
    with pytest.raises(NotFoundError):
        ctx.assign_group('XG1', 'F1')

    assert _reload(db, AnimalGroup, 'XG1').current_foster_id is None


def test_assign_group_member_failure_is_partial_and_resumable(ctx, seed, db, monkeypatch):
    members = [seed.animal('One', animal_id='A1'), seed.animal('Two', animal_id='A2')]
    seed.group('Pair', members=members, group_id='G1')

    def lost_connection(self, organization_id):
        raise OperationalError("UPDATE animals", {}, Exception("connection lost"))

    monkeypatch.setattr(AnimalBatch, 'apply', lost_connection)

    with pytest.raises(PartialCompletionError) as excinfo:
        ctx.assign_group('G1', 'F1')

    error = excinfo.value
    assert error.completed_steps == ['group']
    assert error.failed_step == 'members'
    assert error.remaining.animal_ids == ['A1', 'A2']
    assert error.details['remaining']['updates'][0]['current_foster_id'] == 'F1'
    assert isinstance(error.cause, NetworkError)

    assert _reload(db, AnimalGroup, 'G1').current_foster_id == 'F1'
    assert _reload(db, Animal, 'A1').current_foster_id is None
    assert Message.query.count() == 0

    monkeypatch.undo()
    ctx.assign_group('G1', 'F1')

    assert _reload(db, Animal, 'A1').current_foster_id == 'F1'
    assert _reload(db, Animal, 'A2').status == AnimalStatus.IN_FOSTER


def test_assign_group_first_step_failure_is_network_error(ctx, seed, db, monkeypatch):
    members = [seed.animal('One', animal_id='A1')]
    seed.group('Solo', members=members, group_id='G1')

    def unreachable(step):
        db.session.rollback()
        raise NetworkError(f"Could not confirm '{step}' with the database", details={'step': step})

    monkeypatch.setattr(assignment_manager, 'commit', unreachable)

    with pytest.raises(NetworkError):
        ctx.assign_group('G1', 'F1')

    monkeypatch.undo()
    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None


# ----------------------------------------------------------------------
# unassign_animal
# ----------------------------------------------------------------------

def test_unassign_animal_keeps_given_values(ctx, seed, db):
    seed.animal('Biscuit', animal_id='A1', status=AnimalStatus.IN_FOSTER,
                visibility=FosterVisibility.NOT_VISIBLE, foster=seed.f1)

    result = ctx.unassign_animal('A1', AnimalStatus.IN_SHELTER, FosterVisibility.NOT_VISIBLE)

    animal = _reload(db, Animal, 'A1')
    assert animal.current_foster_id is None
    assert animal.status == AnimalStatus.IN_SHELTER
    # Not re-derived to available_now
    assert animal.foster_visibility == FosterVisibility.NOT_VISIBLE
    assert result.foster_id == 'F1'

    contents = [m.content for m in _messages(seed.foster_chat(seed.f1))]
    assert contents == ["Hi Frankie One, Biscuit is no longer assigned to you."]


def test_unassign_animal_not_assigned(ctx, seed):
    seed.animal('Biscuit', animal_id='A1')

    with pytest.raises(NotAssignedError):
        ctx.unassign_animal('A1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)


def test_unassign_grouped_animal_is_refused(ctx, seed, db):
    pip = seed.animal('Pip', animal_id='A1')
    seed.group('Bottle Babies', members=[pip], foster=seed.f1)

    with pytest.raises(GroupMembershipError):
        ctx.unassign_animal('A1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)

    assert _reload(db, Animal, 'A1').current_foster_id == 'F1'


@pytest.mark.parametrize('status, visibility', [
    ('lost', FosterVisibility.AVAILABLE_NOW),
    (AnimalStatus.IN_SHELTER, 'hidden'),
])
def test_unassign_animal_rejects_unknown_values(ctx, seed, status, visibility):
    seed.animal('Biscuit', animal_id='A1', foster=seed.f1)

    with pytest.raises(ValidationError):
        ctx.unassign_animal('A1', status, visibility)


# ----------------------------------------------------------------------
# unassign_group
# ----------------------------------------------------------------------

def test_unassign_group_to_medical_hold(ctx, seed, db):
    members = [seed.animal('One', animal_id='A1'), seed.animal('Two', animal_id='A2')]
    seed.group('G1 litter', members=members, group_id='G1')
    ctx.assign_group('G1', 'F1')

    result = ctx.unassign_group('G1', AnimalStatus.MEDICAL_HOLD, FosterVisibility.AVAILABLE_FUTURE)

    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None
    for animal_id in ('A1', 'A2'):
        animal = _reload(db, Animal, animal_id)
        assert animal.current_foster_id is None
        assert animal.status == AnimalStatus.MEDICAL_HOLD
        assert animal.foster_visibility == FosterVisibility.AVAILABLE_FUTURE
        assert animal.group_id == 'G1'

    messages = _messages(seed.foster_chat(seed.f1))
    assert messages[-1].content == "Hi Frankie One, G1 litter is no longer assigned to you."
    assert MessageLink.query.filter_by(message_id=result.notification.message_id).one().group_id == 'G1'


def test_unassign_group_listing_animal_of_other_organization(ctx, seed, db, other_org):
    a1 = seed.animal('One', animal_id='A1')
    seed.group('Mixed', members=[a1], foster=seed.f1, group_id='G1', animal_ids=['A1', 'XA2'])

    with pytest.raises(ValidationError) as excinfo:
        ctx.unassign_group('G1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)

    assert excinfo.value.details['missing_animal_ids'] == ['XA2']
    assert _reload(db, AnimalGroup, 'G1').current_foster_id == 'F1'
    assert _reload(db, Animal, 'A1').current_foster_id == 'F1'
    assert _reload(db, Animal, 'XA2').group_id == 'XG1'


def test_unassign_group_not_assigned(ctx, seed):
    members = [seed.animal('One', animal_id='A1')]
    seed.group('Solo', members=members, group_id='G1')

    with pytest.raises(NotAssignedError):
        ctx.unassign_group('G1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)


def test_unassign_empty_group_is_allowed(ctx, seed, db):
    seed.group('Empty', group_id='G1', foster=seed.f2)

    result = ctx.unassign_group('G1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)

    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None
    assert result.affected_animal_ids == ()


def test_unassign_group_failure_on_group_row_keeps_group_assigned(ctx, seed, db, monkeypatch):
    members = [seed.animal('One', animal_id='A1'), seed.animal('Two', animal_id='A2')]
    seed.group('Pair', members=members, group_id='G1', foster=seed.f1)

    real_commit = assignment_manager.commit

    def fail_group_step(step):
        if step == 'group':
            db.session.rollback()
            raise NetworkError("Could not confirm 'group' with the database", details={'step': step})
        real_commit(step)

    monkeypatch.setattr(assignment_manager, 'commit', fail_group_step)

    with pytest.raises(PartialCompletionError) as excinfo:
        ctx.unassign_group('G1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)

    assert excinfo.value.completed_steps == ['members']
    assert excinfo.value.failed_step == 'group'
    assert _reload(db, AnimalGroup, 'G1').current_foster_id == 'F1'
    assert _reload(db, Animal, 'A1').current_foster_id is None

    monkeypatch.undo()
    ctx.unassign_group('G1', AnimalStatus.IN_SHELTER, FosterVisibility.AVAILABLE_NOW)
    assert _reload(db, AnimalGroup, 'G1').current_foster_id is None

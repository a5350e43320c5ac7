"""
Assignment routes

Coordinator endpoints for placing animals and groups with fosters and
taking them back.
"""

from flask import jsonify, request
from flask_login import current_user, login_required
from foster_app.business.fostering.context import FosterContext
from foster_app.business.fostering.errors import ValidationError
from foster_app.presentation.routes.fostering import coordinator_required, fostering_bp
from foster_app.utils.logger import get_logger

logger = get_logger("foster_app.presentation.routes.fostering.assignments")


def _payload():
    return request.get_json(silent=True) or {}


def _required(data, key):
    value = data.get(key)
    if not value or not isinstance(value, str):
        raise ValidationError(f"Missing required field '{key}'", details={'field': key})
    return value


@fostering_bp.route('/animals/<animal_id>/assign', methods=['POST'])
@login_required
@coordinator_required
def assign_animal(animal_id):
    data = _payload()
    foster_id = _required(data, 'foster_id')
    logger.info(f"Assign animal {animal_id} to {foster_id} requested by {current_user.id}")

    result = FosterContext.for_profile(current_user).assign_animal(animal_id, foster_id, data.get('message'))
    return jsonify(result.to_dict())


@fostering_bp.route('/groups/<group_id>/assign', methods=['POST'])
@login_required
@coordinator_required
def assign_group(group_id):
    data = _payload()
    foster_id = _required(data, 'foster_id')
    logger.info(f"Assign group {group_id} to {foster_id} requested by {current_user.id}")

    result = FosterContext.for_profile(current_user).assign_group(group_id, foster_id, data.get('message'))
    return jsonify(result.to_dict())


@fostering_bp.route('/animals/<animal_id>/unassign', methods=['POST'])
@login_required
@coordinator_required
def unassign_animal(animal_id):
    data = _payload()
    result = FosterContext.for_profile(current_user).unassign_animal(
        animal_id,
        _required(data, 'status'),
        _required(data, 'foster_visibility'),
        data.get('message'),
    )
    return jsonify(result.to_dict())


@fostering_bp.route('/groups/<group_id>/unassign', methods=['POST'])
@login_required
@coordinator_required
def unassign_group(group_id):
    data = _payload()
    result = FosterContext.for_profile(current_user).unassign_group(
        group_id,
        _required(data, 'status'),
        _required(data, 'foster_visibility'),
        data.get('message'),
    )
    return jsonify(result.to_dict())

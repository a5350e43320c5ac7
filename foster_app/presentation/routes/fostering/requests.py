"""
Foster request routes

The requester is always the logged-in profile, and only they can cancel.
"""

from flask import jsonify, request
from flask_login import current_user, login_required
from foster_app.business.fostering.context import FosterContext
from foster_app.business.fostering.targets import RequestTarget
from foster_app.presentation.routes.fostering import fostering_bp
from foster_app.utils.logger import get_logger

logger = get_logger("foster_app.presentation.routes.fostering.requests")


@fostering_bp.route('/requests', methods=['POST'])
@login_required
def create_request():
    data = request.get_json(silent=True) or {}
    target = RequestTarget(animal_id=data.get('animal_id'), group_id=data.get('group_id'))
    logger.info(f"Foster request for {target.kind} {target.target_id} submitted by {current_user.id}")

    result = FosterContext.for_profile(current_user).create_request(target, current_user.id, data.get('message'))
    return jsonify(result.to_dict()), 201


@fostering_bp.route('/requests/<request_id>/cancel', methods=['POST'])
@login_required
def cancel_request(request_id):
    data = request.get_json(silent=True) or {}
    result = FosterContext.for_profile(current_user).cancel_request(request_id, data.get('message'))
    return jsonify(result.to_dict())

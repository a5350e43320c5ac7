from flask import jsonify, request
from flask_login import current_user, login_required
from foster_app.business.fostering.context import FosterContext
from foster_app.presentation.routes.fostering import fostering_bp


@fostering_bp.route('/animals/<animal_id>/conflict')
@login_required
def check_group_conflict(animal_id):
    """Whether assigning the animal to foster_id would split its group"""
    candidate = request.args.get('foster_id', type=str)
    check = FosterContext.for_profile(current_user).check_group_conflict(animal_id, candidate)
    return jsonify(check.to_dict())


@fostering_bp.route('/visibility/<status>')
@login_required
def visibility_for(status):
    return jsonify({'status': status, 'foster_visibility': FosterContext.visibility_for(status)})

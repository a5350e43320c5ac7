from functools import wraps
from flask import Blueprint, jsonify
from flask_login import current_user
from foster_app.business.fostering.errors import (
    AlreadyAssignedError,
    AlreadyPendingError,
    FosterDomainError,
    GroupMembershipError,
    NetworkError,
    NotAssignedError,
    NotAuthorizedError,
    NotFoundError,
    PartialCompletionError,
    StoreError,
    ValidationError,
)
from foster_app.utils.logger import get_logger

logger = get_logger("foster_app.presentation.routes.fostering")

fostering_bp = Blueprint('fostering', __name__)

# Most specific class wins; see _status_for
ERROR_STATUS = {
    ValidationError: 400,
    NotAuthorizedError: 403,
    NotFoundError: 404,
    GroupMembershipError: 409,
    AlreadyPendingError: 409,
    AlreadyAssignedError: 409,
    NotAssignedError: 409,
    PartialCompletionError: 500,
    StoreError: 500,
    NetworkError: 503,
}


def _status_for(error: FosterDomainError) -> int:
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 400


@fostering_bp.errorhandler(FosterDomainError)
def handle_domain_error(error):
    status = _status_for(error)
    if status >= 500:
        logger.error(f"{type(error).__name__}: {error.message} | details={error.details}")
    else:
        logger.info(f"Rejected fostering operation: {type(error).__name__}: {error.message}")
    return jsonify(error.to_dict()), status


def coordinator_required(view):
    """Reject non-coordinators with 403. Apply after login_required."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_coordinator:
            logger.warning(f"Profile {current_user.id} attempted coordinator action {view.__name__}")
            return jsonify({
                'error': 'Forbidden',
                'message': 'Only coordinators can change foster assignments',
                'details': {},
            }), 403
        return view(*args, **kwargs)
    return wrapped


# Import all route modules
from . import (  # noqa: E402,F401
    assignments,
    requests,
    queries,
)

"""
Store boundary helpers

Every engine write is its own commit. Transport failures surface as
NetworkError so callers can tell "could not reach the store" apart from
"row does not exist". Any other database failure surfaces as StoreError.
"""

from contextlib import contextmanager
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from foster_app import db
from foster_app.business.fostering.errors import NetworkError, StoreError
from foster_app.utils.logger import get_logger

logger = get_logger("foster_app.business.fostering.store")


def _is_transport_failure(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@contextmanager
def store_call(step: str):
    """
    Run store work for one named step.

    The session is rolled back on any SQLAlchemy failure. Transport
    failures are re-raised as NetworkError, everything else as StoreError.
    Both carry the step name in details.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        if _is_transport_failure(exc):
            logger.error(f"Store unreachable during step '{step}': {exc}")
            raise NetworkError(
                f"Could not confirm '{step}' with the database",
                details={'step': step},
            ) from exc
        logger.error(f"Store error during step '{step}': {exc}")
        raise StoreError(
            f"The database rejected '{step}'",
            details={'step': step, 'reason': type(exc).__name__},
        ) from exc


def commit(step: str) -> None:
    with store_call(step):
        db.session.commit()

# evoting/database/storage.py

# Translates driver failures into StorageError so callers never see SQLAlchemy types.

import logging
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError

from evoting import db
from evoting.errors import StorageError, VotingError

logger = logging.getLogger(__name__)


def is_retryable(exc):
    """Timeouts, dropped connections and lock waits may succeed on a manual retry."""
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@contextmanager
def storage_guard(operation, raise_integrity=False):
    """Run a unit of database work, rolling back and wrapping any driver error.

    With ``raise_integrity`` an IntegrityError is re-raised untouched so the
    caller can map a constraint violation onto a domain error.
    """
    try:
        yield db.session
    except IntegrityError as e:
        db.session.rollback()
        if raise_integrity:
            raise
        logger.error("Constraint violation during %s: %s", operation, e)
        raise StorageError("The record violates a database constraint.") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Storage failure during %s: %s", operation, e)
        raise StorageError(retryable=is_retryable(e)) from e
    except VotingError:
        db.session.rollback()
        raise


def ping():
    """Issue a trivial statement; used by the readiness probe."""
    with storage_guard('ping') as session:
        session.execute(text('SELECT 1'))
    return True

"""
Classification of raw SQLAlchemy/DBAPI errors raised inside a booking transaction.

Only the booking coordinator calls these; repositories let store errors propagate.
"""

from sqlalchemy import exc as sa_exc


# PostgreSQL SQLSTATE codes that are safe to retry from scratch
TRANSIENT_SQLSTATES = frozenset(
    {
        '40001',  # serialization_failure
        '40P01',  # deadlock_detected
        '55P03',  # lock_not_available (lock_timeout)
        '57014',  # query_canceled (statement_timeout)
    }
)


UNIQUE_VIOLATION_SQLSTATE = '23505'
FOREIGN_KEY_VIOLATION_SQLSTATE = '23503'


def _sqlstate(error: sa_exc.DBAPIError) -> str | None:
    orig = error.orig
    return getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)


def is_unique_violation(error: BaseException) -> bool:
    """Duplicate key only; foreign key and NOT NULL violations are not seat conflicts"""
    if not isinstance(error, sa_exc.IntegrityError):
        return False
    if (sqlstate := _sqlstate(error)) is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    # SQLite: 'UNIQUE constraint failed: booked_seat.seat_id'
    return 'unique constraint' in str(error.orig).lower()


def is_foreign_key_violation(error: BaseException) -> bool:
    """A written row references a user, movie or seat that does not exist"""
    if not isinstance(error, sa_exc.IntegrityError):
        return False
    if (sqlstate := _sqlstate(error)) is not None:
        return sqlstate == FOREIGN_KEY_VIOLATION_SQLSTATE
    # SQLite: 'FOREIGN KEY constraint failed'
    return 'foreign key constraint' in str(error.orig).lower()


def is_transient_store_error(error: BaseException) -> bool:
    # Pool exhausted: no connection within DB_POOL_TIMEOUT
    if isinstance(error, sa_exc.TimeoutError):
        return True
    if not isinstance(error, sa_exc.DBAPIError):
        return False
    if error.connection_invalidated:
        return True
    if _sqlstate(error) in TRANSIENT_SQLSTATES:
        return True
    # Dropped connections, SQLite "database is locked"
    return isinstance(error, sa_exc.OperationalError)

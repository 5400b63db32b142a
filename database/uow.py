import contextlib
import logging

from database.repositories import VehicleRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def vehicle_uow(session_factory=None):
    """Per-unit-of-work transaction scope.

    Yields a VehicleRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with vehicle_uow() as repo:
            repo.bulk_upsert(vehicles)
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        from database.database import SessionLocal
        session_factory = SessionLocal

    session = session_factory()
    try:
        repo = VehicleRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

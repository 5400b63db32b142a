from sqlalchemy.orm import Session


class BaseRepository:
    """Session-bound repository; transaction boundaries stay with the caller."""

    def __init__(self, db: Session):
        self.db = db

    def flush(self) -> None:
        """Send pending changes so constraint violations surface at the call site."""
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

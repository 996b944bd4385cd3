import logging
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class UnitOfWork:
    """One request-scoped transaction over a SQLAlchemy session.

    Used as a context manager: the block commits when it exits normally and
    rolls back when anything raises, so callers never persist half of an
    operation::

        with UnitOfWork(db) as uow:
            ...
            # commit happens on exit

    The session is owned by the request (see ``get_db``) and is never shared
    between concurrent operations.
    """

    def __init__(self, session: Session):
        self.session = session

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            logger.warning(f"Rolling back transaction after {exc_type.__name__}: {exc}")
            self.rollback()
        # Never swallow the exception
        return False

    def commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def rollback(self):
        self.session.rollback()

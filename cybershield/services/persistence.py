"""Datastore guards turning SQLAlchemy errors into generic server errors."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cybershield.utils.errors import PersistenceFailure

logger = logging.getLogger(__name__)


def commit_or_fail(db: Session, *, action: str, message: str | None = None) -> None:
    """Commit the unit of work; on failure roll back, log and raise ``PersistenceFailure``."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Persistence failure", extra={"action": action})
        raise PersistenceFailure(message) from exc


@contextmanager
def read_or_fail(db: Session, *, action: str) -> Iterator[None]:
    """Same contract as ``commit_or_fail`` for queries: driver errors never reach the client."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Read failure", extra={"action": action})
        raise PersistenceFailure() from exc


__all__ = ["commit_or_fail", "read_or_fail"]

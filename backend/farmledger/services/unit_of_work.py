import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from farmledger.core.exceptions import (
    DuplicateEntityException,
    FarmLedgerException,
    PersistenceException,
)

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(db: Session, action: str) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except FarmLedgerException:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Integrity error while trying to %s", action, extra={"action": action, "error": str(exc.orig)})
        raise DuplicateEntityException(f"Failed to {action}: conflicts with existing records") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database error while trying to %s", action, extra={"action": action})
        raise PersistenceException(f"Failed to {action}") from exc

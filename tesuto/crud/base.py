from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session
import logging

from ..exceptions import StoreError, ConstraintError

logger = logging.getLogger(__name__)


def commit(session: Session) -> None:
    """Фиксирует транзакцию, переводя ошибки SQLAlchemy в ошибки хранилища"""
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning(f"Constraint violation: {e.orig}")
        raise ConstraintError("Operation violates a data constraint", details={"reason": str(e.orig)})
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Store failure on commit: {e}")
        raise StoreError("Database operation failed")

"""
Context manager for handling database sessions and exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from greyn_cart.infrastructure.database.operations import DatabaseManager

logger = logging.getLogger(__name__)


@contextmanager
def managed_session(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    """
    Context manager for handling database sessions, including commits, rollbacks,
    and exception logging.

    Yields:
        Session: The SQLAlchemy session object.

    Raises:
        SQLAlchemyError: If a database-related error occurs.
    """
    session = db_manager.get_session()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error("DATABASE ERROR: %s", e)
        session.rollback()
        raise
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

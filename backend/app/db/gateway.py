"""
Persistence Gateway.

Thin wrapper over AsyncSession that executes statements and commits,
translating SQLAlchemy failures into application exceptions.
"""

import re
import logging
from typing import Any

from sqlalchemy.exc import DBAPIError, InterfaceError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import PersistenceError, StoreUnavailableError

logger = logging.getLogger("creche_billing")

# user:password@ inside connection URLs
_CREDENTIALS_RE = re.compile(r"//[^/@\s]+@")


def _scrub(message: str) -> str:
    return _CREDENTIALS_RE.sub("//***@", message)


def translate_error(exc: BaseException) -> PersistenceError:
    """Map a driver/ORM failure onto PersistenceError or StoreUnavailableError."""
    message = _scrub(str(getattr(exc, "orig", None) or exc))
    if isinstance(exc, (InterfaceError, OSError)):
        return StoreUnavailableError(details={"reason": message})
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreUnavailableError(details={"reason": message})
    return PersistenceError(message=f"Database statement failed: {message}")


async def execute(db: AsyncSession, statement: Any):
    """Execute a statement, returning the SQLAlchemy result."""
    try:
        return await db.execute(statement)
    except (SQLAlchemyError, OSError) as exc:
        await rollback(db)
        raise translate_error(exc) from exc


async def commit(db: AsyncSession) -> None:
    """Commit the current transaction."""
    try:
        await db.commit()
    except (SQLAlchemyError, OSError) as exc:
        await rollback(db)
        raise translate_error(exc) from exc


async def rollback(db: AsyncSession) -> None:
    """Roll back the current transaction; a failed rollback is logged, not raised."""
    try:
        await db.rollback()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Rollback failed: %s", _scrub(str(exc)))

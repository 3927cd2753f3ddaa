"""Transaction Scope: one public service operation == one database transaction.

Invariants:
    - Body succeeds -> commit; body raises -> rollback, exception re-raised unchanged
    - IntegrityError (unique/FK/check violation) surfaces as ConflictError
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.core.errors import ConflictError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str) -> AsyncGenerator[AsyncSession, None]:
    """Run the body as a single transaction on `db`."""
    try:
        yield db
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"{operation}: integrity violation: {e.orig}")
        raise ConflictError(f"{operation} conflicts with existing data") from e
    except Exception:
        await db.rollback()
        raise

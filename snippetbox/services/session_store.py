"""
Snippetbox — Session Store (Data Access)
=========================================

What:  Persists session data in the `sessions` table.
How:   Values are stored as a JSON document per token. Lookups ignore rows
       whose expiry has passed; `delete_expired()` removes them.
Who:   Used only by SessionManager.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.exceptions import DatabaseError
from snippetbox.models.session import SessionRecord

logger = logging.getLogger(__name__)


class SessionStore:
    """SQL-backed session storage keyed by the raw session token."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Session values for `token`, or None when the token is unknown or its
        session has expired.
        """
        query = select(SessionRecord.data).where(
            SessionRecord.token == token,
            SessionRecord.expiry > datetime.now(timezone.utc),
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(query)
                data = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading session: %s", str(e))
            raise DatabaseError(message="Could not load the session.") from e

        if data is None:
            return None
        return json.loads(data)

    async def commit(self, token: str, values: Dict[str, Any], expiry: datetime) -> None:
        """Insert or replace the session row for `token`."""
        record = SessionRecord(token=token, data=json.dumps(values), expiry=expiry)
        try:
            async with self._session_factory() as db:
                await db.merge(record)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error saving session: %s", str(e))
            raise DatabaseError(message="Could not save the session.") from e

    async def delete(self, token: str) -> None:
        try:
            async with self._session_factory() as db:
                await db.execute(delete(SessionRecord).where(SessionRecord.token == token))
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting session: %s", str(e))
            raise DatabaseError(message="Could not delete the session.") from e

    async def delete_expired(self) -> int:
        """
        Remove every expired session row.

        Returns:
            Number of rows deleted.
        """
        stmt = delete(SessionRecord).where(SessionRecord.expiry <= datetime.now(timezone.utc))
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error pruning sessions: %s", str(e))
            raise DatabaseError(message="Could not prune expired sessions.") from e
        return result.rowcount or 0

"""
Snippetbox — User Service (Data Access)
========================================

What:  Existence check for user accounts.
Who:   The authentication-context stage, which confirms that the user id
       stored in a session still refers to a row.
"""

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.exceptions import DatabaseError
from snippetbox.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """Data-access object for the `users` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def exists(self, user_id: int) -> bool:
        """
        True if a user with this id exists.

        Raises:
            DatabaseError: Query execution failed
        """
        try:
            async with self._session_factory() as db:
                result = await db.execute(select(exists().where(User.id == user_id)))
                return bool(result.scalar())
        except SQLAlchemyError as e:
            logger.error("Database error checking user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not check the user account.",
                context={"user_id": user_id},
            ) from e

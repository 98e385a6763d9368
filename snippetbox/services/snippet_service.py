"""
Snippetbox — Snippet Service (Data Access)
===========================================

What:  Inserts snippets and reads the ones that have not yet expired.
How:   Opens one AsyncSession per call from the shared session factory,
       computes UTC timestamps in Python and converts rows into
       `SnippetRead` schemas.
Who:   Called by the snippet route handlers.

Error Handling Strategy:
    SQLAlchemy errors are wrapped in DatabaseError (details go to the log and
    the exception context, never to the client). A lookup that matches no
    visible row raises NotFoundError so handlers can answer 404 instead of 500.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.exceptions import DatabaseError, NotFoundError
from snippetbox.models.snippet import Snippet
from snippetbox.schemas.snippet import SnippetRead

logger = logging.getLogger(__name__)

# Number of snippets shown on the home page
LATEST_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnippetService:
    """
    Data-access object for the `snippets` table.

    Responsibilities:
        - insert(): store a new snippet, return its id
        - get(): one non-expired snippet by id
        - latest(): up to 10 non-expired snippets, newest id first
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, title: str, content: str, expires: int) -> int:
        """
        Store a snippet that expires `expires` days from now.

        Args:
            title: Snippet title
            content: Snippet body
            expires: Lifetime in days

        Returns:
            The id assigned by the database.

        Raises:
            DatabaseError: The insert failed
        """
        now = _utcnow()
        snippet = Snippet(
            title=title,
            content=content,
            created=now,
            expires=now + timedelta(days=expires),
        )
        try:
            async with self._session_factory() as db:
                db.add(snippet)
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error inserting snippet: %s", str(e))
            raise DatabaseError(
                message="Could not store the snippet.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Snippet %d created (expires in %d days)", snippet.id, expires)
        return snippet.id

    async def get(self, snippet_id: int) -> SnippetRead:
        """
        Retrieve a single snippet that has not expired.

        Raises:
            NotFoundError: No visible snippet has this id
            DatabaseError: Query execution failed
        """
        query = select(Snippet).where(
            Snippet.expires > _utcnow(),
            Snippet.id == snippet_id,
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(query)
                snippet = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the snippet.",
                context={"snippet_id": snippet_id},
            ) from e

        if snippet is None:
            raise NotFoundError(resource="snippet", resource_id=snippet_id)

        return SnippetRead.model_validate(snippet)

    async def latest(self) -> List[SnippetRead]:
        """
        The most recently created snippets that have not expired.

        Query plan:
            SELECT ... WHERE expires > :now ORDER BY id DESC LIMIT 10
        """
        query = (
            select(Snippet)
            .where(Snippet.expires > _utcnow())
            .order_by(desc(Snippet.id))
            .limit(LATEST_LIMIT)
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(query)
                snippets = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing snippets: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve snippets.",
                context={"error_type": type(e).__name__},
            ) from e

        return [SnippetRead.model_validate(s) for s in snippets]

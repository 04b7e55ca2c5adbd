"""
Snippetbox — Snippet Store (Persistence)
=========================================

What:  Async SQLAlchemy implementation of the snippet persistence contract:
       insert, get, latest, delete, get_ids.
How:   Every call runs in its own transaction obtained from the injected
       session factory (commit on success, rollback on error).
Who:   Held by the Application container; called by the snippet flows.

Error Handling Strategy:
    Missing (or expired) rows raise NoRecordError. Any SQLAlchemy failure is
    logged with context and re-raised as DatabaseError, which the flows turn
    into an opaque 500.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.database import MAX_ID, transaction
from snippetbox.exceptions import DatabaseError, NoRecordError
from snippetbox.models.snippet import Snippet
from snippetbox.schemas.snippet import SnippetRecord

logger = logging.getLogger(__name__)

LATEST_LIMIT = 10


def _check_id(snippet_id: int) -> None:
    # Ids outside the column range cannot exist and would overflow the driver
    if not 1 <= snippet_id <= MAX_ID:
        raise NoRecordError(resource="snippet", resource_id=snippet_id)


class SnippetStore:
    """Snippet persistence backed by an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, title: str, content: str, expires: int) -> int:
        """
        Store a new snippet that stays visible for `expires` days.

        Returns:
            The new snippet's id.
        """
        now = datetime.now(timezone.utc)
        try:
            async with transaction(self._session_factory) as db:
                snippet = Snippet(
                    title=title,
                    content=content,
                    created=now,
                    expires=now + timedelta(days=expires),
                )
                db.add(snippet)
                await db.flush()  # assigns the autoincrement id
                snippet_id = snippet.id
        except SQLAlchemyError as e:
            logger.error("Database error inserting snippet: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the snippet.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Snippet %d created (expires in %d days)", snippet_id, expires)
        return snippet_id

    async def get(self, snippet_id: int) -> SnippetRecord:
        """
        Fetch one unexpired snippet.

        Raises:
            NoRecordError: no such id, or the snippet has expired
            DatabaseError: query execution failed
        """
        _check_id(snippet_id)
        now = datetime.now(timezone.utc)
        try:
            async with transaction(self._session_factory) as db:
                result = await db.execute(
                    select(Snippet).where(Snippet.id == snippet_id, Snippet.expires > now)
                )
                snippet = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the snippet.",
                context={"snippet_id": snippet_id},
            ) from e

        if snippet is None:
            raise NoRecordError(resource="snippet", resource_id=snippet_id)
        return SnippetRecord.model_validate(snippet)

    async def latest(self, limit: int = LATEST_LIMIT) -> List[SnippetRecord]:
        """The `limit` most recently created snippets that have not expired."""
        now = datetime.now(timezone.utc)
        try:
            async with transaction(self._session_factory) as db:
                result = await db.execute(
                    select(Snippet)
                    .where(Snippet.expires > now)
                    .order_by(Snippet.id.desc())
                    .limit(limit)
                )
                snippets = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing snippets: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve snippets.",
                context={"error_type": type(e).__name__},
            ) from e

        return [SnippetRecord.model_validate(s) for s in snippets]

    async def delete(self, snippet_id: int) -> None:
        """
        Remove a snippet permanently.

        Raises:
            NoRecordError: nothing was deleted
        """
        _check_id(snippet_id)
        try:
            async with transaction(self._session_factory) as db:
                result = await db.execute(delete(Snippet).where(Snippet.id == snippet_id))
                deleted = result.rowcount
        except SQLAlchemyError as e:
            logger.error("Database error deleting snippet %s: %s", snippet_id, str(e))
            raise DatabaseError(
                message="Could not delete the snippet.",
                context={"snippet_id": snippet_id},
            ) from e

        if not deleted:
            raise NoRecordError(resource="snippet", resource_id=snippet_id)
        logger.info("Snippet %d deleted", snippet_id)

    async def get_ids(self) -> List[int]:
        """Ids of every stored snippet, ascending; feeds the delete page."""
        try:
            async with transaction(self._session_factory) as db:
                result = await db.execute(select(Snippet.id).order_by(Snippet.id))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing snippet ids: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve snippet ids.",
                context={"error_type": type(e).__name__},
            ) from e

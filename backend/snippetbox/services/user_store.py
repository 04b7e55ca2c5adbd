"""
Snippetbox — User Store (Persistence)
======================================

What:  Async SQLAlchemy implementation of the user persistence contract:
       insert (signup), authenticate (login), exists.
How:   Passwords are hashed with bcrypt off the event loop
       (`asyncio.to_thread`); each call runs in its own transaction.

Domain errors:
    insert        → DuplicateEmailError when users_uc_email is violated
    authenticate  → InvalidCredentialsError for an unknown email AND for a
                    wrong password (one undifferentiated error). An unknown
                    email is still checked against a placeholder hash, so
                    both failures take one bcrypt verification.
"""

import asyncio
import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.database import transaction
from snippetbox.exceptions import (
    DatabaseError,
    DuplicateEmailError,
    InvalidCredentialsError,
)
from snippetbox.models.user import User

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))


class UserStore:
    """User persistence backed by an async session factory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        bcrypt_rounds: int = 12,
    ):
        self._session_factory = session_factory
        self._bcrypt_rounds = bcrypt_rounds
        # Checked against on unknown emails so both failure paths pay the hash cost
        self._dummy_hash = hash_password("snippetbox-unknown-user", bcrypt_rounds)

    async def insert(self, name: str, email: str, password: str) -> None:
        """
        Create a user account.

        Raises:
            DuplicateEmailError: the email address is already registered
            DatabaseError: any other database failure
        """
        hashed = await asyncio.to_thread(hash_password, password, self._bcrypt_rounds)
        try:
            async with transaction(self._session_factory) as db:
                db.add(User(name=name, email=email, hashed_password=hashed))
                await db.flush()
        except IntegrityError as e:
            if "users_uc_email" in str(e.orig) or "users.email" in str(e.orig):
                raise DuplicateEmailError(email=email) from e
            logger.error("Integrity error inserting user: %s", str(e))
            raise DatabaseError(
                message="Could not create the account.",
                context={"error_type": type(e).__name__},
            ) from e
        except SQLAlchemyError as e:
            logger.error("Database error inserting user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the account.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("User account created")

    async def authenticate(self, email: str, password: str) -> int:
        """
        Check credentials and return the matching user id.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
        """
        try:
            async with transaction(self._session_factory) as db:
                result = await db.execute(
                    select(User.id, User.hashed_password).where(User.email == email)
                )
                row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error authenticating user: %s", str(e))
            raise DatabaseError(
                message="Could not verify credentials.",
                context={"error_type": type(e).__name__},
            ) from e

        if row is None:
            await asyncio.to_thread(verify_password, password, self._dummy_hash)
            raise InvalidCredentialsError()

        user_id, hashed = row
        if not await asyncio.to_thread(verify_password, password, hashed):
            raise InvalidCredentialsError()
        return user_id

    async def exists(self, user_id: int) -> bool:
        try:
            async with transaction(self._session_factory) as db:
                result = await db.execute(select(User.id).where(User.id == user_id))
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not look up the user.",
                context={"user_id": user_id},
            ) from e

"""
Credential store — the only code that reads or writes ``users`` rows.

Uniqueness of ``username`` and ``email`` is enforced by the table's unique
constraints; the pre-insert lookup only exists to give a friendly error on
the common path.  A concurrent signup that slips past the lookup still
hits the constraint and surfaces as ``ConflictError``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import User
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.validators import validate_profile_fields

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Username or email already exists"


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class UserStore:
    """Async CRUD over ``User`` with validation on every write."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ── Reads ──────────────────────────────────────────────────────────

    async def find_by_username_or_email(
        self, username: Optional[str], email: Optional[str],
    ) -> Optional[User]:
        """Return any record matching *username* or *email* (signup conflicts)."""
        clauses = []
        if username:
            clauses.append(User.username == username.strip())
        if email:
            clauses.append(User.email == email.strip().lower())
        if not clauses:
            return None
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(or_(*clauses)).limit(1))
            return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.username == username)
            )
            return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        uid = _to_uuid(user_id)
        if uid is None:
            return None
        async with self._session_factory() as session:
            return await session.get(User, uid)

    # ── Writes ─────────────────────────────────────────────────────────

    async def create(self, fields: Dict[str, Any]) -> User:
        """
        Insert a new user.

        *fields* must carry ``username``, ``password_hash``, ``email``,
        ``dob`` and optionally ``phone``.  Raises ``ValidationError`` for
        bad fields and ``ConflictError`` for a taken username/email.
        """
        profile = validate_profile_fields(fields)
        password_hash = fields.get("password_hash")
        if not password_hash:
            raise ValidationError("Password is required")

        if await self.find_by_username_or_email(profile["username"], profile["email"]):
            raise ConflictError(CONFLICT_MESSAGE)

        user = User(id=uuid.uuid4(), password_hash=password_hash, **profile)
        async with self._session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError(CONFLICT_MESSAGE) from exc

        logger.info("Created user %s (%s)", user.username, user.id)
        return user

    async def update_by_id(self, user_id: str | uuid.UUID, fields: Dict[str, Any]) -> User:
        """
        Replace the profile fields of an existing user.

        The password hash is never touched here.  Raises ``NotFoundError``
        when no record has *user_id*.
        """
        profile = validate_profile_fields(fields)
        uid = _to_uuid(user_id)
        if uid is None:
            raise NotFoundError("User not found")

        async with self._session_factory() as session:
            user = await session.get(User, uid)
            if user is None:
                raise NotFoundError("User not found")

            clash = await session.execute(
                select(User.id).where(
                    or_(User.username == profile["username"], User.email == profile["email"]),
                    User.id != uid,
                ).limit(1)
            )
            if clash.scalar_one_or_none() is not None:
                raise ConflictError(CONFLICT_MESSAGE)

            for key, value in profile.items():
                setattr(user, key, value)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError(CONFLICT_MESSAGE) from exc

        logger.info("Updated profile of user %s", user.id)
        return user

    # ── Projection ─────────────────────────────────────────────────────

    @staticmethod
    def to_profile(user: User) -> Dict[str, Any]:
        """Public view of a user record; never includes the password hash."""
        return {
            "username": user.username,
            "email": user.email,
            "phone": user.phone,
            "dob": user.dob.isoformat() if user.dob else None,
        }

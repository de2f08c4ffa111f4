"""
Business logic for user accounts.

Accounts are created by registration and used only for login.  The
plaintext password is hashed before it reaches the database and is
never logged.  Login failures do not reveal whether the email exists.

Password hashing is deliberately slow and SQLite calls block, so both
run in the threadpool; the event loop keeps serving other requests
while a login is being checked.
"""

import logging
import sqlite3
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from ..core.db import get_connection
from ..core.exceptions import AuthenticationError, EmailAlreadyRegisteredError
from ..core.security import create_session_token, hash_password, verify_password
from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class UserService:
    """Сервис учётных записей: регистрация, вход и выдача токенов."""

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Register a new account.

        Raises ``EmailAlreadyRegisteredError`` if the email is taken;
        the existing account is left untouched.
        """
        logger.info("Registering user %s", data.email)
        hashed = await run_in_threadpool(hash_password, data.password)
        user_id = await run_in_threadpool(cls._insert_user, data.name, data.email, hashed)
        logger.info("Registered user %s with id %s", data.email, user_id)
        return UserRead(id=user_id, name=data.name, email=data.email)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the account if ``password`` matches, otherwise ``None``."""
        row = await run_in_threadpool(cls._fetch_by_email, email)
        if not row:
            return None
        if not await run_in_threadpool(verify_password, password, row["password"]):
            return None
        return UserRead(id=row["id"], name=row["name"] or "", email=row["email"])

    @classmethod
    async def login(cls, email: str, password: str) -> str:
        """Check credentials and issue a session token.

        Raises ``AuthenticationError`` with the same message whether the
        email is unknown or the password is wrong.
        """
        user = await cls.authenticate(email, password)
        if user is None:
            logger.info("Failed login for %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)
        logger.info("User %s logged in", user.id)
        return create_session_token(user.id)

    @staticmethod
    def _insert_user(name: str, email: str, hashed: str) -> int:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            existing = cursor.execute(
                "SELECT id FROM users WHERE email = ?", (email,)
            ).fetchone()
            if existing:
                raise EmailAlreadyRegisteredError(email)
            try:
                cursor.execute(
                    "INSERT INTO users (name, email, password) VALUES (?, ?, ?)",
                    (name, email, hashed),
                )
            except sqlite3.IntegrityError as exc:
                # A concurrent registration won the race for this email.
                raise EmailAlreadyRegisteredError(email) from exc
            conn.commit()
            return cursor.lastrowid
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _fetch_by_email(email: str) -> Optional[sqlite3.Row]:
        conn = get_connection()
        try:
            return conn.execute(
                "SELECT id, name, email, password FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        finally:
            conn.close()

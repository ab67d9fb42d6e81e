"""
Password hashing and login sessions.

Passwords are stored as ``"<hex scrypt hash>.<hex salt>"``. Logins
create an opaque token persisted in ``auth_sessions``; requests carry it
either in the session cookie or as a ``Bearer`` token.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from config import SESSION_COOKIE, SESSION_TTL_HOURS
from database import get_db
from models import AuthSession, User

logger = logging.getLogger(__name__)

SALT_BYTES = 16
KEY_LEN = 64


def hash_password(password: str, salt: Optional[str] = None) -> str:
    salt = salt or secrets.token_hex(SALT_BYTES)
    digest = hashlib.scrypt(password.encode(), salt=salt.encode(), n=16384, r=8, p=1, dklen=KEY_LEN)
    return f"{digest.hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    """Constant-time check of *supplied* against a stored hash."""
    try:
        hashed, salt = stored.split(".", 1)
    except ValueError:
        return False
    candidate = hash_password(supplied, salt).split(".", 1)[0]
    return hmac.compare_digest(bytes.fromhex(hashed), bytes.fromhex(candidate))


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


async def create_session(db: AsyncSession, user: User) -> str:
    now = datetime.now(timezone.utc)
    row = AuthSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(hours=SESSION_TTL_HOURS),
    )
    db.add(row)
    await db.commit()
    return row.token


async def end_session(db: AsyncSession, token: str):
    await db.execute(delete(AuthSession).where(AuthSession.token == token))
    await db.commit()


async def user_for_token(db: AsyncSession, token: str) -> Optional[User]:
    result = await db.execute(select(AuthSession).where(AuthSession.token == token))
    session = result.scalars().first()
    if session is None:
        return None
    if _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        await end_session(db, token)
        return None
    result = await db.execute(select(User).where(User.id == session.user_id))
    return result.scalars().first()


def token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(SESSION_COOKIE)


async def current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Dependency for protected routes: the logged-in user, or 401."""
    token = token_from_request(request)
    user = await user_for_token(db, token) if token else None
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user

"""Persistence helpers for users, designs and editor preferences."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import RECENT_DESIGNS_LIMIT
from models import Design, User, UserPreferences

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc)


def _furniture_json(furniture) -> str:
    """Serialize a furniture list (dicts or pydantic items) for storage."""
    items = []
    for item in furniture or []:
        if hasattr(item, "model_dump"):
            item = item.model_dump(mode="json")
        else:
            item = {**item, "id": str(item["id"])}
        items.append(item)
    return json.dumps(items)


# ---------- Users ----------

async def create_user(db: AsyncSession, data: dict) -> User:
    row = User(
        username=data["username"],
        password=data["password"],
        email=data.get("email"),
        full_name=data.get("full_name"),
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info(f"Registered user {row.username} ({row.id})")
    return row


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id).limit(1))
    return result.scalars().first()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username).limit(1))
    return result.scalars().first()


async def update_user(db: AsyncSession, user: User, data: dict) -> User:
    """Apply non-null profile fields (username, email, full_name)."""
    for key in ("username", "email", "full_name"):
        if data.get(key) is not None:
            setattr(user, key, data[key])
    user.updated_at = _now()
    await db.commit()
    await db.refresh(user)
    return user


async def update_user_password(db: AsyncSession, user: User, password_hash: str):
    user.password = password_hash
    user.updated_at = _now()
    await db.commit()


# ---------- Designs ----------

async def create_design(db: AsyncSession, user_id: int, data: dict) -> Design:
    row = Design(
        user_id=user_id,
        name=data["name"],
        description=data.get("description"),
        room_width=int(data["room_width"]),
        room_length=int(data["room_length"]),
        room_height=int(data["room_height"]),
        wall_color=data["wall_color"],
        furniture=_furniture_json(data.get("furniture")),
    )
    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info(f"Created design {row.id} '{row.name}' for user {user_id}")
    return row


async def get_design_by_id(db: AsyncSession, design_id: int) -> Optional[Design]:
    result = await db.execute(select(Design).where(Design.id == design_id).limit(1))
    return result.scalars().first()


async def get_designs_by_user(db: AsyncSession, user_id: int) -> list:
    """All designs of a user, most recently updated first."""
    result = await db.execute(
        select(Design)
        .where(Design.user_id == user_id)
        .order_by(Design.updated_at.desc(), Design.id.desc())
    )
    return list(result.scalars().all())


async def get_recent_designs_by_user(db: AsyncSession, user_id: int,
                                     limit: int = RECENT_DESIGNS_LIMIT) -> list:
    result = await db.execute(
        select(Design)
        .where(Design.user_id == user_id)
        .order_by(Design.updated_at.desc(), Design.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def update_design(db: AsyncSession, design: Design, data: dict) -> Design:
    """
    Apply a partial update. Only keys present in *data* change; the
    owner cannot be reassigned and ``updated_at`` is always refreshed.
    """
    for key, value in data.items():
        if key in ("id", "user_id", "created_at", "updated_at"):
            continue
        if key == "furniture":
            value = _furniture_json(value)
        setattr(design, key, value)
    design.updated_at = _now()
    await db.commit()
    await db.refresh(design)
    logger.info(f"Updated design {design.id} ({', '.join(sorted(data)) or 'touch'})")
    return design


async def delete_design(db: AsyncSession, design: Design):
    await db.delete(design)
    await db.commit()
    logger.info(f"Deleted design {design.id}")


# ---------- Preferences ----------

async def get_user_preferences(db: AsyncSession, user_id: int) -> Optional[UserPreferences]:
    result = await db.execute(
        select(UserPreferences).where(UserPreferences.user_id == user_id).limit(1)
    )
    return result.scalars().first()


async def save_user_preferences(db: AsyncSession, user_id: int, data: dict) -> UserPreferences:
    """Create the user's preferences row, or update it if one exists."""
    row = await get_user_preferences(db, user_id)
    if row is None:
        row = UserPreferences(user_id=user_id, **data)
        db.add(row)
    else:
        for key, value in data.items():
            setattr(row, key, value)
        row.updated_at = _now()
    await db.commit()
    await db.refresh(row)
    return row

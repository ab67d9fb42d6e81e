"""Editor preferences routes: one row per user, saved by upsert."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import User
from schemas import PreferencesIn, PreferencesOut
from services.auth import current_user
from services.designs import get_user_preferences, save_user_preferences

router = APIRouter(prefix="/api", tags=["preferences"])


@router.post("/user-preferences", response_model=PreferencesOut)
async def post_preferences(req: PreferencesIn, db: AsyncSession = Depends(get_db),
                           user: User = Depends(current_user)):
    """Create or replace the caller's editor preferences."""
    return await save_user_preferences(db, user.id, req.model_dump())


@router.get("/user-preferences", response_model=Optional[PreferencesOut])
async def get_preferences(db: AsyncSession = Depends(get_db), user: User = Depends(current_user)):
    """The caller's preferences, or ``null`` if none were saved yet."""
    return await get_user_preferences(db, user.id)

"""Pydantic schemas for API request/response validation."""

import json
from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime
from uuid import UUID


# ---------- Furniture ----------
class FurnitureItem(BaseModel):
    id: UUID
    type: str
    name: str
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    depth: float = Field(..., gt=0)
    color: str
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)
    rotation: float = Field(..., ge=0, le=359)


class CatalogItemOut(BaseModel):
    type: str
    name: str
    category: str
    default_width: float
    default_height: float
    default_depth: float
    default_color: str


class SizePresetOut(BaseModel):
    width: float
    height: float
    depth: float


# ---------- Design ----------
HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class DesignCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    room_width: int = Field(..., gt=0)
    room_length: int = Field(..., gt=0)
    room_height: int = Field(..., gt=0)
    wall_color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    furniture: list[FurnitureItem] = []


class DesignUpdate(BaseModel):
    """Partial update; any field left out is kept as stored."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    room_width: Optional[int] = Field(None, gt=0)
    room_length: Optional[int] = Field(None, gt=0)
    room_height: Optional[int] = Field(None, gt=0)
    wall_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    furniture: Optional[list[FurnitureItem]] = None

    @field_validator("name", "room_width", "room_length", "room_height", "wall_color", "furniture")
    @classmethod
    def _not_null(cls, value):
        # only description may be cleared; leave a field out to keep it
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class DesignOut(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str]
    room_width: int
    room_length: int
    room_height: int
    wall_color: str
    furniture: list[FurnitureItem] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("furniture", mode="before")
    @classmethod
    def _decode_furniture(cls, value):
        if isinstance(value, str):
            return json.loads(value or "[]")
        return value

    class Config:
        from_attributes = True


class LayoutCheckOut(BaseModel):
    design_id: int
    overlaps: list[tuple[str, str]] = []
    outside_room: list[str] = []
    coverage_ratio: float
    is_valid: bool


# ---------- Preferences ----------
class PreferencesIn(BaseModel):
    default_theme: Literal["system", "light", "dark"] = "system"
    enable_grid_snapping: bool = True
    enable_auto_save: bool = False
    default_room_width: str = Field("12", min_length=1)
    default_room_length: str = Field("15", min_length=1)
    default_room_height: str = Field("8", min_length=1)


class PreferencesOut(PreferencesIn):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ---------- Users ----------
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    email: Optional[str] = None
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3)
    email: Optional[str] = None
    full_name: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserOut(BaseModel):
    id: int
    username: str
    email: Optional[str]
    full_name: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    token: str
    user: UserOut

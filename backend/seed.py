"""
Seed the database with an admin account and two sample designs.

Safe to run repeatedly: existing users and designs are left alone.

    python seed.py
"""

import asyncio
import logging
import uuid

from database import async_session, init_db
from services.auth import hash_password
from services.designs import (
    create_design,
    create_user,
    get_designs_by_user,
    get_user_by_username,
    save_user_preferences,
)

logger = logging.getLogger(__name__)

ADMIN = {
    "username": "admin",
    "password": "password",
    "email": "admin@example.com",
    "full_name": "Admin User",
}

ADMIN_PREFERENCES = {
    "default_theme": "system",
    "enable_grid_snapping": True,
    "enable_auto_save": False,
    "default_room_width": "12",
    "default_room_length": "15",
    "default_room_height": "8",
}


def _item(type_, name, width, height, depth, color, x, y):
    return {
        "id": str(uuid.uuid4()), "type": type_, "name": name,
        "width": width, "height": height, "depth": depth,
        "color": color, "x": x, "y": y, "rotation": 0,
    }


def sample_designs() -> list:
    return [
        {
            "name": "Living Room Setup",
            "description": "Modern living room arrangement with sofa and coffee table",
            "room_width": 20, "room_length": 25, "room_height": 10,
            "wall_color": "#f5f5f5",
            "furniture": [
                _item("sofa", "Sofa", 20, 32, 35, "#3b82f6", 35, 70),
                _item("coffee_table", "Coffee Table", 12, 16, 8, "#6b7280", 50, 50),
            ],
        },
        {
            "name": "Home Office",
            "description": "Productivity-focused home office setup",
            "room_width": 15, "room_length": 15, "room_height": 8,
            "wall_color": "#e0e7ff",
            "furniture": [
                _item("desk", "Desk", 18, 30, 10, "#ec4899", 50, 30),
                _item("chair", "Office Chair", 10, 30, 10, "#10b981", 50, 45),
                _item("bookshelf", "Bookshelf", 15, 60, 8, "#f59e0b", 85, 50),
            ],
        },
    ]


async def seed():
    await init_db()
    async with async_session() as db:
        admin = await get_user_by_username(db, ADMIN["username"])
        if admin is None:
            admin = await create_user(db, {**ADMIN, "password": hash_password(ADMIN["password"])})
            await save_user_preferences(db, admin.id, ADMIN_PREFERENCES)
            logger.info(f"Created admin user with ID {admin.id}")
        else:
            logger.info("Admin user already exists, skipping user creation")

        if await get_designs_by_user(db, admin.id):
            logger.info("Sample designs already exist, skipping design creation")
            return admin.id

        for design in sample_designs():
            await create_design(db, admin.id, design)
        logger.info("Created sample designs")
        return admin.id


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(seed())

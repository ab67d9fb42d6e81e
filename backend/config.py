"""Application configuration via environment variables."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{BASE_DIR / 'designcrafter.db'}")

# File Storage
EXPORT_DIR = Path(os.getenv("EXPORT_DIR", str(BASE_DIR / "exports")))
EXPORT_DIR.mkdir(parents=True, exist_ok=True)

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Sessions
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "designcrafter_session")
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", str(24 * 7)))

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")

# Editor defaults (feet)
DEFAULT_ROOM_WIDTH = 12
DEFAULT_ROOM_LENGTH = 15
DEFAULT_ROOM_HEIGHT = 8
DEFAULT_WALL_COLOR = "#808080"
RECENT_DESIGNS_LIMIT = 5

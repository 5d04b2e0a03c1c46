"""
Runtime configuration read from environment variables (and a .env file if present)
"""
import os
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Service settings with production defaults"""

    def __init__(self, **overrides):
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", 8080))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Durable user store
        self.user_store_backend = os.getenv("USER_STORE_BACKEND", "file").lower()
        self.user_db_file = os.getenv("USER_DB_FILE", "users.json")
        self.redis_host = os.getenv("REDIS_HOST", "localhost")
        self.redis_port = int(os.getenv("REDIS_PORT", 6379))
        self.redis_password = os.getenv("REDIS_PASSWORD")
        self.redis_users_key = os.getenv("REDIS_USERS_KEY", "tictactoe:users")

        # Room lifecycle timings (seconds)
        self.room_ttl_seconds = int(os.getenv("ROOM_TTL_SECONDS", 3600))
        self.sweep_interval_seconds = int(os.getenv("SWEEP_INTERVAL_SECONDS", 300))
        self.emote_duration_seconds = float(os.getenv("EMOTE_DURATION_SECONDS", 3))

        self.leaderboard_limit = int(os.getenv("LEADERBOARD_LIMIT", 10))
        self.cors_origins = os.getenv("CORS_ORIGINS", "*")
        self.static_dir: Optional[str] = os.getenv("STATIC_DIR") or None

        for name, value in overrides.items():
            if not hasattr(self, name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self, name, value)

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def __repr__(self):
        return (
            f"<Settings store={self.user_store_backend} port={self.port} "
            f"room_ttl={self.room_ttl_seconds}s sweep={self.sweep_interval_seconds}s>"
        )

import string
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings

from shortlink.core.db import MAX_INT64

SECONDS_PER_DAY = 24 * 60 * 60


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # e.g. mongodb://localhost:27017/shortlink, the path is the database name
    host: str
    port: int
    debug: bool
    session_secret_key: str  # Signs the session cookie
    cors_origins: list[str] = []
    shortcode_universe: str = string.ascii_letters + string.digits  # Digit set for shortcodes
    shortcode_length: int = 7  # Maximum shortcode length
    session_max_age_days: int = 7
    secure_cookies: bool = False  # Set to True in production with HTTPS
    admin_email: str | None = None  # Bootstrap administrator (optional)
    admin_password: str | None = None

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SHORTLINK_",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def check_shortcodes(self) -> Self:
        if len(self.shortcode_universe) < 2:
            raise ValueError("shortcode_universe must contain at least 2 characters")
        if len(set(self.shortcode_universe)) != len(self.shortcode_universe):
            raise ValueError("shortcode_universe must not contain duplicate characters")
        if self.shortcode_length < 1:
            raise ValueError("shortcode_length must be at least 1")
        # Link ids are stored as BSON int64
        if len(self.shortcode_universe) ** self.shortcode_length - 1 > MAX_INT64:
            raise ValueError("shortcode_universe and shortcode_length allow ids beyond 64 bits")
        if self.session_max_age_days < 1:
            raise ValueError("session_max_age_days must be at least 1")
        return self

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_max_age_days * SECONDS_PER_DAY

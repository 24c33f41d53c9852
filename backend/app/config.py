"""
EventFeed Server Configuration

This file contains all server-side configurable settings.
Modify these values to tune the service behaviour.
"""

from dataclasses import dataclass
import os


@dataclass
class ServerConfig:
    """Server networking configuration."""
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: tuple = (
        "http://localhost:5173",  # Vite default port
        "http://localhost:3000",  # Alternative React port
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    )


@dataclass
class DatabaseConfig:
    """Database configuration."""
    DATABASE_URL: str = os.getenv("EVENTFEED_DATABASE_URL", "")  # Empty: SQLite file under data/
    ECHO_SQL: bool = False  # Log SQL queries


@dataclass
class SecurityConfig:
    """Password and remember-token hashing settings."""
    BCRYPT_COST: int = 12
    BCRYPT_MIN_COST: int = 4  # bcrypt's lower bound, only for test runs
    USE_MIN_COST: bool = None
    REMEMBER_TOKEN_BYTES: int = 16  # 128 bits of entropy

    def __post_init__(self):
        if self.USE_MIN_COST is None:
            self.USE_MIN_COST = os.getenv("EVENTFEED_ENV", "") == "test"

    @property
    def cost(self) -> int:
        """Work factor to hash with under the current configuration."""
        return self.BCRYPT_MIN_COST if self.USE_MIN_COST else self.BCRYPT_COST


@dataclass
class UserConfig:
    """User account validation limits."""
    NAME_MAX_LENGTH: int = 50
    EMAIL_MAX_LENGTH: int = 200
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_MAX_BYTES: int = 72  # bcrypt ignores anything past 72 bytes


@dataclass
class MicropostConfig:
    """Micropost (event announcement) limits."""
    CONTENT_MAX_LENGTH: int = 140
    LOCATION_MAX_LENGTH: int = 255


@dataclass
class FeedConfig:
    """Feed query settings."""
    WINDOW_HOURS: int = 24  # Events older than this drop out of the feed
    PAGE_SIZE: int = 30
    MAX_PAGE_SIZE: int = 100


@dataclass
class LoggingConfig:
    """Logging configuration."""
    LEVEL: str = "INFO"
    FORMAT: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class Settings:
    """Main settings container."""
    server: ServerConfig = None
    database: DatabaseConfig = None
    security: SecurityConfig = None
    user: UserConfig = None
    micropost: MicropostConfig = None
    feed: FeedConfig = None
    logging: LoggingConfig = None

    # Application info
    APP_NAME: str = "EventFeed"
    VERSION: str = "0.1.0"
    DEBUG: bool = True

    def __post_init__(self):
        self.server = self.server or ServerConfig()
        self.database = self.database or DatabaseConfig()
        self.security = self.security or SecurityConfig()
        self.user = self.user or UserConfig()
        self.micropost = self.micropost or MicropostConfig()
        self.feed = self.feed or FeedConfig()
        self.logging = self.logging or LoggingConfig()


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings

"""
Settings

Centralized configuration for the judging service.
All values are loaded from environment variables (a .env file at the
project root is honoured).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

load_dotenv(dotenv_path=ENV_FILE)


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get a boolean value from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ('true', '1', 'yes', 'on', 'enabled')


def get_list_env(key: str) -> list:
    """Get a comma-separated list from environment variable."""
    raw = os.getenv(key, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """
    Settings for the application.

    To add a new setting:
    1. Add it here as a class attribute
    2. Load it from environment variable
    3. Read it through the ``settings`` singleton
    """

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./hatchjudge.db")

    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    ALLOWED_ORIGINS: list = get_list_env("ALLOWED_ORIGINS")

    # Judges may score a team that has not submitted for the phase. When
    # disabled, scoring without a submission row is rejected.
    SCORE_WITHOUT_SUBMISSION: bool = get_bool_env("SCORE_WITHOUT_SUBMISSION", True)

    # slowapi limit string applied to score/elimination endpoints
    MUTATION_RATE_LIMIT: str = os.getenv("MUTATION_RATE_LIMIT", "60/minute")

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == "development"

    @classmethod
    def as_dict(cls) -> dict:
        """Non-secret settings, for diagnostics."""
        return {
            "environment": cls.ENVIRONMENT,
            "log_level": cls.LOG_LEVEL,
            "database_backend": cls.DATABASE_URL.split(":", 1)[0],
            "score_without_submission": cls.SCORE_WITHOUT_SUBMISSION,
            "mutation_rate_limit": cls.MUTATION_RATE_LIMIT,
        }


# Singleton instance for easy importing
settings = Settings()

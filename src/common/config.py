"""
Configuration loader for the weak-ties contact service.

Loads all settings from environment variables (.env file).
Validates required settings and provides type-safe access.
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _int_env(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


class Config:
    """
    Centralized configuration for the profile, CSV and AI components.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== Profile scraping API (RapidAPI) =====
    RAPIDAPI_KEY: str = os.getenv("RAPIDAPI_KEY", "")
    RAPIDAPI_HOST: str = os.getenv("RAPIDAPI_HOST", "li-data-scraper.p.rapidapi.com")
    RAPIDAPI_TIMEOUT: int = _int_env("RAPIDAPI_TIMEOUT", 15)

    # ===== Azure OpenAI =====
    AZURE_OPENAI_API_KEY: str = os.getenv("AZURE_OPENAI_API_KEY", "")
    AZURE_OPENAI_ENDPOINT: str = os.getenv("AZURE_OPENAI_ENDPOINT", "")
    AZURE_OPENAI_API_VERSION: str = os.getenv("AZURE_OPENAI_API_VERSION", "2024-10-21")
    AZURE_OPENAI_DEPLOYMENT: str = os.getenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")

    # Temperature settings
    RECOMMENDATION_TEMPERATURE: float = 0.3  # Consistent rankings
    MESSAGE_TEMPERATURE: float = 0.7  # Varied but on-brief drafts
    CHAT_TEMPERATURE: float = 0.7

    # ===== CSV header detection =====
    # Empirically tuned against LinkedIn "Connections" exports
    CSV_HEADER_PATTERN_WEIGHT: int = _int_env("CSV_HEADER_PATTERN_WEIGHT", 2)
    CSV_HEADER_SHAPE_WEIGHT: int = _int_env("CSV_HEADER_SHAPE_WEIGHT", 1)
    CSV_HEADER_COLUMN_BONUS: int = _int_env("CSV_HEADER_COLUMN_BONUS", 3)
    CSV_HEADER_MIN_COLUMNS: int = _int_env("CSV_HEADER_MIN_COLUMNS", 4)
    CSV_HEADER_MIN_SCORE: int = _int_env("CSV_HEADER_MIN_SCORE", 5)

    @classmethod
    def missing_profile_settings(cls) -> List[str]:
        """Names of unset settings required by the profile fetch."""
        return [name for name, value in {"RAPIDAPI_KEY": cls.RAPIDAPI_KEY}.items() if not value]

    @classmethod
    def missing_ai_settings(cls) -> List[str]:
        """Names of unset settings required by the AI endpoints."""
        required = {
            "AZURE_OPENAI_API_KEY": cls.AZURE_OPENAI_API_KEY,
            "AZURE_OPENAI_ENDPOINT": cls.AZURE_OPENAI_ENDPOINT,
        }
        return [name for name, value in required.items() if not value]

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        missing = cls.missing_profile_settings() + cls.missing_ai_settings()

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.CSV_HEADER_MIN_COLUMNS < 1:
            raise ValueError("CSV_HEADER_MIN_COLUMNS must be at least 1")

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  RapidAPI: {'✓ Configured' if cls.RAPIDAPI_KEY else '✗ Missing'} (host={cls.RAPIDAPI_HOST})
  Azure OpenAI: {'✓ Configured' if not cls.missing_ai_settings() else '✗ Missing'}
  Deployment: {cls.AZURE_OPENAI_DEPLOYMENT} (api_version={cls.AZURE_OPENAI_API_VERSION})
  CSV header min score: {cls.CSV_HEADER_MIN_SCORE}
        """.strip()

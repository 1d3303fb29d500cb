"""
API Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.common.config import Config

logger = logging.getLogger(__name__)


class ApiSettings(BaseSettings):
    """
    API service configuration with validation.

    All settings can be overridden via environment variables.
    Validation happens at startup to fail fast on misconfiguration.
    """

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")

    # === Security ===
    api_secret: Optional[str] = Field(
        default=None,
        min_length=16,
        description="API authentication secret (min 16 chars for security)"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # === CORS ===
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins"
    )

    # === Uploads ===
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        le=50 * 1024 * 1024,
        description="Maximum accepted contact CSV size in bytes"
    )

    # === Profile responses ===
    profile_cache_control: str = Field(
        default="public, s-maxage=3600, stale-while-revalidate=86400",
        description="Cache-Control header for successful profile responses"
    )

    # === Logging ===
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="simple", description="simple or json")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("api_secret")
    @classmethod
    def validate_secret_strength(cls, v: Optional[str]) -> Optional[str]:
        """Reject well-known or low-entropy secrets."""
        if v is None:
            return None
        weak_secrets = {"secret", "password", "12345678901234567", "changeme"}
        if v.lower() in weak_secrets or len(set(v)) < 4:
            raise ValueError("API secret is too weak - use a secure random string")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("simple", "json"):
            raise ValueError("log_format must be 'simple' or 'json'")
        return v.lower()

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def auth_required(self) -> bool:
        """Auth is required in production or whenever a secret is configured."""
        return self.is_production or self.api_secret is not None

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if self.is_production:
            if not self.api_secret:
                issues.append("CRITICAL: API_SECRET required in production")
            if not self.cors_origins:
                issues.append("WARNING: CORS_ORIGINS not configured")

        for missing in Config.missing_profile_settings():
            issues.append(f"WARNING: {missing} not set, profile lookups will fail")
        for missing in Config.missing_ai_settings():
            issues.append(f"WARNING: {missing} not set, AI endpoints will fail")

        return issues


@lru_cache()
def get_settings() -> ApiSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    """
    return ApiSettings()


def validate_config_on_startup() -> None:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  cors_origins={settings.cors_origins_list or 'none'}")
    logger.info(f"  max_upload_bytes={settings.max_upload_bytes}")
    logger.info(f"  auth_required={settings.auth_required}")
    logger.info(Config.summary())


# Convenience exports
settings = get_settings()

"""
Authentication Module

Handles API authentication using a shared secret bearer token.
Uses centralized config for settings validation.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


logger = logging.getLogger(__name__)
# Missing headers are allowed through when auth is disabled
security = HTTPBearer(auto_error=False)


def get_api_secret() -> str:
    """Get the API secret from validated config."""
    if not settings.api_secret:
        raise ValueError("API_SECRET environment variable is required for authentication")
    return settings.api_secret


async def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[HTTPAuthorizationCredentials]:
    """
    Verify shared secret token.

    Args:
        credentials: Bearer token from request header

    Returns:
        The credentials if valid, or None when auth is disabled

    Raises:
        HTTPException: 401 if token is missing or invalid, 500 if auth is
            required but no secret is configured
    """
    if not settings.auth_required:
        return credentials

    try:
        expected_secret = get_api_secret()
    except ValueError:
        raise HTTPException(
            status_code=500,
            detail="Server authentication not configured"
        )

    if credentials is None or credentials.credentials != expected_secret:
        logger.warning("Rejected request with missing or invalid bearer token")
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token"
        )

    return credentials

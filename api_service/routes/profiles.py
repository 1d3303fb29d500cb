"""
LinkedIn Profile API Routes.

- GET /api/profiles?url=... - Fetch, normalize and validate one public profile

Upstream failures map to fixed status codes. A 2xx upstream body that does
not match the profile schema is returned as a 502 with every issue listed.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.services.linkedin_profile_client import (
    InvalidProfileUrlError,
    LinkedInProfileError,
    ProfileAuthenticationError,
    ProfileConfigurationError,
    ProfileFetchError,
    ProfileNotFoundError,
    ProfileRateLimitError,
    get_profile,
)

from ..auth import verify_token
from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["profiles"])

# Client-facing messages per upstream failure
PROFILE_ERROR_MESSAGES = {
    ProfileConfigurationError: "API configuration error",
    ProfileAuthenticationError: "API authentication failed",
    ProfileRateLimitError: "API rate limit exceeded",
    ProfileNotFoundError: "LinkedIn profile not found",
    ProfileFetchError: "Failed to fetch profile data",
}


def profile_error_response(error: LinkedInProfileError) -> JSONResponse:
    """Map a profile client exception to its JSON error response."""
    if isinstance(error, InvalidProfileUrlError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request parameters",
                "details": [{"path": ["url"], "message": str(error)}],
            },
        )

    message = PROFILE_ERROR_MESSAGES.get(type(error), "Failed to fetch profile data")
    return JSONResponse(status_code=error.status_code, content={"error": message})


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "",
    dependencies=[Depends(verify_token)],
    summary="Fetch a LinkedIn profile",
    description="Fetch a public LinkedIn profile by URL and return it normalized and validated",
)
def fetch_profile(url: Optional[str] = Query(default=None, description="LinkedIn profile URL")) -> JSONResponse:
    try:
        result = get_profile(url)
    except LinkedInProfileError as e:
        logger.warning(f"Profile fetch failed ({type(e).__name__}): {e}")
        return profile_error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error fetching profile {url}: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    if not result.success:
        return JSONResponse(status_code=502, content=result.to_error_payload())

    return JSONResponse(
        content=result.profile.to_dict(),
        headers={"Cache-Control": settings.profile_cache_control},
    )

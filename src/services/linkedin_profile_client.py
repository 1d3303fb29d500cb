"""
LinkedIn Profile Client

Fetches public LinkedIn profile data through the RapidAPI "LinkedIn Data
Scraper" and runs it through preprocessing and schema validation.

The upstream API is unreliable about shapes, not about transport: one GET,
no retries. HTTP failures map to a fixed set of exceptions; a 2xx body that
does not match the schema is a ProfileValidationResult, not an exception.

API Reference:
- Profile by URL: https://{RAPIDAPI_HOST}/get-profile-data-by-url?url={encoded_url}
"""

import logging
from typing import Any, Optional
from urllib.parse import quote, urlparse

import requests

from src.common.config import Config
from src.common.error_handling import log_on_exception
from src.schema.linkedin_profile import ProfileValidationResult, validate_profile
from src.services.profile_preprocessor import defaulted_fields, preprocess_profile_data

logger = logging.getLogger(__name__)

PROFILE_ENDPOINT = "https://{host}/get-profile-data-by-url?url={url}"
PROFILE_PATH_MARKER = "linkedin.com/in/"


class LinkedInProfileError(Exception):
    """Base exception for profile fetch errors."""
    status_code: int = 502


class InvalidProfileUrlError(LinkedInProfileError):
    """Raised before any network call when the URL is not a LinkedIn profile URL."""
    status_code = 400


class ProfileConfigurationError(LinkedInProfileError):
    """Raised when the RapidAPI key is not configured."""
    status_code = 500


class ProfileAuthenticationError(LinkedInProfileError):
    """Raised when RapidAPI rejects the API key (401)."""
    status_code = 401


class ProfileRateLimitError(LinkedInProfileError):
    """Raised when RapidAPI rate limits the request (429)."""
    status_code = 429


class ProfileNotFoundError(LinkedInProfileError):
    """Raised when the profile does not exist (404)."""
    status_code = 404


class ProfileFetchError(LinkedInProfileError):
    """Raised for any other non-2xx status or transport failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


def validate_profile_url(url: Optional[str]) -> str:
    """
    Check that url is an absolute http(s) URL pointing at a LinkedIn profile.

    Args:
        url: Candidate profile URL

    Returns:
        The stripped URL

    Raises:
        InvalidProfileUrlError: If the URL is missing, malformed, or not a /in/ URL
    """
    if not url or not url.strip():
        raise InvalidProfileUrlError("URL is required")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidProfileUrlError("Invalid URL")

    if PROFILE_PATH_MARKER not in url:
        raise InvalidProfileUrlError("URL must be a valid LinkedIn profile URL")

    return url


def build_profile_request_url(profile_url: str, host: Optional[str] = None) -> str:
    return PROFILE_ENDPOINT.format(host=host or Config.RAPIDAPI_HOST, url=quote(profile_url, safe=""))


def fetch_profile_json(profile_url: str, timeout: Optional[int] = None) -> Any:
    """
    Fetch raw profile JSON from RapidAPI.

    Args:
        profile_url: LinkedIn profile URL (validated first)
        timeout: Request timeout in seconds (defaults to Config.RAPIDAPI_TIMEOUT)

    Returns:
        JSON-decoded response body (untyped)

    Raises:
        InvalidProfileUrlError: Bad URL, no request made
        ProfileConfigurationError: RAPIDAPI_KEY missing
        ProfileAuthenticationError: 401
        ProfileRateLimitError: 429
        ProfileNotFoundError: 404
        ProfileFetchError: Any other failure
    """
    profile_url = validate_profile_url(profile_url)

    if not Config.RAPIDAPI_KEY:
        logger.error("RAPIDAPI_KEY environment variable is not set")
        raise ProfileConfigurationError("API configuration error")

    request_timeout = timeout or Config.RAPIDAPI_TIMEOUT
    headers = {
        "X-RapidAPI-Key": Config.RAPIDAPI_KEY,
        "X-RapidAPI-Host": Config.RAPIDAPI_HOST,
        "Accept": "application/json",
    }

    logger.info(f"Fetching LinkedIn profile: {profile_url}")

    try:
        with log_on_exception(logger, "RapidAPI profile fetch", level=logging.ERROR):
            response = requests.get(
                build_profile_request_url(profile_url),
                headers=headers,
                timeout=request_timeout,
            )
    except requests.exceptions.Timeout:
        raise ProfileFetchError(f"Request timed out after {request_timeout}s")
    except requests.exceptions.RequestException as e:
        raise ProfileFetchError(f"Network error: {str(e)}")

    if not response.ok:
        logger.error(f"RapidAPI request failed: {response.status_code} {response.reason}")

        if response.status_code == 401:
            raise ProfileAuthenticationError("API authentication failed")

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "60")
            raise ProfileRateLimitError(f"API rate limit exceeded. Retry after {retry_after} seconds.")

        if response.status_code == 404:
            raise ProfileNotFoundError("LinkedIn profile not found")

        raise ProfileFetchError(
            f"RapidAPI returned status {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise ProfileFetchError(f"RapidAPI returned a non-JSON body: {e}")


def get_profile(profile_url: str, timeout: Optional[int] = None) -> ProfileValidationResult:
    """
    Fetch, preprocess and validate one profile.

    Transport failures raise; schema mismatches come back as a failed
    ProfileValidationResult carrying every issue and the preprocessed payload.
    """
    raw = fetch_profile_json(profile_url, timeout=timeout)
    processed = preprocess_profile_data(raw)

    filled = defaulted_fields(raw, processed)
    if filled:
        logger.debug(f"Preprocessing filled/repaired: {', '.join(filled)}")

    result = validate_profile(processed)

    if not result.success:
        logger.error(
            f"Invalid response from LinkedIn API ({len(result.issues)} issues): "
            + "; ".join(f"{'.'.join(str(p) for p in i.path)}: {i.message}" for i in result.issues)
        )
        logger.debug(f"Preprocessed payload: {processed!r}")
    else:
        logger.info(f"Validated profile: {result.profile.username or profile_url}")

    return result

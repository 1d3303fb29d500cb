"""
Declarative schemas for external data: LinkedIn profiles and CSV contacts.
"""

from src.schema.contact import Contact
from src.schema.linkedin_profile import (
    LinkedInProfile,
    ProfileValidationError,
    ProfileValidationResult,
    ValidationIssue,
    clean_profile_data,
    clean_url,
    is_valid_url,
    validate_profile,
)

__all__ = [
    "Contact",
    "LinkedInProfile",
    "ProfileValidationError",
    "ProfileValidationResult",
    "ValidationIssue",
    "clean_profile_data",
    "clean_url",
    "is_valid_url",
    "validate_profile",
]

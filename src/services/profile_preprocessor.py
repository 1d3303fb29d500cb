"""
Profile Preprocessor

Repairs raw RapidAPI profile JSON before schema validation:

- missing flags default to False, missing counts to 0,
- collections hidden by privacy settings default to None,
- `projects` is completed to {"total": ..., "items": ...},
- position logos that are not valid URLs become "" (the "no image" sentinel).

The validator itself never applies these defaults, so dropping this step
surfaces as validation issues instead of silently passing.
"""

import copy
import logging
from typing import Any, Dict, List

from src.schema.linkedin_profile import is_valid_url

logger = logging.getLogger(__name__)

BOOLEAN_FLAGS = ("isOpenToWork", "isHiring")

NULLABLE_COLLECTIONS = (
    "languages",
    "skills",
    "courses",
    "certifications",
    "honors",
    "volunteering",
    "givenRecommendation",
    "receivedRecommendation",
)

RECOMMENDATION_COUNTS = ("givenRecommendationCount", "receivedRecommendationCount")

POSITION_LISTS = ("position", "fullPositions")


def _default_projects(projects: Any) -> Any:
    if projects is None:
        return {"total": 0, "items": None}
    if not isinstance(projects, dict):
        return projects
    return {
        **projects,
        "total": projects["total"] if projects.get("total") is not None else 0,
        "items": projects.get("items"),
    }


def _sanitize_position(position: Any) -> Any:
    if not isinstance(position, dict):
        return position
    logo = position.get("companyLogo")
    return {**position, "companyLogo": logo if is_valid_url(logo) else ""}


def _sanitize_positions(positions: Any) -> Any:
    if positions is None:
        return []
    if not isinstance(positions, list):
        return positions
    return [_sanitize_position(pos) for pos in positions]


def preprocess_profile_data(data: Any) -> Any:
    """
    Apply defaults and sub-shape repairs to a raw profile payload.

    Pure and idempotent: the input is not mutated, and preprocessing the
    output again yields an equal object. Non-dict input is returned as-is
    so the validator can report it.

    Args:
        data: JSON-decoded response body

    Returns:
        New dict ready for `validate_profile`
    """
    if not isinstance(data, dict):
        logger.warning(f"Profile payload is {type(data).__name__}, not an object; skipping preprocessing")
        return data

    processed: Dict[str, Any] = copy.deepcopy(data)

    for flag in BOOLEAN_FLAGS:
        if processed.get(flag) is None:
            processed[flag] = False

    for key in NULLABLE_COLLECTIONS:
        processed.setdefault(key, None)

    for key in RECOMMENDATION_COUNTS:
        if processed.get(key) is None:
            processed[key] = 0

    processed["projects"] = _default_projects(processed.get("projects"))

    for key in POSITION_LISTS:
        processed[key] = _sanitize_positions(processed.get(key))

    return processed


def defaulted_fields(raw: Any, processed: Any) -> List[str]:
    """Top-level keys that preprocessing added or replaced (for debug logs)."""
    if not isinstance(raw, dict) or not isinstance(processed, dict):
        return []
    return sorted(key for key, value in processed.items() if key not in raw or raw[key] != value)

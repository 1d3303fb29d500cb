"""
LinkedIn Profile Schema

Declarative pydantic models for the public-profile JSON returned by the
RapidAPI LinkedIn data scraper. The upstream API is partially documented and
drifts between profile types (executives, individuals, private profiles), so:

- identity and descriptive fields may be absent, but an explicit null is
  reported (they are declared `X = None`, and pydantic does not validate
  defaults),
- `isOpenToWork` / `isHiring` and the recommendation counts are required and
  strictly typed (drift there means the API changed and should fail loudly),
- URL fields that are routinely "" or malformed degrade to None instead of
  rejecting the whole profile,
- collections that privacy settings hide are nullable as well as optional
  (`Optional[...]`).

Validation never short-circuits: `validate_profile` returns every issue found
in one pass, together with the payload that was validated.
"""

import copy
import logging
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    PlainValidator,
    StrictBool,
    StrictStr,
    Tag,
    TypeAdapter,
    ValidationError,
)
from pydantic_core import PydanticCustomError

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed"

LANGUAGE_NAMES = "names"
LANGUAGE_ENTRIES = "entries"


# =============================================================================
# Field-level cleaners
# =============================================================================

_URL_ADAPTER = TypeAdapter(AnyUrl)


def is_valid_url(value: Any) -> bool:
    """Return True if value is a string that parses as an absolute URL."""
    if not isinstance(value, str) or not value:
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def clean_url(value: Any) -> Any:
    """
    Tolerant URL cleaner.

    "" and None become None, unparseable strings become None, valid URL
    strings are kept verbatim. Non-strings pass through so the strict
    string check reports them.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value if is_valid_url(value) else None
    return value


def _require_number(value: Any) -> Union[int, float]:
    # bool is an int subclass but never a count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Input should be a valid number")
    return value


def _require_url(value: str) -> str:
    if not is_valid_url(value):
        raise PydanticCustomError("url_parsing", "Input should be a valid URL")
    return value


Number = Annotated[Union[int, float], PlainValidator(_require_number)]
Url = Annotated[StrictStr, AfterValidator(_require_url)]
TolerantUrl = Annotated[Optional[StrictStr], BeforeValidator(clean_url)]


# =============================================================================
# Sub-schemas
# =============================================================================

class LinkedInDate(BaseModel):
    """Date triple. No calendar validation, display only."""
    year: Number
    month: Number
    day: Number


class BackgroundImage(BaseModel):
    width: Number
    height: Number
    url: Url


class Geo(BaseModel):
    country: StrictStr
    city: StrictStr
    full: StrictStr
    countryCode: StrictStr = None


class Language(BaseModel):
    name: StrictStr
    proficiency: StrictStr = None


class Logo(BaseModel):
    url: Url
    width: Number
    height: Number


class MultiLocaleString(BaseModel):
    """
    Localized variants of one string, e.g. {"en_US": "Engineer"}.

    Only `en` and `en_US` are typed; other locale tags are kept as sent.
    """
    model_config = ConfigDict(extra="allow")

    en: StrictStr = None
    en_US: StrictStr = None


class Education(BaseModel):
    start: LinkedInDate = None
    end: LinkedInDate = None
    fieldOfStudy: StrictStr = None
    degree: StrictStr = None
    grade: StrictStr = None
    schoolName: StrictStr = None
    description: StrictStr = None
    activities: StrictStr = None
    url: TolerantUrl = None
    schoolId: StrictStr = None
    logo: Optional[List[Logo]] = None


class Position(BaseModel):
    """One entry of `position` / `fullPositions`. Every field is optional."""
    companyId: Number = None
    companyName: StrictStr = None
    companyUsername: StrictStr = None
    companyURL: TolerantUrl = None
    companyLogo: StrictStr = None
    companyIndustry: StrictStr = None
    companyStaffCountRange: StrictStr = None
    title: StrictStr = None
    multiLocaleTitle: MultiLocaleString = None
    multiLocaleCompanyName: MultiLocaleString = None
    location: StrictStr = None
    locationType: StrictStr = None
    description: StrictStr = None
    employmentType: StrictStr = None
    start: LinkedInDate = None
    end: LinkedInDate = None


class Skill(BaseModel):
    name: StrictStr
    passedSkillAssessment: StrictBool
    endorsementsCount: Number = None


class Course(BaseModel):
    name: StrictStr
    number: StrictStr


class CertificationCompany(BaseModel):
    name: StrictStr
    universalName: StrictStr
    logo: StrictStr = None
    staffCountRange: Dict[str, Any] = None
    headquarter: Dict[str, Any] = None


class TimePeriod(BaseModel):
    start: LinkedInDate = None
    end: LinkedInDate = None


class Certification(BaseModel):
    name: StrictStr
    start: LinkedInDate = None
    end: LinkedInDate = None
    authority: StrictStr = None
    company: CertificationCompany = None
    timePeriod: TimePeriod = None


class Volunteering(BaseModel):
    title: StrictStr
    start: LinkedInDate = None
    end: LinkedInDate = None
    companyName: StrictStr = None
    CompanyId: StrictStr = None
    companyUrl: Url = None
    companyLogo: StrictStr = None


class Projects(BaseModel):
    """
    `total` is the display count reported by LinkedIn; `items` may be
    truncated or hidden, so the two are not cross-checked.
    """
    total: Number
    items: Optional[List[Any]] = None


class SupportedLocale(BaseModel):
    country: StrictStr
    language: StrictStr


def _language_shape(value: Any) -> str:
    if isinstance(value, list) and not all(isinstance(item, str) for item in value):
        return LANGUAGE_ENTRIES
    return LANGUAGE_NAMES


# Plain strings on some profiles, objects on others. The branch is chosen
# from the items so only one shape reports issues.
Languages = Annotated[
    Union[
        Annotated[List[StrictStr], Tag(LANGUAGE_NAMES)],
        Annotated[List[Language], Tag(LANGUAGE_ENTRIES)],
    ],
    Discriminator(_language_shape),
]


# =============================================================================
# Aggregate profile
# =============================================================================

class LinkedInProfile(BaseModel):
    """Typed public profile. Unknown upstream keys are dropped."""

    # Identity
    id: Number = None
    urn: StrictStr = None
    username: StrictStr = None

    # Names and headline
    firstName: StrictStr = None
    lastName: StrictStr = None
    headline: StrictStr = None
    summary: StrictStr = None
    multiLocaleFirstName: MultiLocaleString = None
    multiLocaleLastName: MultiLocaleString = None
    multiLocaleHeadline: MultiLocaleString = None

    # Flags
    isOpenToWork: StrictBool
    isHiring: StrictBool
    isPremium: StrictBool = None
    isCreator: StrictBool = None
    isPrime: StrictBool = None

    # Media and location
    profilePicture: TolerantUrl = None
    backgroundImage: List[BackgroundImage] = None
    geo: Geo = None

    languages: Optional[Languages] = None

    educations: List[Education] = None
    position: List[Position] = None
    fullPositions: List[Position] = None

    # Hidden by privacy settings: null or absent
    skills: Optional[List[Skill]] = None
    courses: Optional[List[Course]] = None
    certifications: Optional[List[Certification]] = None
    honors: Optional[List[Any]] = None
    volunteering: Optional[List[Volunteering]] = None

    # Recommendations: bodies are never returned, counts always are
    givenRecommendation: None = None
    givenRecommendationCount: Number
    receivedRecommendation: None = None
    receivedRecommendationCount: Number

    projects: Projects
    supportedLocales: List[SupportedLocale] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, keeping absent fields absent and explicit nulls null."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Validation results
# =============================================================================

class ValidationIssue(BaseModel):
    """One path-tagged problem found while validating a profile."""

    path: List[Union[str, int]]
    code: str
    message: str
    input: Any = None

    @classmethod
    def from_pydantic(cls, error: Dict[str, Any]) -> "ValidationIssue":
        loc = list(error.get("loc", ()))
        # The languages union tag is not a key in the payload
        if loc[:1] == ["languages"] and len(loc) > 1 and loc[1] in (LANGUAGE_NAMES, LANGUAGE_ENTRIES):
            del loc[1]
        return cls(
            path=loc,
            code=error.get("type", "unknown"),
            message=error.get("msg", ""),
            input=error.get("input"),
        )


class ProfileValidationResult(BaseModel):
    """
    Discriminated success/failure of one profile validation.

    On failure `profile` is None and `issues` lists everything that was
    wrong, so schema gaps can be patched from a single response.
    """

    success: bool
    profile: Optional[LinkedInProfile] = None
    issues: List[ValidationIssue] = []
    raw_data: Any = None

    def to_error_payload(self) -> Dict[str, Any]:
        """Wire shape returned to clients when validation fails."""
        return {
            "error": VALIDATION_FAILED,
            "details": [issue.model_dump() for issue in self.issues],
            "rawData": self.raw_data,
        }


class ProfileValidationError(Exception):
    """Raised by `clean_profile_data` when the profile does not validate."""

    def __init__(self, result: ProfileValidationResult):
        self.result = result
        paths = ", ".join(".".join(str(p) for p in issue.path) or "<root>" for issue in result.issues)
        super().__init__(f"{VALIDATION_FAILED}: {len(result.issues)} issue(s) at {paths}")


def validate_profile(data: Any) -> ProfileValidationResult:
    """
    Validate an (already preprocessed) profile payload.

    Never raises: a non-object payload is reported as a single issue with an
    empty path.

    Args:
        data: Untyped JSON-decoded profile

    Returns:
        ProfileValidationResult with either the typed profile or all issues
    """
    try:
        profile = LinkedInProfile.model_validate(data)
    except ValidationError as e:
        issues = [ValidationIssue.from_pydantic(err) for err in e.errors(include_url=False)]
        logger.debug(f"Profile failed validation with {len(issues)} issue(s)")
        return ProfileValidationResult(success=False, issues=issues, raw_data=data)

    return ProfileValidationResult(success=True, profile=profile, raw_data=data)


def clean_profile_data(raw_data: Any) -> LinkedInProfile:
    """
    Blank out empty URL strings in educations and positions, then validate.

    Unlike `validate_profile` this raises, for callers that treat an invalid
    profile as exceptional.

    Raises:
        ProfileValidationError: carrying the full validation result
    """
    data = copy.deepcopy(raw_data)
    if isinstance(data, dict):
        for key, url_field in (("educations", "url"), ("position", "companyURL"), ("fullPositions", "companyURL")):
            entries = data.get(key)
            if isinstance(entries, list):
                data[key] = [
                    {**entry, url_field: None} if isinstance(entry, dict) and entry.get(url_field) == "" else entry
                    for entry in entries
                ]

    result = validate_profile(data)
    if not result.success:
        raise ProfileValidationError(result)
    return result.profile

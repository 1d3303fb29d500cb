"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- RapidAPI and Azure OpenAI credentials are replaced with mock values
- Environment variable isolation (prevents credential leakage)

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import os

import pytest

# Set test environment BEFORE any imports to prevent Config from loading real values
os.environ["ENVIRONMENT"] = "development"


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    Config reads the environment at import time, so the class attributes
    are patched as well as the variables.
    """
    from src.common.config import Config

    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("RAPIDAPI_KEY", "test-rapidapi-key")
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "test-azure-key")
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com")

    monkeypatch.setattr(Config, "RAPIDAPI_KEY", "test-rapidapi-key")
    monkeypatch.setattr(Config, "AZURE_OPENAI_API_KEY", "test-azure-key")
    monkeypatch.setattr(Config, "AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com")

    yield


@pytest.fixture
def minimal_profile():
    """Smallest payload that validates without preprocessing."""
    return {
        "firstName": "John",
        "lastName": "Doe",
        "headline": "SWE",
        "profilePicture": "https://x.com/a.jpg",
        "isOpenToWork": False,
        "isHiring": False,
        "givenRecommendationCount": 0,
        "receivedRecommendationCount": 0,
        "projects": {"total": 0, "items": None},
    }


@pytest.fixture
def full_profile(minimal_profile):
    """Payload exercising every nested sub-shape."""
    return {
        **minimal_profile,
        "id": 123456,
        "urn": "ACoAAA",
        "username": "johndoe",
        "summary": "Builds things.",
        "multiLocaleFirstName": {"en_US": "John"},
        "isPremium": True,
        "backgroundImage": [{"width": 800, "height": 200, "url": "https://media.licdn.com/bg.jpg"}],
        "geo": {"country": "Germany", "city": "Berlin", "full": "Berlin, Germany", "countryCode": "de"},
        "languages": [{"name": "English", "proficiency": "NATIVE_OR_BILINGUAL"}],
        "educations": [
            {
                "start": {"year": 2010, "month": 0, "day": 0},
                "end": {"year": 2014, "month": 0, "day": 0},
                "schoolName": "TU Berlin",
                "degree": "BSc",
                "url": "https://www.linkedin.com/school/tu-berlin/",
                "logo": [{"url": "https://media.licdn.com/logo.png", "width": 100, "height": 100}],
            }
        ],
        "position": [
            {
                "companyId": 42,
                "companyName": "Acme",
                "companyURL": "https://www.linkedin.com/company/acme/",
                "companyLogo": "https://media.licdn.com/acme.png",
                "title": "Engineer",
                "multiLocaleTitle": {"en_US": "Engineer"},
                "start": {"year": 2020, "month": 1, "day": 0},
            }
        ],
        "skills": [{"name": "Python", "passedSkillAssessment": False, "endorsementsCount": 12}],
        "courses": [{"name": "Algorithms", "number": "CS101"}],
        "certifications": [
            {
                "name": "AWS SA",
                "authority": "Amazon",
                "company": {"name": "Amazon Web Services", "universalName": "amazon-web-services"},
                "timePeriod": {"start": {"year": 2021, "month": 5, "day": 0}},
            }
        ],
        "volunteering": [{"title": "Mentor", "companyUrl": "https://example.org"}],
        "supportedLocales": [{"country": "US", "language": "en"}],
        "projects": {"total": 3, "items": []},
    }

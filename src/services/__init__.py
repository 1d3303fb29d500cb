"""
Services for profile lookups, contact ingestion and the AI operations.

The AI services extend OperationService for consistent run IDs, timing
and error envelopes.
"""

from src.services.operation_base import OperationResult, OperationService, OperationTimer
from src.services.contact_upload_service import ContactSession, ContactUploadService, UploadResult
from src.services.csv_ingest import CsvParseResult, HeaderScoring, parse_contacts_csv
from src.services.linkedin_profile_client import get_profile
from src.services.profile_preprocessor import preprocess_profile_data
from src.services.recommendation_service import RecommendationService
from src.services.message_service import MessageGenerationService
from src.services.chat_service import ChatService

__all__ = [
    # Base classes
    "OperationResult",
    "OperationService",
    "OperationTimer",
    # Contacts
    "ContactSession",
    "ContactUploadService",
    "UploadResult",
    "CsvParseResult",
    "HeaderScoring",
    "parse_contacts_csv",
    # Profiles
    "get_profile",
    "preprocess_profile_data",
    # AI
    "RecommendationService",
    "MessageGenerationService",
    "ChatService",
]

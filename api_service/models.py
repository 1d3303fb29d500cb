"""
Shared Pydantic models for the API service.

These models define the structure for API requests and responses.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from src.schema.contact import Contact


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: datetime
    active_sessions: int = 0


# === Contacts ===

class ContactListResponse(BaseModel):
    contacts: List[Contact]
    total: int


class ClearContactsResponse(BaseModel):
    success: bool
    notifications: List[Dict[str, str]]


# === AI requests ===

class RecommendationRequest(BaseModel):
    """Request body for POST /api/ai/recommendations."""

    userGoal: str = Field(..., min_length=10, description="What the user wants to achieve")
    contacts: List[Contact] = Field(..., min_length=1, description="Contacts to rank")
    maxRecommendations: int = Field(default=5, ge=1, le=10)


class MessageGenerationRequest(BaseModel):
    """Request body for POST /api/ai/generate-message."""

    contact: Contact
    userGoal: str = Field(..., min_length=10)
    messageType: Literal["linkedin", "email", "introduction"] = "linkedin"
    tone: Literal["professional", "friendly", "casual", "formal"] = "professional"
    keyTopics: Optional[List[str]] = None
    customContext: Optional[str] = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    """Request body for POST /api/ai/chat."""

    messages: List[ChatMessage]
    contacts: Optional[List[Contact]] = None
    userGoal: Optional[str] = None

"""
AI Networking API Routes.

- POST /api/ai/recommendations - Rank contacts against a business goal
- POST /api/ai/generate-message - Draft an outreach message for one contact
- POST /api/ai/chat - Stream a networking-assistant reply as plain text

Request bodies are validated before any model is created; invalid bodies
get a 400 with the validation issues.
"""

import logging
from typing import Any, Optional, Type, TypeVar, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ValidationError

from src.common.llm_factory import AIServiceError
from src.services.chat_service import ChatService
from src.services.message_service import MessageGenerationService
from src.services.operation_base import OperationResult, ai_error_message
from src.services.recommendation_service import RecommendationService

from ..auth import verify_token
from ..models import ChatRequest, MessageGenerationRequest, RecommendationRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])

ModelT = TypeVar("ModelT", bound=BaseModel)

CHAT_FALLBACK_MESSAGE = "An unexpected error occurred while processing your request"


# =============================================================================
# Service providers (overridable in tests via app.dependency_overrides)
# =============================================================================


def get_recommendation_service() -> RecommendationService:
    return RecommendationService()


def get_message_service() -> MessageGenerationService:
    return MessageGenerationService()


def get_chat_service() -> ChatService:
    return ChatService()


# =============================================================================
# Helpers
# =============================================================================


def invalid_request(details: list) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request format", "details": details})


async def parse_body(request: Request, model: Type[ModelT]) -> Union[ModelT, JSONResponse]:
    """Validate the JSON body, returning either the model or a 400 response."""
    try:
        payload: Any = await request.json()
    except ValueError:
        return invalid_request([{"loc": ["body"], "msg": "Body must be valid JSON", "type": "json_invalid"}])

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        return invalid_request(e.errors(include_url=False, include_context=False))


def operation_response(result: OperationResult) -> JSONResponse:
    if not result.success:
        return JSONResponse(status_code=result.status_code, content={"error": result.error})
    return JSONResponse(content=result.data)


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/recommendations",
    dependencies=[Depends(verify_token)],
    summary="Recommend contacts for a goal",
)
async def recommend_contacts(
    request: Request,
    service: RecommendationService = Depends(get_recommendation_service),
) -> JSONResponse:
    body = await parse_body(request, RecommendationRequest)
    if isinstance(body, JSONResponse):
        return body

    result = await service.execute(
        user_goal=body.userGoal,
        contacts=body.contacts,
        max_recommendations=body.maxRecommendations,
    )
    return operation_response(result)


@router.post(
    "/generate-message",
    dependencies=[Depends(verify_token)],
    summary="Generate an outreach message",
)
async def generate_message(
    request: Request,
    service: MessageGenerationService = Depends(get_message_service),
) -> JSONResponse:
    body = await parse_body(request, MessageGenerationRequest)
    if isinstance(body, JSONResponse):
        return body

    result = await service.execute(
        contact=body.contact,
        user_goal=body.userGoal,
        message_type=body.messageType,
        tone=body.tone,
        key_topics=body.keyTopics,
        custom_context=body.customContext,
    )
    return operation_response(result)


@router.post(
    "/chat",
    dependencies=[Depends(verify_token)],
    summary="Chat with the networking assistant",
)
async def chat(
    request: Request,
    service: ChatService = Depends(get_chat_service),
):
    """
    Stream the assistant's reply as text/plain.

    The first chunk is awaited before the response starts so provider
    failures still produce a JSON error with the right status.
    """
    body = await parse_body(request, ChatRequest)
    if isinstance(body, JSONResponse):
        return body

    stream = service.stream(
        messages=[(m.role, m.content) for m in body.messages],
        contacts=body.contacts,
        user_goal=body.userGoal,
    )

    first: Optional[str] = None
    try:
        first = await stream.__anext__()
    except StopAsyncIteration:
        pass
    except AIServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"error": ai_error_message(e, CHAT_FALLBACK_MESSAGE)})

    async def body_iter():
        if first:
            yield first
        async for chunk in stream:
            yield chunk

    return StreamingResponse(body_iter(), media_type="text/plain; charset=utf-8")
"""
LLM Factory Module.

Creates the Azure OpenAI chat models used by the recommendation, message
and chat services, and classifies provider failures into AIServiceError
subclasses the API layer maps to HTTP statuses.

Usage:
    from src.common.llm_factory import create_llm

    llm = create_llm(temperature=0.3)
    response = llm.invoke([SystemMessage(content="..."), HumanMessage(content="...")])
"""

import logging
from typing import Any, Optional

from langchain_openai import AzureChatOpenAI

from src.common.config import Config

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Base class for AI provider failures."""
    status_code: int = 500


class AIConfigurationError(AIServiceError):
    """Azure OpenAI credentials or endpoint missing."""
    status_code = 500


class AIRateLimitError(AIServiceError):
    status_code = 429


class AIAuthenticationError(AIServiceError):
    status_code = 401


def create_llm(
    temperature: Optional[float] = None,
    deployment: Optional[str] = None,
    streaming: bool = False,
    **kwargs: Any,
) -> AzureChatOpenAI:
    """
    Create an Azure OpenAI chat model.

    Args:
        temperature: Sampling temperature (defaults to Config.RECOMMENDATION_TEMPERATURE)
        deployment: Azure deployment name (defaults to Config.AZURE_OPENAI_DEPLOYMENT)
        streaming: Enable token streaming
        **kwargs: Additional AzureChatOpenAI parameters

    Raises:
        AIConfigurationError: If the API key or endpoint is not configured
    """
    missing = Config.missing_ai_settings()
    if missing:
        raise AIConfigurationError(f"Azure OpenAI configuration is missing: {', '.join(missing)}")

    effective_deployment = deployment or Config.AZURE_OPENAI_DEPLOYMENT
    effective_temperature = temperature if temperature is not None else Config.RECOMMENDATION_TEMPERATURE

    llm = AzureChatOpenAI(
        azure_deployment=effective_deployment,
        azure_endpoint=Config.AZURE_OPENAI_ENDPOINT,
        api_key=Config.AZURE_OPENAI_API_KEY,
        api_version=Config.AZURE_OPENAI_API_VERSION,
        temperature=effective_temperature,
        streaming=streaming,
        **kwargs,
    )

    logger.debug(f"Created Azure LLM: deployment={effective_deployment}, temperature={effective_temperature}")
    return llm


def classify_ai_error(error: Exception) -> AIServiceError:
    """
    Map a provider exception to an AIServiceError subclass.

    openai's typed errors are matched by class name so this module does not
    depend on the SDK's exception layout; message text is the fallback.
    """
    if isinstance(error, AIServiceError):
        return error

    name = type(error).__name__
    message = str(error)
    lowered = message.lower()

    if name == "RateLimitError" or "rate limit" in lowered:
        return AIRateLimitError(message)
    if name == "AuthenticationError" or "authentication" in lowered:
        return AIAuthenticationError(message)
    return AIServiceError(message)

"""
Outreach Message Service.

Drafts a personalized message for reactivating one contact, with the
guidelines chosen by message type (LinkedIn, email, introduction) and tone.

Usage:
    service = MessageGenerationService()
    result = await service.execute(
        contact=contact,
        user_goal="Learn how logistics startups approach the Nordic market",
        message_type="email",
        tone="friendly",
    )
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field, ValidationError

from src.common.config import Config
from src.common.json_utils import parse_llm_json
from src.common.llm_factory import create_llm
from src.schema.contact import Contact
from src.services.operation_base import OperationResult, OperationService

logger = logging.getLogger(__name__)

MessageType = Literal["linkedin", "email", "introduction"]
Tone = Literal["professional", "friendly", "casual", "formal"]

WORDS_PER_MINUTE = 200

# LinkedIn export style first ("02 Jan 2024"), then ISO
CONNECTED_ON_FORMATS = ("%d %b %Y", "%d %B %Y", "%Y-%m-%d", "%m/%d/%Y")

MESSAGE_TYPE_GUIDELINES: Dict[str, str] = {
    "linkedin": """LinkedIn Message Guidelines:
- Keep it under 300 characters for the initial message
- Be conversational and authentic
- Reference shared connection history
- Clear, specific ask
- Professional but warm tone""",
    "email": """Email Guidelines:
- Professional subject line
- Proper email structure (greeting, body, closing)
- 150-250 words for body
- Clear value proposition
- Specific call-to-action""",
    "introduction": """Introduction Guidelines:
- Assume someone is introducing you
- Brief background context
- Clear reason for connection
- Mutual benefit focus
- Easy next steps""",
}

TONE_GUIDELINES: Dict[str, str] = {
    "professional": "Business-focused, respectful, competent",
    "friendly": "Warm, approachable, personable but still professional",
    "casual": "Relaxed, conversational, authentic",
    "formal": "Formal, respectful, traditional business language",
}

MESSAGE_SYSTEM_PROMPT = """You are an expert business communication specialist helping craft personalized outreach messages for reactivating professional connections.

## Guidelines for {message_type_upper} messages
{type_guidelines}

## Personalization Requirements
1. Reference the existing LinkedIn connection
2. Acknowledge the time gap since you last connected
3. Be specific about why you are reaching out to THEM specifically
4. Connect their expertise/role to the goal
5. Offer mutual value, not just ask for help
6. Suggest a specific, low-commitment next step

## Tone: {tone}
{tone_guidelines}

## Output Format
Return ONLY a JSON object with:
- subject: a compelling subject line (for email) or opening (for LinkedIn)
- message: the main message following all guidelines
- alternatives: 2-3 alternative versions with different approaches
- tips: 3-5 practical tips for sending this message
- followUpSuggestions: 2-3 follow-up suggestions if they respond positively

Make it feel personal and authentic, not templated."""

MESSAGE_USER_PROMPT = """## Contact
- Name: {name}
- Company: {company}
- Position: {position}
- Connected: {connected}
- Profile: {url}

## User's Goal
{user_goal}

## Message Requirements
- Type: {message_type} message
- Tone: {tone}
- Key Topics: {key_topics}
- Additional Context: {custom_context}"""


class MessageOutput(BaseModel):
    subject: str = ""
    message: str
    alternatives: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    followUpSuggestions: List[str] = Field(default_factory=list)


def months_since(connected_on: str, now: Optional[datetime] = None) -> Optional[int]:
    """
    Whole 30-day months since a connection date, or None if it does not parse.

    Example:
        >>> months_since("01 Jan 2024", now=datetime(2024, 7, 1, tzinfo=timezone.utc))
        6
    """
    text = (connected_on or "").strip()
    if not text:
        return None

    for fmt in CONNECTED_ON_FORMATS:
        try:
            connected = datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
            break
        except ValueError:
            continue
    else:
        return None

    now = now or datetime.now(timezone.utc)
    return max(0, (now - connected).days // 30)


def message_analytics(message: str) -> Dict[str, int]:
    words = len(message.split())
    return {
        "estimatedLength": len(message),
        "wordCount": words,
        "readingTime": math.ceil(words / WORDS_PER_MINUTE),
    }


class MessageGenerationService(OperationService):
    """Generates one outreach draft per call."""

    operation_name = "generate-message"
    fallback_error_message = "An unexpected error occurred while generating the message"

    def __init__(self, llm: Optional[Any] = None):
        self._llm = llm

    def _get_llm(self) -> Any:
        if self._llm is None:
            self._llm = create_llm(temperature=Config.MESSAGE_TEMPERATURE)
        return self._llm

    def build_messages(
        self,
        contact: Contact,
        user_goal: str,
        message_type: MessageType,
        tone: Tone,
        key_topics: Optional[List[str]] = None,
        custom_context: Optional[str] = None,
    ) -> list:
        months = months_since(contact.connectedOn)
        connected = contact.connectedOn or "unknown"
        if months is not None:
            connected = f"{contact.connectedOn} (approximately {months} months ago)"

        system_prompt = MESSAGE_SYSTEM_PROMPT.format(
            message_type_upper=message_type.upper(),
            type_guidelines=MESSAGE_TYPE_GUIDELINES[message_type],
            tone=tone,
            tone_guidelines=TONE_GUIDELINES[tone],
        )
        user_prompt = MESSAGE_USER_PROMPT.format(
            name=contact.full_name,
            company=contact.company,
            position=contact.position,
            connected=connected,
            url=contact.url,
            user_goal=user_goal,
            message_type=message_type,
            tone=tone,
            key_topics=", ".join(key_topics) if key_topics else "Not specified",
            custom_context=custom_context or "None provided",
        )
        return [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]

    async def execute(
        self,
        contact: Contact,
        user_goal: str,
        message_type: MessageType = "linkedin",
        tone: Tone = "professional",
        key_topics: Optional[List[str]] = None,
        custom_context: Optional[str] = None,
        **kwargs,
    ) -> OperationResult:
        """
        Draft a message for one contact.

        Returns:
            OperationResult whose data holds the draft, metadata and analytics
        """
        run_id = self.create_run_id()
        logger.info(f"[{run_id[:16]}] Generating {message_type}/{tone} message for contact {contact.id}")

        with self.timed_execution() as timer:
            try:
                llm = self._get_llm()
                response = await llm.ainvoke(
                    self.build_messages(contact, user_goal, message_type, tone, key_topics, custom_context)
                )
                output = MessageOutput.model_validate(parse_llm_json(response.content))
            except (ValueError, ValidationError) as e:
                logger.error(f"[{run_id[:16]}] Unusable message output: {e}")
                return self.create_error_result(run_id=run_id, error=e, duration_ms=timer.duration_ms)
            except Exception as e:
                logger.exception(f"[{run_id[:16]}] Message generation failed: {e}")
                return self.create_error_result(run_id=run_id, error=e, duration_ms=timer.duration_ms)

            data = output.model_dump()
            data["metadata"] = {
                "contact": {
                    "name": contact.full_name,
                    "company": contact.company,
                    "position": contact.position,
                },
                "messageType": message_type,
                "tone": tone,
                "userGoal": user_goal,
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "keyTopics": key_topics or [],
            }
            data["analytics"] = message_analytics(output.message)

            logger.info(f"[{run_id[:16]}] Message complete: {len(output.message)} chars")
            return self.create_success_result(
                run_id=run_id,
                data=data,
                duration_ms=timer.duration_ms,
                model_used=Config.AZURE_OPENAI_DEPLOYMENT,
            )

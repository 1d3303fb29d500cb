"""
Networking chat assistant.

Streams free-text replies about the user's network. The user's contacts and
current goal, when given, are appended to the system prompt.
"""

import logging
from typing import Any, AsyncIterator, List, Literal, Optional, Sequence, Tuple

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.common.config import Config
from src.common.llm_factory import classify_ai_error, create_llm
from src.schema.contact import Contact
from src.services.recommendation_service import format_contacts_for_prompt

logger = logging.getLogger(__name__)

ChatRole = Literal["user", "assistant", "system"]

CHAT_SYSTEM_PROMPT = """You are an AI assistant specialized in helping business professionals activate their weak ties and find relevant connections for specific business goals.

Your role is to:
1. Understand the user's business goals and context
2. Analyze their LinkedIn connections to identify relevant contacts
3. Provide intelligent recommendations on who to reach out to
4. Help craft appropriate outreach strategies

Key principles:
- Be concise and actionable in your responses
- Focus on practical networking advice
- Consider geographic, industry, and role relevance
- Suggest specific reasons why each connection might be valuable
- Maintain a professional and helpful tone

When the user shares their goal, analyze their contacts and provide specific recommendations with clear reasoning."""

_ROLE_TO_MESSAGE = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


def build_system_prompt(contacts: Optional[Sequence[Contact]] = None, user_goal: Optional[str] = None) -> str:
    prompt = CHAT_SYSTEM_PROMPT
    if contacts:
        prompt += (
            f"\n\nUser's LinkedIn Connections ({len(contacts)} total):\n"
            + format_contacts_for_prompt(contacts, include_ids=False, include_urls=True)
        )
    if user_goal:
        prompt += f"\n\nUser's Current Goal: {user_goal}"
    return prompt


class ChatService:
    """Streams chat completions token by token."""

    def __init__(self, llm: Optional[Any] = None):
        self._llm = llm

    def _get_llm(self) -> Any:
        if self._llm is None:
            self._llm = create_llm(temperature=Config.CHAT_TEMPERATURE, streaming=True)
        return self._llm

    def build_messages(
        self,
        messages: Sequence[Tuple[ChatRole, str]],
        contacts: Optional[Sequence[Contact]] = None,
        user_goal: Optional[str] = None,
    ) -> List[BaseMessage]:
        history = [SystemMessage(content=build_system_prompt(contacts, user_goal))]
        history.extend(_ROLE_TO_MESSAGE[role](content=content) for role, content in messages)
        return history

    def prepare(self) -> Any:
        """
        Resolve the chat model before streaming starts.

        Raises:
            AIServiceError: Classified configuration failure
        """
        try:
            return self._get_llm()
        except Exception as e:
            raise classify_ai_error(e) from e

    async def stream(
        self,
        messages: Sequence[Tuple[ChatRole, str]],
        contacts: Optional[Sequence[Contact]] = None,
        user_goal: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Yield reply text chunks.

        Args:
            messages: Conversation so far as (role, content) pairs
            contacts: Contacts to describe in the system prompt
            user_goal: Goal to mention in the system prompt

        Raises:
            AIServiceError: Classified provider failure
        """
        llm = self.prepare()
        history = self.build_messages(messages, contacts, user_goal)
        logger.info(f"Chat stream: {len(messages)} messages, {len(contacts or [])} contacts")

        try:
            async for chunk in llm.astream(history):
                if chunk.content:
                    yield chunk.content
        except Exception as e:
            logger.exception(f"Chat stream failed: {e}")
            raise classify_ai_error(e) from e

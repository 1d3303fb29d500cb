"""
Contact Recommendation Service.

Asks the LLM which of the user's contacts are most relevant to a stated
business goal and returns a ranked, validated list.

Usage:
    service = RecommendationService()
    result = await service.execute(
        user_goal="Find investors for a climate-tech startup in Berlin",
        contacts=session.contacts,
        max_recommendations=5,
    )
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field, ValidationError

from src.common.config import Config
from src.common.json_utils import parse_llm_json
from src.common.llm_factory import create_llm
from src.schema.contact import Contact
from src.services.operation_base import OperationResult, OperationService

logger = logging.getLogger(__name__)

MIN_RELEVANCE_SCORE = 30

RECOMMENDATION_SYSTEM_PROMPT = """You are an expert business networking advisor specializing in analyzing LinkedIn connections to find the most relevant people for specific business goals.

## Evaluation Criteria
1. Industry relevance (does their company/role relate to the goal?)
2. Geographic relevance (are they in the target location or have relevant experience?)
3. Seniority/influence (can they make decisions or provide valuable insights?)
4. Network potential (might they know other relevant people?)
5. Expertise alignment (do they have skills/experience relevant to the goal?)

## For Each Recommendation
- Assign a relevance score (0-100, where 100 is a perfect match)
- Provide 2-4 specific reasons why they are relevant
- Suggest a specific, personalized approach for reaching out
- Identify 2-3 key topics to discuss with them

## Requirements
- Only recommend contacts with relevance score >= {min_score}
- Rank by relevance score (highest first)
- Use the exact contact id given for each contact
- Provide realistic and actionable advice

## Output Format
Return ONLY a JSON object:
{{
  "recommendations": [
    {{
      "contactId": "...",
      "name": "...",
      "company": "...",
      "position": "...",
      "relevanceScore": 0,
      "reasons": ["..."],
      "suggestedApproach": "...",
      "keyTopics": ["..."]
    }}
  ],
  "summary": {{
    "totalContacts": 0,
    "recommendedContacts": 0,
    "primaryIndustries": ["..."],
    "geographicRelevance": "..."
  }}
}}"""

RECOMMENDATION_USER_PROMPT = """USER'S GOAL: {user_goal}

CONTACTS TO ANALYZE ({contact_count} total):
{contacts}

TASK: Recommend the top {max_recommendations} most relevant people for the user's goal."""


class Recommendation(BaseModel):
    contactId: str
    name: str
    company: str = ""
    position: str = ""
    relevanceScore: float = Field(..., ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)
    suggestedApproach: str = ""
    keyTopics: List[str] = Field(default_factory=list)


class RecommendationSummary(BaseModel):
    totalContacts: int = 0
    recommendedContacts: int = 0
    primaryIndustries: List[str] = Field(default_factory=list)
    geographicRelevance: str = ""


class RecommendationOutput(BaseModel):
    """Shape the model is asked to return."""

    recommendations: List[Recommendation]
    summary: RecommendationSummary = Field(default_factory=RecommendationSummary)


def format_contacts_for_prompt(contacts: Sequence[Contact], include_ids: bool = True, include_urls: bool = False) -> str:
    """Render contacts as a numbered block for prompts."""
    blocks = []
    for index, contact in enumerate(contacts, start=1):
        lines = [f"{index}. {contact.full_name}"]
        if include_ids:
            lines.append(f"   ID: {contact.id}")
        lines.append(f"   Company: {contact.company}")
        lines.append(f"   Position: {contact.position}")
        lines.append(f"   Connected: {contact.connectedOn}")
        if include_urls:
            lines.append(f"   URL: {contact.url}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def rank_recommendations(
    output: RecommendationOutput,
    contacts: Sequence[Contact],
) -> List[Recommendation]:
    """
    Keep recommendations that point at a known contact, highest score first.

    The sort is stable, so ties keep the model's order.
    """
    known_ids = {c.id for c in contacts}
    valid = [r for r in output.recommendations if r.contactId in known_ids]

    dropped = len(output.recommendations) - len(valid)
    if dropped:
        logger.warning(f"Dropped {dropped} recommendations with unknown contact ids")

    return sorted(valid, key=lambda r: r.relevanceScore, reverse=True)


class RecommendationService(OperationService):
    """Ranks contacts against a business goal with one LLM call."""

    operation_name = "recommend-contacts"
    fallback_error_message = "An unexpected error occurred while generating recommendations"

    def __init__(self, llm: Optional[Any] = None):
        """
        Args:
            llm: Chat model to use; created from Config on first call if None
        """
        self._llm = llm

    def _get_llm(self) -> Any:
        if self._llm is None:
            self._llm = create_llm(temperature=Config.RECOMMENDATION_TEMPERATURE)
        return self._llm

    def build_messages(self, user_goal: str, contacts: Sequence[Contact], max_recommendations: int) -> list:
        system_prompt = RECOMMENDATION_SYSTEM_PROMPT.format(min_score=MIN_RELEVANCE_SCORE)
        user_prompt = RECOMMENDATION_USER_PROMPT.format(
            user_goal=user_goal,
            contact_count=len(contacts),
            contacts=format_contacts_for_prompt(contacts),
            max_recommendations=max_recommendations,
        )
        return [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]

    async def execute(
        self,
        user_goal: str,
        contacts: Sequence[Contact],
        max_recommendations: int = 5,
        **kwargs,
    ) -> OperationResult:
        """
        Recommend contacts for a goal.

        Args:
            user_goal: What the user is trying to achieve
            contacts: Candidate contacts (at least one)
            max_recommendations: Upper bound requested from the model

        Returns:
            OperationResult whose data holds recommendations, summary and metadata
        """
        run_id = self.create_run_id()
        logger.info(
            f"[{run_id[:16]}] Starting recommendations: {len(contacts)} contacts, "
            f"max={max_recommendations}"
        )

        with self.timed_execution() as timer:
            try:
                llm = self._get_llm()
                response = await llm.ainvoke(self.build_messages(user_goal, contacts, max_recommendations))
                output = RecommendationOutput.model_validate(parse_llm_json(response.content))
            except (ValueError, ValidationError) as e:
                logger.error(f"[{run_id[:16]}] Unusable recommendation output: {e}")
                return self.create_error_result(run_id=run_id, error=e, duration_ms=timer.duration_ms)
            except Exception as e:
                logger.exception(f"[{run_id[:16]}] Recommendation call failed: {e}")
                return self.create_error_result(run_id=run_id, error=e, duration_ms=timer.duration_ms)

            ranked = rank_recommendations(output, contacts)
            summary = output.summary.model_copy(
                update={"totalContacts": len(contacts), "recommendedContacts": len(ranked)}
            )

            data: Dict[str, Any] = {
                "recommendations": [r.model_dump() for r in ranked],
                "summary": summary.model_dump(),
                "metadata": {
                    "userGoal": user_goal,
                    "analysisDate": datetime.now(timezone.utc).isoformat(),
                    "requestedCount": max_recommendations,
                    "actualCount": len(ranked),
                },
            }

            logger.info(f"[{run_id[:16]}] Recommendations complete: {len(ranked)} returned")
            return self.create_success_result(
                run_id=run_id,
                data=data,
                duration_ms=timer.duration_ms,
                model_used=Config.AZURE_OPENAI_DEPLOYMENT,
            )

"""
Intelligence Service - Orchestrates prompt -> completion -> parsed result.

Flow per request:
1. Resolve audience context and format the prompt
2. One chat completion through the LLM client (retries live in the client)
3. Parse the completion into the response contract

Upstream errors propagate to the caller; parsing never raises.
"""
from datetime import date
from typing import Callable, Optional

from loguru import logger

from config import settings as default_settings
from constants import audience_context, normalize_audience
from llm import EmptyCompletionError, LLMClient, Message, get_client, set_llm_context
from prompts import get_prompt
from .assembler import assemble_response
from .briefings import format_briefing_date, parse_briefings
from .models import Briefing, IntelligenceResponse, TrendingTopic
from .trending import parse_topics


NO_RESPONSE_TEXT = "I could not generate a response."

# (temperature, max_tokens) per task
INTEL_PARAMS = (0.2, 1500)
BRIEFINGS_PARAMS = (0.3, 2000)
TRENDING_PARAMS = (0.3, 1500)
CHAT_SIMPLE_PARAMS = (0.2, 500)


def _long_date(day: date) -> str:
    """'October 19, 2026'"""
    return f"{day:%B} {day.day}, {day.year}"


class IntelligenceService:
    """
    Entry point for every LLM-backed operation of the API.

    A fresh client is created per operation from `client_factory` and
    closed afterwards. The default factory reads the API key from
    settings and raises ConfigurationError when it is missing.
    """

    def __init__(
        self,
        client_factory: Optional[Callable[..., LLMClient]] = None,
        settings=None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.settings = settings or default_settings
        self.client_factory = client_factory or get_client
        self._today = today or date.today

    async def _complete(
        self,
        task_type: str,
        system: str,
        user_content: str,
        params: tuple[float, int],
        model: Optional[str] = None,
        **options,
    ):
        set_llm_context(task_type=task_type)
        temperature, max_tokens = params
        client = self.client_factory()
        try:
            return await client.chat(
                [Message(role="user", content=user_content)],
                system=system,
                max_tokens=max_tokens,
                temperature=temperature,
                model=model,
                **options,
            )
        finally:
            await client.aclose()

    async def fetch_intel(self, query: str, audience: Optional[str] = None) -> IntelligenceResponse:
        """
        Build a full intelligence brief for a query.

        Args:
            query: Non-empty user question
            audience: Audience label; unknown labels use the CMO focus

        Returns:
            IntelligenceResponse
        """
        audience = normalize_audience(audience, self.settings.DEFAULT_AUDIENCE)
        logger.info(f"Fetching intel for {audience}: {query[:80]}")

        system = get_prompt(
            "chat_intel",
            audience=audience,
            audience_context=audience_context(audience),
        )
        completion = await self._complete(
            "chat_intel", system, query, INTEL_PARAMS,
            model=self.settings.PPLX_MODEL_FAST,
        )
        return assemble_response(completion.content, completion.citations)

    async def generate_briefings(self, audience: Optional[str] = None, limit: Optional[int] = None) -> list[Briefing]:
        """Generate today's briefings for one audience."""
        audience = normalize_audience(audience, self.settings.DEFAULT_AUDIENCE)
        limit = limit or self.settings.BRIEFINGS_LIMIT
        date_str = format_briefing_date(self._today())
        logger.info(f"Generating {limit} briefings for {audience} ({date_str})")

        system = get_prompt(
            "briefings",
            audience=audience,
            audience_context=audience_context(audience),
            limit=limit,
            date=date_str,
        )
        user_content = f"Generate {limit} strategic intelligence briefings for {audience} with fresh market data from today."
        completion = await self._complete(
            "briefings", system, user_content, BRIEFINGS_PARAMS,
            model=self.settings.PPLX_MODEL_FAST,
        )

        briefings = parse_briefings(completion.content, date_str, limit)
        logger.info(f"Generated {len(briefings)} briefings for {audience}")
        return briefings

    async def generate_trending(self, audience: Optional[str] = None, limit: Optional[int] = None) -> list[TrendingTopic]:
        """Generate trending topic suggestions from the last day of news."""
        audience = normalize_audience(audience, self.settings.DEFAULT_AUDIENCE)
        limit = limit or self.settings.BRIEFINGS_LIMIT
        logger.info(f"Generating {limit} trending topics for {audience}")

        system = get_prompt(
            "trending",
            audience=audience,
            audience_context=audience_context(audience),
            limit=limit,
            date=_long_date(self._today()),
        )
        user_content = f"What are the top {limit} trending marketing intelligence topics for {audience} right now?"
        completion = await self._complete(
            "trending", system, user_content, TRENDING_PARAMS,
            model=self.settings.PPLX_MODEL_TRENDING,
            search_recency_filter="day",
        )
        return parse_topics(completion.content, limit)

    async def chat_simple(self, query: str) -> dict:
        """
        Short follow-up answer.

        Returns:
            {"response": str, "citations": list[str]}
        """
        logger.info(f"Chat-simple query: {query[:80]}")
        try:
            completion = await self._complete(
                "chat_simple", get_prompt("chat_simple"), query, CHAT_SIMPLE_PARAMS,
                model=self.settings.PPLX_MODEL_FAST,
            )
        except EmptyCompletionError:
            logger.warning("Chat-simple completion was empty")
            return {"response": NO_RESPONSE_TEXT, "citations": []}

        return {
            "response": completion.content or NO_RESPONSE_TEXT,
            "citations": list(completion.citations or []),
        }

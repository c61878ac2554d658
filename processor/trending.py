"""
Trending Topics Parser - Turn `## TOPIC n` blocks into TrendingTopic records.
"""
import re
from typing import Optional

from loguru import logger

from .models import TrendingTopic


DEFAULT_TOPICS = [
    TrendingTopic("AI Strategy", True, "How is DeepSeek disrupting enterprise AI pricing for marketing teams?"),
    TrendingTopic("Market Trends", True, "What does Google AI Mode mean for 2026 paid search budgets?"),
    TrendingTopic("Revenue Growth", True, "Which brands are winning Q1 2026 with AI-powered personalization?"),
    TrendingTopic("Competitive Analysis", True, "How are agencies repositioning around AI agents vs automation?"),
    TrendingTopic("Brand Intelligence", False, "What zero-party data strategies are driving measurable brand lift?"),
    TrendingTopic("Customer Retention", False, "How are AI chatbots impacting customer retention metrics in 2026?"),
]

_TOPIC_BLOCK = re.compile(r"##[ \t]*TOPIC[ \t]+\d+[^\n]*\n(.*?)(?=##[ \t]*TOPIC[ \t]+\d+|\Z)", re.DOTALL | re.IGNORECASE)
_CATEGORY = re.compile(r"CATEGORY:[ \t]*(.+)", re.IGNORECASE)
_TRENDING = re.compile(r"TRENDING:[ \t]*(YES|NO)\b", re.IGNORECASE)
_SAMPLE_QUERY = re.compile(r"SAMPLE_QUERY:[ \t]*(.+)", re.IGNORECASE)


def default_topics(limit: Optional[int] = None) -> list[TrendingTopic]:
    topics = [TrendingTopic(t.label, t.trending, t.sample_query) for t in DEFAULT_TOPICS]
    return topics[:limit] if limit else topics


def parse_topics(content: str, limit: Optional[int] = None) -> list[TrendingTopic]:
    """
    Parse topic blocks. A missing TRENDING line counts as not trending;
    blocks without CATEGORY or SAMPLE_QUERY are skipped.
    """
    topics: list[TrendingTopic] = []

    for match in _TOPIC_BLOCK.finditer(content or ""):
        block = match.group(1)
        category = _CATEGORY.search(block)
        sample_query = _SAMPLE_QUERY.search(block)
        if not (category and sample_query):
            continue

        trending = _TRENDING.search(block)
        topics.append(TrendingTopic(
            label=category.group(1).strip(),
            trending=bool(trending) and trending.group(1).upper() == "YES",
            sample_query=sample_query.group(1).strip().strip('"'),
        ))

    if not topics:
        logger.warning("Could not parse any trending topics, using defaults")
        return default_topics(limit)

    return topics[:limit] if limit else topics

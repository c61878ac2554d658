"""
Briefings Parser - Turn `## BRIEFING n` blocks into Briefing records.

    ## BRIEFING 1
    CATEGORY: AI Strategy
    TITLE: 62% of CMOs shift budget to AI agents
    DESCRIPTION: Two or three sentences with metrics.
"""
import re
from datetime import date
from typing import Optional

from loguru import logger

from .models import Briefing


MAX_TITLE_LENGTH = 80

DEFAULT_THEMES = [
    "AI Strategy",
    "Market Trends",
    "Revenue Growth",
    "Competitive Analysis",
    "Brand Intelligence",
    "Customer Retention",
]

DEFAULT_DESCRIPTION = (
    "Intelligence briefing generated from real-time market analysis. "
    "Click to explore detailed insights and strategic recommendations."
)

_BRIEFING_BLOCK = re.compile(r"##[ \t]*BRIEFING[ \t]+\d+[^\n]*\n(.*?)(?=##[ \t]*BRIEFING[ \t]+\d+|\Z)", re.DOTALL | re.IGNORECASE)
_CATEGORY = re.compile(r"CATEGORY:[ \t]*(.+)", re.IGNORECASE)
_TITLE = re.compile(r"TITLE:[ \t]*(.+)", re.IGNORECASE)
_DESCRIPTION = re.compile(r"DESCRIPTION:[ \t]*(.+?)(?=\n[ \t]*\n|\n[ \t]*[A-Z_]+:|\Z)", re.IGNORECASE | re.DOTALL)


def format_briefing_date(day: Optional[date] = None) -> str:
    """DD.MM.YYYY"""
    day = day or date.today()
    return day.strftime("%d.%m.%Y")


def briefing_id(index: int) -> str:
    """1 -> 'LOG-001'"""
    return f"LOG-{index:03d}"


def default_briefings(date_str: str, limit: Optional[int] = None) -> list[Briefing]:
    """Generic briefings, one per default theme."""
    briefings = []
    for i, theme in enumerate(DEFAULT_THEMES):
        title = f"Strategic Intelligence: {theme}"
        briefings.append(Briefing(
            id=briefing_id(i + 1),
            date=date_str,
            title=title,
            description=DEFAULT_DESCRIPTION,
            theme=theme,
            query=title,
        ))
    return briefings[:limit] if limit else briefings


def parse_briefings(content: str, date_str: str, limit: Optional[int] = None) -> list[Briefing]:
    """
    Parse briefing blocks; blocks missing CATEGORY, TITLE or DESCRIPTION
    are skipped. Falls back to default briefings when nothing parses.
    """
    briefings: list[Briefing] = []

    for match in _BRIEFING_BLOCK.finditer(content or ""):
        block = match.group(1)
        category = _CATEGORY.search(block)
        title = _TITLE.search(block)
        description = _DESCRIPTION.search(block)
        if not (category and title and description):
            continue

        title_text = title.group(1).strip()[:MAX_TITLE_LENGTH].strip()
        briefings.append(Briefing(
            id=briefing_id(len(briefings) + 1),
            date=date_str,
            title=title_text,
            description=" ".join(description.group(1).split()),
            theme=category.group(1).strip(),
            query=title_text,
        ))

    if not briefings:
        logger.warning("Could not parse any briefings, using defaults")
        return default_briefings(date_str, limit)

    return briefings[:limit] if limit else briefings

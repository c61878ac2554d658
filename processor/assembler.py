"""
Response Assembler - Build an IntelligenceResponse from raw completion text.

Parsing never raises: malformed or unexpected text degrades to fallback
content so the brief always has something to show.
"""
from typing import Optional

from loguru import logger

from .frameworks import parse_frameworks
from .graph_data import build_graph_data
from .models import IntelligenceResponse
from .sections import ACTIONS, FRAMEWORKS, IMPLICATIONS, SIGNALS, extract_section, parse_list
from .signals import fallback_signals, parse_signals


DEFAULT_IMPLICATIONS = [
    "Requires strategic review and action planning",
    "Monitor competitive landscape for similar trends",
]

DEFAULT_ACTIONS = [
    "Schedule team briefing to discuss implications",
    "Analyze internal data to validate findings",
]


def assemble_response(content: str, citations: Optional[list[str]] = None) -> IntelligenceResponse:
    """
    Parse a completion into the /chat-intel response contract.

    Args:
        content: Completion text from the model
        citations: Citation URLs returned with the completion

    Returns:
        IntelligenceResponse with at least one implication and one action
    """
    content = content or ""
    citations = list(citations or [])

    signals = parse_signals(extract_section(content, SIGNALS), citations)
    if not signals:
        signals = fallback_signals(content, citations)
        if signals:
            logger.info(f"No SIGNALS section parsed, synthesized {len(signals)} signals from bullets")

    implications = parse_list(extract_section(content, IMPLICATIONS))
    actions = parse_list(extract_section(content, ACTIONS))
    frameworks = parse_frameworks(extract_section(content, FRAMEWORKS))

    if not implications:
        implications = list(DEFAULT_IMPLICATIONS)
    if not actions:
        actions = list(DEFAULT_ACTIONS)

    response = IntelligenceResponse(
        signals=signals,
        implications=implications,
        actions=actions,
        frameworks=frameworks,
        citations=citations,
        graph_data=build_graph_data(content, signals),
    )

    logger.debug(
        f"Assembled brief: {len(signals)} signals, {len(implications)} implications, "
        f"{len(actions)} actions, {len(frameworks)} frameworks, {len(citations)} citations"
    )
    return response

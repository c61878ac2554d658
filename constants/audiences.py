"""
Audience Constants

Executive personas the briefs are written for. Each audience carries a
focus sentence that is injected into every prompt.
"""
from enum import Enum
from typing import Dict, List, Optional


class Audience(str, Enum):
    """Known executive audiences."""
    CMO = "CMO"
    VP_MARKETING = "VP Marketing"
    BRAND_DIRECTOR = "Brand Director"
    GROWTH_LEADER = "Growth Leader"


DEFAULT_AUDIENCE = Audience.CMO.value


# ============================================
# AUDIENCE CONTEXT (prompt focus)
# ============================================

AUDIENCE_CONTEXT: Dict[str, str] = {
    Audience.CMO.value: "Focus on board-level implications, budget ROI, and strategic positioning.",
    Audience.VP_MARKETING.value: "Focus on operational execution, team resources, and vendor evaluation.",
    Audience.BRAND_DIRECTOR.value: "Focus on brand equity, creative differentiation, and positioning.",
    Audience.GROWTH_LEADER.value: "Focus on acquisition channels, conversion metrics, and retention tactics.",
}

KNOWN_AUDIENCES: List[str] = [a.value for a in Audience]


def normalize_audience(audience: Optional[str], default: str = DEFAULT_AUDIENCE) -> str:
    """Trimmed audience label, or the default when blank."""
    if audience is None:
        return default
    audience = str(audience).strip()
    return audience or default


def audience_context(audience: Optional[str]) -> str:
    """Focus sentence for an audience; unknown audiences get the CMO focus."""
    return AUDIENCE_CONTEXT.get(normalize_audience(audience), AUDIENCE_CONTEXT[DEFAULT_AUDIENCE])

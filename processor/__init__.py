"""
Processor Module - Turns model completions into the API's response contract.

Components:
- sections / signals / frameworks / graph_data: completion text parsers
- assembler: combines the parsers into an IntelligenceResponse
- briefings / trending: daily briefing and topic parsers
- pipeline: IntelligenceService, the prompt -> completion -> parse flow
"""

from .assembler import assemble_response
from .briefings import default_briefings, format_briefing_date, parse_briefings
from .frameworks import parse_frameworks
from .graph_data import build_graph_data, extract_comparisons, extract_metrics, normalize_value
from .models import (
    Briefing,
    ChartDatum,
    Framework,
    GraphData,
    IntelligenceResponse,
    Signal,
    TrendingTopic,
)
from .pipeline import IntelligenceService
from .sections import extract_section, parse_list, remove_section
from .signals import fallback_signals, parse_signals
from .trending import default_topics, parse_topics

__all__ = [
    "IntelligenceService",
    "assemble_response",
    "extract_section",
    "parse_list",
    "remove_section",
    "parse_signals",
    "fallback_signals",
    "parse_frameworks",
    "build_graph_data",
    "extract_comparisons",
    "extract_metrics",
    "normalize_value",
    "parse_briefings",
    "default_briefings",
    "format_briefing_date",
    "parse_topics",
    "default_topics",
    "Signal",
    "Framework",
    "ChartDatum",
    "GraphData",
    "IntelligenceResponse",
    "Briefing",
    "TrendingTopic",
]

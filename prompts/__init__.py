"""
Prompts Module - Centralized prompt management for the intelligence service.

Usage:
    from prompts import get_prompt

    system = get_prompt("chat_intel", audience="CMO", audience_context="...")

Prompt Files:
- chat_intel.md: Full brief (SIGNALS / IMPLICATIONS / ACTIONS / FRAMEWORKS)
- briefings.md: Daily `## BRIEFING n` headlines
- trending.md: `## TOPIC n` trending topic suggestions
- chat_simple.md: Short follow-up answers
"""

from ._loader import PromptLoader, get_prompt, list_prompts, reload_prompts

__all__ = [
    "PromptLoader",
    "get_prompt",
    "list_prompts",
    "reload_prompts",
]

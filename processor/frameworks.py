"""
Framework Parser - Turn the FRAMEWORKS section into Framework records.
"""
import re
from typing import Optional

from .models import Framework
from .sections import parse_list


_FRAMEWORK_BLOCK_SPLIT = re.compile(r"^###[ \t]+", re.MULTILINE)
_PARENTHETICAL = re.compile(r"\(.*\)")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(label: str) -> str:
    """'Digital Strategy' -> 'digital-strategy'."""
    return _NON_SLUG_CHARS.sub("-", label.lower()).strip("-")


def parse_frameworks(section: Optional[str]) -> list[Framework]:
    """
    Parse `### Name` blocks, each followed by dash-prefixed actions.

    A parenthetical in the heading (e.g. "(e.g., Digital Strategy)") is
    dropped from the label. Blocks without any action are discarded.
    """
    if not section:
        return []

    frameworks: list[Framework] = []

    for block in _FRAMEWORK_BLOCK_SPLIT.split(section)[1:]:
        lines = block.strip().splitlines()
        if not lines:
            continue

        label = _PARENTHETICAL.sub("", lines[0]).strip().strip("*").strip()
        actions = parse_list("\n".join(lines[1:]))
        if not label or not actions:
            continue

        frameworks.append(Framework(id=slugify(label), label=label, actions=actions))

    return frameworks

"""
Section Extractor - Split a completion into its `## NAME` sections.

Expected layout of the model output:

    ## SIGNALS
    - Title
    Summary: ...
    Source: Name | URL

    ## IMPLICATIONS
    - ...

    ## FRAMEWORKS
    ### Digital Strategy
    - ...
"""
import re
from typing import Optional


SIGNALS = "SIGNALS"
IMPLICATIONS = "IMPLICATIONS"
ACTIONS = "ACTIONS"
FRAMEWORKS = "FRAMEWORKS"

# A `###` sub-heading does not end a section
_NEXT_HEADING = r"(?=^[ \t]*##(?!#)|\Z)"

_LIST_ITEM_PREFIX = re.compile(r"^-\s*")


def _section_pattern(section_name: str) -> re.Pattern:
    return re.compile(
        rf"^[ \t]*##[ \t]*{re.escape(section_name)}\b[^\n]*\n?(.*?){_NEXT_HEADING}",
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    )


def extract_section(content: str, section_name: str) -> Optional[str]:
    """
    Return the trimmed body of a `## <section_name>` section.

    The heading match is case-insensitive. The body runs until the next
    `##` heading or the end of the text.

    Returns:
        Section body, or None when the heading is absent
    """
    if not content:
        return None

    match = _section_pattern(section_name).search(content)
    if not match:
        return None
    return match.group(1).strip()


def remove_section(content: str, section_name: str) -> str:
    """Return the text with every `## <section_name>` section (heading included) cut out."""
    if not content:
        return content or ""
    return _section_pattern(section_name).sub("", content)


def parse_list(section: Optional[str]) -> list[str]:
    """Return every dash-prefixed line of a section with the dash removed."""
    if not section:
        return []

    items = []
    for line in section.splitlines():
        stripped = line.strip()
        if not stripped.startswith("-"):
            continue
        item = _LIST_ITEM_PREFIX.sub("", stripped)
        if item:
            items.append(item)
    return items

"""
Signal Parser - Turn the SIGNALS section into Signal records.

Each signal block looks like:

    - TikTok Shop Surge
    Summary: Up 340% YoY
    Source: Bloomberg | https://bloomberg.com/x

Missing or placeholder URLs are back-filled from the citation list returned
with the completion, matched by position.
"""
import re
from typing import Optional
from urllib.parse import urlparse

from .models import Signal


PLACEHOLDER_URL = "#"
DEFAULT_SOURCE_NAME = "Industry Analysis"
FALLBACK_SOURCE_NAME = "Analysis"
FALLBACK_SIGNAL_LIMIT = 5
FALLBACK_TITLE_LENGTH = 60

_SIGNAL_BLOCK_SPLIT = re.compile(r"^-[ \t]+", re.MULTILINE)
_BULLET_LINE = re.compile(r"^[-•][ \t]+(\S.*)$", re.MULTILINE)
_SUMMARY_PREFIX = "Summary:"
_SOURCE_PREFIX = "Source:"


def is_valid_url(url: Optional[str]) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not url or url == PLACEHOLDER_URL:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def hostname_of(url: str) -> str:
    """Hostname without a leading `www.`, or empty string."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def _citation_at(citations: list[str], index: int) -> Optional[str]:
    if 0 <= index < len(citations):
        citation = citations[index]
        if isinstance(citation, str) and is_valid_url(citation):
            return citation
    return None


def _clean_title(line: str) -> str:
    return line.strip().strip("*").strip()


def _split_source(source_text: str) -> tuple[str, str]:
    """Split `Name | URL` into its parts; either may be empty."""
    parts = [p.strip() for p in source_text.split("|")]
    name = parts[0] if parts else ""
    url = parts[1] if len(parts) > 1 else ""
    return name, url


def resolve_source(
    source_name: str,
    source_url: str,
    citations: list[str],
    index: int,
) -> tuple[str, str]:
    """
    Decide the final (sourceName, sourceUrl) for the signal at `index`.

    An inline valid URL always wins. Otherwise the citation at the same
    index is used, and its hostname names the source when the model gave
    no name. With neither, the URL is the '#' placeholder.
    """
    if is_valid_url(source_url):
        return source_name or hostname_of(source_url) or DEFAULT_SOURCE_NAME, source_url

    citation = _citation_at(citations, index)
    if citation:
        return source_name or hostname_of(citation) or DEFAULT_SOURCE_NAME, citation

    return source_name or DEFAULT_SOURCE_NAME, PLACEHOLDER_URL


def parse_signals(section: Optional[str], citations: Optional[list[str]] = None) -> list[Signal]:
    """
    Parse a SIGNALS section into Signal records.

    Args:
        section: SIGNALS section body (from extract_section)
        citations: Citation URLs from the completion, in order

    Returns:
        One Signal per `- ` block with a non-empty title
    """
    if not section:
        return []

    citations = citations or []
    signals: list[Signal] = []

    # Text before the first bullet is not a signal
    for block in _SIGNAL_BLOCK_SPLIT.split(section)[1:]:
        lines = [line.strip() for line in block.strip().splitlines() if line.strip()]
        if not lines:
            continue

        title = _clean_title(lines[0])
        if not title:
            continue

        summary_line = next((line for line in lines[1:] if line.startswith(_SUMMARY_PREFIX)), None)
        source_line = next((line for line in lines[1:] if line.startswith(_SOURCE_PREFIX)), None)

        summary = summary_line[len(_SUMMARY_PREFIX):].strip() if summary_line else ""
        source_text = source_line[len(_SOURCE_PREFIX):].strip() if source_line else ""
        source_name, source_url = _split_source(source_text)

        index = len(signals)
        source_name, source_url = resolve_source(source_name, source_url, citations, index)

        signals.append(Signal(
            id=f"SIG-{index + 1}",
            title=title,
            summary=summary,
            source_name=source_name,
            source_url=source_url,
        ))

    return signals


def fallback_signals(content: str, citations: Optional[list[str]] = None) -> list[Signal]:
    """
    Synthesize signals from generic bullet lines anywhere in the text.

    Used when the completion has no usable SIGNALS section.
    """
    if not content:
        return []

    citations = citations or []
    signals: list[Signal] = []

    for index, match in enumerate(_BULLET_LINE.finditer(content)):
        if index >= FALLBACK_SIGNAL_LIMIT:
            break
        text = match.group(1).strip()
        signals.append(Signal(
            id=f"SIG-{index + 1}",
            title=text[:FALLBACK_TITLE_LENGTH].strip(),
            summary=text,
            source_name=FALLBACK_SOURCE_NAME,
            source_url=_citation_at(citations, index) or PLACEHOLDER_URL,
        ))

    return signals

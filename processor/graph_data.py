"""
Graph/Metric Extractor - Pull chartable numbers out of a brief.

Two passes:
1. Comparisons: "<Entity> <number><unit> <words>" anywhere outside ACTIONS,
   plus benchmark phrases ("Industry average 12% ...") tagged as
   "Industry Benchmark".
2. Metrics (only when no comparison was found): the first percentage and
   the first dollar amount in each signal summary.

NOTE: values are normalised onto ONE display axis so a single bar chart can
hold them: B x1000, M x1, K /1000, x x10, % unchanged. This is a display
heuristic, not a unit conversion; "$1.2B" and "38%" end up as 1200 and 38
on the same axis. Existing charts depend on these exact values.
"""
import re
from typing import Iterable, Optional

from loguru import logger

from .models import ChartDatum, GraphData, Signal
from .sections import ACTIONS, remove_section


MAX_CHART_ITEMS = 4
METRIC_LABEL_LENGTH = 24
BENCHMARK_SOURCE = "Industry Benchmark"

UNIT_SCALE = {
    "B": 1000.0,
    "M": 1.0,
    "K": 0.001,
    "x": 10.0,
    "%": 1.0,
}

_NUMBER = r"(?P<number>\d+(?:\.\d+)?)"
# Unit letters must not run into a word ("5 Months" is not 5M)
_UNIT = r"(?P<unit>%|[xBMK](?![A-Za-z]))?"
_WORD = r"[A-Za-z0-9][\w'’-]*"

_COMPARISON = re.compile(
    r"\b(?P<entity>[A-Z][A-Za-z&'’]*(?:[ \t]+[A-Z][A-Za-z&'’]*){0,3})"
    r"[ \t]+(?P<dollar>\$)?" + _NUMBER + _UNIT +
    r"(?P<context>(?:[ \t]+" + _WORD + r"){1,3})"
)

_BENCHMARK = re.compile(
    r"\b(?P<entity>[Ii]ndustry[ \t]+[Aa]verage|[Aa]verage|[Bb]enchmark)\b"
    r"[ \t]*(?:of|is|was|at|:|=)?[ \t]*(?P<dollar>\$)?" + _NUMBER + _UNIT +
    r"(?P<context>(?:[ \t]+" + _WORD + r"){0,3})"
)

_PERCENT = re.compile(_NUMBER + r"[ \t]*%")
_DOLLAR = re.compile(r"\$" + _NUMBER + r"[ \t]*(?P<unit>[BMK](?![A-Za-z]))?")
_TRAILING_WORDS = re.compile(r"(?:[ \t]+" + _WORD + r"(?!\w)){1,3}")

# Leading words that are not entities ("Up 340% YoY", "The Nike ...")
_ENTITY_STOPWORDS = {
    "a", "about", "almost", "an", "and", "around", "at", "by", "down", "for",
    "from", "in", "just", "nearly", "of", "on", "only", "or", "over", "since",
    "some", "source", "summary", "than", "the", "to", "under", "up", "with",
}
_BENCHMARK_WORDS = {"average", "industry", "benchmark"}


def normalize_value(number: float, unit: Optional[str] = None) -> float:
    """
    Put a number on the shared display scale.

    "38%" -> 38, "$1.2B" -> 1200, "65B" -> 65000, "3x" -> 30.
    Whole values come back as int so they serialise as 38, not 38.0.
    """
    scale = UNIT_SCALE.get(unit or "", 1.0)
    value = round(float(number) * scale, 4)
    return int(value) if value.is_integer() else value


def _display_unit(dollar: Optional[str], unit: Optional[str]) -> str:
    return f"{dollar or ''}{unit or ''}"


def _looks_like_year(number: str, dollar: Optional[str], unit: Optional[str]) -> bool:
    if dollar or unit or "." in number:
        return False
    return 1900 <= int(number) <= 2100


def _clean_entity(entity: str) -> str:
    """Drop leading stopwords; empty when nothing entity-like is left."""
    words = entity.split()
    while words and words[0].lower() in _ENTITY_STOPWORDS:
        words.pop(0)
    if any(w.lower() in _BENCHMARK_WORDS for w in words):
        return ""
    return " ".join(words)


def _dedupe(items: Iterable[ChartDatum]) -> list[ChartDatum]:
    seen = set()
    unique = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        unique.append(item)
    return unique


def extract_comparisons(text: str) -> list[ChartDatum]:
    """
    Find entity comparisons and benchmark figures in free text.

    The ACTIONS section is skipped: its bullets are recommendations, not
    observed figures.

    Returns:
        Comparisons in text order, then benchmarks, deduplicated by
        (label, context)
    """
    if not text:
        return []

    text = remove_section(text, ACTIONS)

    comparisons: list[ChartDatum] = []
    for match in _COMPARISON.finditer(text):
        number, dollar, unit = match.group("number"), match.group("dollar"), match.group("unit")
        if _looks_like_year(number, dollar, unit):
            continue

        entity = _clean_entity(match.group("entity"))
        if not entity:
            continue

        comparisons.append(ChartDatum(
            label=entity,
            value=normalize_value(float(number), unit),
            unit=_display_unit(dollar, unit),
            context=match.group("context").strip(),
        ))

    benchmarks: list[ChartDatum] = []
    for match in _BENCHMARK.finditer(text):
        entity = " ".join(match.group("entity").split())
        benchmarks.append(ChartDatum(
            label=entity[0].upper() + entity[1:],
            value=normalize_value(float(match.group("number")), match.group("unit")),
            unit=_display_unit(match.group("dollar"), match.group("unit")),
            context=match.group("context").strip(),
            source=BENCHMARK_SOURCE,
        ))

    return _dedupe(comparisons + benchmarks)


def _metric_label(title: str) -> str:
    """Signal title shortened on a word boundary."""
    title = " ".join(title.split())
    if len(title) <= METRIC_LABEL_LENGTH:
        return title
    cut = title[:METRIC_LABEL_LENGTH].rsplit(" ", 1)[0]
    return cut.rstrip(" ,:;-") or title[:METRIC_LABEL_LENGTH]


def _phrase(text: str, match: re.Match) -> str:
    """The matched figure plus up to three following words."""
    trailing = _TRAILING_WORDS.match(text, match.end())
    phrase = match.group(0) + (trailing.group(0) if trailing else "")
    return " ".join(phrase.split())


def extract_metrics(signals: Iterable[Signal]) -> list[ChartDatum]:
    """
    One metric per signal per match type (percentage, dollar amount).

    Only the first match of each type in a summary is used.
    """
    metrics: list[ChartDatum] = []

    for signal in signals:
        summary = signal.summary or ""
        if not summary:
            continue
        label = _metric_label(signal.title)

        percent = _PERCENT.search(summary)
        if percent:
            metrics.append(ChartDatum(
                label=label,
                value=normalize_value(float(percent.group("number")), "%"),
                unit="%",
                context=_phrase(summary, percent),
            ))

        dollar = _DOLLAR.search(summary)
        if dollar:
            unit = dollar.group("unit")
            metrics.append(ChartDatum(
                label=label,
                value=normalize_value(float(dollar.group("number")), unit),
                unit=_display_unit("$", unit),
                context=_phrase(summary, dollar),
            ))

    return _dedupe(metrics)


def build_graph_data(text: str, signals: Iterable[Signal]) -> Optional[GraphData]:
    """
    Comparisons if any (max 4), else signal metrics (max 4), else None.
    """
    comparisons = extract_comparisons(text)
    if comparisons:
        logger.debug(f"Graph data: {len(comparisons)} comparisons found")
        return GraphData(comparisons=comparisons[:MAX_CHART_ITEMS])

    metrics = extract_metrics(signals)
    if metrics:
        logger.debug(f"Graph data: {len(metrics)} signal metrics found")
        return GraphData(metrics=metrics[:MAX_CHART_ITEMS])

    return None

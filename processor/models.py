"""
Data models for the intelligence processor.

Every model exposes `to_dict()` returning the camelCase JSON contract
consumed by the frontend.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Signal:
    """A single cited data point inside a brief."""
    id: str
    title: str
    summary: str = ""
    source_name: str = ""
    source_url: str = "#"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "sourceName": self.source_name,
            "sourceUrl": self.source_url,
        }


@dataclass
class Framework:
    """A named group of recommended action steps."""
    id: str
    label: str
    actions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "actions": list(self.actions),
        }


@dataclass
class ChartDatum:
    """
    One bar on the brief's chart.

    `value` is on the shared display scale (see graph_data.normalize_value),
    so percentages, dollar amounts and multipliers share one axis.
    """
    label: str
    value: float
    unit: str
    context: str
    source: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.label.lower(), self.context.lower())

    def to_dict(self) -> dict:
        data = {
            "label": self.label,
            "value": self.value,
            "unit": self.unit,
            "context": self.context,
        }
        if self.source:
            data["source"] = self.source
        return data


@dataclass
class GraphData:
    """Chart payload: either comparisons or per-signal metrics, never both."""
    comparisons: list[ChartDatum] = field(default_factory=list)
    metrics: list[ChartDatum] = field(default_factory=list)

    def to_dict(self) -> dict:
        if self.comparisons:
            return {"comparisons": [c.to_dict() for c in self.comparisons]}
        return {"metrics": [m.to_dict() for m in self.metrics]}


@dataclass
class IntelligenceResponse:
    """The assembled brief returned by /chat-intel."""
    signals: list[Signal] = field(default_factory=list)
    implications: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)
    frameworks: list[Framework] = field(default_factory=list)
    citations: list[str] = field(default_factory=list)
    graph_data: Optional[GraphData] = None

    def to_dict(self) -> dict:
        data = {
            "signals": [s.to_dict() for s in self.signals],
            "implications": list(self.implications),
            "actions": list(self.actions),
            "citations": list(self.citations),
        }
        if self.frameworks:
            data["frameworks"] = [f.to_dict() for f in self.frameworks]
        if self.graph_data:
            data["graphData"] = self.graph_data.to_dict()
        return data


@dataclass
class Briefing:
    """A daily headline-sized intelligence item."""
    id: str
    date: str
    title: str
    description: str
    theme: str
    query: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "description": self.description,
            "theme": self.theme,
            "query": self.query,
        }


@dataclass
class TrendingTopic:
    """A topic suggestion for the search box."""
    label: str
    trending: bool
    sample_query: str

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "trending": self.trending,
            "sampleQuery": self.sample_query,
        }

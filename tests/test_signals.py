"""Tests for signal parsing and source resolution."""
from processor.signals import (
    DEFAULT_SOURCE_NAME,
    PLACEHOLDER_URL,
    fallback_signals,
    hostname_of,
    is_valid_url,
    parse_signals,
    resolve_source,
)


class TestUrlHelpers:

    def test_is_valid_url(self):
        assert is_valid_url("https://bloomberg.com/x")
        assert is_valid_url("http://example.org")
        assert not is_valid_url("#")
        assert not is_valid_url("")
        assert not is_valid_url(None)
        assert not is_valid_url("bloomberg.com/x")
        assert not is_valid_url("ftp://files.example.com")

    def test_hostname_strips_www(self):
        assert hostname_of("https://www.reuters.com/y") == "reuters.com"
        assert hostname_of("https://news.example.com/a") == "news.example.com"


class TestResolveSource:
    """Test suite for resolve_source."""

    def test_inline_url_wins_over_citation(self):
        name, url = resolve_source("Bloomberg", "https://bloomberg.com/x", ["https://reuters.com/y"], 0)
        assert (name, url) == ("Bloomberg", "https://bloomberg.com/x")

    def test_citation_backfills_missing_url(self):
        name, url = resolve_source("Reuters", "", ["https://reuters.com/y"], 0)
        assert (name, url) == ("Reuters", "https://reuters.com/y")

    def test_citation_hostname_names_unnamed_source(self):
        name, url = resolve_source("", "#", ["https://www.reuters.com/y"], 0)
        assert (name, url) == ("reuters.com", "https://www.reuters.com/y")

    def test_no_url_and_no_citation(self):
        assert resolve_source("", "", [], 0) == (DEFAULT_SOURCE_NAME, PLACEHOLDER_URL)

    def test_invalid_citation_is_ignored(self):
        assert resolve_source("Gartner", "", ["not-a-url"], 0) == ("Gartner", PLACEHOLDER_URL)


class TestParseSignals:
    """Test suite for parse_signals."""

    SECTION = (
        "- TikTok Shop Surge\n"
        "Summary: Up 340% YoY\n"
        "Source: Bloomberg | https://bloomberg.com/x\n"
        "\n"
        "- **Retail Media**\n"
        "Summary: Growing fast\n"
        "Source: eMarketer\n"
        "\n"
        "- Third Signal\n"
        "Summary: No source given"
    )

    def test_parses_each_block(self):
        citations = ["https://reuters.com/y", "https://www.emarketer.com/z"]
        signals = parse_signals(self.SECTION, citations)

        assert [s.id for s in signals] == ["SIG-1", "SIG-2", "SIG-3"]
        assert [s.title for s in signals] == ["TikTok Shop Surge", "Retail Media", "Third Signal"]
        assert signals[0].summary == "Up 340% YoY"

    def test_sources_resolved_by_position(self):
        citations = ["https://reuters.com/y", "https://www.emarketer.com/z"]
        signals = parse_signals(self.SECTION, citations)

        assert signals[0].source_url == "https://bloomberg.com/x"
        assert signals[0].source_name == "Bloomberg"
        assert signals[1].source_url == "https://www.emarketer.com/z"
        assert signals[1].source_name == "eMarketer"
        assert signals[2].source_url == PLACEHOLDER_URL
        assert signals[2].source_name == DEFAULT_SOURCE_NAME

    def test_preamble_is_not_a_signal(self):
        signals = parse_signals("Here are the signals:\n- Only One\nSummary: s", [])
        assert len(signals) == 1
        assert signals[0].title == "Only One"

    def test_missing_summary_is_empty(self):
        signals = parse_signals("- Just A Title", [])
        assert signals[0].summary == ""

    def test_empty_section(self):
        assert parse_signals(None, []) == []
        assert parse_signals("", ["https://a.com"]) == []

    def test_to_dict_uses_camel_case(self):
        signal = parse_signals("- T\nSummary: s\nSource: N | https://n.com", [])[0]
        assert signal.to_dict() == {
            "id": "SIG-1",
            "title": "T",
            "summary": "s",
            "sourceName": "N",
            "sourceUrl": "https://n.com",
        }


class TestFallbackSignals:
    """Test suite for fallback_signals."""

    def test_builds_signals_from_any_bullets(self):
        content = "Some intro text\n- First point about growth\n• Second point\n"
        signals = fallback_signals(content, ["https://a.com/1"])

        assert [s.summary for s in signals] == ["First point about growth", "Second point"]
        assert signals[0].source_url == "https://a.com/1"
        assert signals[1].source_url == PLACEHOLDER_URL
        assert all(s.source_name == "Analysis" for s in signals)

    def test_caps_at_five_and_truncates_titles(self):
        long_text = "x" * 100
        content = "\n".join(f"- {long_text} {i}" for i in range(8))
        signals = fallback_signals(content, [])

        assert len(signals) == 5
        assert all(len(s.title) <= 60 for s in signals)
        assert signals[0].summary == f"{long_text} 0"

    def test_no_bullets(self):
        assert fallback_signals("plain paragraph only", []) == []

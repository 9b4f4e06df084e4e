"""Tests for Anthropic Messages API event parsing."""

from types import SimpleNamespace

from ensemble_stream.providers.anthropic.parsers import AnthropicStreamParser, format_web_search_results
from ensemble_stream.streaming.types import (
    CitationAdded,
    ReasoningDelta,
    ReasoningDone,
    StreamFailed,
    TextDelta,
    TextDone,
    ToolArgumentsDelta,
    ToolArgumentsDone,
    ToolCallAdded,
    Unrecognized,
    UsageReported,
)
from tests.helpers.streaming_mocks import (
    anthropic_event,
    anthropic_message_end,
    anthropic_message_start,
    anthropic_text_block,
    anthropic_thinking_block,
    anthropic_tool_block,
)


def parse_all(parser, events):
    out = []
    for event in events:
        out.extend(parser.parse(event))
    return out


class TestAnthropicStreamParser:

    def setup_method(self):
        self.parser = AnthropicStreamParser("claude-sonnet-4-20250514")

    def test_text_stream(self):
        events = parse_all(self.parser, (
            [anthropic_message_start("msg_a", input_tokens=12)]
            + anthropic_text_block(0, ["Hello", " there"])
            + anthropic_message_end(output_tokens=4)
        ))

        assert events[:2] == [TextDelta("msg_a", "Hello"), TextDelta("msg_a", " there")]
        assert events[2] == TextDone("msg_a")
        assert isinstance(events[3], UsageReported)
        assert events[3].usage["input_tokens"] == 12
        assert events[3].usage["output_tokens"] == 4

    def test_usage_counters_take_maximum(self):
        events = parse_all(self.parser, [
            anthropic_message_start("msg_a", input_tokens=20),
            anthropic_event("message_delta", delta=SimpleNamespace(stop_reason=None),
                            usage={"output_tokens": 9}),
            anthropic_event("message_delta", delta=SimpleNamespace(stop_reason="end_turn"),
                            usage={"input_tokens": 0, "output_tokens": 15}),
            anthropic_event("message_stop"),
        ])

        usage = [e for e in events if isinstance(e, UsageReported)]
        assert len(usage) == 1
        assert usage[0].usage["input_tokens"] == 20
        assert usage[0].usage["output_tokens"] == 15

    def test_no_usage_without_tokens(self):
        parser = AnthropicStreamParser("claude-3-5-haiku")
        assert parser.parse(anthropic_event("message_stop")) == []

    def test_thinking_block(self):
        events = parse_all(self.parser, [anthropic_message_start("msg_a")]
                           + anthropic_thinking_block(0, ["Let me", " think"], signature="abc"))

        assert events == [
            ReasoningDelta("msg_a", 0, "Let me"),
            ReasoningDelta("msg_a", 0, " think"),
            ReasoningDone("msg_a", 0, signature="abc"),
        ]

    def test_interleaved_thinking_blocks_get_separate_indexes(self):
        events = parse_all(self.parser, (
            [anthropic_message_start("msg_a")]
            + anthropic_thinking_block(0, ["first"])
            + anthropic_text_block(1, ["answer"])
            + anthropic_thinking_block(2, ["second"])
        ))

        done = [e for e in events if isinstance(e, ReasoningDone)]
        assert [d.summary_index for d in done] == [0, 1]

    def test_tool_use_block(self):
        events = parse_all(self.parser, [anthropic_message_start("msg_a")]
                           + anthropic_tool_block(0, "toolu_1", "get_weather", ['{"city":', ' "Oslo"}']))

        assert events == [
            ToolCallAdded("toolu_1", "toolu_1", "get_weather"),
            ToolArgumentsDelta("toolu_1", '{"city":'),
            ToolArgumentsDelta("toolu_1", ' "Oslo"}'),
            ToolArgumentsDone("toolu_1", '{"city": "Oslo"}'),
        ]

    def test_tool_use_without_arguments(self):
        events = parse_all(self.parser, anthropic_tool_block(0, "toolu_1", "ping", []))
        assert events[-1] == ToolArgumentsDone("toolu_1", "{}")

    def test_tool_only_stream_has_no_message_complete(self):
        events = parse_all(self.parser, (
            [anthropic_message_start("msg_a")]
            + anthropic_tool_block(0, "toolu_1", "ping", ["{}"])
            + anthropic_message_end()
        ))
        assert not any(isinstance(e, TextDone) for e in events)

    def test_citation_delta(self):
        self.parser.parse(anthropic_message_start("msg_a"))
        event = anthropic_event(
            "content_block_delta", index=0,
            delta=SimpleNamespace(type="citations_delta",
                                  citation=SimpleNamespace(url="https://a.example", title="A")),
        )
        assert self.parser.parse(event) == [CitationAdded("msg_a", "https://a.example", "A")]

    def test_web_search_results_become_text(self):
        self.parser.parse(anthropic_message_start("msg_a"))
        block = SimpleNamespace(type="web_search_tool_result", content=[
            {"type": "web_search_result", "title": "Python", "url": "https://python.org"},
        ])
        events = self.parser.parse(anthropic_event("content_block_start", index=0, content_block=block))

        assert events == [TextDelta("msg_a", "\n\nSearch Results:\n1. Python – https://python.org\n")]

    def test_refusal(self):
        event = anthropic_event("message_delta", delta=SimpleNamespace(stop_reason="refusal"), usage=None)
        assert self.parser.parse(event) == [
            StreamFailed("Claude refusal error: the model declined to respond", "refusal")
        ]

    def test_error_event(self):
        event = anthropic_event("error", error=SimpleNamespace(type="overloaded_error", message="Overloaded"))
        assert self.parser.parse(event) == [StreamFailed("Claude API error: Overloaded", "overloaded_error")]

    def test_message_id_generated_when_missing(self):
        events = parse_all(self.parser, anthropic_text_block(0, ["x"]) + [anthropic_event("message_stop")])
        assert events[0].item_id.startswith("msg_")
        assert events[-1] == TextDone(events[0].item_id)

    def test_unknown_events(self):
        assert self.parser.parse(anthropic_event("ping")) == [Unrecognized("ping")]


class TestFormatWebSearchResults:

    def test_skips_non_results(self):
        results = [
            {"type": "web_search_result", "title": "A", "url": "https://a"},
            {"type": "web_search_tool_result_error"},
            {"type": "web_search_result", "url": "https://b"},
        ]
        assert format_web_search_results(results) == "1. A – https://a\n2. Untitled – https://b"

    def test_non_list(self):
        assert format_web_search_results(None) == ""

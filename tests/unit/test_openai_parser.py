"""Tests for OpenAI Responses API event parsing."""

from types import SimpleNamespace

from ensemble_stream.providers.openai.parsers import OpenAIResponsesParser
from ensemble_stream.streaming.types import (
    CitationAdded,
    ReasoningDelta,
    ReasoningDone,
    ReasoningItemDone,
    StreamFailed,
    TextDelta,
    TextDone,
    ToolArgumentsDelta,
    ToolArgumentsDone,
    ToolCallAdded,
    Unrecognized,
    UsageReported,
)
from tests.helpers.streaming_mocks import openai_completed_event, openai_event


class TestOpenAIResponsesParser:

    def setup_method(self):
        self.parser = OpenAIResponsesParser("gpt-4.1")

    def test_text_delta_and_done(self):
        assert self.parser.parse(openai_event("response.output_text.delta", item_id="msg_1", delta="Hi")) == [
            TextDelta("msg_1", "Hi")
        ]
        assert self.parser.parse(openai_event("response.output_text.done", item_id="msg_1", text="Hi")) == [
            TextDone("msg_1", "Hi")
        ]

    def test_accepts_plain_dicts(self):
        event = {"type": "response.output_text.delta", "item_id": "msg_1", "delta": "x"}
        assert self.parser.parse(event) == [TextDelta("msg_1", "x")]

    def test_function_call_lifecycle(self):
        added = openai_event(
            "response.output_item.added",
            item=SimpleNamespace(type="function_call", id="fc_1", call_id="call_1", name="lookup"),
        )
        assert self.parser.parse(added) == [ToolCallAdded("fc_1", "call_1", "lookup")]
        assert self.parser.parse(
            openai_event("response.function_call_arguments.delta", item_id="fc_1", delta='{"a"')
        ) == [ToolArgumentsDelta("fc_1", '{"a"')]
        assert self.parser.parse(
            openai_event("response.function_call_arguments.done", item_id="fc_1", arguments='{"a": 1}')
        ) == [ToolArgumentsDone("fc_1", '{"a": 1}')]

    def test_message_item_added_is_unrecognized(self):
        added = openai_event("response.output_item.added", item=SimpleNamespace(type="message", id="msg_1"))
        assert self.parser.parse(added) == [Unrecognized("response.output_item.added")]

    def test_reasoning_summary(self):
        delta = openai_event("response.reasoning_summary_text.delta", item_id="rs_1", summary_index=1, delta="Hm")
        done = openai_event("response.reasoning_summary_text.done", item_id="rs_1", summary_index=1, text="Hm.")

        assert self.parser.parse(delta) == [ReasoningDelta("rs_1", 1, "Hm")]
        assert self.parser.parse(done) == [ReasoningDone("rs_1", 1, "Hm.")]

    def test_reasoning_item_done_counts_summaries(self):
        done = openai_event("response.output_item.done",
                            item=SimpleNamespace(type="reasoning", id="rs_1", summary=[]))
        assert self.parser.parse(done) == [ReasoningItemDone("rs_1", 0)]

    def test_url_citation(self):
        event = openai_event(
            "response.output_text.annotation.added",
            item_id="msg_1",
            annotation={"type": "url_citation", "url": "https://a.example", "title": "A"},
        )
        assert self.parser.parse(event) == [CitationAdded("msg_1", "https://a.example", "A")]

    def test_file_citation_is_unrecognized(self):
        event = openai_event("response.output_text.annotation.added", item_id="msg_1",
                             annotation={"type": "file_citation", "file_id": "f1"})
        assert isinstance(self.parser.parse(event)[0], Unrecognized)

    def test_completed_reports_usage(self):
        events = self.parser.parse(openai_completed_event(input_tokens=7, output_tokens=3))
        assert len(events) == 1
        assert isinstance(events[0], UsageReported)
        assert events[0].usage["input_tokens"] == 7

    def test_completed_without_usage(self):
        event = openai_event("response.completed", response=SimpleNamespace(usage=None))
        assert self.parser.parse(event) == []

    def test_failed(self):
        event = openai_event(
            "response.failed",
            response=SimpleNamespace(error=SimpleNamespace(code="server_error", message="boom")),
        )
        assert self.parser.parse(event) == [
            StreamFailed("OpenAI response failed: [server_error] boom", "server_error")
        ]

    def test_incomplete(self):
        event = openai_event(
            "response.incomplete",
            response=SimpleNamespace(incomplete_details=SimpleNamespace(reason="max_output_tokens")),
        )
        assert self.parser.parse(event) == [
            StreamFailed("OpenAI response incomplete: max_output_tokens", "incomplete")
        ]

    def test_refusal(self):
        event = openai_event("response.refusal.done", refusal="I can't help with that")
        assert self.parser.parse(event) == [
            StreamFailed("OpenAI refusal error: I can't help with that", "refusal")
        ]

    def test_error_event(self):
        event = openai_event("error", code="rate_limit_exceeded", message="slow down")
        assert self.parser.parse(event) == [
            StreamFailed("OpenAI API error (gpt-4.1): [rate_limit_exceeded] slow down", "rate_limit_exceeded")
        ]

    def test_lifecycle_events_are_unrecognized(self):
        for kind in ("response.created", "response.in_progress", "response.content_part.added"):
            assert self.parser.parse(openai_event(kind)) == [Unrecognized(kind)]

"""Tests for the command line interface."""

import json
from unittest.mock import patch

from ensemble_stream.cli import main
from ensemble_stream.models.events import ErrorEvent, MessageDeltaEvent


SCHEMA = {
    "type": "object",
    "properties": {
        "city": {"type": "string", "minLength": 2},
        "days": {"type": "integer", "optional": True},
    },
}


class FakeClient:
    def __init__(self, events):
        self.events = events

    async def stream(self, messages, model, agent=None):
        for event in self.events:
            yield event


class TestSchemaCommand:

    def test_schema(self, tmp_path, capsys):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(SCHEMA))

        assert main(["schema", str(path)]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["required"] == ["city", "days"]
        assert output["properties"]["city"] == {"type": "string"}

    def test_schema_tool_mode(self, tmp_path, capsys):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(SCHEMA))

        assert main(["schema", str(path), "--tool"]) == 0
        assert json.loads(capsys.readouterr().out)["required"] == ["city"]

    def test_schema_rejects_non_object(self, tmp_path, capsys):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(["string"]))

        assert main(["schema", str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Schema must be a JSON object" in captured.err


class TestStreamCommand:

    def test_prints_text(self, capsys):
        client = FakeClient([MessageDeltaEvent(content="Hello"), MessageDeltaEvent(content=" world")])
        with patch("ensemble_stream.cli.EnsembleClient", return_value=client):
            assert main(["stream", "gpt-4.1", "Hi"]) == 0

        assert capsys.readouterr().out == "Hello world\n"

    def test_events_mode(self, capsys):
        client = FakeClient([MessageDeltaEvent(content="Hi", message_id="m1")])
        with patch("ensemble_stream.cli.EnsembleClient", return_value=client):
            main(["stream", "gpt-4.1", "Hi", "--events"])

        line = json.loads(capsys.readouterr().out.strip())
        assert line["type"] == "message_delta"
        assert line["content"] == "Hi"

    def test_error_sets_exit_code(self, capsys):
        client = FakeClient([ErrorEvent(error="No provider available for model: llama")])
        with patch("ensemble_stream.cli.EnsembleClient", return_value=client):
            assert main(["stream", "llama", "Hi"]) == 1

        assert "No provider available" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

"""CLI entry point for Ensemble Stream."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from .agents.models.agent_definition import AgentDefinition, ModelSettings
from .agents.tools.schema_utils import strict_schema, strict_tool_parameters
from .api.client import EnsembleClient
from .errors import SchemaTranslationError
from .models.events import MessageDeltaEvent, ThinkingDeltaEvent, ErrorEvent


async def stream_text(model: str, prompt: str, max_tokens: Optional[int] = None,
                      temperature: Optional[float] = None, events: bool = False,
                      show_thinking: bool = False) -> int:
    """Stream a response, printing text or canonical events as JSON lines."""
    client = EnsembleClient()
    agent = AgentDefinition(
        model_settings=ModelSettings(max_tokens=max_tokens, temperature=temperature)
    )

    exit_code = 0
    async for event in client.stream(prompt, model, agent):
        if events:
            print(json.dumps(event.to_dict(), default=str), flush=True)
        elif isinstance(event, MessageDeltaEvent):
            print(event.content, end='', flush=True)
        elif isinstance(event, ThinkingDeltaEvent) and show_thinking:
            print(event.thinking_content, end='', file=sys.stderr, flush=True)
        if isinstance(event, ErrorEvent):
            if not events:
                print(f"\nError: {event.error}", file=sys.stderr)
            exit_code = 1
    if not events:
        print()  # New line at the end
    return exit_code


def translate_schema(path: str, keep_optional: bool) -> int:
    """Print the strict-mode translation of a JSON schema file."""
    with open(path, encoding="utf-8") as f:
        schema = json.load(f)
    try:
        translated = strict_tool_parameters(schema) if keep_optional else strict_schema(schema)
    except SchemaTranslationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    print(json.dumps(translated, indent=2))
    return 0


def main(argv=None) -> int:
    """Main CLI function."""
    parser = argparse.ArgumentParser(description="Ensemble Stream CLI")
    parser.add_argument('--log-level', default='WARNING', help='Logging level (default: WARNING)')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    stream_parser = subparsers.add_parser('stream', help='Stream a response from a model')
    stream_parser.add_argument('model', help='Model id, e.g. "gpt-4.1" or "claude-sonnet-4-20250514-high"')
    stream_parser.add_argument('prompt', help='Text prompt')
    stream_parser.add_argument('--max-tokens', type=int, help='Maximum tokens to generate')
    stream_parser.add_argument('--temperature', type=float, help='Temperature (0.0-2.0)')
    stream_parser.add_argument('--events', action='store_true', help='Print canonical events as JSON lines')
    stream_parser.add_argument('--thinking', action='store_true', help='Echo reasoning to stderr')

    schema_parser = subparsers.add_parser('schema', help='Translate a JSON schema to strict mode')
    schema_parser.add_argument('path', help='Path to a JSON schema file')
    schema_parser.add_argument('--tool', action='store_true',
                               help='Keep top-level optional properties out of "required"')

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.command == 'stream':
        return asyncio.run(stream_text(
            args.model,
            args.prompt,
            args.max_tokens,
            args.temperature,
            args.events,
            args.thinking,
        ))
    elif args.command == 'schema':
        return translate_schema(args.path, args.tool)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())

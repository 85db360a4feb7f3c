"""CLI entry point for chat-segments."""

import logging
import sys
from pathlib import Path

import typer

from .models import DEFAULT_REASONING_TAG_PAIRS, ParserConfig

APP_HELP = """
Split chat message content into text, reasoning and tool-call segments.

\b
Input is the raw message body as the chat server streams it, with
reasoning and tool calls embedded as <details> blocks. Pass - to read
from stdin.
"""

SEGMENTS_HELP = """
Output the parsed message as JSON.

\b
Examples:
  # List segment kinds in order
  chat-segments segments message.txt | jq '[.segments[].kind]'

  # Tool call names and arguments
  chat-segments segments message.txt | jq '[.segments[] | select(.kind == "tool_call") | .entry | {name, arguments}]'

  # Detect bare <think> tags as reasoning too
  chat-segments segments message.txt --raw-tags
"""

app = typer.Typer(add_completion=False, help=APP_HELP)


def read_content(input_path: Path) -> str:
    """Read message content from a file, or stdin for `-`."""
    if str(input_path) == "-":
        return sys.stdin.read()
    if not input_path.exists():
        typer.echo(f"Error: File not found: {input_path}", err=True)
        raise typer.Exit(1)
    return input_path.read_text(encoding="utf-8")


def build_config(raw_tags: bool, keep_sentinels: bool) -> ParserConfig:
    return ParserConfig(
        raw_reasoning_tags=DEFAULT_REASONING_TAG_PAIRS if raw_tags else (),
        strip_sentinels=not keep_sentinels,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log parser decisions to stderr"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
        )


@app.command(help=SEGMENTS_HELP)
def segments(
    input_path: Path = typer.Argument(..., help="Message file, or - for stdin"),
    output: Path | None = typer.Option(None, "-o", "--output", help="Output JSON file path"),
    compact: bool = typer.Option(False, "--compact", help="No indentation (for piping)"),
    raw_tags: bool = typer.Option(
        False, "--raw-tags", help="Treat bare <think>/<reasoning> tags as reasoning blocks"
    ),
    keep_sentinels: bool = typer.Option(
        False, "--keep-sentinels", help="Don't strip the typing indicator and search banner"
    ),
) -> None:
    from .parser import parse_message
    from .renderer import render_json

    content = read_content(input_path)
    parsed = parse_message(content, build_config(raw_tags, keep_sentinels))
    json_str = render_json(parsed, compact=compact)

    if output is None:
        typer.echo(json_str)
    else:
        output.write_text(json_str, encoding="utf-8")
        typer.echo(f"Written to {output}", err=True)


@app.command(help="Print the message as plain text for text-to-speech.")
def speech(
    input_path: Path = typer.Argument(..., help="Message file, or - for stdin"),
) -> None:
    from .parser import parse_message

    parsed = parse_message(read_content(input_path))
    typer.echo(parsed.speech_text)


@app.command(help="Print a markdown digest of the message's tool calls and text.")
def summary(
    input_path: Path = typer.Argument(..., help="Message file, or - for stdin"),
    raw_tags: bool = typer.Option(
        False, "--raw-tags", help="Treat bare <think>/<reasoning> tags as reasoning blocks"
    ),
) -> None:
    from .parser import parse_message
    from .renderer import render_summary

    parsed = parse_message(read_content(input_path), build_config(raw_tags, False))
    typer.echo(render_summary(parsed))


if __name__ == "__main__":
    app()

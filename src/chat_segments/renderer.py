"""JSON and markdown export of parsed messages."""

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from .models import ParsedMessage, TextSegment

ARGUMENTS_MAX_LEN = 400
RESULT_MAX_LEN = 800


def pretty_value(value: Any, max_len: int = 600) -> str:
    """Indented JSON for a decoded attribute, truncated with an ellipsis."""
    if value is None:
        return ""
    try:
        pretty = json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        raw = str(value)
        return raw[:max_len] + "…" if len(raw) > max_len else raw
    if len(pretty) > max_len:
        return pretty[:max_len] + "\n…"
    return pretty


def message_to_dict(parsed: ParsedMessage) -> dict:
    """Convert a ParsedMessage to a JSON-ready dict."""
    return {
        "content": parsed.content,
        "truncated_at": parsed.truncated_at,
        "segments": [segment.model_dump(mode="json") for segment in parsed.segments],
        "speech_text": parsed.speech_text,
    }


def render_json(parsed: ParsedMessage, compact: bool = False) -> str:
    """Render a parsed message as a JSON string."""
    return json.dumps(message_to_dict(parsed), indent=None if compact else 2, ensure_ascii=False)


def _environment() -> Environment:
    template_dir = Path(__file__).parent / "templates"
    return Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_summary(parsed: ParsedMessage) -> str:
    """Render a markdown digest: tool calls with their payloads, then the text."""
    template = _environment().get_template("summary.md.j2")

    tool_calls = [
        {
            "name": call.name,
            "done": call.done,
            "arguments": pretty_value(call.arguments, ARGUMENTS_MAX_LEN),
            "result": pretty_value(call.result, RESULT_MAX_LEN),
        }
        for call in parsed.tool_calls
    ]
    texts = [s.text.strip() for s in parsed.segments if isinstance(s, TextSegment)]
    main_content = "\n\n".join(t for t in texts if t)

    return template.render(tool_calls=tool_calls, main_content=main_content).strip()

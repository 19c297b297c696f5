"""
Model output parsing - models wrap JSON in Markdown fences more often than not.
"""

import json
import re
from typing import Any

_FENCE = re.compile(r"```json|```")


class OutputParseError(ValueError):
    """Model output was not the JSON the prompt asked for."""


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` marker and surrounding whitespace."""
    return _FENCE.sub("", text or "").strip()


def parse_json_output(text: str) -> Any:
    """Parse fenced or bare JSON from a model response."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise OutputParseError("Model returned an empty response")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise OutputParseError(f"Model response is not valid JSON: {exc.msg}") from exc

"""
Small text helpers shared by the plugins, orchestrator and calendar service.
"""

import json
import re
from typing import Any, Optional

_FENCE = re.compile(r"^\s*```[\w-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def shorten(text: Optional[str], max_length: int = 30) -> str:
    """Collapse newlines and cut `text` to `max_length` characters plus '...'."""
    if not text:
        return ""
    text = text.replace("\r\n", " ").replace("\n", " ").strip()
    return text if len(text) <= max_length else text[:max_length] + "..."


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```) if present."""
    match = _FENCE.match(text or "")
    return match.group(1).strip() if match else (text or "").strip()


def parse_json_reply(text: str) -> Any:
    """
    Parse a JSON document returned by an LLM.

    Raises:
        ValueError: if the reply is not valid JSON
    """
    return json.loads(strip_code_fences(text))

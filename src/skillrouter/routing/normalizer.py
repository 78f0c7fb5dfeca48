"""Prompt extraction and normalization for hook input.

The hook receives either the Claude Code ``UserPromptSubmit`` JSON payload
or plain text on stdin. The prompt is read from ``prompt`` first, then
``user_prompt``; anything else (plain text, malformed JSON, JSON that is not
an object, empty fields) falls back to the raw text. Normalization never
raises.
"""

from __future__ import annotations

import json
import logging

logger = logging.getLogger(__name__)

PROMPT_KEYS: tuple[str, ...] = ("prompt", "user_prompt")


def extract_prompt(raw: str | None) -> str:
    """Return the prompt carried by ``raw``, or ``raw`` itself."""
    if raw is None:
        return ""
    try:
        data = json.loads(raw)
    except (ValueError, TypeError):
        logger.debug("Hook input is not JSON, using raw text")
        return raw

    if not isinstance(data, dict):
        return raw

    for key in PROMPT_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value

    return raw


def normalize_prompt(raw: str | None) -> str:
    """Extract the prompt and lower-case it for case-insensitive matching."""
    return extract_prompt(raw).lower()


__all__ = ["PROMPT_KEYS", "extract_prompt", "normalize_prompt"]

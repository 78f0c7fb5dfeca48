"""First-match-wins rule matching.

Rules are hand-ordered so that specific triggers precede general ones, so
the first rule whose pattern is found in the text wins and later rules are
never inspected.
"""

from __future__ import annotations

from collections.abc import Iterable

from skillrouter.routing.models import ModelRule


def match(normalized_text: str, rules: Iterable[ModelRule]) -> ModelRule | None:
    """Return the first rule whose pattern is found in ``normalized_text``."""
    if not normalized_text:
        return None
    for rule in rules:
        if rule.matches(normalized_text):
            return rule
    return None


__all__ = ["match"]

# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Claude Code hook envelope for dispatch results.

A matched directive is rendered as the ``UserPromptSubmit`` hook output the
host reads from stdout::

    {
      "hookSpecificOutput": {
        "hookEventName": "UserPromptSubmit",
        "additionalContext": "<skill-instruction>\\nACTIVATE SKILL: ...\\n</skill-instruction>"
      }
    }

A ``ModelNoOp`` renders to ``None``: the hook prints nothing and the prompt
continues unchanged.
"""

from __future__ import annotations

from typing import Any

from skillrouter.routing.enums import EnumChainKind
from skillrouter.routing.models import DispatchResult, ModelDirective

DEFAULT_HOOK_EVENT = "UserPromptSubmit"
ACTIVATION_PREFIX = "⚡ SKILL_ACTIVATED:"


def _chain_line(directive: ModelDirective) -> str | None:
    if directive.chain == EnumChainKind.NONE:
        return None
    # Drop the "activate <id>; " head, the skill line already names it.
    _, _, tail = directive.instruction.partition("; ")
    return tail or None


def render_skill_instruction(directive: ModelDirective) -> str:
    """Render the ``<skill-instruction>`` block for a directive."""
    lines = [
        "<skill-instruction>",
        f"ACTIVATE SKILL: {directive.capability_id}",
        f"READ: {directive.resource_path}",
    ]
    if directive.follow:
        lines.append(f"FOLLOW: {directive.follow}")
    chain = _chain_line(directive)
    if chain:
        lines.append(f"CHAIN: {chain}")
    lines.append(f"OUTPUT: {ACTIVATION_PREFIX} {directive.output_marker}")
    lines.append("</skill-instruction>")
    return "\n".join(lines)


def render_hook_output(
    result: DispatchResult, event_name: str = DEFAULT_HOOK_EVENT
) -> dict[str, Any] | None:
    """Return the hook JSON envelope, or ``None`` when nothing matched."""
    if not isinstance(result, ModelDirective):
        return None
    return {
        "hookSpecificOutput": {
            "hookEventName": event_name,
            "additionalContext": render_skill_instruction(result),
        }
    }


__all__ = [
    "ACTIVATION_PREFIX",
    "DEFAULT_HOOK_EVENT",
    "render_hook_output",
    "render_skill_instruction",
]

"""Claude Code hook integration for SkillRouter."""

from __future__ import annotations

from skillrouter.hooks.hook_output import render_hook_output, render_skill_instruction

__all__ = [
    "render_hook_output",
    "render_skill_instruction",
]

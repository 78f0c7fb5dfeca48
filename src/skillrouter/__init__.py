"""SkillRouter - rule-driven skill activation for Claude Code hooks.

This package routes a user prompt to one capability of a fixed skill
catalog, emits a directive describing it, and encodes the follow-on
capabilities (sequential, conditional or fan-out) the host should run next.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("skillrouter")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

"""Command-line interface for SkillRouter."""

from skillrouter.cli.main import cli, main

__all__ = ["cli", "main"]

# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""SkillRouter CLI.

Commands:

    hook        Claude Code UserPromptSubmit hook: read stdin, print the
                skill-instruction envelope when a rule matches. Always exits 0.
    dispatch    Print the directive payload (or {"matched": false}) as JSON.
    validate    Load and validate the rule table; exit 1 on any problem.
    rules       List the rule table in match order.
    resolve     Resolve a PASS/FAIL outcome for a capability's chain and
                write a debt record when the FAIL branch asks for one.

Usage::

    echo '{"prompt": "debug this"}' | skillrouter hook
    skillrouter dispatch "I have a bug in login"
    skillrouter --rules .claude/hooks/skill-rules.yaml validate
    skillrouter resolve agent-audit-graph --outcome fail --slug missing-retries

Hook settings (``.claude/settings.json``)::

    {"hooks": {"UserPromptSubmit": [{"hooks": [
        {"type": "command", "command": "skillrouter hook"}]}]}}
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from skillrouter.config.settings import Settings, get_settings
from skillrouter.hooks.hook_output import render_hook_output
from skillrouter.lib.errors import (
    ChainResolutionError,
    DebtRecordError,
    RuleTableValidationError,
)
from skillrouter.outcomes.debt_recorder import DebtRecorder
from skillrouter.outcomes.router import OutcomeRouter
from skillrouter.routing.dispatcher import Dispatcher
from skillrouter.routing.enums import EnumOutcome
from skillrouter.routing.loader import RuleTableLoadError
from skillrouter.routing.models import ModelNextCapability

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _settings(ctx: click.Context) -> Settings:
    """Return the validated settings or exit 1 with the configuration error."""
    obj = ctx.ensure_object(dict)
    settings = obj.get("settings")
    if settings is None:
        error = obj.get("settings_error")
        error_console.print(f"[red]Configuration error:[/red] {error}")
        sys.exit(1)
    return settings


def _hook_settings(ctx: click.Context) -> Settings:
    """Return the validated settings, or defaults when the environment is invalid."""
    obj = ctx.ensure_object(dict)
    settings = obj.get("settings")
    if settings is not None:
        return settings
    logger.warning("Falling back to default settings for the hook")
    return Settings.model_construct(rules_path=obj.get("rules_path"))


def _load_dispatcher(ctx: click.Context) -> Dispatcher:
    """Load the dispatcher or exit 1 with the configuration problem."""
    try:
        return Dispatcher.from_settings(_settings(ctx))
    except (RuleTableLoadError, RuleTableValidationError) as e:
        error_console.print(f"[red]Rule table error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.option(
    "--rules",
    "rules_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML rule table (defaults to SKILLROUTER_RULES_PATH or the bundled table).",
)
@click.pass_context
def cli(ctx: click.Context, rules_path: Path | None) -> None:
    """Rule-driven skill activation for Claude Code."""
    obj = ctx.ensure_object(dict)
    obj["rules_path"] = rules_path
    try:
        settings = get_settings()
    except ValidationError as e:
        # Commands report this themselves; the hook falls back to defaults.
        _configure_logging("WARNING")
        logger.warning("Invalid SKILLROUTER_* settings: %s", e)
        obj["settings"] = None
        obj["settings_error"] = e
        return
    if rules_path is not None:
        settings = settings.model_copy(update={"rules_path": rules_path})
    _configure_logging(settings.log_level)
    obj["settings"] = settings


# ---------------------------------------------------------------------------
# hook
# ---------------------------------------------------------------------------


@cli.command("hook")
@click.pass_context
def hook_cmd(ctx: click.Context) -> None:
    """Run as a UserPromptSubmit hook. Never blocks the prompt."""
    try:
        settings = _hook_settings(ctx)
        raw = click.get_text_stream("stdin").read()
        result = Dispatcher.from_settings(settings).dispatch(raw)
        envelope = render_hook_output(result, settings.hook_event_name)
        if envelope is not None:
            click.echo(json.dumps(envelope, ensure_ascii=False))
    except Exception:
        logger.exception("Skill activation hook failed, continuing normally")
    sys.exit(0)


# ---------------------------------------------------------------------------
# dispatch
# ---------------------------------------------------------------------------


@cli.command("dispatch")
@click.argument("text", required=False)
@click.option(
    "--capability",
    default=None,
    help="Build the directive for a chained capability id instead of matching TEXT.",
)
@click.pass_context
def dispatch_cmd(ctx: click.Context, text: str | None, capability: str | None) -> None:
    """Print the directive for TEXT (or stdin) as JSON."""
    dispatcher = _load_dispatcher(ctx)
    if capability is not None:
        result = dispatcher.dispatch_capability(capability)
    else:
        raw = text if text is not None else click.get_text_stream("stdin").read()
        result = dispatcher.dispatch(raw)
    click.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command("validate")
@click.pass_context
def validate_cmd(ctx: click.Context) -> None:
    """Load and validate the rule table."""
    settings = _settings(ctx)
    problems = settings.validate_paths()
    if problems:
        for problem in problems:
            error_console.print(f"[red]✗[/red] {problem}")
        sys.exit(1)

    dispatcher = _load_dispatcher(ctx)
    table = dispatcher.rule_table
    console.print(
        f"[green]✓[/green] {len(table)} rule(s), "
        f"{len(table.capability_ids)} capability id(s)"
    )


# ---------------------------------------------------------------------------
# rules
# ---------------------------------------------------------------------------


@cli.command("rules")
@click.pass_context
def rules_cmd(ctx: click.Context) -> None:
    """List rules in match order."""
    table = _load_dispatcher(ctx).rule_table

    grid = Table(title="Skill rules (first match wins)")
    grid.add_column("#", justify="right")
    grid.add_column("Capability")
    grid.add_column("Tier")
    grid.add_column("Chain")
    grid.add_column("Targets")
    grid.add_column("Marker")
    for index, rule in enumerate(table):
        grid.add_row(
            str(index),
            rule.capability_id,
            rule.tier or "",
            rule.chain.kind,
            ", ".join(rule.chain.targets()),
            rule.output_marker,
        )
    console.print(grid)


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


@cli.command("resolve")
@click.argument("capability_id", metavar="CAPABILITY")
@click.option(
    "--outcome",
    required=True,
    type=click.Choice([o.value for o in EnumOutcome], case_sensitive=False),
    help="Outcome reported by the host for CAPABILITY.",
)
@click.option("--slug", default=None, help="Issue slug for a debt record.")
@click.option("--context", "context_text", default="", help="Free-text debt context.")
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the resolved action without writing a debt record.",
)
@click.pass_context
def resolve_cmd(
    ctx: click.Context,
    capability_id: str,
    outcome: str,
    slug: str | None,
    context_text: str,
    dry_run: bool,
) -> None:
    """Resolve OUTCOME for CAPABILITY's chain directive."""
    settings = _settings(ctx)
    router = OutcomeRouter(_load_dispatcher(ctx).rule_table)

    try:
        resolution = router.resolve(capability_id, outcome.lower(), slug)
    except ChainResolutionError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    if resolution is None:
        click.echo(json.dumps({"next": None}))
        return

    if isinstance(resolution, ModelNextCapability):
        click.echo(json.dumps({"next": resolution.capability_id}))
        return

    if dry_run:
        click.echo(json.dumps({"debt": resolution.model_dump(mode="json")}))
        return

    recorder = DebtRecorder(settings.debt_root, settings.default_debt_severity)
    try:
        path = recorder.write(resolution, context=context_text)
    except DebtRecordError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)
    click.echo(json.dumps({"debt_record": path.as_posix()}))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

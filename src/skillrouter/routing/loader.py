# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Rule table loader.

Reads the static YAML rule configuration once at startup and returns a
validated ``RuleTable``. Parsing problems raise ``RuleTableLoadError``;
whole-table problems (bad regex, dangling chain target, duplicates) raise
``RuleTableValidationError``. Either way the process should abort before
accepting any input.

Configuration format::

    version: 1
    skills_root: .claude/skills        # optional
    rules:
      - capability: systematic-debugging
        pattern: '\\bdebug|\\bbug\\b|traceback'
        marker: "#DBG-3F7K"
        follow: "Four-phase debugging"
      - capability: agent-audit-graph
        pattern: 'audit.?agent'
        marker: "#AUDT-8K3M"
        chain:
          kind: conditional
          on_pass: agent-tester
          on_fail: {action: create_debt_record, capability_id: graph-agent}

Usage:
    >>> loader = RuleTableLoader()             # bundled table
    >>> table = loader.load()
    >>> table = RuleTableLoader(Path("rules.yaml")).load()
"""

from __future__ import annotations

import logging
from importlib.resources import files
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from skillrouter.routing.models import (
    CAPABILITY_ID_PATTERN,
    ChainDirective,
    ModelChainNone,
    ModelRule,
)
from skillrouter.routing.rule_table import RuleTable

logger = logging.getLogger(__name__)

BUNDLED_RULES_NAME = "rules.yaml"
DEFAULT_SKILLS_ROOT = ".claude/skills"


class RuleTableLoadError(Exception):
    """Raised when the rule configuration cannot be read or parsed.

    Attributes:
        path: Path (or resource name) of the configuration that failed.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, path: Path | str, cause: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.path = path
        self.cause = cause


class ModelRuleEntry(BaseModel):
    """One rule as written in the YAML configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    capability: str = Field(..., pattern=CAPABILITY_ID_PATTERN)
    pattern: str = Field(..., min_length=1)
    marker: str = Field(..., min_length=1)
    resource: str | None = Field(default=None, min_length=1)
    follow: str = ""
    tier: str | None = None
    chain: ChainDirective = Field(default_factory=ModelChainNone)

    def to_rule(self, skills_root: str) -> ModelRule:
        resource = self.resource or (
            f"{skills_root.rstrip('/')}/{self.capability}/SKILL.md"
        )
        return ModelRule(
            capability_id=self.capability,
            pattern=self.pattern,
            resource_path=resource,
            output_marker=self.marker,
            chain=self.chain,
            follow=self.follow,
            tier=self.tier,
        )


class ModelRuleTableConfig(BaseModel):
    """Top-level YAML document."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = Field(default=1, ge=1)
    skills_root: str | None = None
    rules: list[ModelRuleEntry] = Field(..., min_length=1)


class RuleTableLoader:
    """Loader for the rule table configuration.

    Attributes:
        path: YAML file to load, or ``None`` for the bundled table.
        skills_root: Root used to derive resource paths for rules that do
            not declare one. A ``skills_root`` in the YAML document wins.
    """

    def __init__(
        self,
        path: Path | None = None,
        skills_root: str = DEFAULT_SKILLS_ROOT,
    ) -> None:
        self._path = path
        self._skills_root = skills_root

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def source_name(self) -> str:
        if self._path is None:
            return f"<bundled {BUNDLED_RULES_NAME}>"
        return str(self._path)

    def _read_text(self) -> str:
        if self._path is None:
            resource = files("skillrouter") / "data" / BUNDLED_RULES_NAME
            return resource.read_text(encoding="utf-8")
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise RuleTableLoadError(
                f"Rule table file not found: {self._path}",
                path=self._path,
                cause=e,
            ) from e
        except OSError as e:
            raise RuleTableLoadError(
                f"Cannot read rule table file: {self._path}",
                path=self._path,
                cause=e,
            ) from e

    def load_config(self) -> ModelRuleTableConfig:
        """Read and schema-validate the YAML document.

        Raises:
            RuleTableLoadError: If the file cannot be read, parsed or validated.
        """
        source = self.source_name
        logger.debug("Loading rule table from: %s", source)

        try:
            raw_data: Any = yaml.safe_load(self._read_text())
        except yaml.YAMLError as e:
            raise RuleTableLoadError(
                f"Invalid YAML in rule table: {source}", path=source, cause=e
            ) from e

        if raw_data is None:
            raise RuleTableLoadError(f"Rule table is empty: {source}", path=source)

        if not isinstance(raw_data, dict):
            raise RuleTableLoadError(
                f"Rule table must be a YAML mapping, got "
                f"{type(raw_data).__name__}: {source}",
                path=source,
            )

        try:
            return ModelRuleTableConfig.model_validate(raw_data)
        except ValidationError as e:
            error_details = []
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                error_details.append(f"  - {loc}: {error['msg']}")
            raise RuleTableLoadError(
                f"Rule table validation failed for {source}:\n"
                + "\n".join(error_details),
                path=source,
                cause=e,
            ) from e

    def load(self) -> RuleTable:
        """Load, build and validate the rule table.

        Raises:
            RuleTableLoadError: If the configuration cannot be parsed.
            RuleTableValidationError: If the table fails validation.
        """
        config = self.load_config()
        skills_root = config.skills_root or self._skills_root
        table = RuleTable(entry.to_rule(skills_root) for entry in config.rules)
        logger.info(
            "Loaded rule table v%d: %d rule(s) from %s",
            config.version,
            len(table),
            self.source_name,
        )
        return table


__all__ = [
    "BUNDLED_RULES_NAME",
    "DEFAULT_SKILLS_ROOT",
    "ModelRuleEntry",
    "ModelRuleTableConfig",
    "RuleTableLoadError",
    "RuleTableLoader",
]

# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Dispatcher: entry point of skill routing.

Pipeline: normalize → match → build directive, or ``ModelNoOp`` when no rule
matches. The dispatcher is stateless: it holds only the immutable rule
table, so ``dispatch`` is a pure function of its input and may be called
concurrently.

Chain directives are hints for the host. The host re-enters
``dispatch_capability`` for the next capability as a fresh, independent
call; there is no multi-step state inside the dispatcher.

``dispatch`` never raises. Any unexpected failure is logged and degrades to
``ModelNoOp`` so that a hook never blocks the host pipeline.

Usage::

    dispatcher = Dispatcher.from_settings()
    result = dispatcher.dispatch('{"prompt": "I have a bug in login"}')
    if result.matched:
        print(result.capability_id)
"""

from __future__ import annotations

import logging

from skillrouter.config.settings import Settings, get_settings
from skillrouter.routing.directive_builder import DEFAULT_DEBT_ROOT, build_directive
from skillrouter.routing.loader import RuleTableLoader
from skillrouter.routing.matcher import match
from skillrouter.routing.models import DispatchResult, ModelNoOp
from skillrouter.routing.normalizer import normalize_prompt
from skillrouter.routing.rule_table import RuleTable

logger = logging.getLogger(__name__)


class Dispatcher:
    """Stateless intent dispatcher over a validated rule table."""

    def __init__(self, rule_table: RuleTable, debt_root: str = DEFAULT_DEBT_ROOT) -> None:
        """Wrap ``rule_table``, validating it first if that has not happened yet.

        Raises:
            RuleTableValidationError: If the table fails validation.
        """
        if not rule_table.validated:
            rule_table.validate()
        self._rule_table = rule_table
        self._debt_root = debt_root

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Dispatcher:
        """Load the configured rule table and build a dispatcher.

        Raises:
            RuleTableLoadError: If the configuration cannot be parsed.
            RuleTableValidationError: If the table fails validation.
        """
        settings = settings or get_settings()
        loader = RuleTableLoader(settings.rules_path, skills_root=settings.skills_root)
        return cls(loader.load(), debt_root=settings.debt_root.as_posix())

    @property
    def rule_table(self) -> RuleTable:
        return self._rule_table

    def dispatch(self, raw_input: str | None) -> DispatchResult:
        """Route one utterance to a directive, or ``ModelNoOp``."""
        try:
            text = normalize_prompt(raw_input)
            rule = match(text, self._rule_table)
            if rule is None:
                logger.debug("No skill matched")
                return ModelNoOp()
            logger.info(
                "Skill matched: %s (%s)", rule.capability_id, rule.output_marker
            )
            return build_directive(rule, self._debt_root)
        except Exception:
            logger.exception("Dispatch failed, continuing without a skill")
            return ModelNoOp()

    def dispatch_capability(self, capability_id: str) -> DispatchResult:
        """Build the directive for a chained capability by id.

        Uses the first rule declaring ``capability_id``. Unknown ids yield
        ``ModelNoOp``.
        """
        rule = self._rule_table.first_rule_for(capability_id)
        if rule is None:
            logger.warning("Chained capability not in rule table: %s", capability_id)
            return ModelNoOp()
        return build_directive(rule, self._debt_root)


__all__ = ["Dispatcher"]

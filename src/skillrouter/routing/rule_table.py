# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Immutable, validated rule table.

Rules are kept in declaration order; order is part of the matching
contract. The table is validated as a whole before it is handed to a
dispatcher, and every problem is reported in a single
``RuleTableValidationError``:

- pattern that does not compile
- duplicate ``(pattern, capability_id)`` pair
- chain target that is not the capability of any rule in the table
- output marker used by more than one rule
- capability declared twice with a different resource path or chain
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from skillrouter.lib.errors import RuleTableValidationError
from skillrouter.routing.models import ModelRule, compile_pattern

logger = logging.getLogger(__name__)


class RuleTable:
    """Ordered, read-only sequence of rules.

    Example:
        >>> table = RuleTable([rule_a, rule_b])
        >>> table.first_rule_for("systematic-debugging")
    """

    def __init__(self, rules: Iterable[ModelRule], *, validate: bool = True) -> None:
        self._rules: tuple[ModelRule, ...] = tuple(rules)
        self._capability_ids = frozenset(r.capability_id for r in self._rules)
        self._validated = False
        if validate:
            self.validate()

    @property
    def rules(self) -> tuple[ModelRule, ...]:
        return self._rules

    @property
    def validated(self) -> bool:
        return self._validated

    @property
    def capability_ids(self) -> frozenset[str]:
        return self._capability_ids

    def __iter__(self) -> Iterator[ModelRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, capability_id: object) -> bool:
        return capability_id in self._capability_ids

    def rules_for(self, capability_id: str) -> tuple[ModelRule, ...]:
        return tuple(r for r in self._rules if r.capability_id == capability_id)

    def first_rule_for(self, capability_id: str) -> ModelRule | None:
        for rule in self._rules:
            if rule.capability_id == capability_id:
                return rule
        return None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def find_problems(self) -> list[str]:
        """Run every validation check and return the problems found."""
        problems: list[str] = []
        seen_pairs: set[tuple[str, str]] = set()
        markers: dict[str, str] = {}
        definitions: dict[str, ModelRule] = {}

        for index, rule in enumerate(self._rules):
            where = f"rule #{index} ({rule.capability_id})"

            try:
                compile_pattern(rule.pattern)
            except re.error as e:
                problems.append(f"{where}: invalid pattern {rule.pattern!r}: {e}")

            pair = (rule.pattern, rule.capability_id)
            if pair in seen_pairs:
                problems.append(
                    f"{where}: duplicate rule for pattern {rule.pattern!r}"
                )
            seen_pairs.add(pair)

            owner = markers.get(rule.output_marker)
            if owner is not None:
                problems.append(
                    f"{where}: output marker {rule.output_marker!r} already "
                    f"used by {owner}"
                )
            else:
                markers[rule.output_marker] = rule.capability_id

            for target in rule.chain.targets():
                if target not in self._capability_ids:
                    problems.append(
                        f"{where}: chain target {target!r} is not a capability "
                        "in this table"
                    )

            first = definitions.get(rule.capability_id)
            if first is None:
                definitions[rule.capability_id] = rule
            elif (
                first.resource_path != rule.resource_path
                or first.chain != rule.chain
            ):
                problems.append(
                    f"{where}: capability declared again with a different "
                    "resource path or chain"
                )
            else:
                logger.warning(
                    "Capability %s declared by more than one rule (%s)",
                    rule.capability_id,
                    where,
                )

        return problems

    def validate(self) -> None:
        """Validate the whole table.

        Raises:
            RuleTableValidationError: If any problem is found.
        """
        problems = self.find_problems()
        if problems:
            raise RuleTableValidationError(problems)
        self._validated = True
        logger.debug(
            "Rule table valid: %d rule(s), %d capability id(s)",
            len(self._rules),
            len(self._capability_ids),
        )


__all__ = ["RuleTable"]

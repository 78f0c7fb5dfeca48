# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Outcome router for chained capabilities.

The host runs a capability and reports PASS or FAIL. The router resolves
that outcome against the capability's chain directive:

    none         -> None (terminal)
    sequential   -> next capability, whatever the outcome
    conditional  -> on_pass / on_fail branch; a debt action is bound to its
                    owning capability and returned for the debt recorder
    fanout       -> ChainResolutionError (no single successor)

Only the branch selected by the outcome is ever returned.
"""

from __future__ import annotations

import logging

from skillrouter.lib.errors import ChainResolutionError
from skillrouter.routing.enums import EnumOutcome
from skillrouter.routing.models import (
    ChainDirective,
    ModelChainConditional,
    ModelChainFanOut,
    ModelChainSequential,
    ModelCreateDebtRecord,
    ModelDirective,
    ModelNextCapability,
)
from skillrouter.routing.rule_table import RuleTable

logger = logging.getLogger(__name__)

OutcomeResolution = ModelNextCapability | ModelCreateDebtRecord | None


def resolve_chain(
    owner_capability_id: str,
    chain: ChainDirective,
    outcome: EnumOutcome | str,
    slug: str | None = None,
) -> OutcomeResolution:
    """Resolve ``outcome`` against ``chain`` declared by ``owner_capability_id``.

    Raises:
        ChainResolutionError: For fan-out chains, or an unknown outcome.
    """
    try:
        outcome = EnumOutcome(outcome)
    except ValueError as e:
        raise ChainResolutionError(
            f"Unknown outcome {outcome!r}; expected 'pass' or 'fail'",
            capability_id=owner_capability_id,
        ) from e

    if isinstance(chain, ModelChainSequential):
        return ModelNextCapability(capability_id=chain.next)

    if isinstance(chain, ModelChainConditional):
        branch = chain.on_pass if outcome is EnumOutcome.PASS else chain.on_fail
        logger.debug(
            "Outcome %s for %s resolved to %s",
            outcome.value,
            owner_capability_id,
            branch,
        )
        if isinstance(branch, ModelCreateDebtRecord):
            return branch.bind(owner_capability_id, slug)
        return ModelNextCapability(capability_id=branch)

    if isinstance(chain, ModelChainFanOut):
        raise ChainResolutionError(
            f"Fan-out chain of {owner_capability_id} has no single successor; "
            f"dispatch each of {', '.join(chain.next)}",
            capability_id=owner_capability_id,
            targets=list(chain.next),
        )

    return None


class OutcomeRouter:
    """Resolve reported outcomes against a rule table's chain directives."""

    def __init__(self, rule_table: RuleTable) -> None:
        self._rule_table = rule_table

    def resolve(
        self,
        capability_id: str,
        outcome: EnumOutcome | str,
        slug: str | None = None,
    ) -> OutcomeResolution:
        """Resolve ``outcome`` for the first rule declaring ``capability_id``.

        Raises:
            ChainResolutionError: If the capability is unknown or the chain
                cannot be resolved to a single successor.
        """
        rule = self._rule_table.first_rule_for(capability_id)
        if rule is None:
            raise ChainResolutionError(
                f"Capability not in rule table: {capability_id}",
                capability_id=capability_id,
            )
        return resolve_chain(capability_id, rule.chain, outcome, slug)

    def resolve_directive(
        self,
        directive: ModelDirective,
        outcome: EnumOutcome | str,
        slug: str | None = None,
    ) -> OutcomeResolution:
        """Resolve ``outcome`` against the chain carried by ``directive``."""
        return resolve_chain(
            directive.capability_id, directive.chain_directive, outcome, slug
        )


__all__ = ["OutcomeResolution", "OutcomeRouter", "resolve_chain"]

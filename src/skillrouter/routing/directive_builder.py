# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Directive construction from a matched rule.

The instruction text is a direct function of the rule's chain directive:

    none         activate <id>; no further action
    sequential   activate <id>; after completion, activate <next>
    conditional  activate <id>; on PASS → <pass>; on FAIL → <fail>
    fanout       activate <id>; after completion, activate all of <a>, <b>

Referential integrity is checked when the rule table is validated, so the
builder never fails at call time.
"""

from __future__ import annotations

from skillrouter.routing.enums import EnumChainKind
from skillrouter.routing.models import (
    ChainDirective,
    ModelChainConditional,
    ModelChainFanOut,
    ModelChainSequential,
    ModelCreateDebtRecord,
    ModelDirective,
    ModelRule,
)

DEFAULT_DEBT_ROOT = ".debts"


def _describe_branch(
    branch: str | ModelCreateDebtRecord, owner: str, debt_root: str
) -> str:
    if isinstance(branch, ModelCreateDebtRecord):
        return branch.describe(owner, debt_root)
    return branch


def build_instruction(
    capability_id: str,
    chain: ChainDirective,
    debt_root: str = DEFAULT_DEBT_ROOT,
) -> str:
    """Render the instruction line for ``capability_id`` and its chain."""
    head = f"activate {capability_id}"
    if isinstance(chain, ModelChainSequential):
        return f"{head}; after completion, activate {chain.next}"
    if isinstance(chain, ModelChainConditional):
        on_pass = _describe_branch(chain.on_pass, capability_id, debt_root)
        on_fail = _describe_branch(chain.on_fail, capability_id, debt_root)
        return f"{head}; on PASS → {on_pass}; on FAIL → {on_fail}"
    if isinstance(chain, ModelChainFanOut):
        return f"{head}; after completion, activate all of {', '.join(chain.next)}"
    return f"{head}; no further action"


def build_directive(
    rule: ModelRule, debt_root: str = DEFAULT_DEBT_ROOT
) -> ModelDirective:
    """Build the directive for a matched rule."""
    return ModelDirective(
        capability_id=rule.capability_id,
        resource_path=rule.resource_path,
        instruction=build_instruction(rule.capability_id, rule.chain, debt_root),
        output_marker=rule.output_marker,
        chain=EnumChainKind(rule.chain.kind),
        chain_targets=rule.chain.targets(),
        follow=rule.follow,
        chain_directive=rule.chain,
    )


__all__ = ["DEFAULT_DEBT_ROOT", "build_directive", "build_instruction"]

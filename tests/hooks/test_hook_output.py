# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Tests for the Claude Code hook envelope."""

from __future__ import annotations

import pytest

from skillrouter.hooks.hook_output import render_hook_output, render_skill_instruction
from skillrouter.routing.directive_builder import build_directive
from skillrouter.routing.models import (
    ModelChainConditional,
    ModelChainNone,
    ModelChainSequential,
    ModelCreateDebtRecord,
    ModelNoOp,
    ModelRule,
)


def _make_directive(chain=None, follow: str = ""):
    rule = ModelRule(
        capability_id="agent-audit-graph",
        pattern=r"audit.?agent",
        resource_path=".claude/skills/agent-audit-graph/SKILL.md",
        output_marker="#AUDT-8K3M",
        chain=chain or ModelChainNone(),
        follow=follow,
    )
    return build_directive(rule)


@pytest.mark.unit
class TestRenderSkillInstruction:
    def test_terminal_without_follow(self) -> None:
        assert render_skill_instruction(_make_directive()) == (
            "<skill-instruction>\n"
            "ACTIVATE SKILL: agent-audit-graph\n"
            "READ: .claude/skills/agent-audit-graph/SKILL.md\n"
            "OUTPUT: ⚡ SKILL_ACTIVATED: #AUDT-8K3M\n"
            "</skill-instruction>"
        )

    def test_follow_and_sequential_chain(self) -> None:
        text = render_skill_instruction(
            _make_directive(
                ModelChainSequential(next="agent-tester"), follow="Heavy audit"
            )
        )
        assert "FOLLOW: Heavy audit\n" in text
        assert "CHAIN: after completion, activate agent-tester\n" in text

    def test_conditional_chain_line(self) -> None:
        text = render_skill_instruction(
            _make_directive(
                ModelChainConditional(
                    on_pass="agent-tester",
                    on_fail=ModelCreateDebtRecord(capability_id="graph-agent"),
                )
            )
        )
        assert (
            "CHAIN: on PASS → agent-tester; "
            "on FAIL → create debt record at .debts/graph-agent/\n"
        ) in text


@pytest.mark.unit
class TestRenderHookOutput:
    def test_envelope(self) -> None:
        envelope = render_hook_output(_make_directive())
        assert envelope is not None
        output = envelope["hookSpecificOutput"]
        assert output["hookEventName"] == "UserPromptSubmit"
        assert output["additionalContext"].startswith("<skill-instruction>\n")

    def test_custom_event_name(self) -> None:
        envelope = render_hook_output(_make_directive(), event_name="SessionStart")
        assert envelope["hookSpecificOutput"]["hookEventName"] == "SessionStart"

    def test_noop_renders_nothing(self) -> None:
        assert render_hook_output(ModelNoOp()) is None

# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for the ``skillrouter`` CLI.

Tests:
- hook: match prints envelope / no match prints nothing / broken config
  still exits 0
- dispatch: TEXT argument, stdin, --capability
- validate: valid table / invalid table / missing rules file
- rules: lists rules in order
- resolve: next capability / debt record written / dry run / fan-out error
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from skillrouter.cli.main import cli

RULES_YAML = """
version: 1
rules:
  - capability: agent-audit
    pattern: 'audit'
    marker: "#AUD-1"
    follow: "Heavy audit"
    chain:
      kind: conditional
      on_pass: agent-tester
      on_fail: {action: create_debt_record}
  - capability: agent-tester
    pattern: 'test'
    marker: "#TST-1"
  - capability: alpha
    pattern: 'alpha'
    marker: "#ALP-1"
    chain: {kind: fanout, next: [agent-tester, agent-audit]}
"""


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML, encoding="utf-8")
    return path


@pytest.fixture
def broken_rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.yaml"
    path.write_text(
        "rules:\n  - {capability: a, pattern: '(', marker: '#A'}\n", encoding="utf-8"
    )
    return path


def _invoke(args: list[str], input: str | None = None):
    return CliRunner().invoke(cli, args, input=input, obj={})


@pytest.mark.unit
class TestHookCommand:
    def test_match_prints_envelope(self, rules_file: Path) -> None:
        result = _invoke(
            ["--rules", str(rules_file), "hook"],
            input=json.dumps({"prompt": "Please AUDIT the agent"}),
        )
        assert result.exit_code == 0
        envelope = json.loads(result.output)
        context = envelope["hookSpecificOutput"]["additionalContext"]
        assert "ACTIVATE SKILL: agent-audit\n" in context
        assert "FOLLOW: Heavy audit\n" in context
        assert "OUTPUT: ⚡ SKILL_ACTIVATED: #AUD-1\n" in context

    def test_no_match_prints_nothing(self, rules_file: Path) -> None:
        result = _invoke(["--rules", str(rules_file), "hook"], input="?!")
        assert result.exit_code == 0
        assert result.output == ""

    def test_broken_config_never_blocks(self, broken_rules_file: Path) -> None:
        result = _invoke(["--rules", str(broken_rules_file), "hook"], input="audit")
        assert result.exit_code == 0

    def test_bundled_table(self) -> None:
        result = _invoke(["hook"], input='{"prompt": "I have a bug in login"}')
        assert result.exit_code == 0
        assert "ACTIVATE SKILL: systematic-debugging" in result.output

    @pytest.mark.parametrize("level", ["debug", "verbose"])
    def test_bad_log_level_env_never_blocks(
        self, level: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKILLROUTER_LOG_LEVEL", level)
        result = _invoke(["hook"], input='{"prompt": "I have a bug"}')
        assert result.exit_code == 0
        assert "ACTIVATE SKILL: systematic-debugging" in result.output

    def test_invalid_env_keeps_rules_option(
        self, rules_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKILLROUTER_DEFAULT_DEBT_SEVERITY", "apocalyptic")
        result = _invoke(["--rules", str(rules_file), "hook"], input="audit")
        assert result.exit_code == 0
        assert "ACTIVATE SKILL: agent-audit\n" in result.output

    def test_event_name_from_env(
        self, rules_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKILLROUTER_HOOK_EVENT_NAME", "CustomEvent")
        result = _invoke(["--rules", str(rules_file), "hook"], input="audit")
        assert (
            json.loads(result.output)["hookSpecificOutput"]["hookEventName"]
            == "CustomEvent"
        )


@pytest.mark.unit
class TestDispatchCommand:
    def test_text_argument(self, rules_file: Path) -> None:
        result = _invoke(["--rules", str(rules_file), "dispatch", "run the test"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["capabilityId"] == "agent-tester"
        assert payload["chain"] == "none"
        assert payload["chainTargets"] == []

    def test_stdin(self, rules_file: Path) -> None:
        result = _invoke(["--rules", str(rules_file), "dispatch"], input="alpha")
        payload = json.loads(result.output)
        assert payload["chain"] == "fanout"
        assert payload["chainTargets"] == ["agent-tester", "agent-audit"]

    def test_no_match(self, rules_file: Path) -> None:
        result = _invoke(["--rules", str(rules_file), "dispatch", "nothing here"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"matched": False}

    def test_capability_option(self, rules_file: Path) -> None:
        result = _invoke(
            ["--rules", str(rules_file), "dispatch", "--capability", "agent-tester"]
        )
        assert json.loads(result.output)["outputMarker"] == "#TST-1"


@pytest.mark.unit
class TestValidateCommand:
    def test_valid(self, rules_file: Path) -> None:
        result = _invoke(["--rules", str(rules_file), "validate"])
        assert result.exit_code == 0
        assert "3 rule(s)" in result.output

    def test_invalid(self, broken_rules_file: Path) -> None:
        result = _invoke(["--rules", str(broken_rules_file), "validate"])
        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        result = _invoke(["--rules", str(tmp_path / "nope.yaml"), "validate"])
        assert result.exit_code == 1

    def test_bundled(self) -> None:
        result = _invoke(["validate"])
        assert result.exit_code == 0
        assert "44 rule(s)" in result.output

    def test_invalid_env_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLROUTER_LOG_LEVEL", "verbose")
        result = _invoke(["validate"])
        assert result.exit_code == 1


@pytest.mark.unit
def test_rules_lists_in_order(rules_file: Path) -> None:
    result = _invoke(["--rules", str(rules_file), "rules"])
    assert result.exit_code == 0
    out = result.output
    assert out.index("#AUD-1") < out.index("#TST-1") < out.index("#ALP-1")


@pytest.mark.unit
class TestResolveCommand:
    def test_pass_resolves_to_next(self, rules_file: Path) -> None:
        result = _invoke(
            ["--rules", str(rules_file), "resolve", "agent-audit", "--outcome", "PASS"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {"next": "agent-tester"}

    def test_terminal(self, rules_file: Path) -> None:
        result = _invoke(
            ["--rules", str(rules_file), "resolve", "agent-tester", "--outcome", "pass"]
        )
        assert json.loads(result.output) == {"next": None}

    def test_fail_writes_debt_record(
        self, rules_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        debt_root = tmp_path / "debts"
        monkeypatch.setenv("SKILLROUTER_DEBT_ROOT", str(debt_root))
        result = _invoke(
            [
                "--rules",
                str(rules_file),
                "resolve",
                "agent-audit",
                "--outcome",
                "fail",
                "--slug",
                "missing retries",
                "--context",
                "No retry around the LLM call",
            ]
        )
        assert result.exit_code == 0
        path = Path(json.loads(result.output)["debt_record"])
        assert path.parent == debt_root / "agent-audit"
        assert path.name.endswith("-missing-retries.md")
        assert "No retry around the LLM call" in path.read_text(encoding="utf-8")

    def test_dry_run_writes_nothing(
        self, rules_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        debt_root = tmp_path / "debts"
        monkeypatch.setenv("SKILLROUTER_DEBT_ROOT", str(debt_root))
        result = _invoke(
            [
                "--rules",
                str(rules_file),
                "resolve",
                "agent-audit",
                "--outcome",
                "fail",
                "--dry-run",
            ]
        )
        assert result.exit_code == 0
        debt = json.loads(result.output)["debt"]
        assert debt["capability_id"] == "agent-audit"
        assert debt["slug"] == "agent-audit-failure"
        assert not debt_root.exists()

    def test_fanout_is_an_error(self, rules_file: Path) -> None:
        result = _invoke(
            ["--rules", str(rules_file), "resolve", "alpha", "--outcome", "pass"]
        )
        assert result.exit_code == 1

    def test_unknown_capability(self, rules_file: Path) -> None:
        result = _invoke(
            ["--rules", str(rules_file), "resolve", "ghost", "--outcome", "pass"]
        )
        assert result.exit_code == 1

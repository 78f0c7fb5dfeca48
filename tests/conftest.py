"""Shared fixtures for SkillRouter tests."""

from __future__ import annotations

import pytest

from skillrouter.config.settings import clear_settings_cache
from skillrouter.routing.loader import RuleTableLoader
from skillrouter.routing.rule_table import RuleTable


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch):
    """Fresh settings per test, isolated from the developer's environment."""
    for name in (
        "SKILLROUTER_RULES_PATH",
        "SKILLROUTER_SKILLS_ROOT",
        "SKILLROUTER_DEBT_ROOT",
        "SKILLROUTER_LOG_LEVEL",
        "SKILLROUTER_HOOK_EVENT_NAME",
        "SKILLROUTER_DEFAULT_DEBT_SEVERITY",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(scope="session")
def bundled_table() -> RuleTable:
    return RuleTableLoader().load()

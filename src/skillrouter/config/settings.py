"""SkillRouter settings.

Provides configuration for the skill activation hook:
- Rule table location (shipped default or operator override)
- Skill description root used to derive resource paths
- Debt record root for conditional-chain failures
- Hook envelope and logging options

All variables use the ``SKILLROUTER_`` prefix and may be set in the
environment or in a ``.env`` file found in the working directory or any of
its parents:

    SKILLROUTER_RULES_PATH=.claude/hooks/skill-rules.yaml
    SKILLROUTER_SKILLS_ROOT=.claude/skills
    SKILLROUTER_DEBT_ROOT=.debts
    SKILLROUTER_LOG_LEVEL=WARNING

When ``SKILLROUTER_RULES_PATH`` is unset the rule table bundled with the
package is used.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_and_load_env() -> None:
    """Load .env file from the working directory or the nearest parent."""
    from dotenv import load_dotenv

    current = Path.cwd().resolve()
    for _ in range(10):
        env_file = current / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=False)
            return
        parent = current.parent
        if parent == current:
            break
        current = parent


_find_and_load_env()

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings for the SkillRouter dispatcher and hook."""

    _defaults_warned: bool = PrivateAttr(default=False)

    # =========================================================================
    # RULE TABLE
    # =========================================================================
    rules_path: Path | None = Field(
        default=None,
        description=(
            "Path to a YAML rule table. When unset, the rule table shipped "
            "with the package is loaded."
        ),
    )
    skills_root: str = Field(
        default=".claude/skills",
        description=(
            "Root used to derive a rule's resource path when the rule does not "
            "declare one: {skills_root}/{capability}/SKILL.md"
        ),
    )

    # =========================================================================
    # DEBT RECORDS
    # =========================================================================
    debt_root: Path = Field(
        default=Path(".debts"),
        description="Directory under which debt records are written.",
    )
    default_debt_severity: Literal["low", "medium", "high", "critical"] = Field(
        default="medium",
        description="Severity stamped on debt records that do not declare one.",
    )

    # =========================================================================
    # HOOK / LOGGING
    # =========================================================================
    hook_event_name: str = Field(
        default="UserPromptSubmit",
        description="Value of hookSpecificOutput.hookEventName in hook output.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for CLI entry points. Logs always go to stderr.",
    )

    model_config = SettingsConfigDict(
        env_prefix="SKILLROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("default_debt_severity", mode="before")
    @classmethod
    def _lower_severity(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def validate_paths(self) -> list[str]:
        """Validate that configured paths are usable.

        Returns:
            List of validation error messages. Empty list means valid.
        """
        errors: list[str] = []

        if self.rules_path is not None:
            if not self.rules_path.exists():
                errors.append(
                    f"SKILLROUTER_RULES_PATH points to a missing file: {self.rules_path}. "
                    "Unset it to use the bundled rule table."
                )
            elif not self.rules_path.is_file():
                errors.append(
                    f"SKILLROUTER_RULES_PATH is not a file: {self.rules_path}"
                )

        if self.debt_root.exists() and not self.debt_root.is_dir():
            errors.append(
                f"SKILLROUTER_DEBT_ROOT exists but is not a directory: {self.debt_root}"
            )

        if not self.skills_root.strip():
            errors.append("SKILLROUTER_SKILLS_ROOT must not be empty.")

        return errors

    def log_default_warnings(self) -> None:
        """Log informational messages about defaulted settings, once per instance."""
        if self._defaults_warned:
            return
        self._defaults_warned = True

        if self.rules_path is None:
            logger.info(
                "Using bundled rule table (SKILLROUTER_RULES_PATH unset). "
                "Set SKILLROUTER_RULES_PATH to load a custom table."
            )

    def reset_warnings(self) -> None:
        """Reset the warning state for test isolation."""
        self._defaults_warned = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get singleton settings instance.

    Note:
        For test isolation, use `clear_settings_cache()` to reset the
        singleton before each test that needs fresh settings.
    """
    instance = Settings()
    instance.log_default_warnings()
    return instance


def clear_settings_cache() -> None:
    """Clear the settings singleton cache for test isolation.

    Example:
        @pytest.fixture(autouse=True)
        def reset_settings():
            clear_settings_cache()
            yield
            clear_settings_cache()
    """
    get_settings.cache_clear()

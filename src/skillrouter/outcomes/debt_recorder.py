# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Debt recorder, the only filesystem side effect of skill routing.

Writes a write-once markdown record for a resolved ``create_debt_record``
action:

    {debt_root}/{capability_id}/{timestamp}-{slug}.md

``timestamp`` is ISO 8601 basic format in UTC (``20261019T120000Z``) so the
name stays portable. Files are created exclusively; if the name is taken a
numeric suffix is appended. The record carries YAML front matter (created,
capability, source, severity, status) followed by the free-text context and
a checklist of required follow-up actions.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

import yaml

from skillrouter.lib.errors import DebtRecordError
from skillrouter.routing.enums import EnumDebtSeverity
from skillrouter.routing.models import ModelCreateDebtRecord

logger = logging.getLogger(__name__)

_SLUG_MAX_LEN = 60
_MAX_SUFFIX = 100
_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Reduce free text to ``[a-z0-9-]``; empty input becomes ``"failure"``."""
    slug = _SLUG_STRIP.sub("-", text.lower()).strip("-")
    return slug[:_SLUG_MAX_LEN].rstrip("-") or "failure"


def default_checklist(action: ModelCreateDebtRecord) -> list[str]:
    source = action.source_capability_id or action.capability_id
    return [
        f"Reproduce the failure reported by {source}",
        "Identify the root cause and record it in this file",
        f"Fix the issue in {action.capability_id}",
        f"Re-run {source} and confirm it passes",
        "Set status to resolved",
    ]


class DebtRecorder:
    """Write debt records under ``debt_root``.

    Args:
        debt_root: Directory under which records are namespaced by capability.
        default_severity: Severity for actions that do not declare one.
        clock: Returns the creation time; injectable for tests.
    """

    def __init__(
        self,
        debt_root: Path,
        default_severity: EnumDebtSeverity | str = EnumDebtSeverity.MEDIUM,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._debt_root = debt_root
        self._default_severity = EnumDebtSeverity(default_severity)
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    @property
    def debt_root(self) -> Path:
        return self._debt_root

    def render(
        self,
        action: ModelCreateDebtRecord,
        created_at: datetime,
        context: str = "",
        checklist: Sequence[str] | None = None,
    ) -> str:
        """Render the markdown body of a debt record."""
        severity = action.severity or self._default_severity
        front_matter = {
            "created": created_at.isoformat(),
            "capability": action.capability_id,
            "source": action.source_capability_id or action.capability_id,
            "slug": action.slug,
            "severity": severity.value,
            "status": "open",
        }
        items = list(checklist) if checklist else default_checklist(action)
        lines = [
            "---",
            yaml.safe_dump(front_matter, sort_keys=False).rstrip(),
            "---",
            "",
            f"# Debt: {action.slug}",
            "",
            "## Context",
            "",
            context.strip() or "_No context provided._",
            "",
            "## Required follow-up",
            "",
            *(f"- [ ] {item}" for item in items),
            "",
        ]
        return "\n".join(lines)

    def write(
        self,
        action: ModelCreateDebtRecord,
        context: str = "",
        checklist: Sequence[str] | None = None,
    ) -> Path:
        """Write the record for ``action`` and return its path.

        ``action`` must be bound (see ``ModelCreateDebtRecord.bind``).

        Raises:
            DebtRecordError: If the action is unbound or the file cannot be
                written.
        """
        if action.capability_id is None:
            raise DebtRecordError(
                "Debt action has no capability id; bind it to its owner first",
                path=str(self._debt_root),
            )

        created_at = self._clock()
        slug = slugify(action.slug or f"{action.capability_id}-failure")
        action = action.model_copy(update={"slug": slug})
        stamp = created_at.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")
        directory = self._debt_root / action.capability_id
        content = self.render(action, created_at, context, checklist)

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DebtRecordError(
                f"Cannot create debt directory: {directory}",
                path=str(directory),
                cause=e,
            ) from e

        for attempt in range(1, _MAX_SUFFIX + 1):
            suffix = "" if attempt == 1 else f"-{attempt}"
            path = directory / f"{stamp}-{slug}{suffix}.md"
            try:
                with open(path, "x", encoding="utf-8") as f:
                    f.write(content)
            except FileExistsError:
                continue
            except OSError as e:
                raise DebtRecordError(
                    f"Cannot write debt record: {path}", path=str(path), cause=e
                ) from e
            logger.info("Debt record written: %s", path)
            return path

        raise DebtRecordError(
            f"No free debt record name for {stamp}-{slug} in {directory}",
            path=str(directory),
        )


__all__ = ["DebtRecorder", "default_checklist", "slugify"]

# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Enumerations for skill routing.

All enums are ``str`` enums so they serialise cleanly to JSON and survive
round-trips through Pydantic models and the hook payload.
"""

from __future__ import annotations

from enum import Enum


class EnumChainKind(str, Enum):
    """Kind of follow-on encoded by a rule's chain directive."""

    NONE = "none"
    """Terminal capability; no follow-on."""

    SEQUENTIAL = "sequential"
    """Host re-dispatches the next capability unconditionally."""

    CONDITIONAL = "conditional"
    """Host follows the PASS or FAIL branch after an external judgment."""

    FANOUT = "fanout"
    """Host may run every listed capability concurrently, in any order."""


class EnumOutcome(str, Enum):
    """Externally reported outcome of a capability run."""

    PASS = "pass"  # noqa: S105
    FAIL = "fail"


class EnumDebtSeverity(str, Enum):
    """Severity stamped on a debt record."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

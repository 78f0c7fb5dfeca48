"""Outcome routing for conditional chains and debt record persistence."""

from __future__ import annotations

from skillrouter.outcomes.debt_recorder import DebtRecorder, slugify
from skillrouter.outcomes.router import OutcomeResolution, OutcomeRouter, resolve_chain

__all__ = [
    "DebtRecorder",
    "OutcomeResolution",
    "OutcomeRouter",
    "resolve_chain",
    "slugify",
]

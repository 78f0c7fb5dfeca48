"""Skill routing: rule table, matcher, directive builder and dispatcher."""

from __future__ import annotations

from skillrouter.routing.directive_builder import build_directive, build_instruction
from skillrouter.routing.dispatcher import Dispatcher
from skillrouter.routing.enums import EnumChainKind, EnumDebtSeverity, EnumOutcome
from skillrouter.routing.loader import RuleTableLoader, RuleTableLoadError
from skillrouter.routing.matcher import match
from skillrouter.routing.models import (
    DispatchResult,
    ModelChainConditional,
    ModelChainFanOut,
    ModelChainNone,
    ModelChainSequential,
    ModelCreateDebtRecord,
    ModelDirective,
    ModelNextCapability,
    ModelNoOp,
    ModelRule,
)
from skillrouter.routing.normalizer import extract_prompt, normalize_prompt
from skillrouter.routing.rule_table import RuleTable

__all__ = [
    "DispatchResult",
    "Dispatcher",
    "EnumChainKind",
    "EnumDebtSeverity",
    "EnumOutcome",
    "ModelChainConditional",
    "ModelChainFanOut",
    "ModelChainNone",
    "ModelChainSequential",
    "ModelCreateDebtRecord",
    "ModelDirective",
    "ModelNextCapability",
    "ModelNoOp",
    "ModelRule",
    "RuleTable",
    "RuleTableLoadError",
    "RuleTableLoader",
    "build_directive",
    "build_instruction",
    "extract_prompt",
    "match",
    "normalize_prompt",
]

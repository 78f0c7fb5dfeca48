# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Pydantic v2 data models for skill routing.

* ``ModelRule``: one row of the rule table (pattern, capability, resource
  path, chain directive, output marker).
* Chain directives: a tagged union on ``kind`` of ``ModelChainNone``,
  ``ModelChainSequential``, ``ModelChainConditional``, ``ModelChainFanOut``.
* ``ModelCreateDebtRecord``: failure action usable as a conditional branch.
* ``ModelDirective`` / ``ModelNoOp``: the two possible dispatch results.

All models are immutable (``frozen=True``) after construction.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from skillrouter.routing.enums import EnumChainKind, EnumDebtSeverity

CAPABILITY_ID_PATTERN = r"^[a-z0-9][a-z0-9-]*$"


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a rule pattern case-insensitively.

    Raises:
        re.error: If the pattern is not a valid regular expression.
    """
    return re.compile(pattern, re.IGNORECASE)


# ---------------------------------------------------------------------------
# Failure action
# ---------------------------------------------------------------------------


class ModelCreateDebtRecord(BaseModel):
    """Instruction for the host to persist a debt record.

    The dispatcher never executes this action. ``capability_id`` namespaces
    the record directory and defaults to the capability whose conditional
    chain declared the action. ``slug`` names the issue and defaults to
    ``"<capability_id>-failure"``.

    Attributes:
        action: Discriminator, always ``"create_debt_record"``.
        capability_id: Namespace under the debt root.
        slug: Free-text issue slug.
        severity: Record severity; ``None`` defers to settings.
        source_capability_id: Capability whose FAIL branch produced this
            action. Filled in at resolution time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: Literal["create_debt_record"] = "create_debt_record"
    capability_id: str | None = Field(default=None, pattern=CAPABILITY_ID_PATTERN)
    slug: str | None = None
    severity: EnumDebtSeverity | None = None
    source_capability_id: str | None = None

    def bind(
        self,
        owner_capability_id: str,
        slug: str | None = None,
    ) -> ModelCreateDebtRecord:
        """Return a copy with every defaulted field resolved against its owner."""
        capability_id = self.capability_id or owner_capability_id
        return self.model_copy(
            update={
                "capability_id": capability_id,
                "slug": slug or self.slug or f"{capability_id}-failure",
                "source_capability_id": owner_capability_id,
            }
        )

    def describe(self, owner_capability_id: str, debt_root: str = ".debts") -> str:
        namespace = self.capability_id or owner_capability_id
        return f"create debt record at {debt_root.rstrip('/')}/{namespace}/"


CapabilityId = Annotated[str, Field(pattern=CAPABILITY_ID_PATTERN)]

ChainBranch = Annotated[
    CapabilityId | ModelCreateDebtRecord,
    Field(union_mode="left_to_right"),
]


def _branch_target(branch: str | ModelCreateDebtRecord) -> str | None:
    return branch if isinstance(branch, str) else None


# ---------------------------------------------------------------------------
# Chain directives
# ---------------------------------------------------------------------------


class ModelChainNone(BaseModel):
    """Terminal capability."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["none"] = "none"

    def targets(self) -> tuple[str, ...]:
        return ()


class ModelChainSequential(BaseModel):
    """Unconditional follow-on capability."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["sequential"] = "sequential"
    next: str = Field(..., pattern=CAPABILITY_ID_PATTERN)

    def targets(self) -> tuple[str, ...]:
        return (self.next,)


class ModelChainConditional(BaseModel):
    """PASS/FAIL branches; either branch may be a debt-record action."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["conditional"] = "conditional"
    on_pass: ChainBranch
    on_fail: ChainBranch

    def targets(self) -> tuple[str, ...]:
        found = (_branch_target(self.on_pass), _branch_target(self.on_fail))
        return tuple(t for t in found if t is not None)


class ModelChainFanOut(BaseModel):
    """Several follow-on capabilities the host may run concurrently."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["fanout"] = "fanout"
    next: tuple[CapabilityId, ...] = Field(..., min_length=1)

    def targets(self) -> tuple[str, ...]:
        return self.next


ChainDirective = Annotated[
    ModelChainNone | ModelChainSequential | ModelChainConditional | ModelChainFanOut,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------


class ModelRule(BaseModel):
    """One entry of the rule table.

    The pattern is kept as source text; ``compiled`` compiles it on first use
    (case-insensitive). Pattern validity is checked by the rule table's
    validation pass so that every bad pattern is reported at once.

    Attributes:
        capability_id: Identifier of the capability this rule activates.
        pattern: Regular expression searched in the normalized prompt.
        resource_path: Pointer to the capability description. Echoed, never read.
        output_marker: Cosmetic confirmation token for this rule.
        chain: Follow-on directive.
        follow: Guidance line forwarded to the host.
        tier: Optional grouping label used for listings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    capability_id: str = Field(..., pattern=CAPABILITY_ID_PATTERN)
    pattern: str = Field(..., min_length=1)
    resource_path: str = Field(..., min_length=1)
    output_marker: str = Field(..., min_length=1)
    chain: ChainDirective = Field(default_factory=ModelChainNone)
    follow: str = ""
    tier: str | None = None

    @property
    def compiled(self) -> re.Pattern[str]:
        return compile_pattern(self.pattern)

    def matches(self, text: str) -> bool:
        return self.compiled.search(text) is not None


# ---------------------------------------------------------------------------
# Dispatch results
# ---------------------------------------------------------------------------


class ModelDirective(BaseModel):
    """Structured payload returned when a rule matched.

    Serialised with camelCase keys via ``to_payload()``. ``chain_directive``
    carries the typed chain for the outcome router and is excluded from the
    payload.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    matched: Literal[True] = True
    capability_id: str
    resource_path: str
    instruction: str
    output_marker: str
    chain: EnumChainKind
    chain_targets: tuple[str, ...] = ()
    follow: str = ""
    chain_directive: ChainDirective = Field(
        default_factory=ModelChainNone, exclude=True
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ModelNoOp(BaseModel):
    """Neutral result: continue normal processing, no capability activated."""

    model_config = ConfigDict(frozen=True)

    matched: Literal[False] = False

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


DispatchResult = ModelDirective | ModelNoOp


class ModelNextCapability(BaseModel):
    """Resolved outcome: dispatch this capability next."""

    model_config = ConfigDict(frozen=True)

    capability_id: str


__all__ = [
    "CAPABILITY_ID_PATTERN",
    "CapabilityId",
    "ChainBranch",
    "ChainDirective",
    "DispatchResult",
    "ModelChainConditional",
    "ModelChainFanOut",
    "ModelChainNone",
    "ModelChainSequential",
    "ModelCreateDebtRecord",
    "ModelDirective",
    "ModelNextCapability",
    "ModelNoOp",
    "ModelRule",
    "compile_pattern",
]

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

OutcomeKind = Literal["missing", "changed", "error", "valid"]


class Missing(BaseModel):
    """The term no longer exists in the live spec."""

    kind: Literal["missing"] = "missing"


class Changed(BaseModel):
    """The live definition drifted from the cached one."""

    kind: Literal["changed"] = "changed"
    old_content: str
    new_content: str
    similarity: float  # 0.0-1.0


class Error(BaseModel):
    """The live spec could not be fetched or parsed."""

    kind: Literal["error"] = "error"


class Valid(BaseModel):
    kind: Literal["valid"] = "valid"


ValidationOutcome = Annotated[
    Missing | Changed | Error | Valid,
    Field(discriminator="kind"),
]


class ReferenceResult(BaseModel):
    """Outcome of validating one reference element."""

    reference_type: Literal["xref", "tref"]
    external_spec: str
    term: str
    outcome: ValidationOutcome
    rendered: bool  # False when suppressed (valid indicators off) or already present


class ValidationReport(BaseModel):
    """Summary of one validation pass, delivered to completion listeners."""

    specs_validated: int = 0
    xrefs_validated: int = 0
    trefs_validated: int = 0
    results: list[ReferenceResult] = []

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for r in self.results if r.outcome.kind == kind)

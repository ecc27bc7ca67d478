"""Pydantic models for interview state, conflicts and API payloads.

Persisted and API JSON uses camelCase keys; Python code uses snake_case.
Both spellings are accepted on input.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from industry_interview.keys import normalize_key


class CamelModel(BaseModel):
    """Base model that serializes field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Interview Models
# =============================================================================


class Question(CamelModel):
    """A question the interview can ask."""

    qid: str = Field(..., min_length=1, description="Stable question id")
    question: str = Field(..., description="Prompt text")
    help: str | None = Field(default=None, description="Help text shown under the prompt")
    options: list[str] | None = Field(default=None, description="Multiple-choice options")


class InterviewAnswer(CamelModel):
    """One answered question in the interview history."""

    qid: str = Field(..., min_length=1)
    question: str = Field(..., description="Question text as it was asked")
    answer: str = Field(..., min_length=1)
    created_at: datetime


class Candidate(CamelModel):
    """An industry hypothesis with its accumulated heuristic score."""

    key: str = Field(..., min_length=1)
    label: str
    score: float = 0.0


class CanonicalIndustry(CamelModel):
    """An authoritative industry entry used to filter and label candidates."""

    key: str = Field(..., min_length=1)
    label: str


class SubIndustry(CamelModel):
    """A sub-industry choice offered once the primary industry is known."""

    key: str = Field(..., min_length=1)
    label: str


# =============================================================================
# Conflict Models
# =============================================================================


class CloseCallConflict(CamelModel):
    """Top two candidates are too close to call."""

    type: Literal["close_call"] = "close_call"
    between: list[str]
    scores: list[float]
    reason: str = ""


class TopFlippedConflict(CamelModel):
    """The leading candidate changed since the previous round."""

    type: Literal["top_flipped"] = "top_flipped"
    from_key: str = Field(..., alias="from")
    to: str
    reason: str = ""


class ConfidencePlateauConflict(CamelModel):
    """Confidence barely moved between two consecutive rounds."""

    type: Literal["confidence_plateau"] = "confidence_plateau"
    prev: float
    next: float
    reason: str = ""


class DomainMismatchConflict(CamelModel):
    """A vehicle industry leads but the answers only talk about homes."""

    type: Literal["domain_mismatch"] = "domain_mismatch"
    key: str
    reason: str = ""


Conflict = Annotated[
    Union[
        CloseCallConflict,
        TopFlippedConflict,
        ConfidencePlateauConflict,
        DomainMismatchConflict,
    ],
    Field(discriminator="type"),
]


# =============================================================================
# State Models
# =============================================================================


class InterviewMeta(CamelModel):
    """Bookkeeping for the anti-repeat guard. Unknown fields round-trip."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    updated_at: datetime | None = None
    last_asked_qid: str | None = None


class InterviewState(CamelModel):
    """Per-tenant industry interview state embedded in the onboarding document."""

    mode: Literal["interview"] = "interview"
    status: Literal["collecting", "suggested"] = "collecting"
    round: int = Field(default=1, ge=1)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    suggested_industry_key: str | None = None
    needs_confirmation: bool = True
    next_question: Question | None = None
    answers: list[InterviewAnswer] = Field(default_factory=list)
    candidates: list[Candidate] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    meta: InterviewMeta = Field(default_factory=InterviewMeta)

    def answered_qids(self) -> set[str]:
        """Normalized ids of every question answered so far."""
        return {normalize_key(a.qid) for a in self.answers}

    def to_document(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape stored in the onboarding document."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# API Models
# =============================================================================


class InterviewRequest(CamelModel):
    """Request body for the industry interview endpoint."""

    tenant_id: str = Field(..., min_length=1, description="Tenant being onboarded")
    action: Literal["start", "answer", "reset"]
    qid: str | None = Field(default=None, description="Question id being answered")
    answer: Any = Field(default=None, description="Answer text or structured answer")


class InterviewResponse(CamelModel):
    """Response for the industry interview endpoints."""

    ok: bool = True
    tenant_id: str
    industry_inference: InterviewState


class IndustriesResponse(CamelModel):
    """Canonical industry list."""

    industries: list[CanonicalIndustry]


class SubIndustriesResponse(CamelModel):
    """Sub-industry choices for one industry."""

    industry_key: str
    sub_industries: list[SubIndustry]


class HealthResponse(CamelModel):
    """Response for health check endpoint."""

    status: Literal["healthy", "degraded", "unhealthy"] = Field(..., description="Service status")
    active_documents: int = Field(..., description="Onboarding documents held in the store")
    canonical_industries: int = Field(..., description="Number of canonical industries loaded")
    version: str = Field(..., description="API version")

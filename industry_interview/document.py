"""Adapter between the onboarding document and InterviewState.

The onboarding document is a loosely typed JSON object shared with unrelated
onboarding steps. Only the `industryInference` sub-object (plus three summary
fields mirrored at the top level) belongs to the interview; everything else is
carried through untouched.
"""

import copy
import math
from typing import Any, Mapping, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from industry_interview.config import get_settings
from industry_interview.keys import safe_trim
from industry_interview.models import (
    Candidate,
    Conflict,
    InterviewAnswer,
    InterviewMeta,
    InterviewState,
    Question,
)

logger = structlog.get_logger(__name__)

INFERENCE_KEY = "industryInference"
MIRRORED_FIELDS = ("suggestedIndustryKey", "confidenceScore", "needsConfirmation")

ModelT = TypeVar("ModelT", bound=BaseModel)

_conflict_adapter: TypeAdapter[Conflict] = TypeAdapter(Conflict)


def _valid_items(raw: Any, model: type[ModelT]) -> list[ModelT]:
    if not isinstance(raw, list):
        return []
    items = []
    for item in raw:
        try:
            items.append(model.model_validate(item))
        except ValidationError:
            logger.debug("dropped_malformed_item", model=model.__name__)
    return items


def _valid_conflicts(raw: Any) -> list[Conflict]:
    if not isinstance(raw, list):
        return []
    conflicts = []
    for item in raw:
        try:
            conflicts.append(_conflict_adapter.validate_python(item))
        except ValidationError:
            logger.debug("dropped_malformed_item", model="Conflict")
    return conflicts


def _as_round(raw: Any, max_rounds: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 1
    return max(1, min(max_rounds, value))


def _as_confidence(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return max(0.0, min(1.0, value))


def normalize_interview(raw: Any, max_rounds: int | None = None) -> InterviewState:
    """Build a valid InterviewState from whatever was persisted.

    Missing or foreign objects yield a fresh state. Malformed entries are
    dropped rather than failing the whole load, and the status is derived
    from whether a suggestion is present. The round is clamped to
    [1, max_rounds] (settings.max_rounds when omitted). A pending question
    with no recorded last-asked id is treated as the last question asked.
    """
    if not isinstance(raw, Mapping) or raw.get("mode") != "interview":
        return InterviewState()

    if max_rounds is None:
        max_rounds = get_settings().max_rounds

    suggested = safe_trim(raw.get("suggestedIndustryKey")) or None

    next_question = None
    if isinstance(raw.get("nextQuestion"), Mapping):
        try:
            next_question = Question.model_validate(raw["nextQuestion"])
        except ValidationError:
            logger.debug("dropped_malformed_item", model="Question")

    meta = InterviewMeta()
    if isinstance(raw.get("meta"), Mapping):
        try:
            meta = InterviewMeta.model_validate(raw["meta"])
        except ValidationError:
            logger.debug("dropped_malformed_item", model="InterviewMeta")

    if suggested:
        next_question = None
    if next_question is not None and not safe_trim(meta.last_asked_qid):
        meta = meta.model_copy(update={"last_asked_qid": next_question.qid})

    return InterviewState(
        status="suggested" if suggested else "collecting",
        round=_as_round(raw.get("round", 1), max_rounds),
        confidence_score=_as_confidence(raw.get("confidenceScore", 0)),
        suggested_industry_key=suggested,
        needs_confirmation=bool(raw.get("needsConfirmation", True)),
        next_question=next_question,
        answers=_valid_items(raw.get("answers"), InterviewAnswer),
        candidates=_valid_items(raw.get("candidates"), Candidate),
        conflicts=_valid_conflicts(raw.get("conflicts")),
        meta=meta,
    )


def load_interview_state(
    document: Mapping[str, Any] | None,
    max_rounds: int | None = None,
) -> InterviewState:
    """Extract the interview state from an onboarding document (or None)."""
    if not isinstance(document, Mapping):
        return InterviewState()
    return normalize_interview(document.get(INFERENCE_KEY), max_rounds)


def store_interview_state(
    document: Mapping[str, Any] | None,
    state: InterviewState,
) -> dict[str, Any]:
    """Return a copy of the document with the interview state written back.

    The summary fields are mirrored at the top level for other onboarding
    steps that only need the outcome. All other fields are preserved.
    """
    updated: dict[str, Any] = copy.deepcopy(dict(document)) if isinstance(document, Mapping) else {}
    serialized = state.to_document()
    updated[INFERENCE_KEY] = serialized
    for name in MIRRORED_FIELDS:
        updated[name] = serialized[name]
    return updated

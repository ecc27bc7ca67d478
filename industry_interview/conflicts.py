"""Conflict detection between consecutive interview rounds."""

from typing import Sequence

from industry_interview.keys import normalize_key, safe_trim
from industry_interview.models import (
    Candidate,
    CloseCallConflict,
    ConfidencePlateauConflict,
    Conflict,
    DomainMismatchConflict,
    InterviewAnswer,
    InterviewState,
    TopFlippedConflict,
)
from industry_interview.rules import DEFAULT_RULES, InterviewRules

CLOSE_CALL_MAX_GAP = 1.0
CONFIDENCE_PLATEAU_DELTA = 0.05

# Every conflict kind currently blocks auto-suggestion
BLOCKING_CONFLICT_TYPES = frozenset(
    {"close_call", "top_flipped", "confidence_plateau", "domain_mismatch"}
)


def has_blocking_conflict(conflicts: Sequence[Conflict]) -> bool:
    """True when any conflict should prevent suggesting a final industry."""
    return any(c.type in BLOCKING_CONFLICT_TYPES for c in conflicts)


def _domain_mismatch(
    top_key: str,
    answers: Sequence[InterviewAnswer],
    rules: InterviewRules,
) -> DomainMismatchConflict | None:
    if top_key not in rules.vehicle_keys:
        return None
    if any(normalize_key(a.qid) == rules.domain_clarifier_qid for a in answers):
        return None

    text = " | ".join(safe_trim(a.answer) for a in answers).lower()
    if rules.home_pattern.search(text) and not rules.vehicle_pattern.search(text):
        return DomainMismatchConflict(
            key=top_key,
            reason="Vehicle industry leads but answers only mention homes",
        )
    return None


def detect_conflicts(
    previous: InterviewState,
    candidates: Sequence[Candidate],
    confidence: float,
    answers: Sequence[InterviewAnswer] | None = None,
    rules: InterviewRules = DEFAULT_RULES,
    close_call_max_gap: float = CLOSE_CALL_MAX_GAP,
    plateau_delta: float = CONFIDENCE_PLATEAU_DELTA,
) -> list[Conflict]:
    """Compare a fresh evaluation against the state it was derived from.

    Args:
        previous: State immediately before the current answer was applied.
        candidates: Freshly ranked candidates.
        confidence: Freshly computed confidence.
        answers: Full answer history including the current answer. Only
            needed for the domain mismatch check; skipped when None.

    Returns:
        All applicable conflicts; kinds are not mutually exclusive.
    """
    conflicts: list[Conflict] = []

    prev_top = normalize_key(previous.candidates[0].key) if previous.candidates else ""
    new_top = normalize_key(candidates[0].key) if candidates else ""

    if prev_top and new_top and prev_top != new_top:
        conflicts.append(
            TopFlippedConflict(
                from_key=prev_top,
                to=new_top,
                reason=f"Top candidate changed from {prev_top} to {new_top}",
            )
        )

    if len(candidates) >= 2:
        first, second = candidates[0], candidates[1]
        if abs(first.score - second.score) <= close_call_max_gap and first.score > 0:
            conflicts.append(
                CloseCallConflict(
                    between=[normalize_key(first.key), normalize_key(second.key)],
                    scores=[first.score, second.score],
                    reason="Top two candidates are within the close-call gap",
                )
            )

    if previous.round >= 2 and abs(confidence - previous.confidence_score) < plateau_delta:
        conflicts.append(
            ConfidencePlateauConflict(
                prev=previous.confidence_score,
                next=confidence,
                reason="Confidence did not move meaningfully since the last round",
            )
        )

    if answers is not None and new_top:
        mismatch = _domain_mismatch(new_top, answers, rules)
        if mismatch is not None:
            conflicts.append(mismatch)

    return conflicts

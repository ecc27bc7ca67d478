"""Candidate scoring and confidence estimation.

Both functions are pure: the same answers and canonical list always produce
the same ranking and confidence.
"""

from typing import Mapping, Sequence

import structlog

from industry_interview.keys import normalize_key, safe_trim, title_from_key
from industry_interview.models import Candidate, CanonicalIndustry, InterviewAnswer
from industry_interview.rules import DEFAULT_RULES, InterviewRules

logger = structlog.get_logger(__name__)

MAX_CANDIDATES = 6
MIN_TOP_SCORE_FOR_HIGH_CONFIDENCE = 3.0


def canonical_labels(canonical: Sequence[CanonicalIndustry]) -> dict[str, str]:
    """Map normalized canonical keys to their labels, keeping the first entry per key."""
    labels: dict[str, str] = {}
    for entry in canonical:
        key = normalize_key(entry.key)
        if key and key not in labels:
            labels[key] = safe_trim(entry.label) or title_from_key(key)
    return labels


def _resolve_picked_industry(
    answer: str,
    labels: Mapping[str, str],
    rules: InterviewRules,
) -> str | None:
    """Resolve a label picked on the generic clarifier back to an industry key."""
    picked = normalize_key(answer)
    if not picked:
        return None
    for key, label in labels.items():
        if normalize_key(label) == picked:
            return key
    if picked in labels or picked in rules.known_keys:
        return picked
    return None


def score_candidates(
    answers: Sequence[InterviewAnswer],
    canonical: Sequence[CanonicalIndustry] = (),
    rules: InterviewRules = DEFAULT_RULES,
    max_candidates: int = MAX_CANDIDATES,
) -> list[Candidate]:
    """Rank industry candidates from the full answer history.

    Keyword points come from one boolean test per pattern over the joined,
    lower-cased answers. Option boosts are evaluated per answer against the
    rules registered for that answer's question. When the canonical list is
    non-empty, keys outside it are dropped.

    Returns:
        Candidates sorted by score (stable on ties), at most max_candidates
        long. Never empty: a zero-score "service" candidate is returned when
        nothing scored.
    """
    labels = canonical_labels(canonical)
    haystack = " | ".join(safe_trim(a.answer) for a in answers).lower()

    scores: dict[str, float] = {}
    for key, patterns in rules.keyword_rules.items():
        scores[key] = float(sum(1 for pattern in patterns if pattern.search(haystack)))

    for answer in answers:
        qid = normalize_key(answer.qid)
        text = safe_trim(answer.answer).lower()
        for boost in rules.option_boosts.get(qid, ()):
            if boost.pattern.search(text):
                scores[boost.key] = scores.get(boost.key, 0.0) + boost.points
        if qid == rules.generic_clarifier_qid:
            picked = _resolve_picked_industry(text, labels, rules)
            if picked:
                scores[picked] = scores.get(picked, 0.0) + rules.clarifier_pick_boost

    ranked = [
        Candidate(key=key, label=labels.get(key) or title_from_key(key), score=score)
        for key, score in scores.items()
        if score > 0 and (not labels or key in labels)
    ]

    if not ranked:
        fallback = rules.fallback_key
        return [Candidate(key=fallback, label=labels.get(fallback) or "Service", score=0.0)]

    # list.sort is stable with reverse=True, so ties keep table order
    ranked.sort(key=lambda c: c.score, reverse=True)
    ranked = ranked[:max_candidates]

    logger.debug(
        "candidates_scored",
        top=ranked[0].key,
        top_score=ranked[0].score,
        candidates=len(ranked),
    )
    return ranked


def compute_confidence(
    candidates: Sequence[Candidate],
    min_top_score: float = MIN_TOP_SCORE_FOR_HIGH_CONFIDENCE,
) -> float:
    """Estimate how settled the ranking is, in [0, 1].

    Weak signals (top score below min_top_score) are capped at 0.35. Otherwise
    the result blends absolute magnitude with the lead over the runner-up, so a
    business scoring high on two industries is not treated as classified.
    """
    if not candidates:
        return 0.0

    top = candidates[0].score
    if top <= 0:
        return 0.0
    if top < min_top_score:
        return min(0.35, top / 8)

    second = candidates[1].score if len(candidates) > 1 else 0.0
    magnitude = min(1.0, top / 10)
    separation = max(0.0, min(1.0, (top - second) / max(1.0, top)))
    confidence = 0.55 * magnitude + 0.45 * separation
    return max(0.0, min(1.0, confidence))

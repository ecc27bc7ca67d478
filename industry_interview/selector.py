"""Next-question selection: decision tree, clarifiers and the anti-repeat guard."""

from typing import Sequence

from industry_interview.keys import normalize_key, title_from_key
from industry_interview.models import Candidate, Conflict, InterviewState, Question
from industry_interview.rules import DEFAULT_RULES, InterviewRules


def _first_unanswered(
    qids: Sequence[str],
    answered: set[str],
    rules: InterviewRules,
) -> Question | None:
    for qid in qids:
        if normalize_key(qid) not in answered:
            question = rules.question(qid)
            if question is not None:
                return question
    return None


def select_next_question(
    state: InterviewState,
    rules: InterviewRules = DEFAULT_RULES,
) -> Question | None:
    """Walk the decision tree for the current answers and top-two candidates.

    Returns None when the matching branch has no unanswered questions left.
    """
    answered = state.answered_qids()
    if normalize_key(rules.opening_qid) not in answered:
        return rules.question(rules.opening_qid)

    top_keys = [normalize_key(c.key) for c in state.candidates[:2]]
    top_keys = [k for k in top_keys if k]

    for branch in rules.branches:
        if any(k in branch.industry_keys for k in top_keys):
            return _first_unanswered(branch.checklist, answered, rules)

    if top_keys:
        lock_in = _first_unanswered(rules.lock_ins.get(top_keys[0], ()), answered, rules)
        if lock_in is not None:
            return lock_in

    return _first_unanswered(rules.general_checklist, answered, rules)


def generate_clarifier(
    conflicts: Sequence[Conflict],
    candidates: Sequence[Candidate],
    rules: InterviewRules = DEFAULT_RULES,
) -> Question:
    """Build a question that separates the competing hypotheses.

    Known confusable pairs get a hand-written question; any other pair gets a
    generic "which is closer" question built from the top two labels. With
    fewer than two candidates there is nothing to compare, so the open-ended
    description prompt is returned.
    """
    if any(c.type == "domain_mismatch" for c in conflicts):
        question = rules.question(rules.domain_clarifier_qid)
        if question is not None:
            return question

    if len(candidates) >= 2:
        first, second = candidates[0], candidates[1]
        pair = frozenset({normalize_key(first.key), normalize_key(second.key)})
        pair_qid = rules.clarifier_pairs.get(pair)
        if pair_qid:
            question = rules.question(pair_qid)
            if question is not None:
                return question

        generic = rules.question(rules.generic_clarifier_qid)
        return Question(
            qid=rules.generic_clarifier_qid,
            question=generic.question if generic else "Which is closer to your business?",
            help=generic.help if generic else None,
            options=[
                first.label or title_from_key(first.key),
                second.label or title_from_key(second.key),
                "Something else",
            ],
        )

    return _freeform_at(0, rules)


def _freeform_at(index: int, rules: InterviewRules) -> Question:
    qid = rules.freeform_qids[index % len(rules.freeform_qids)]
    question = rules.question(qid)
    if question is None:
        return Question(qid=qid, question="Describe your business in one sentence.")
    return question


def next_freeform_question(
    state: InterviewState,
    rules: InterviewRules = DEFAULT_RULES,
) -> Question:
    """Pick the next freeform prompt, never the one that was just asked."""
    freeform = [normalize_key(q) for q in rules.freeform_qids]
    last = normalize_key(state.meta.last_asked_qid)

    if last in freeform:
        return _freeform_at(freeform.index(last) + 1, rules)

    answered = sum(1 for a in state.answers if normalize_key(a.qid) in freeform)
    return _freeform_at(answered, rules)


def guard_against_repeat(
    proposed: Question | None,
    state: InterviewState,
    rules: InterviewRules = DEFAULT_RULES,
) -> Question:
    """Make sure the question about to be asked differs from the last one asked.

    Falls back, in order, to a clarifier (when two candidates exist), the first
    unanswered question from the repeat-fallback list, and finally the
    freeform rotation.
    """
    if proposed is None:
        return next_freeform_question(state, rules)

    last = normalize_key(state.meta.last_asked_qid)
    if not last or normalize_key(proposed.qid) != last:
        return proposed

    if len(state.candidates) >= 2:
        clarifier = generate_clarifier(state.conflicts, state.candidates, rules)
        if normalize_key(clarifier.qid) != last:
            return clarifier

    answered = state.answered_qids()
    for qid in rules.repeat_fallback_qids:
        key = normalize_key(qid)
        if key == last or key in answered:
            continue
        question = rules.question(key)
        if question is not None:
            return question

    return next_freeform_question(state, rules)

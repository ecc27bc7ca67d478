"""Industry interview state machine.

The engine never performs I/O and never mutates the state it is given: every
action returns a new InterviewState. The current time comes from the injected
clock so tests can pin timestamps.
"""

from datetime import datetime, timezone
from typing import Callable, Sequence

import structlog

from industry_interview.config import Settings, get_settings
from industry_interview.conflicts import detect_conflicts, has_blocking_conflict
from industry_interview.keys import normalize_key, safe_trim
from industry_interview.models import (
    CanonicalIndustry,
    InterviewAnswer,
    InterviewMeta,
    InterviewState,
    Question,
)
from industry_interview.rules import DEFAULT_RULES, InterviewRules
from industry_interview.scoring import compute_confidence, score_candidates
from industry_interview.selector import (
    generate_clarifier,
    guard_against_repeat,
    select_next_question,
)

logger = structlog.get_logger(__name__)


class InterviewError(Exception):
    """Base exception for interview engine errors."""

    pass


class InterviewValidationError(InterviewError):
    """Raised when an action is missing required input. State is left untouched."""

    def __init__(self, message: str, code: str = "ANSWER_REQUIRED"):
        super().__init__(message)
        self.code = code
        self.message = message


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IndustryInterviewEngine:
    """Adaptive interview that infers a tenant's industry from its answers."""

    def __init__(
        self,
        rules: InterviewRules | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the engine.

        Args:
            rules: Question bank and scoring tables. Defaults to DEFAULT_RULES.
            settings: Tuning thresholds. Defaults to the cached app settings.
            clock: Returns the current time. Defaults to UTC now.
        """
        self.rules = rules or DEFAULT_RULES
        self.settings = settings or get_settings()
        self._clock = clock or utc_now

    # -------------------------
    # ACTIONS
    # -------------------------

    def new_state(self) -> InterviewState:
        """A fresh interview with nothing asked or answered."""
        return InterviewState(meta=InterviewMeta(updated_at=self._clock()))

    def reset(self, state: InterviewState | None = None) -> InterviewState:
        """Discard everything accumulated and start over."""
        if state is not None:
            logger.info("interview_reset", previous_round=state.round, previous_status=state.status)
        return self.new_state()

    def start(
        self,
        state: InterviewState | None = None,
        canonical: Sequence[CanonicalIndustry] = (),
    ) -> InterviewState:
        """Ask the first question. A no-op if a question is pending or a suggestion exists.

        The canonical list is accepted for interface symmetry with answer();
        start does not rescore, so it only matters once answers arrive.
        """
        state = state or self.new_state()

        if state.status == "suggested" or state.next_question is not None:
            logger.debug(
                "interview_start_noop",
                status=state.status,
                pending_qid=state.next_question.qid if state.next_question else None,
            )
            return state

        if has_blocking_conflict(state.conflicts) and state.candidates:
            proposed: Question | None = generate_clarifier(state.conflicts, state.candidates, self.rules)
        else:
            proposed = select_next_question(state, self.rules)

        question = guard_against_repeat(proposed, state, self.rules)
        logger.info("interview_started", qid=question.qid, round=state.round)
        return self._ask(state, question)

    def answer(
        self,
        state: InterviewState,
        qid: str | None,
        answer: str | None,
        *,
        question: str | None = None,
        canonical: Sequence[CanonicalIndustry] = (),
    ) -> InterviewState:
        """Record an answer, re-evaluate the candidates and decide what happens next.

        Args:
            state: Latest persisted state.
            qid: Id of the question being answered.
            answer: Answer text.
            question: Question text as shown to the user. Looked up from the
                pending question or the bank when omitted.
            canonical: Authoritative industries used to filter and label
                candidates. Empty means no filtering.

        Raises:
            InterviewValidationError: qid or answer is blank.
        """
        qid = safe_trim(qid)
        text = safe_trim(answer)
        if not qid or not text:
            raise InterviewValidationError("qid and answer are required.")

        if self._is_duplicate(state, qid, text):
            logger.debug("duplicate_answer_ignored", qid=qid, round=state.round)
            return state

        now = self._clock()
        answers = [
            *state.answers,
            InterviewAnswer(
                qid=qid,
                question=self._question_text(state, qid, question),
                answer=text,
                created_at=now,
            ),
        ]

        s = self.settings
        candidates = score_candidates(answers, canonical, self.rules, s.max_candidates)
        confidence = compute_confidence(candidates, s.min_top_score_for_high_confidence)
        conflicts = detect_conflicts(
            state,
            candidates,
            confidence,
            answers=answers,
            rules=self.rules,
            close_call_max_gap=s.close_call_max_gap,
            plateau_delta=s.confidence_plateau_delta,
        )
        next_round = min(s.max_rounds, state.round + 1)

        blocked = has_blocking_conflict(conflicts)
        top = candidates[0]
        reached_target = confidence >= s.confidence_target and not blocked
        can_force_suggest = next_round >= s.max_rounds and not blocked and top.score > 0

        evaluated = state.model_copy(
            update={
                "round": next_round,
                "answers": answers,
                "candidates": candidates,
                "conflicts": conflicts,
                "confidence_score": confidence,
                "meta": state.meta.model_copy(update={"updated_at": now}),
            }
        )

        logger.info(
            "interview_answer",
            qid=qid,
            round=next_round,
            top=top.key,
            top_score=top.score,
            confidence=round(confidence, 3),
            conflicts=[c.type for c in conflicts],
        )

        if reached_target or can_force_suggest:
            suggested_key = normalize_key(top.key)
            logger.info(
                "interview_suggested",
                industry_key=suggested_key,
                confidence=round(confidence, 3),
                forced=not reached_target,
                round=next_round,
            )
            return evaluated.model_copy(
                update={
                    "status": "suggested",
                    "next_question": None,
                    "suggested_industry_key": suggested_key,
                    "needs_confirmation": True,
                }
            )

        collecting = evaluated.model_copy(
            update={"status": "collecting", "suggested_industry_key": None}
        )
        if blocked:
            proposed: Question | None = generate_clarifier(conflicts, candidates, self.rules)
        else:
            proposed = select_next_question(collecting, self.rules)

        return self._ask(collecting, guard_against_repeat(proposed, collecting, self.rules))

    # -------------------------
    # HELPERS
    # -------------------------

    def _ask(self, state: InterviewState, question: Question) -> InterviewState:
        return state.model_copy(
            update={
                "next_question": question,
                "meta": state.meta.model_copy(
                    update={"updated_at": self._clock(), "last_asked_qid": question.qid}
                ),
            }
        )

    def _question_text(self, state: InterviewState, qid: str, supplied: str | None) -> str:
        text = safe_trim(supplied)
        if text:
            return text
        pending = state.next_question
        if pending is not None and normalize_key(pending.qid) == normalize_key(qid):
            return pending.question
        bank = self.rules.question(qid)
        return bank.question if bank is not None else qid

    @staticmethod
    def _is_duplicate(state: InterviewState, qid: str, text: str) -> bool:
        if not state.answers:
            return False
        last = state.answers[-1]
        return normalize_key(last.qid) == normalize_key(qid) and last.answer.strip().lower() == text.lower()

"""Tests for conflict detection."""

from datetime import datetime, timezone

from industry_interview.conflicts import detect_conflicts, has_blocking_conflict
from industry_interview.models import (
    Candidate,
    CloseCallConflict,
    InterviewAnswer,
    InterviewState,
    TopFlippedConflict,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def cand(key: str, score: float) -> Candidate:
    return Candidate(key=key, label=key, score=score)


def answer(qid: str, text: str) -> InterviewAnswer:
    return InterviewAnswer(qid=qid, question=qid, answer=text, created_at=NOW)


def types(conflicts):
    return [c.type for c in conflicts]


class TestDetectConflicts:
    """Tests for detect_conflicts."""

    def test_no_conflicts_on_first_round(self):
        """A clear leader on a fresh state raises nothing."""
        conflicts = detect_conflicts(InterviewState(), [cand("auto_detailing", 8)], 0.89)
        assert conflicts == []

    def test_top_flipped(self):
        """A change of leader is reported with both keys."""
        previous = InterviewState(round=2, candidates=[cand("Auto Repair", 3)], confidence_score=0.3)
        conflicts = detect_conflicts(previous, [cand("auto_detailing", 6), cand("auto_repair", 3)], 0.7)

        assert types(conflicts) == ["top_flipped"]
        flipped = conflicts[0]
        assert isinstance(flipped, TopFlippedConflict)
        assert flipped.from_key == "auto_repair"
        assert flipped.to == "auto_detailing"

    def test_same_leader_is_not_flipped(self):
        """Key normalization prevents spurious flips."""
        previous = InterviewState(candidates=[cand("Auto Detailing", 3)])
        conflicts = detect_conflicts(previous, [cand("auto_detailing", 8)], 0.89)
        assert "top_flipped" not in types(conflicts)

    def test_close_call(self):
        """Top two within the gap are a close call."""
        conflicts = detect_conflicts(InterviewState(), [cand("a", 5), cand("b", 4)], 0.365)

        assert types(conflicts) == ["close_call"]
        close = conflicts[0]
        assert isinstance(close, CloseCallConflict)
        assert close.between == ["a", "b"]
        assert close.scores == [5, 4]

    def test_close_call_needs_positive_score(self):
        """Two zero scores are not a close call."""
        conflicts = detect_conflicts(InterviewState(), [cand("a", 0), cand("b", 0)], 0.0)
        assert "close_call" not in types(conflicts)

    def test_wide_gap_is_not_close(self):
        """A gap larger than the threshold is fine."""
        conflicts = detect_conflicts(InterviewState(), [cand("a", 8), cand("b", 2)], 0.7)
        assert conflicts == []

    def test_plateau_requires_round_two(self):
        """Plateau is only checked once a previous round has been evaluated."""
        previous = InterviewState(round=1, confidence_score=0.0)
        conflicts = detect_conflicts(previous, [cand("a", 0)], 0.0)
        assert "confidence_plateau" not in types(conflicts)

    def test_plateau(self):
        """A confidence change below the delta is a plateau."""
        previous = InterviewState(round=3, candidates=[cand("a", 4)], confidence_score=0.40)
        conflicts = detect_conflicts(previous, [cand("a", 4)], 0.42)

        assert types(conflicts) == ["confidence_plateau"]
        assert conflicts[0].prev == 0.40
        assert conflicts[0].next == 0.42

    def test_kinds_are_not_exclusive(self):
        """Several conflicts can be reported for one evaluation."""
        previous = InterviewState(round=2, candidates=[cand("service", 0)], confidence_score=0.35)
        conflicts = detect_conflicts(previous, [cand("a", 5), cand("b", 4)], 0.365)
        assert types(conflicts) == ["top_flipped", "close_call", "confidence_plateau"]

    def test_domain_mismatch(self):
        """A vehicle leader with home-only answers is a domain mismatch."""
        answers = [answer("top_jobs", "we detail homes and residential properties")]
        conflicts = detect_conflicts(InterviewState(), [cand("auto_detailing", 8)], 0.89, answers=answers)

        assert types(conflicts) == ["domain_mismatch"]
        assert conflicts[0].key == "auto_detailing"

    def test_domain_mismatch_not_raised_when_vehicles_mentioned(self):
        """Mentioning vehicles clears the mismatch."""
        answers = [answer("top_jobs", "homes and cars")]
        conflicts = detect_conflicts(InterviewState(), [cand("auto_detailing", 8)], 0.89, answers=answers)
        assert conflicts == []

    def test_domain_mismatch_skipped_after_clarifier(self):
        """Once the domain clarifier is answered the mismatch is settled."""
        answers = [
            answer("top_jobs", "detailing homes"),
            answer("domain_clarifier", "Homes (residential)"),
        ]
        conflicts = detect_conflicts(InterviewState(), [cand("auto_detailing", 8)], 0.89, answers=answers)
        assert "domain_mismatch" not in types(conflicts)

    def test_domain_mismatch_ignores_non_vehicle_leaders(self):
        """Home answers are expected for home industries."""
        answers = [answer("top_jobs", "residential homes")]
        conflicts = detect_conflicts(InterviewState(), [cand("plumbing", 8)], 0.89, answers=answers)
        assert conflicts == []


class TestHasBlockingConflict:
    """Tests for has_blocking_conflict."""

    def test_empty(self):
        """No conflicts never block."""
        assert has_blocking_conflict([]) is False

    def test_any_kind_blocks(self):
        """Every detected kind blocks suggestion."""
        conflicts = detect_conflicts(InterviewState(), [cand("a", 5), cand("b", 4)], 0.365)
        assert has_blocking_conflict(conflicts) is True

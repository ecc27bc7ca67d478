"""Observability utilities: trace IDs and interview metrics.

This module provides:
- Trace ID generation and propagation via context vars
- Prometheus metrics for interview actions, conflicts and outcomes
- A structured logging helper that records each interview transition
"""

import secrets
from contextvars import ContextVar

import structlog
from prometheus_client import Counter, Histogram

from industry_interview.models import InterviewState

logger = structlog.get_logger()

# =============================================================================
# Trace ID Context
# =============================================================================

# Context variable for trace ID propagation across async calls
trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")


def generate_trace_id() -> str:
    """Generate cryptographically secure trace ID for request tracking."""
    return secrets.token_hex(16)  # 32 hex chars, same format as uuid4().hex


def get_trace_id() -> str:
    """Get current trace ID from context, or empty string if not set."""
    return trace_id_ctx.get()


def set_trace_id(trace_id: str) -> None:
    """Set trace ID in context."""
    trace_id_ctx.set(trace_id)


# =============================================================================
# Prometheus Metrics for the Interview
# =============================================================================

interview_actions_total = Counter(
    "interview_actions_total",
    "Industry interview actions handled",
    ["action", "status"],  # status: collecting, suggested, rejected
)

interview_conflicts_total = Counter(
    "interview_conflicts_total",
    "Conflicts detected while evaluating answers",
    ["type"],
)

interview_confidence = Histogram(
    "interview_confidence",
    "Confidence score after each evaluated answer",
    buckets=[0.1, 0.2, 0.35, 0.5, 0.65, 0.82, 0.9, 1.0],
)

interview_rounds_to_suggestion = Histogram(
    "interview_rounds_to_suggestion",
    "Round at which the interview produced a suggestion",
    buckets=[2, 3, 4, 5, 6, 7, 8],
)


def record_interview_action(
    action: str,
    tenant_id: str,
    before: InterviewState,
    after: InterviewState,
) -> None:
    """Log an interview transition and update metrics."""
    # Duplicate answers come back unchanged and are not re-counted
    evaluated = action == "answer" and len(after.answers) != len(before.answers)

    logger.info(
        "interview_action",
        trace_id=get_trace_id(),
        tenant_id=tenant_id,
        action=action,
        status=after.status,
        round=after.round,
        confidence=round(after.confidence_score, 3),
        next_qid=after.next_question.qid if after.next_question else None,
        suggested=after.suggested_industry_key,
    )

    interview_actions_total.labels(action=action, status=after.status).inc()

    if evaluated:
        interview_confidence.observe(after.confidence_score)
        for conflict in after.conflicts:
            interview_conflicts_total.labels(type=conflict.type).inc()
        if after.status == "suggested":
            interview_rounds_to_suggestion.observe(after.round)


def record_rejected_action(action: str, tenant_id: str, code: str) -> None:
    """Log and count an action rejected by validation."""
    logger.warning(
        "interview_action_rejected",
        trace_id=get_trace_id(),
        tenant_id=tenant_id,
        action=action,
        code=code,
    )
    interview_actions_total.labels(action=action, status="rejected").inc()

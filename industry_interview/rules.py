"""Scoring rules and decision-tree tables for the industry interview.

Everything here is read-only configuration. build_rules() compiles the raw
tables into an InterviewRules value that is passed explicitly to the scorer,
the selector and the engine, so tests can substitute their own tables.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from industry_interview.keys import normalize_key
from industry_interview.models import Question
from industry_interview.question_bank import (
    DOMAIN_CLARIFIER_QID,
    FREEFORM_QIDS,
    GENERIC_CLARIFIER_QID,
    OPENING_QID,
    QUESTION_BANK,
    pick_question,
)

# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

OPTION_BOOST = 6  # picking an industry on the opening question
FOLLOWUP_BOOST = 3
CLARIFIER_BOOST = 4
CLARIFIER_PICK_BOOST = 4  # picking a label on the generic top-two clarifier

FALLBACK_INDUSTRY_KEY = "service"


# ---------------------------------------------------------------------------
# Keyword Rules
# ---------------------------------------------------------------------------

# Each pattern is tested once against the lower-cased answer haystack and
# contributes at most one point. Table order is the tie-break order.
INDUSTRY_KEYWORDS: dict[str, list[str]] = {
    "auto_detailing": [
        r"\bdetail",
        r"ceramic",
        r"paint correction",
        r"\bwax",
        r"polish",
        r"\bppf\b|paint protection",
        r"\bbuff",
        r"wash package|car wash",
    ],
    "auto_repair": [
        r"mechanic",
        r"\bbrakes?\b",
        r"\bengines?\b",
        r"oil change",
        r"diagnostic",
        r"transmission",
        r"tune[- ]?up",
        r"suspension",
    ],
    "auto_repair_collision": [
        r"collision",
        r"auto body|body shop",
        r"\bdents?\b",
        r"bumper",
        r"\bpanels?\b",
        r"refinish",
        r"insurance claim",
    ],
    "vehicle_wraps": [
        r"\bwrap",
        r"vinyl",
        r"decal",
        r"lettering",
        r"\bgraphics\b",
        r"window tint",
    ],
    "window_treatments": [
        r"\bblinds\b",
        r"\bshades?\b",
        r"window treatment",
        r"window covering",
        r"shutters",
        r"drapes|curtains",
    ],
    "upholstery": [
        r"upholster",
        r"leather",
        r"canvas",
        r"headliner",
        r"\bsew",
        r"\bmarine\b",
        r"\bfabric",
    ],
    "paving_contractor": [
        r"asphalt",
        r"sealcoat",
        r"driveway",
        r"parking lot",
        r"\bpav(?:e|ing)\b",
        r"concrete",
        r"striping",
    ],
    "landscaping": [
        r"landscap",
        r"\blawns?\b",
        r"\bmow",
        r"hardscap",
        r"irrigation",
        r"\bsod\b",
        r"mulch",
    ],
    "painting_contractors": [
        r"(?:interior|exterior) paint",
        r"painting contractor",
        r"house paint",
        r"\bprimer\b",
        r"cabinet paint",
        r"drywall",
    ],
    "hvac": [
        r"\bhvac\b",
        r"furnace",
        r"air condition",
        r"heat pump",
        r"\bducts?\b|ductwork",
        r"thermostat",
    ],
    "plumbing": [
        r"plumb",
        r"water heater",
        r"\bdrains?\b",
        r"\bpipes?\b",
        r"\bleaks?\b",
        r"sewer",
        r"faucet|toilet",
    ],
    "electrical": [
        r"electric",
        r"wiring",
        r"breaker",
        r"\boutlets?\b",
        r"lighting",
        r"generator",
    ],
    "roofing": [
        r"\broof",
        r"shingle",
        r"gutter",
        r"siding",
        r"flashing",
    ],
    "cleaning_services": [
        r"cleaning|cleaner",
        r"janitor",
        r"\bmaid",
        r"deep clean",
        r"pressure wash|power wash",
        r"carpet",
        r"move[- ]out",
    ],
}


# ---------------------------------------------------------------------------
# Option Boosts
# ---------------------------------------------------------------------------

# qid -> [(trigger pattern, industry key, points)]
# Triggers are matched against the individual answer, not the haystack.
OPTION_BOOST_RULES: dict[str, list[tuple[str, str, float]]] = {
    "services": [
        (r"detail|ceramic", "auto_detailing", OPTION_BOOST),
        (r"auto repair|mechanic", "auto_repair", OPTION_BOOST),
        (r"collision|auto body|body shop", "auto_repair_collision", OPTION_BOOST),
        (r"\bwraps?\b|vinyl graphics", "vehicle_wraps", OPTION_BOOST),
        (r"window treatment|blinds|shades", "window_treatments", OPTION_BOOST),
        (r"upholster", "upholstery", OPTION_BOOST),
        (r"paving|asphalt|concrete", "paving_contractor", OPTION_BOOST),
        (r"landscap|hardscap", "landscaping", OPTION_BOOST),
        (r"painting", "painting_contractors", OPTION_BOOST),
        (r"\bhvac\b|heating|cooling", "hvac", OPTION_BOOST),
        (r"plumb", "plumbing", OPTION_BOOST),
        (r"electric", "electrical", OPTION_BOOST),
        (r"roof|siding", "roofing", OPTION_BOOST),
        (r"clean|janitor", "cleaning_services", OPTION_BOOST),
    ],
    "specialty": [
        (r"detail|ceramic|ppf", "auto_detailing", FOLLOWUP_BOOST),
        (r"mechanical|maintenance", "auto_repair", FOLLOWUP_BOOST),
        (r"collision|body", "auto_repair_collision", FOLLOWUP_BOOST),
        (r"wrap|tint|graphics", "vehicle_wraps", FOLLOWUP_BOOST),
    ],
    "materials_objects": [
        (r"roads|parking", "paving_contractor", FOLLOWUP_BOOST),
    ],
    "clarify_detail_vs_repair": [
        (r"wash|polish|coat", "auto_detailing", CLARIFIER_BOOST),
        (r"engine|brake|mechanical", "auto_repair", CLARIFIER_BOOST),
    ],
    "clarify_detail_vs_cleaning": [
        (r"vehicle|\bcars?\b|truck|boat", "auto_detailing", CLARIFIER_BOOST),
        (r"home|building|office", "cleaning_services", CLARIFIER_BOOST),
    ],
    "clarify_repair_vs_collision": [
        (r"engine|brake|mechanical", "auto_repair", CLARIFIER_BOOST),
        (r"dent|panel|accident|collision", "auto_repair_collision", CLARIFIER_BOOST),
    ],
}


# ---------------------------------------------------------------------------
# Decision Tree
# ---------------------------------------------------------------------------

AUTOMOTIVE_KEYS = frozenset(
    {
        "auto_detailing",
        "auto_repair",
        "auto_repair_collision",
        "auto_body",
        "collision_repair",
        "mobile_detailing",
    }
)
TRADES_KEYS = frozenset({"hvac", "plumbing", "electrical", "roofing"})
CLEANING_KEYS = frozenset({"cleaning_services"})

AUTOMOTIVE_CHECKLIST = ("specialty", "top_jobs", "job_type", "materials_objects")
TRADES_CHECKLIST = ("job_type", "materials", "who_for", "top_jobs")
CLEANING_CHECKLIST = ("who_for", "top_jobs", "materials_objects")
GENERAL_CHECKLIST = (
    "top_jobs",
    "materials_objects",
    "job_type",
    "materials",
    "who_for",
    "specialty",
    "location",
)

# Industry-specific questions asked before the general checklist when the
# leading candidate is not covered by one of the grouped branches.
INDUSTRY_LOCK_INS: dict[str, tuple[str, ...]] = {
    "window_treatments": ("wt_products", "wt_job_type", "wt_customer_type"),
    "vehicle_wraps": ("vw_wrap_type", "vw_design"),
    "painting_contractors": ("paint_scope", "paint_customer_type"),
    "paving_contractor": ("paving_type",),
    "upholstery": ("uph_domain",),
}

# Unordered confusable pairs -> hand-written disambiguation question
CLARIFIER_PAIRS: dict[frozenset[str], str] = {
    frozenset({"auto_detailing", "auto_repair"}): "clarify_detail_vs_repair",
    frozenset({"auto_detailing", "cleaning_services"}): "clarify_detail_vs_cleaning",
    frozenset({"auto_repair", "auto_repair_collision"}): "clarify_repair_vs_collision",
}

# Alternatives tried, in order, when the proposed question was just asked
REPEAT_FALLBACK_QIDS = (
    "specialty",
    "top_jobs",
    "materials",
    "job_type",
    "materials_objects",
    "who_for",
    "location",
)

# Vehicle industries that a home-only answer history contradicts
VEHICLE_KEYS = frozenset({"auto_repair_collision", "auto_detailing", "auto_repair", "vehicle_wraps"})
HOME_PATTERN = r"\bhomes?\b|\bresidential\b"
VEHICLE_PATTERN = r"\bcars?\b|\btrucks?\b|\bvans?\b|\bvehicles?\b"


# ---------------------------------------------------------------------------
# Compiled Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OptionBoost:
    """Fixed bonus for an answer whose text matches the trigger pattern."""

    key: str
    pattern: re.Pattern[str]
    points: float


@dataclass(frozen=True)
class QuestionBranch:
    """A decision-tree branch: applies when either top-two key is in industry_keys."""

    name: str
    industry_keys: frozenset[str]
    checklist: tuple[str, ...]


@dataclass(frozen=True)
class InterviewRules:
    """Immutable bundle of every table the interview consults."""

    question_bank: Mapping[str, Question]
    keyword_rules: Mapping[str, tuple[re.Pattern[str], ...]]
    option_boosts: Mapping[str, tuple[OptionBoost, ...]]
    branches: tuple[QuestionBranch, ...]
    lock_ins: Mapping[str, tuple[str, ...]]
    general_checklist: tuple[str, ...]
    clarifier_pairs: Mapping[frozenset[str], str]
    repeat_fallback_qids: tuple[str, ...]
    freeform_qids: tuple[str, ...]
    vehicle_keys: frozenset[str]
    home_pattern: re.Pattern[str]
    vehicle_pattern: re.Pattern[str]
    opening_qid: str = OPENING_QID
    domain_clarifier_qid: str = DOMAIN_CLARIFIER_QID
    generic_clarifier_qid: str = GENERIC_CLARIFIER_QID
    clarifier_pick_boost: float = CLARIFIER_PICK_BOOST
    fallback_key: str = FALLBACK_INDUSTRY_KEY
    known_keys: frozenset[str] = field(default=frozenset())

    def question(self, qid: str | None) -> Question | None:
        """Look up a question in this rule set's bank."""
        return pick_question(qid, self.question_bank)


def _compile_keywords(table: Mapping[str, Iterable[str]]) -> dict[str, tuple[re.Pattern[str], ...]]:
    compiled: dict[str, tuple[re.Pattern[str], ...]] = {}
    for key, patterns in table.items():
        compiled[normalize_key(key)] = tuple(re.compile(p, re.IGNORECASE) for p in patterns)
    return compiled


def _compile_boosts(
    table: Mapping[str, Iterable[tuple[str, str, float]]],
) -> dict[str, tuple[OptionBoost, ...]]:
    compiled: dict[str, tuple[OptionBoost, ...]] = {}
    for qid, rules in table.items():
        compiled[normalize_key(qid)] = tuple(
            OptionBoost(key=normalize_key(key), pattern=re.compile(pattern, re.IGNORECASE), points=points)
            for pattern, key, points in rules
        )
    return compiled


def build_rules(
    keywords: Mapping[str, Iterable[str]] | None = None,
    option_boosts: Mapping[str, Iterable[tuple[str, str, float]]] | None = None,
    question_bank: Mapping[str, Question] | None = None,
) -> InterviewRules:
    """Compile rule tables into an InterviewRules value.

    Args:
        keywords: industry key -> regex patterns. Defaults to INDUSTRY_KEYWORDS.
        option_boosts: qid -> [(pattern, key, points)]. Defaults to OPTION_BOOST_RULES.
        question_bank: qid -> Question. Defaults to QUESTION_BANK.
    """
    keyword_rules = _compile_keywords(INDUSTRY_KEYWORDS if keywords is None else keywords)
    boosts = _compile_boosts(OPTION_BOOST_RULES if option_boosts is None else option_boosts)

    known = set(keyword_rules)
    for rules in boosts.values():
        known.update(rule.key for rule in rules)

    return InterviewRules(
        question_bank=QUESTION_BANK if question_bank is None else question_bank,
        keyword_rules=MappingProxyType(keyword_rules),
        option_boosts=MappingProxyType(boosts),
        branches=(
            QuestionBranch("automotive", AUTOMOTIVE_KEYS, AUTOMOTIVE_CHECKLIST),
            QuestionBranch("trades", TRADES_KEYS, TRADES_CHECKLIST),
            QuestionBranch("cleaning", CLEANING_KEYS, CLEANING_CHECKLIST),
        ),
        lock_ins=MappingProxyType(dict(INDUSTRY_LOCK_INS)),
        general_checklist=GENERAL_CHECKLIST,
        clarifier_pairs=MappingProxyType(dict(CLARIFIER_PAIRS)),
        repeat_fallback_qids=REPEAT_FALLBACK_QIDS,
        freeform_qids=FREEFORM_QIDS,
        vehicle_keys=VEHICLE_KEYS,
        home_pattern=re.compile(HOME_PATTERN, re.IGNORECASE),
        vehicle_pattern=re.compile(VEHICLE_PATTERN, re.IGNORECASE),
        known_keys=frozenset(known),
    )


DEFAULT_RULES = build_rules()

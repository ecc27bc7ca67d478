"""Static catalog of interview questions.

Order matters only for readability; lookups go through QUESTION_BANK by qid.
Clarifier and freeform prompts live here too so that every qid the engine can
emit resolves to a full question.
"""

from types import MappingProxyType
from typing import Mapping

from industry_interview.keys import normalize_key
from industry_interview.models import Question

# Question ids referenced by the decision tree and the anti-repeat guard
OPENING_QID = "services"
DOMAIN_CLARIFIER_QID = "domain_clarifier"
GENERIC_CLARIFIER_QID = "clarify_top_two"
FREEFORM_QIDS = ("freeform", "freeform_jobs", "freeform_customers")

_QUESTIONS: list[Question] = [
    # ---------------------------------------------------------------------
    # Broad opener
    # ---------------------------------------------------------------------
    Question(
        qid="services",
        question="What do you primarily do?",
        help="Pick the closest match.",
        options=[
            "Auto detailing / ceramic coating",
            "Auto repair / mechanic",
            "Auto body / collision",
            "Vehicle wraps / vinyl graphics",
            "Window treatments (blinds/shades)",
            "Upholstery / reupholstery",
            "Paving / asphalt / concrete",
            "Landscaping / hardscaping",
            "Painting (interior/exterior)",
            "HVAC",
            "Plumbing",
            "Electrical",
            "Roofing / siding",
            "Cleaning / janitorial",
            "Other",
        ],
    ),
    # ---------------------------------------------------------------------
    # Follow-ups used by the decision tree
    # ---------------------------------------------------------------------
    Question(
        qid="specialty",
        question="Which of these is closest to your main specialty?",
        help="Pick the closest match.",
        options=[
            "Detailing / ceramic coating / PPF",
            "Mechanical repair / maintenance",
            "Collision / body / paint",
            "Wraps / tint / graphics",
            "Other",
        ],
    ),
    Question(
        qid="top_jobs",
        question="Name 2–3 common jobs you quote.",
        help="Example: “paint correction, interior detail, wash packages”.",
    ),
    Question(
        qid="job_type",
        question="What kind of jobs are most common?",
        options=["New install", "Replacement", "Repair", "Maintenance / service", "Mix of these"],
    ),
    Question(
        qid="materials",
        question="What materials or equipment do you work with most?",
        help="Example: “asphalt and sealer”, “copper pipe”, “vinyl film”.",
    ),
    Question(
        qid="materials_objects",
        question="What do you work on most often?",
        help="Pick the closest match.",
        options=["Cars/Trucks", "Boats", "Homes", "Businesses", "Roads/Parking lots", "Other"],
    ),
    Question(
        qid="who_for",
        question="Who are your customers most often?",
        options=[
            "Homeowners (residential)",
            "Businesses (commercial)",
            "Property managers / HOAs",
            "Fleets / dealerships",
            "Mix of these",
        ],
    ),
    Question(
        qid="location",
        question="Where does most of the work happen?",
        options=[
            "At the customer's home or business",
            "At my shop",
            "Job sites / outdoors",
            "Mobile (I travel to the customer)",
            "Mix of these",
        ],
    ),
    # ---------------------------------------------------------------------
    # Industry lock-ins
    # ---------------------------------------------------------------------
    Question(
        qid="wt_products",
        question="For window treatments, what do you install most?",
        options=["Blinds", "Shades", "Shutters", "Drapes/Curtains", "Mix of these"],
    ),
    Question(
        qid="wt_job_type",
        question="For window treatments, what kind of jobs are most common?",
        options=["New install", "Replacement", "Repair", "Measuring/consultation", "Mix of these"],
    ),
    Question(
        qid="wt_customer_type",
        question="For window treatments, who are your customers most often?",
        options=["Residential", "Commercial", "Both"],
    ),
    Question(
        qid="vw_wrap_type",
        question="For wraps, what do you do most?",
        options=["Full wraps", "Partial wraps", "Commercial lettering/decals", "Fleet wraps", "Mix of these"],
    ),
    Question(
        qid="vw_design",
        question="For wraps, do customers typically provide artwork?",
        options=["They provide artwork", "We design it", "Both"],
    ),
    Question(
        qid="paint_scope",
        question="For painting, what do you paint most?",
        options=["Interior", "Exterior", "Both"],
    ),
    Question(
        qid="paint_customer_type",
        question="For painting, who are your customers most often?",
        options=["Residential", "Commercial", "Both"],
    ),
    Question(
        qid="paving_type",
        question="For paving, what do you do most?",
        options=["Asphalt paving", "Sealcoating", "Concrete", "Striping", "Mix of these"],
    ),
    Question(
        qid="uph_domain",
        question="For upholstery, what do you work on most?",
        options=["Auto", "Marine", "Furniture", "Commercial", "Mix of these"],
    ),
    # ---------------------------------------------------------------------
    # Clarifiers
    # ---------------------------------------------------------------------
    Question(
        qid="domain_clarifier",
        question="Quick clarifier: what do you quote MOST often?",
        help="This prevents loading the wrong starter pack.",
        options=[
            "Vehicles (cars/trucks/vans)",
            "Homes (residential)",
            "Commercial buildings/offices",
            "Outdoor/roads/land",
            "Other",
        ],
    ),
    Question(
        qid="clarify_detail_vs_repair",
        question="Which is closer to most of your jobs?",
        help="Detailing and mechanical repair use different starter packs.",
        options=[
            "Washing, polishing & coating the paint",
            "Fixing engines, brakes & mechanical problems",
            "Both equally",
        ],
    ),
    Question(
        qid="clarify_detail_vs_cleaning",
        question="What do you clean or detail most often?",
        options=["Vehicles (cars/trucks/boats)", "Homes & buildings"],
    ),
    Question(
        qid="clarify_repair_vs_collision",
        question="What kind of repairs make up most of your work?",
        options=[
            "Engines, brakes & mechanical work",
            "Dents, panels & paint after accidents",
            "Both equally",
        ],
    ),
    Question(
        qid="clarify_top_two",
        question="Which is closer to your business?",
        help="Pick the one that describes most of your jobs.",
    ),
    # ---------------------------------------------------------------------
    # Freeform rotation (last resort)
    # ---------------------------------------------------------------------
    Question(
        qid="freeform",
        question="Describe your business in one sentence.",
        help="Be specific: what you do + what you work on (short is fine).",
    ),
    Question(
        qid="freeform_jobs",
        question="Describe a typical job you quoted recently.",
        help="What was it, and what did the customer want done?",
    ),
    Question(
        qid="freeform_customers",
        question="What do customers usually ask you for when they first call?",
        help="Use their words if you can.",
    ),
]

QUESTION_BANK: Mapping[str, Question] = MappingProxyType({q.qid: q for q in _QUESTIONS})


def pick_question(qid: str | None, bank: Mapping[str, Question] = QUESTION_BANK) -> Question | None:
    """Look up a question by (normalized) id. Returns a copy so callers cannot alter the bank."""
    key = normalize_key(qid)
    question = bank.get(key)
    return question.model_copy(deep=True) if question is not None else None

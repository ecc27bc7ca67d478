"""Canonical industry catalog and sub-industry defaults."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping

import structlog
from pydantic import ValidationError

from industry_interview.config import get_settings
from industry_interview.keys import normalize_key, safe_trim, title_from_key
from industry_interview.models import CanonicalIndustry, SubIndustry

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Canonical Industries
# ---------------------------------------------------------------------------

DEFAULT_INDUSTRIES: list[CanonicalIndustry] = [
    CanonicalIndustry(key="auto_detailing", label="Auto Detailing"),
    CanonicalIndustry(key="auto_repair", label="Auto Repair"),
    CanonicalIndustry(key="auto_repair_collision", label="Auto Body & Collision"),
    CanonicalIndustry(key="vehicle_wraps", label="Vehicle Wraps"),
    CanonicalIndustry(key="window_treatments", label="Window Treatments"),
    CanonicalIndustry(key="upholstery", label="Upholstery"),
    CanonicalIndustry(key="paving_contractor", label="Paving Contractor"),
    CanonicalIndustry(key="landscaping", label="Landscaping"),
    CanonicalIndustry(key="painting_contractors", label="Painting Contractors"),
    CanonicalIndustry(key="hvac", label="HVAC"),
    CanonicalIndustry(key="plumbing", label="Plumbing"),
    CanonicalIndustry(key="electrical", label="Electrical"),
    CanonicalIndustry(key="roofing", label="Roofing"),
    CanonicalIndustry(key="cleaning_services", label="Cleaning Services"),
    CanonicalIndustry(key="service", label="Service"),
]


def _normalize_entries(raw: Iterable[object]) -> list[CanonicalIndustry]:
    """Validate entries, normalize keys and drop duplicates (first wins)."""
    entries: list[CanonicalIndustry] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        key = normalize_key(item.get("key"))
        if not key or key in seen:
            continue
        try:
            entry = CanonicalIndustry(key=key, label=safe_trim(item.get("label")) or title_from_key(key))
        except ValidationError:
            continue
        seen.add(key)
        entries.append(entry)
    return entries


def load_canonical_industries(path: str | None = None) -> list[CanonicalIndustry]:
    """Load the canonical industry list from a JSON file.

    The file holds either a list of {key, label} objects or an object with an
    "industries" list. Falls back to DEFAULT_INDUSTRIES when the file is
    missing, unreadable or yields no valid entries.
    """
    if not path:
        return list(DEFAULT_INDUSTRIES)

    industries_path = Path(path)
    if not industries_path.exists():
        logger.debug("industries_file_missing", path=path)
        return list(DEFAULT_INDUSTRIES)

    try:
        with open(industries_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load industries file, using defaults", path=path, error=str(e))
        return list(DEFAULT_INDUSTRIES)

    raw = data.get("industries") if isinstance(data, dict) else data
    entries = _normalize_entries(raw) if isinstance(raw, list) else []
    if not entries:
        logger.warning("Industries file has no valid entries, using defaults", path=path)
        return list(DEFAULT_INDUSTRIES)

    logger.info("Canonical industries loaded", path=path, count=len(entries))
    return entries


@lru_cache
def get_canonical_industries() -> tuple[CanonicalIndustry, ...]:
    """Get the cached canonical industry list for the configured path."""
    return tuple(load_canonical_industries(get_settings().industries_json_path))


# ---------------------------------------------------------------------------
# Sub-Industries
# ---------------------------------------------------------------------------

# Platform defaults keyed by industry key
PLATFORM_SUB_INDUSTRIES: dict[str, list[SubIndustry]] = {
    "upholstery": [
        SubIndustry(key="auto", label="Auto"),
        SubIndustry(key="marine", label="Marine"),
        SubIndustry(key="motorcycle", label="Motorcycle"),
        SubIndustry(key="rv", label="RV"),
        SubIndustry(key="commercial", label="Commercial"),
    ],
    "landscaping": [
        SubIndustry(key="residential", label="Residential"),
        SubIndustry(key="commercial", label="Commercial"),
        SubIndustry(key="hoa", label="HOA / Community"),
        SubIndustry(key="hardscape", label="Hardscape"),
        SubIndustry(key="maintenance", label="Maintenance"),
    ],
}

# Offered for industries without platform defaults
GENERIC_SUB_INDUSTRIES: list[SubIndustry] = [
    SubIndustry(key="residential", label="Residential"),
    SubIndustry(key="commercial", label="Commercial"),
    SubIndustry(key="emergency", label="Emergency / Rush"),
    SubIndustry(key="maintenance", label="Maintenance"),
    SubIndustry(key="new_install", label="New Install"),
]


def merge_sub_industries(
    industry_key: str | None,
    tenant_custom: Iterable[SubIndustry] = (),
) -> list[SubIndustry]:
    """Platform defaults for the industry followed by tenant entries, deduped by key.

    A tenant entry with the same key as a default replaces its label in place.
    """
    platform = PLATFORM_SUB_INDUSTRIES.get(normalize_key(industry_key), GENERIC_SUB_INDUSTRIES)

    by_key: dict[str, SubIndustry] = {}
    for sub in platform:
        by_key[sub.key] = sub
    for sub in tenant_custom:
        key = normalize_key(sub.key)
        if not key:
            continue
        by_key[key] = SubIndustry(key=key, label=safe_trim(sub.label) or key)

    return [sub.model_copy() for sub in by_key.values()]

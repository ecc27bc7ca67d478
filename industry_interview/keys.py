"""Industry key normalization and label helpers.

Every component that compares or emits industry keys goes through
normalize_key so that "Auto Detailing", "auto-detailing" and
"auto_detailing" all refer to the same candidate.
"""

import re

KEY_MAX_LENGTH = 64

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_SEPARATOR_RUN = re.compile(r"[-_]+")


def safe_trim(value: object) -> str:
    """Stringify and strip a value, treating None as empty."""
    if value is None:
        return ""
    return str(value).strip()


def normalize_key(raw: object) -> str:
    """Normalize free text into a snake_case industry key.

    Lowercases, replaces "&" with "and", collapses non-alphanumeric runs into
    a single underscore, strips leading/trailing underscores and caps the
    length at KEY_MAX_LENGTH.
    """
    s = safe_trim(raw).lower()
    if not s:
        return ""
    s = s.replace("&", "and")
    s = _NON_ALNUM_RUN.sub("_", s).strip("_")
    return s[:KEY_MAX_LENGTH].rstrip("_")


def title_from_key(key: object) -> str:
    """Build a display label from a key, e.g. "auto_detailing" -> "Auto Detailing"."""
    s = _SEPARATOR_RUN.sub(" ", safe_trim(key)).strip()
    if not s:
        return "Service"
    return " ".join(word[:1].upper() + word[1:] for word in s.split())

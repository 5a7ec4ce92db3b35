"""Name normalization for structured classifier replies.

Classifiers rarely agree on key casing (``category``, ``Category``,
``route_type``...), so keys are folded before lookup.
"""

from __future__ import annotations

from typing import Any

# Normalized key → canonical field name.
# "routetype" is what older classification prompts asked for.
FIELD_ALIASES: dict[str, str] = {
    "category": "category",
    "routetype": "category",
    "route": "category",
    "confidence": "confidence",
    "reasoning": "reasoning",
    "reason": "reasoning",
}


def normalize(s: str) -> str:
    """Strip hyphens, underscores, spaces and lowercase."""
    return s.lower().replace("-", "").replace("_", "").replace(" ", "")


def canonical_fields(record: dict[str, Any]) -> dict[str, Any]:
    """Map the keys of a parsed record onto canonical field names.

    Unknown keys are dropped. When two keys fold to the same field the
    later one wins, matching plain JSON duplicate-key behaviour.
    """
    fields: dict[str, Any] = {}
    for key, value in record.items():
        if not isinstance(key, str):
            continue
        canonical = FIELD_ALIASES.get(normalize(key))
        if canonical:
            fields[canonical] = value
    return fields

"""Decision extraction from raw classifier output.

Classifiers asked for JSON-only replies usually comply, sometimes wrap the
JSON in conversational text and occasionally answer in plain prose.
``DecisionParser`` tries, in order:

  1. Direct JSON: the whole (trimmed) reply is the record
  2. Embedded JSON: the span from the first ``{`` to the last ``}``
  3. Natural-language recovery (see heuristics.py)
  4. Terminal fallback: GeneralInquiry at low confidence

The first strategy that yields a valid Decision wins.  Parsing never raises;
degraded results are visible only through confidence and reasoning.
"""

import json
from typing import Any

from loguru import logger

from decision_router import heuristics
from decision_router.aliases import canonical_fields
from decision_router.models import Category, Decision

# General-purpose handling is the least consequential place to land.
FALLBACK_CATEGORY = Category.GENERAL_INQUIRY
FALLBACK_CONFIDENCE = 0.3
FALLBACK_REASONING = "Parsing failed: All parsing strategies failed"


def _strip_json_noise(text: str) -> str:
    """Remove // and /* */ comments and trailing commas outside of strings."""
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            continue
        elif ch in "}]":
            # Drop a comma that only has whitespace between it and the closer
            j = len(out)
            while j > 0 and out[j - 1].isspace():
                j -= 1
            if j > 0 and out[j - 1] == ",":
                del out[j - 1]
        out.append(ch)
        i += 1
    return "".join(out)


def load_record(text: str) -> dict[str, Any]:
    """Leniently parse a JSON object.

    Raises:
        ValueError: If the text is not JSON or not a JSON object.
    """
    data = json.loads(_strip_json_noise(text))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def validate_record(record: dict[str, Any]) -> Decision:
    """Turn a parsed record into a Decision.

    Raises:
        ValueError: If category is unknown, confidence is not a number in
            [0, 1], or reasoning is not a string.
    """
    fields = canonical_fields(record)

    category = Category.from_name(fields.get("category"))
    if category is None:
        raise ValueError(f"invalid category: {fields.get('category')!r}")

    confidence = fields.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ValueError(f"invalid confidence: {confidence!r}")
    # NaN fails both comparisons
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"confidence out of range: {confidence!r}")

    reasoning = fields.get("reasoning")
    if reasoning is None:
        reasoning = ""
    elif not isinstance(reasoning, str):
        raise ValueError(f"invalid reasoning: {reasoning!r}")

    return Decision(category=category, confidence=float(confidence), reasoning=reasoning)


class DecisionParser:
    """Parses classifier replies into Decisions using a cascade of strategies."""

    def parse(self, raw_text: str | None) -> Decision:
        content = (raw_text or "").strip()
        logger.debug(f"Raw model response: {content}")

        decision = self._try_direct_json(content)
        if decision is not None:
            return decision

        decision = self._try_extracted_json(content)
        if decision is not None:
            return decision

        decision = heuristics.recover(content)
        if decision is not None:
            return decision

        logger.warning("All parsing strategies failed, using fallback")
        return self.fallback()

    @staticmethod
    def fallback() -> Decision:
        return Decision(
            category=FALLBACK_CATEGORY,
            confidence=FALLBACK_CONFIDENCE,
            reasoning=FALLBACK_REASONING,
        )

    def _try_direct_json(self, content: str) -> Decision | None:
        try:
            decision = validate_record(load_record(content))
        except (ValueError, TypeError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError
            logger.debug(f"Direct JSON parsing failed: {e}")
            return None
        logger.debug("Successfully parsed as direct JSON")
        return decision

    def _try_extracted_json(self, content: str) -> Decision | None:
        start = content.find("{")
        end = content.rfind("}")
        if start < 0 or end <= start:
            return None

        fragment = content[start:end + 1]
        logger.debug(f"Extracted JSON: {fragment}")
        try:
            decision = validate_record(load_record(fragment))
        except (ValueError, TypeError, RecursionError) as e:
            logger.debug(f"Extracted JSON parsing failed: {e}")
            return None
        logger.debug("Successfully parsed extracted JSON")
        return decision


_default_parser = DecisionParser()


def extract(raw_text: str | None) -> Decision:
    """Extract a Decision from raw classifier text.  Never raises."""
    return _default_parser.parse(raw_text)

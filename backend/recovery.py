# recovery.py
"""Turn a raw model completion into the analysis JSON object.

Models often wrap the JSON they were asked for in prose or a ```json fence.
Tiers are tried in order and the first one whose candidate text parses wins:

    direct      the whole text
    fenced      the first ```json { ... } ``` block
    brace_span  from the first "{" to the last "}"

Nothing beyond these three is attempted; there is no lenient repair.
"""
from __future__ import annotations
import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from errors import MalformedCompletion, UnexpectedShape

LOG = logging.getLogger("recovery")

REQUIRED_KEYS = ("extracted_fields", "questionnaire_prompt")
FENCED_JSON_RE = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```")
RAW_LOG_LIMIT = 2000


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON and can't be sent back as JSON either
    raise ValueError(f"non-standard JSON constant {name}")


def _loads(candidate: str) -> Any:
    return json.loads(candidate, parse_constant=_reject_constant)


def _direct(raw_text: str) -> Optional[str]:
    return raw_text


def _fenced(raw_text: str) -> Optional[str]:
    m = FENCED_JSON_RE.search(raw_text)
    return m.group(1) if m else None


def _brace_span(raw_text: str) -> Optional[str]:
    first = raw_text.find("{")
    last = raw_text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        return None
    return raw_text[first:last + 1]


# Each attempt returns the candidate substring or None when the tier doesn't apply.
STRATEGIES: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("direct", _direct),
    ("fenced", _fenced),
    ("brace_span", _brace_span),
]


def recover_with_tier(raw_text: str) -> Tuple[str, Any]:
    """Return ``(tier_name, parsed_value)`` for the first tier that parses.

    Raises MalformedCompletion when no tier yields valid JSON.
    """
    raw_text = raw_text or ""
    for name, attempt in STRATEGIES:
        candidate = attempt(raw_text)
        if candidate is None:
            LOG.debug("tier %s: no candidate", name)
            continue
        try:
            value = _loads(candidate)
        except (ValueError, RecursionError) as e:
            LOG.debug("tier %s: parse failed: %s", name, e)
            continue
        LOG.info("completion parsed via %s tier", name)
        return name, value

    LOG.error("all recovery tiers failed; raw completion: %s", raw_text[:RAW_LOG_LIMIT])
    raise MalformedCompletion()


def check_shape(value: Any) -> Dict[str, Any]:
    """Require an object with both REQUIRED_KEYS; raises UnexpectedShape otherwise.

    Applied to the winning tier's value only, it never falls through to a later tier.
    """
    if not isinstance(value, dict):
        LOG.error("parsed completion is a %s, not an object", type(value).__name__)
        raise UnexpectedShape("AI response was not a JSON object. Please try again later.")
    missing = [k for k in REQUIRED_KEYS if k not in value]
    if missing:
        LOG.error("parsed completion missing keys %s (has %s)", missing, list(value.keys()))
        raise UnexpectedShape(f"AI response was missing required sections: {', '.join(missing)}.")
    return value


def recover(raw_text: str) -> Dict[str, Any]:
    _, value = recover_with_tier(raw_text)
    return check_shape(value)

"""Response repair: recover one JSON object from raw, possibly truncated, model text.

The generation service is length-limited, so the usual failure is a payload
cut off mid-array. Repair is a pure function of its input and never invents
content: it can only drop a partial trailing element and close what was left
open.
"""

from __future__ import annotations

import json
from typing import Any

from landnet.utils.exceptions import NoJsonFound, UnrepairableJson
from landnet.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_DISCARDED_TAIL = 500

_CLOSERS = {"{": "}", "[": "]"}

# Open containers while inside one of the payload's top-level arrays
# (nodes, edges, clusters): the root object and the array itself.
_TOP_LEVEL_ARRAY = ["}", "]"]


def extract_candidate(raw_text: str) -> str:
    """Return the span from the first ``{`` to the last ``}``."""
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end < start:
        raise NoJsonFound("No JSON object found in generation response")
    return raw_text[start : end + 1]


def _scan(text: str) -> tuple[list[str], int]:
    """Walk ``text`` outside string literals.

    Returns the closers still pending (outermost first) and the index of the
    last ``}`` that completed an element of a top-level array, or -1.
    """
    stack: list[str] = []
    last_element_end = -1
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]") and stack and stack[-1] == ch:
            stack.pop()
            if ch == "}" and stack == _TOP_LEVEL_ARRAY:
                last_element_end = i
    return stack, last_element_end


def strip_incomplete_tail(candidate: str, max_discarded: int = DEFAULT_MAX_DISCARDED_TAIL) -> str:
    """Cut after the last complete element of a top-level array.

    Nested objects (inline endpoints, cluster metadata) never count as a
    boundary, so a partially written element is dropped whole. A tail of
    ``max_discarded`` characters or more means something other than
    truncation went wrong, and the candidate is returned unchanged.
    """
    _, boundary = _scan(candidate)
    if boundary < 0 or boundary == len(candidate) - 1:
        return candidate
    if len(candidate) - boundary - 1 >= max_discarded:
        return candidate
    return candidate[: boundary + 1]


def closing_sequence(text: str) -> str:
    """Closers for every ``{``/``[`` left open, innermost first.

    Brackets inside string literals are ignored.
    """
    stack, _ = _scan(text)
    return "".join(reversed(stack))


def _try_parse(text: str) -> Any | None:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def repair_response(raw_text: str, *, max_discarded: int = DEFAULT_MAX_DISCARDED_TAIL) -> Any:
    """Parse the JSON object in ``raw_text``, repairing truncation if needed.

    Raises:
        NoJsonFound: no ``{ ... }`` span in the text.
        UnrepairableJson: the candidate did not parse even after repair.
    """
    candidate = extract_candidate(raw_text)

    parsed = _try_parse(candidate)
    if parsed is not None:
        return parsed

    logger.warning("network_json_parse_failed", candidate_chars=len(candidate))

    # Only complete top-level elements survive; then every open container is closed.
    text = strip_incomplete_tail(candidate, max_discarded)
    repaired = text + closing_sequence(text)
    parsed = _try_parse(repaired)
    if parsed is not None:
        logger.info(
            "network_json_repaired",
            strategy="close" if text == candidate else "strip_and_close",
            discarded_chars=len(candidate) - len(text),
            appended=len(repaired) - len(text),
        )
        return parsed

    logger.error("network_json_unrepairable", candidate_chars=len(candidate))
    raise UnrepairableJson("Generation response JSON could not be repaired", raw_text=raw_text)

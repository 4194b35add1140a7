"""Extract a JSON object from model output.

Model replies are not guaranteed to be a single clean JSON document: the
model may wrap the object in prose or markdown fences, emit a draft followed
by a corrected object, truncate its output, or put brace characters inside
string literals.  :func:`extract_json` recovers a value through an ordered
fallback chain, each step running only if the previous one failed:

1. strict parse of the whole text;
2. strip markdown code fences;
3. scan the cleaned text for every balanced ``{...}`` span (string and
   escape aware);
4. parse each span and keep the *last* one that parses, since a model that
   corrects itself puts the final answer last;
5. greedy parse of everything between the first ``{`` and the last ``}``.

Everything here is pure and synchronous (no I/O, no module state), so the
functions are safe to call concurrently from threads or tasks.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from stratgen.domain.errors import ExtractionError

logger = logging.getLogger(__name__)

JsonValue = Union[Dict[str, "JsonValue"], List["JsonValue"], str, int, float, bool, None]

# Opening or closing fence, with an optional info string such as ``json``.
_FENCE_RE = re.compile(r"```[\w+-]*")


@dataclass(frozen=True)
class Candidate:
    """A maximal balanced ``{...}`` span of the cleaned text.

    ``start`` and ``end`` are inclusive offsets.  ``value`` is meaningful only
    when ``valid`` is true.
    """
    start: int
    end: int
    value: JsonValue = None
    valid: bool = False


def _reject_constant(name: str) -> None:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _strict_parse(text: str) -> Tuple[bool, JsonValue]:
    """Parse *text* as one JSON document.  Returns (ok, value); never raises."""
    try:
        return True, json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None


def strip_code_fences(text: str) -> str:
    """Remove every markdown fence marker and trim surrounding whitespace."""
    return _FENCE_RE.sub("", text).strip()


def iter_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` of each balanced object span, in document order.

    Braces inside string literals are ignored, and the character after a
    backslash inside a string is consumed without interpretation.  If an
    object is still open when the text ends, scanning stops: nothing after an
    unterminated object is yielded.
    """
    pos = 0
    while True:
        start = text.find("{", pos)
        if start == -1:
            return

        depth = 0
        in_string = False
        escaped = False
        end = -1
        for i in range(start, len(text)):
            ch = text[i]
            if escaped:
                escaped = False
            elif in_string:
                if ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break

        if end == -1:
            return
        yield start, end
        pos = end + 1


def iter_candidates(text: str) -> Iterator[Candidate]:
    """Parse each span from :func:`iter_spans` and yield it as a ``Candidate``."""
    for start, end in iter_spans(text):
        ok, value = _strict_parse(text[start : end + 1])
        if not ok:
            logger.debug("Discarding unparseable candidate at [%d:%d]", start, end + 1)
        yield Candidate(start=start, end=end, value=value, valid=ok)


def select_candidate(candidates: Iterable[Candidate]) -> Optional[Candidate]:
    """Return the last valid candidate, or ``None`` when none parsed."""
    selected: Optional[Candidate] = None
    for candidate in candidates:
        if candidate.valid:
            selected = candidate
    return selected


def _greedy_bounds(text: str) -> Optional[Tuple[int, int]]:
    """First ``{`` and last ``}`` of *text*, or ``None`` if there is no such pair."""
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    return first, last


def extract_json(text: str) -> JsonValue:
    """Recover a JSON value from model output.

    Raises:
        ExtractionError: no valid value could be recovered.  ``reason`` is
            ``NO_BRACE_FOUND`` when the cleaned text has no ``{ ... }`` pair,
            ``ALL_CANDIDATES_INVALID`` otherwise.
    """
    ok, value = _strict_parse(text)
    if ok:
        return value

    cleaned = strip_code_fences(text)
    candidates = list(iter_candidates(cleaned))
    selected = select_candidate(candidates)
    if selected is not None:
        logger.debug(
            "Selected candidate %d/%d at [%d:%d]",
            candidates.index(selected) + 1, len(candidates), selected.start, selected.end + 1,
        )
        return selected.value

    bounds = _greedy_bounds(cleaned)
    if bounds is None:
        logger.debug("No JSON object found (%d chars)", len(text))
        raise ExtractionError(ExtractionError.NO_BRACE_FOUND, candidates=len(candidates))

    first, last = bounds
    ok, value = _strict_parse(cleaned[first : last + 1])
    if ok:
        logger.debug("Recovered JSON with greedy fallback at [%d:%d]", first, last + 1)
        return value

    logger.debug("All %d candidate(s) and greedy fallback failed to parse", len(candidates))
    raise ExtractionError(ExtractionError.ALL_CANDIDATES_INVALID, candidates=len(candidates))

"""Domain and application errors."""

from __future__ import annotations


class StratGenError(Exception):
    """Base for stratgen errors."""
    pass


class ExtractionError(StratGenError):
    """No valid JSON object could be recovered from model output.

    ``reason`` is one of :attr:`NO_BRACE_FOUND` or :attr:`ALL_CANDIDATES_INVALID`;
    ``candidates`` is the number of balanced spans the scanner found.  Callers
    normally treat every ``ExtractionError`` the same way (retry the model call
    or show an error); the reason is informational.
    """

    NO_BRACE_FOUND = "no_brace_found"
    ALL_CANDIDATES_INVALID = "all_candidates_invalid"

    def __init__(self, reason: str, candidates: int = 0) -> None:
        self.reason = reason
        self.candidates = candidates
        super().__init__(f"Failed to extract and parse JSON ({reason}, candidates={candidates})")


class StrategyGenerationError(StratGenError):
    """The model did not produce a usable core strategy."""
    pass

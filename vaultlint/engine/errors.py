"""Exceptions raised when a lint run cannot produce a report."""

from __future__ import annotations


class LintError(RuntimeError):
    """Base class for fatal lint errors."""


class ConfigError(LintError):
    """Raised when the configuration is malformed."""


class CorpusError(LintError):
    """Raised when the note corpus cannot be loaded."""


class MalformedReferenceError(LintError):
    """Raised when a reference span falls outside its page body."""

    def __init__(self, page: str, raw_target: str, start: int, end: int, body_length: int) -> None:
        super().__init__(
            f"Reference to '{raw_target}' in '{page}' spans bytes {start}..{end} "
            f"but the body is {body_length} bytes long"
        )
        self.page = page
        self.raw_target = raw_target
        self.start = start
        self.end = end
        self.body_length = body_length

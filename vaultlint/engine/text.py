"""Shared text utilities for the lint engine."""

from __future__ import annotations

import re
from bisect import bisect_left
from typing import List, Tuple

from rapidfuzz import fuzz, utils

_TOKEN_RE = re.compile(r"[\w']+")

# Word boundary regex template used when compiling mention matchers
WORD_BOUNDARY = r"(?<![\w#\[]){term}(?!\w)"


def tokenize_spans(text: str) -> List[Tuple[int, int]]:
    """Return ``(start, end)`` character spans of the word tokens in ``text``."""

    return [match.span() for match in _TOKEN_RE.finditer(text)]


def similarity_score(first: str, second: str) -> int:
    """Score how alike two strings are, from 0 (unrelated) to 100 (identical).

    Uses rapidfuzz's weighted ratio over lower-cased, punctuation-free text,
    so exact and substring alignments outrank scattered character matches.
    """

    if not first or not second:
        return 0
    return int(round(fuzz.WRatio(first, second, processor=utils.default_process)))


def comparable_length(first: str, second: str, ratio: float = 1.5) -> bool:
    """Return True when neither string is ``ratio`` times longer than the other."""

    shorter, longer = sorted((len(first), len(second)))
    if shorter == 0:
        return False
    return longer / shorter < ratio


class ByteOffsets:
    """Translate between character indices and UTF-8 byte offsets of a text."""

    def __init__(self, text: str) -> None:
        offsets = [0]
        total = 0
        for char in text:
            total += len(char.encode("utf-8"))
            offsets.append(total)
        self._offsets = offsets

    @property
    def byte_length(self) -> int:
        return self._offsets[-1]

    def to_byte(self, index: int) -> int:
        return self._offsets[index]

    def to_char(self, offset: int) -> int:
        """Return the first character index whose byte offset is at least ``offset``."""

        return bisect_left(self._offsets, offset)

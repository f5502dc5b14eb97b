"""Title and alias normalisation.

Filenames and aliases live in two different spellings. A Logseq page
``foo___bar.md`` is linked as ``[[foo/bar]]``, for example. The
:class:`Normalizer` converts between the two using ordered lists of
``(pattern, replacement)`` substitutions taken from the configuration,
and provides the case-folded keys every detector compares with.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence, Tuple

from .config import compile_pattern

Substitution = Tuple[re.Pattern[str], str]


@dataclass(frozen=True)
class Normalizer:
    """Maps page titles to alias spelling and back."""

    filename_to_alias: Tuple[Substitution, ...]
    alias_to_filename: Tuple[Substitution, ...]

    @classmethod
    def from_pairs(
        cls,
        filename_to_alias: Sequence[Tuple[str, str]],
        alias_to_filename: Sequence[Tuple[str, str]],
    ) -> "Normalizer":
        return cls(
            filename_to_alias=tuple(
                (compile_pattern(source, "filename_to_alias"), replacement)
                for source, replacement in filename_to_alias
            ),
            alias_to_filename=tuple(
                (compile_pattern(source, "alias_to_filename"), replacement)
                for source, replacement in alias_to_filename
            ),
        )

    def to_alias(self, title: str) -> str:
        return _apply(self.filename_to_alias, title)

    def to_filename(self, alias: str) -> str:
        return _apply(self.alias_to_filename, alias)

    @staticmethod
    def alias_key(text: str) -> str:
        """Return the case-folded lookup key for an alias-spelled string."""

        return text.strip().lower()

    def title_key(self, title: str) -> str:
        return self.alias_key(self.to_alias(title))


def _apply(substitutions: Sequence[Substitution], text: str) -> str:
    for pattern, replacement in substitutions:
        text = pattern.sub(replacement, text)
    return text

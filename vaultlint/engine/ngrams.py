"""Word n-gram generation for titles and aliases."""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Sequence, Set, Tuple

from .normalize import Normalizer
from .types import NGram, Page
from .workers import map_partitioned

logger = logging.getLogger(__name__)


def segment_words(text: str, boundary: re.Pattern[str], spacing: re.Pattern[str]) -> List[List[str]]:
    """Split ``text`` into word segments.

    Spacing matches become plain spaces, boundary matches end a segment and
    are dropped. Empty segments are discarded.
    """

    spaced = spacing.sub(" ", text)
    segments = []
    for segment in boundary.split(spaced):
        words = segment.split()
        if words:
            segments.append(words)
    return segments


def ngrams_up_to(
    text: str,
    size: int,
    boundary: re.Pattern[str],
    spacing: re.Pattern[str],
) -> List[Tuple[str, bool]]:
    """Return ``(ngram, complete)`` pairs for every window of 1..=size words.

    ``complete`` is True when the window covers its whole segment. No window
    crosses a segment boundary.
    """

    out: List[Tuple[str, bool]] = []
    for words in segment_words(text, boundary, spacing):
        for width in range(1, size + 1):
            if len(words) < width:
                break
            for start in range(len(words) - width + 1):
                out.append((" ".join(words[start:start + width]), width == len(words)))
    return out


@dataclass(frozen=True)
class NGramIndex:
    """N-gram text to occurrences, plus the per-page view used by the matcher."""

    entries: Dict[str, FrozenSet[NGram]]
    by_page: Dict[str, Tuple[NGram, ...]]

    def for_page(self, title: str) -> Tuple[NGram, ...]:
        return self.by_page.get(title, ())

    def pages_for(self, text: str) -> Set[str]:
        return {occurrence.page for occurrence in self.entries.get(text, ())}


def page_variants(page: Page, normalizer: Normalizer) -> List[str]:
    """Return the title key followed by the alias keys of ``page``, without repeats."""

    variants = [normalizer.title_key(page.title)]
    for alias in page.aliases:
        key = normalizer.alias_key(alias)
        if key not in variants:
            variants.append(key)
    return variants


def build_ngram_index(
    pages: Sequence[Page],
    normalizer: Normalizer,
    size: int,
    boundary: re.Pattern[str],
    spacing: re.Pattern[str],
    workers: int = 1,
) -> NGramIndex:
    """Index the n-grams of every page title and alias."""

    def index_chunk(chunk: Sequence[Page]) -> List[Tuple[str, Tuple[NGram, ...]]]:
        results = []
        for page in chunk:
            seen: Set[Tuple[str, bool, str]] = set()
            occurrences: List[NGram] = []
            for variant in page_variants(page, normalizer):
                for text, complete in ngrams_up_to(variant, size, boundary, spacing):
                    if (text, complete, variant) in seen:
                        continue
                    seen.add((text, complete, variant))
                    occurrences.append(NGram(text=text, page=page.title, source=variant, complete=complete))
            results.append((page.title, tuple(occurrences)))
        return results

    by_page: Dict[str, Tuple[NGram, ...]] = {}
    entries: Dict[str, Set[NGram]] = defaultdict(set)
    for title, occurrences in map_partitioned(index_chunk, list(pages), workers):
        by_page[title] = occurrences
        for occurrence in occurrences:
            entries[occurrence.text].add(occurrence)

    logger.debug("Indexed %d distinct n-grams across %d pages", len(entries), len(by_page))
    return NGramIndex(
        entries={text: frozenset(occurrences) for text, occurrences in entries.items()},
        by_page=by_page,
    )

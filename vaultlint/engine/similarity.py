"""All-pairs fuzzy comparison of page titles and aliases.

Every unordered pair of pages is scored once. The candidates for a pair
are its whole-name comparisons (title and alias keys on both sides) plus
every n-gram of one page against the whole names of the other, in both
directions. The best-scoring candidate represents the pair. This is
quadratic in the number of pages, so rows of the pair matrix are spread
over worker threads.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional, Sequence, Tuple

from .context import CorpusContext
from .text import similarity_score
from .types import SimilarFiles
from .workers import map_partitioned

logger = logging.getLogger(__name__)

Comparison = Tuple[int, str, str]


def same_group(first: str, second: str, spacing: re.Pattern[str]) -> bool:
    """Return True when one title continues the other after a spacing match.

    ``Coffee`` and ``Coffee beans`` or ``recipes`` and ``recipes___soup``
    belong to one group and are never reported as similar files.
    """

    shorter, longer = sorted((first.lower(), second.lower()), key=len)
    if not shorter or not longer.startswith(shorter):
        return False
    return spacing.match(longer, len(shorter)) is not None


def _ngram_texts(context: CorpusContext, title: str) -> List[str]:
    texts: List[str] = []
    for occurrence in context.ngram_index.for_page(title):
        if occurrence.text not in texts:
            texts.append(occurrence.text)
    return texts


def _candidates(context: CorpusContext, first: str, second: str) -> Iterator[Tuple[str, str]]:
    first_full = context.variants[first]
    second_full = context.variants[second]
    for left in first_full:
        for right in second_full:
            yield left, right
    for left in _ngram_texts(context, first):
        for right in second_full:
            yield left, right
    for right in _ngram_texts(context, second):
        for left in first_full:
            yield left, right


def best_comparison(context: CorpusContext, first: str, second: str) -> Optional[Comparison]:
    """Return ``(score, first_variant, second_variant)`` for the best match, or None."""

    best: Optional[Comparison] = None
    for left, right in _candidates(context, first, second):
        if context.is_ignored(left, right):
            continue
        score = similarity_score(left, right)
        if best is None or score > best[0]:
            best = (score, left, right)
    return best


def compare_pair(context: CorpusContext, first: str, second: str) -> Optional[SimilarFiles]:
    """Score one page pair and return a finding when it reaches the threshold."""

    if first == second:
        return None
    first, second = sorted((first, second))
    first_key = context.variants[first][0]
    second_key = context.variants[second][0]
    if context.is_ignored(first_key, second_key):
        return None
    if same_group(first, second, context.spacing):
        logger.debug("Skipping %s and %s, same group", first, second)
        return None

    best = best_comparison(context, first, second)
    if best is None:
        return None
    score, left, right = best
    if score < context.threshold:
        return None
    logger.debug("Similar: %r and %r via %r ~ %r (score %d)", first, second, left, right, score)
    return SimilarFiles(page_a=first, page_b=second, variant_a=left, variant_b=right, score=score)


def find_similar_files(context: CorpusContext) -> List[SimilarFiles]:
    """Return a finding for every page pair scoring at or above the threshold."""

    titles = [page.title for page in context.pages]

    def score_rows(rows: Sequence[int]) -> List[SimilarFiles]:
        found: List[SimilarFiles] = []
        for row in rows:
            for column in range(row + 1, len(titles)):
                finding = compare_pair(context, titles[row], titles[column])
                if finding is not None:
                    found.append(finding)
        return found

    findings = map_partitioned(score_rows, list(range(len(titles))), context.workers)
    logger.info(
        "Compared %d page pairs, %d similar",
        len(titles) * (len(titles) - 1) // 2,
        len(findings),
    )
    return findings

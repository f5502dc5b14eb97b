"""Detection of page names mentioned in prose without a link."""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process, utils

from .context import CorpusContext
from .text import WORD_BOUNDARY, comparable_length, similarity_score, tokenize_spans
from .types import Page, UnlinkedText
from .workers import map_partitioned

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Mention:
    """Candidate mention in character coordinates."""

    start: int
    end: int
    alias: str
    score: int
    exact: bool


@dataclass(frozen=True)
class MentionMatchers:
    """Compiled exact matcher plus alias keys grouped by word count."""

    exact: Optional[re.Pattern[str]]
    by_width: Dict[int, List[str]]


def build_matchers(context: CorpusContext) -> MentionMatchers:
    """Compile the matchers for every alias key in the corpus."""

    # Keys without a word character, like the "/" of a "___" page, never form a mention.
    keys = sorted((key for key in context.alias_map if tokenize_spans(key)), key=lambda key: (-len(key), key))
    exact = None
    if keys:
        alternatives = "|".join(re.escape(key) for key in keys)
        exact = re.compile(WORD_BOUNDARY.format(term=f"(?:{alternatives})"), flags=re.IGNORECASE)

    by_width: Dict[int, List[str]] = defaultdict(list)
    for key in keys:
        by_width[len(tokenize_spans(key))].append(key)
    return MentionMatchers(exact=exact, by_width=dict(by_width))


def _exact_mentions(body: str, matchers: MentionMatchers) -> List[_Mention]:
    if matchers.exact is None:
        return []
    return [
        _Mention(start=match.start(), end=match.end(), alias=match.group(0).lower(), score=100, exact=True)
        for match in matchers.exact.finditer(body)
    ]


def _fuzzy_mentions(body: str, matchers: MentionMatchers, threshold: int) -> List[_Mention]:
    tokens = tokenize_spans(body)
    mentions: List[_Mention] = []
    for width, keys in matchers.by_width.items():
        for index in range(len(tokens) - width + 1):
            start = tokens[index][0]
            end = tokens[index + width - 1][1]
            if start > 0 and body[start - 1] == "#":
                continue
            window = body[start:end]
            # Rounding happens after the cutoff, so leave half a point of slack.
            for key, _, _ in process.extract(
                window,
                keys,
                scorer=fuzz.WRatio,
                processor=utils.default_process,
                score_cutoff=max(threshold - 0.5, 0),
                limit=None,
            ):
                if key == window.lower() or not comparable_length(key, window):
                    continue
                score = similarity_score(window, key)
                if score >= threshold:
                    mentions.append(_Mention(start=start, end=end, alias=key, score=score, exact=False))
    return mentions


def _overlaps(start: int, end: int, spans: Sequence[Tuple[int, int]]) -> bool:
    return any(start < span_end and span_start < end for span_start, span_end in spans)


def _select(mentions: List[_Mention]) -> List[_Mention]:
    """Keep non-overlapping mentions: earliest, then longest, then exact first."""

    ordered = sorted(mentions, key=lambda item: (item.start, -(item.end - item.start), not item.exact, item.alias))
    selected: List[_Mention] = []
    last_end = -1
    for mention in ordered:
        if mention.start < last_end:
            continue
        selected.append(mention)
        last_end = mention.end
    return selected


def scan_page(page: Page, context: CorpusContext, matchers: MentionMatchers) -> List[UnlinkedText]:
    """Return the unlinked mentions of other pages found in ``page``'s body."""

    offsets = context.byte_offsets[page.title]
    reference_spans = [
        (offsets.to_char(reference.start), offsets.to_char(reference.end))
        for reference in page.references
        if reference.end > reference.start
    ]

    candidates: List[_Mention] = []
    for mention in _exact_mentions(page.body, matchers) + _fuzzy_mentions(page.body, matchers, context.threshold):
        if _overlaps(mention.start, mention.end, reference_spans):
            continue
        if mention.alias in context.alias_map:
            candidates.append(mention)

    findings = []
    # Mentions of the page's own names still take part in selection so they
    # shadow weaker overlapping matches, then get dropped.
    for mention in _select(candidates):
        if page.title in context.alias_map[mention.alias]:
            continue
        findings.append(
            UnlinkedText(
                source_page=page.title,
                target_page=min(context.alias_map[mention.alias]),
                alias=mention.alias,
                start=offsets.to_byte(mention.start),
                end=offsets.to_byte(mention.end),
                score=mention.score,
                exact=mention.exact,
            )
        )
    return findings


def find_unlinked_text(context: CorpusContext) -> List[UnlinkedText]:
    """Scan every page body for unlinked mentions of other pages."""

    matchers = build_matchers(context)

    def scan_chunk(chunk: Sequence[Page]) -> List[UnlinkedText]:
        found: List[UnlinkedText] = []
        for page in chunk:
            found.extend(scan_page(page, context, matchers))
        return found

    findings = map_partitioned(scan_chunk, context.pages, context.workers)
    logger.info("Found %d unlinked mentions", len(findings))
    return findings

"""Corpus-level context shared across pipeline stages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Sequence

from .aliases import AliasMap, build_alias_map
from .config import EngineConfig
from .errors import CorpusError, MalformedReferenceError
from .ngrams import NGramIndex, build_ngram_index, page_variants
from .normalize import Normalizer
from .text import ByteOffsets
from .types import Page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorpusContext:
    """Precomputed, read-only lookup structures for one lint run."""

    pages: List[Page]
    page_map: Dict[str, Page]
    normalizer: Normalizer
    boundary: re.Pattern[str]
    spacing: re.Pattern[str]
    alias_map: AliasMap
    title_lookup: Dict[str, str]
    variants: Dict[str, List[str]]
    ngram_index: NGramIndex
    byte_offsets: Dict[str, ByteOffsets]
    threshold: int
    ignore_pairs: FrozenSet[FrozenSet[str]]
    workers: int

    def is_ignored(self, first: str, second: str) -> bool:
        return frozenset((first.lower(), second.lower())) in self.ignore_pairs


def build_corpus_context(corpus: Sequence[Page], config: EngineConfig) -> CorpusContext:
    """Validate the corpus and build the lookup structures for the provided pages."""

    config.validate()
    boundary = config.pattern("boundary_pattern")
    spacing = config.pattern("filename_spacing_pattern")
    normalizer = Normalizer.from_pairs(config.filename_to_alias, config.alias_to_filename)
    workers = config.workers

    pages = sorted(corpus, key=lambda page: page.title)
    page_map: Dict[str, Page] = {}
    title_lookup: Dict[str, str] = {}
    byte_offsets: Dict[str, ByteOffsets] = {}
    for page in pages:
        if page.title in page_map:
            raise CorpusError(f"Two pages share the title '{page.title}': {page_map[page.title].path} and {page.path}")
        page_map[page.title] = page
        title_lookup.setdefault(page.title.lower(), page.title)
        offsets = ByteOffsets(page.body)
        _check_references(page, offsets)
        byte_offsets[page.title] = offsets

    alias_map = build_alias_map(pages, normalizer)
    ngram_index = build_ngram_index(
        pages,
        normalizer,
        config.ngram_size,
        boundary,
        spacing,
        workers=workers,
    )
    ignore_pairs = frozenset(
        frozenset((first.lower(), second.lower())) for first, second in config.ignore_word_pairs
    )

    logger.info("Built corpus context for %d pages and %d alias keys", len(pages), len(alias_map))
    return CorpusContext(
        pages=pages,
        page_map=page_map,
        normalizer=normalizer,
        boundary=boundary,
        spacing=spacing,
        alias_map=alias_map,
        title_lookup=title_lookup,
        variants={page.title: page_variants(page, normalizer) for page in pages},
        ngram_index=ngram_index,
        byte_offsets=byte_offsets,
        threshold=config.filename_match_threshold,
        ignore_pairs=ignore_pairs,
        workers=workers,
    )


def _check_references(page: Page, offsets: ByteOffsets) -> None:
    length = offsets.byte_length
    for reference in page.references:
        if not 0 <= reference.start <= reference.end <= length:
            raise MalformedReferenceError(
                page.title,
                reference.raw_target,
                reference.start,
                reference.end,
                length,
            )

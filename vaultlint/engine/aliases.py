"""Alias table construction and duplicate alias detection."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, FrozenSet, List, Sequence, Set

from .normalize import Normalizer
from .types import DuplicateAlias, Page

logger = logging.getLogger(__name__)

AliasMap = Dict[str, FrozenSet[str]]


def build_alias_map(pages: Sequence[Page], normalizer: Normalizer) -> AliasMap:
    """Map every alias key to the titles of the pages claiming it.

    Each page's own title, in alias spelling, counts as one of its aliases.
    Blank aliases are skipped.
    """

    owners: Dict[str, Set[str]] = defaultdict(set)
    for page in pages:
        owners[normalizer.title_key(page.title)].add(page.title)
        for alias in page.aliases:
            key = normalizer.alias_key(alias)
            if not key:
                logger.debug("Skipping blank alias on %s", page.title)
                continue
            owners[key].add(page.title)
    return {key: frozenset(titles) for key, titles in owners.items()}


def find_duplicate_aliases(alias_map: AliasMap) -> List[DuplicateAlias]:
    """Return one finding per alias with more than one owner."""

    findings = [
        DuplicateAlias(alias=alias, owners=tuple(sorted(owners)))
        for alias, owners in alias_map.items()
        if len(owners) > 1
    ]
    findings.sort(key=lambda finding: finding.alias)
    logger.info("Found %d duplicate aliases", len(findings))
    return findings

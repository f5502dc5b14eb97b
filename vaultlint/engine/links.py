"""Reference resolution against the page titles and alias table."""

from __future__ import annotations

import logging
from typing import List, Optional

from .context import CorpusContext
from .types import BrokenWikilink, Reference

logger = logging.getLogger(__name__)


def resolve_reference(reference: Reference, context: CorpusContext) -> Optional[str]:
    """Return the title of the page ``reference`` points at, or None.

    A matching page title wins over a matching alias. Matching is exact
    after normalisation and case folding.
    """

    normalizer = context.normalizer
    candidate = normalizer.to_filename(reference.raw_target.strip())
    title = context.title_lookup.get(candidate.lower())
    if title is not None:
        return title

    owners = context.alias_map.get(normalizer.alias_key(reference.raw_target))
    if owners:
        return min(owners)
    return None


def find_broken_wikilinks(context: CorpusContext) -> List[BrokenWikilink]:
    """Return a finding for every reference that resolves to no page."""

    findings: List[BrokenWikilink] = []
    resolved = 0
    for page in context.pages:
        for reference in page.references:
            if resolve_reference(reference, context) is not None:
                resolved += 1
                continue
            logger.debug("Broken reference %r in %s", reference.raw_target, page.title)
            findings.append(
                BrokenWikilink(
                    source_page=page.title,
                    raw_target=reference.raw_target,
                    start=reference.start,
                    end=reference.end,
                )
            )
    logger.info("Resolved %d references, %d broken", resolved, len(findings))
    return findings

"""Coordinator for the lint pipeline."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Sequence

from . import aliases as aliases_module
from . import links as links_module
from . import mentions as mentions_module
from . import similarity as similarity_module
from .config import EngineConfig, load_config
from .context import CorpusContext, build_corpus_context
from .report import LintReport, build_report
from .types import Finding, Page

logger = logging.getLogger(__name__)


def lint_pages(corpus: Sequence[Page], config: EngineConfig | None = None) -> LintReport:
    """Run every detector over ``corpus`` and return the ordered report."""

    engine_config = config or load_config(None)
    context = build_corpus_context(corpus, engine_config)
    findings = collect_findings(context)
    return build_report(findings, engine_config.exclude)


def collect_findings(context: CorpusContext) -> List[Finding]:
    """Run the detectors in pipeline order and concatenate their findings."""

    stages: List[tuple[str, Callable[[], Sequence[Finding]]]] = [
        ("similar files", lambda: similarity_module.find_similar_files(context)),
        ("duplicate aliases", lambda: aliases_module.find_duplicate_aliases(context.alias_map)),
        ("broken wikilinks", lambda: links_module.find_broken_wikilinks(context)),
        ("unlinked text", lambda: mentions_module.find_unlinked_text(context)),
    ]

    findings: List[Finding] = []
    for name, stage in stages:
        started = time.perf_counter()
        produced = stage()
        logger.info("Checked %s in %.2fs", name, time.perf_counter() - started)
        findings.extend(produced)
    return findings

"""Aggregation, exclusion and ordering of findings."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Dict, Iterable, List, Sequence, Tuple

from .types import Finding, FindingKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LintReport:
    """Ordered findings of one lint run."""

    findings: Tuple[Finding, ...]

    @property
    def has_errors(self) -> bool:
        return bool(self.findings)

    def of_kind(self, kind: FindingKind) -> List[Finding]:
        return [finding for finding in self.findings if finding.kind is kind]

    def counts(self) -> Dict[str, int]:
        """Return the number of findings per kind, including kinds with none."""

        counter = Counter(finding.kind for finding in self.findings)
        return {kind.value: counter.get(kind, 0) for kind in FindingKind}

    def to_dict(self) -> Dict[str, object]:
        return {
            "has_errors": self.has_errors,
            "counts": self.counts(),
            "findings": [finding.to_dict() for finding in self.findings],
        }


def is_excluded(finding: Finding, patterns: Sequence[str]) -> bool:
    identifier = finding.identifier.lower()
    return any(fnmatchcase(identifier, pattern.lower()) for pattern in patterns)


def filter_excluded(findings: Iterable[Finding], patterns: Sequence[str]) -> List[Finding]:
    """Drop findings whose identifier matches one of the exclusion globs."""

    return [finding for finding in findings if not is_excluded(finding, patterns)]


def sort_key(finding: Finding) -> Tuple[int, str, int, str]:
    return (finding.kind.order, finding.page, finding.offset, finding.identifier)


def build_report(findings: Iterable[Finding], exclude: Sequence[str] = ()) -> LintReport:
    """Filter and order ``findings`` into the final report."""

    collected = list(findings)
    kept = filter_excluded(collected, exclude)
    if len(kept) != len(collected):
        logger.info("Excluded %d findings", len(collected) - len(kept))
    kept.sort(key=sort_key)
    return LintReport(findings=tuple(kept))

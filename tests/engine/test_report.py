"""Report aggregation, exclusion and determinism tests."""

from __future__ import annotations

from vaultlint.engine import report as report_module
from vaultlint.engine.index import lint_pages
from vaultlint.engine.types import (
    BrokenWikilink,
    DuplicateAlias,
    FindingKind,
    SimilarFiles,
    UnlinkedText,
)

from .conftest import make_page


def test_exclusion_glob_drops_matching_kind(engine_config):
    engine_config.raw["exclude"] = ["duplicate_alias:*"]
    corpus = [make_page("Apple", aliases=["foo"]), make_page("Banana", aliases=["foo"])]

    report = lint_pages(corpus, engine_config)

    assert report.of_kind(FindingKind.DUPLICATE_ALIAS) == []
    assert len(report.of_kind(FindingKind.SIMILAR_FILES)) == 1
    assert report.has_errors


def test_exclusion_is_case_insensitive_and_idempotent():
    findings = [
        UnlinkedText("Alpha", "Beta", "beta", 0, 4, 100),
        BrokenWikilink("Alpha", "Gone", 10, 18),
    ]
    patterns = ["UNLINKED_TEXT:alpha:*"]

    once = report_module.filter_excluded(findings, patterns)
    twice = report_module.filter_excluded(once, patterns)

    assert once == [findings[1]]
    assert twice == once


def test_findings_are_ordered_by_kind_page_and_offset():
    late_link = BrokenWikilink("Alpha", "Zed", 30, 37)
    early_link = BrokenWikilink("Alpha", "Yon", 2, 9)
    other_page = BrokenWikilink("Beta", "Xen", 0, 7)
    mention = UnlinkedText("Alpha", "Beta", "beta", 0, 4, 100)
    duplicate = DuplicateAlias("foo", ("Apple", "Banana"))
    similar = SimilarFiles("Apple", "Apricot", "apple", "apricot", 96)

    report = report_module.build_report([mention, late_link, other_page, duplicate, early_link, similar])

    assert report.findings == (similar, duplicate, early_link, late_link, other_page, mention)
    assert report.counts() == {
        "similar_files": 1,
        "duplicate_alias": 1,
        "broken_wikilink": 3,
        "unlinked_text": 1,
    }


def test_empty_report_has_no_errors():
    report = report_module.build_report([])

    assert not report.has_errors
    assert report.to_dict() == {
        "has_errors": False,
        "counts": {"similar_files": 0, "duplicate_alias": 0, "broken_wikilink": 0, "unlinked_text": 0},
        "findings": [],
    }


def _corpus():
    return [
        make_page("Morning routine", "Coffee first, then [[Journal]] and a walk. Check [[Gym plan]]."),
        make_page("Journal", "Wrote about the morning routine and Coffee.", aliases=["Diary"]),
        make_page("Coffee", "Beans from the market. See #shopping.", aliases=["Brew"]),
        make_page("Coffee beans", aliases=["brew"]),
        make_page("Reading list", "Books to read on the diary shelf."),
        make_page("Shopping", "Market trips and [[Reading List]]."),
    ]


def test_report_does_not_depend_on_worker_count(engine_config):
    engine_config.raw["workers"] = 1
    single = lint_pages(_corpus(), engine_config)

    engine_config.raw["workers"] = 4
    threaded = lint_pages(list(reversed(_corpus())), engine_config)

    assert single.findings == threaded.findings
    assert single.has_errors
    assert single.of_kind(FindingKind.BROKEN_WIKILINK)[0].raw_target == "Gym plan"

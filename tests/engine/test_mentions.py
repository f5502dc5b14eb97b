"""Unlinked mention tests."""

from __future__ import annotations

from vaultlint.engine import mentions
from vaultlint.engine.context import build_corpus_context
from vaultlint.engine.index import lint_pages
from vaultlint.engine.types import FindingKind

from .conftest import make_page


def _unlinked(corpus, config):
    return lint_pages(corpus, config).of_kind(FindingKind.UNLINKED_TEXT)


def test_plain_title_mention_is_reported(engine_config):
    corpus = [make_page("Alpha", "We compared Beta against the rest."), make_page("Beta")]

    found = _unlinked(corpus, engine_config)

    assert len(found) == 1
    finding = found[0]
    assert (finding.source_page, finding.target_page, finding.alias) == ("Alpha", "Beta", "beta")
    assert (finding.start, finding.end) == (12, 16)
    assert finding.exact and finding.score == 100
    assert finding.identifier == "unlinked_text:alpha:beta"
    assert "[[beta]]" in finding.message


def test_text_inside_references_is_skipped(engine_config):
    corpus = [make_page("Alpha", "See [[Beta]] and Beta again"), make_page("Beta")]

    found = _unlinked(corpus, engine_config)

    assert [(item.start, item.end) for item in found] == [(17, 21)]


def test_page_does_not_report_itself(engine_config):
    corpus = [make_page("Beta", "Beta is here"), make_page("Alpha")]

    assert _unlinked(corpus, engine_config) == []


def test_tags_are_not_mentions(engine_config):
    corpus = [make_page("Alpha", "Tagged #beta only"), make_page("Beta")]

    report = lint_pages(corpus, engine_config)

    assert report.of_kind(FindingKind.UNLINKED_TEXT) == []
    assert report.of_kind(FindingKind.BROKEN_WIKILINK) == []


def test_spans_are_utf8_byte_offsets(engine_config):
    corpus = [make_page("Gamma", "Café mentions Beta"), make_page("Beta")]

    found = _unlinked(corpus, engine_config)

    assert [(item.start, item.end) for item in found] == [(15, 19)]
    body = corpus[0].body.encode("utf-8")
    assert body[found[0].start:found[0].end] == b"Beta"


def test_close_spelling_is_a_fuzzy_mention(engine_config):
    engine_config.raw["filename_match_threshold"] = 90
    corpus = [make_page("Notes", "I planted Tomatos today"), make_page("Tomato")]

    found = _unlinked(corpus, engine_config)

    assert len(found) == 1
    finding = found[0]
    assert finding.target_page == "Tomato"
    assert not finding.exact
    assert 90 <= finding.score < 100
    assert (finding.start, finding.end) == (10, 17)
    assert finding.message.startswith("probably mentions")


def test_longest_mention_wins(engine_config):
    corpus = [make_page("Log", "I drink green tea daily"), make_page("Green Tea"), make_page("Tea")]

    found = _unlinked(corpus, engine_config)

    assert [(item.alias, item.target_page) for item in found] == [("green tea", "Green Tea")]


def test_alias_mentions_point_at_owner(engine_config):
    corpus = [
        make_page("Diary", "Back to the Big Apple soon."),
        make_page("New York", aliases=["Big Apple"]),
    ]
    context = build_corpus_context(corpus, engine_config)

    found = mentions.scan_page(context.page_map["Diary"], context, mentions.build_matchers(context))

    assert [(item.alias, item.target_page) for item in found] == [("big apple", "New York")]


def test_names_without_words_are_never_mentions(engine_config):
    corpus = [make_page("Notes", "either / or, and x/y"), make_page("___")]
    context = build_corpus_context(corpus, engine_config)

    matchers = mentions.build_matchers(context)

    assert "/" in context.alias_map
    assert matchers.exact.pattern.count("/") == 0
    assert _unlinked(corpus, engine_config) == []

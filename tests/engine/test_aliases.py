"""Alias table and duplicate alias tests."""

from __future__ import annotations

from vaultlint.engine import aliases
from vaultlint.engine.index import lint_pages
from vaultlint.engine.normalize import Normalizer
from vaultlint.engine.types import FindingKind

from .conftest import make_page


def test_alias_claimed_twice_is_reported(engine_config):
    corpus = [make_page("Apple", aliases=["foo"]), make_page("Banana", aliases=["foo"])]

    report = lint_pages(corpus, engine_config)

    duplicates = report.of_kind(FindingKind.DUPLICATE_ALIAS)
    assert len(duplicates) == 1
    assert duplicates[0].alias == "foo"
    assert set(duplicates[0].owners) == {"Apple", "Banana"}
    assert duplicates[0].identifier == "duplicate_alias:foo"


def test_three_owners_share_one_finding():
    normalizer = Normalizer.from_pairs([], [])
    pages = [
        make_page("Cat", aliases=["Pet"]),
        make_page("Dog", aliases=["pet", "Hound"]),
        make_page("Fish", aliases=["PET "]),
    ]

    findings = aliases.find_duplicate_aliases(aliases.build_alias_map(pages, normalizer))

    assert [(item.alias, item.owners) for item in findings] == [("pet", ("Cat", "Dog", "Fish"))]


def test_alias_map_contains_titles_and_aliases():
    normalizer = Normalizer.from_pairs([("___", "/")], [("/", "___")])
    pages = [
        make_page("tools___hammer", aliases=["Mallet", ""]),
        make_page("Saw"),
    ]

    alias_map = aliases.build_alias_map(pages, normalizer)

    assert alias_map == {
        "tools/hammer": frozenset({"tools___hammer"}),
        "mallet": frozenset({"tools___hammer"}),
        "saw": frozenset({"Saw"}),
    }


def test_title_matching_another_alias_is_a_duplicate(engine_config):
    corpus = [make_page("Notebook"), make_page("Journal", aliases=["notebook"])]

    report = lint_pages(corpus, engine_config)

    duplicates = report.of_kind(FindingKind.DUPLICATE_ALIAS)
    assert [(item.alias, item.owners) for item in duplicates] == [("notebook", ("Journal", "Notebook"))]

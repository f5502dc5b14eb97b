"""Configuration loading tests."""

from __future__ import annotations

import pytest

from vaultlint.engine.config import load_config, with_overrides
from vaultlint.engine.errors import ConfigError


def test_defaults():
    config = load_config(None).validate()

    assert config.directories == ["."]
    assert config.ngram_size == 2
    assert config.filename_match_threshold == 95
    assert config.workers == 1
    assert config.exclude == []
    assert config.filename_to_alias == [("___", "/")]
    assert config.alias_to_filename == [("/", "___")]


def test_yaml_file_overrides_defaults(tmp_path):
    path = tmp_path / "vaultlint.yml"
    path.write_text(
        "directories: [notes, journal]\n"
        "filename_match_threshold: 88\n"
        "ignore_word_pairs:\n"
        "  - [left, right]\n",
        encoding="utf-8",
    )

    config = load_config(path).validate()

    assert config.directories == ["notes", "journal"]
    assert config.filename_match_threshold == 88
    assert config.ignore_word_pairs == [("left", "right")]
    assert config.ngram_size == 2


def test_missing_file_is_only_an_error_when_required(tmp_path):
    assert load_config(tmp_path / "absent.yml").ngram_size == 2

    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yml", required=True)


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "vaultlint.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize(
    "key, value",
    [
        ("boundary_pattern", "[unclosed"),
        ("ngram_size", 0),
        ("ngram_size", True),
        ("filename_match_threshold", "high"),
        ("ignore_word_pairs", [["only-one"]]),
        ("wikilink_pattern", r"\[\[(\w+)\|(\w+)\]\]"),
    ],
)
def test_invalid_values_are_rejected(key, value):
    config = load_config(None)
    config.raw[key] = value

    with pytest.raises(ConfigError):
        config.validate()


def test_overrides_replace_scalars_and_extend_lists():
    config = load_config(None)
    config.raw["exclude"] = ["similar_files:*"]

    updated = with_overrides(config, {"ngram_size": 3, "workers": None, "exclude": ["unlinked_text:*"]})

    assert updated.ngram_size == 3
    assert updated.exclude == ["unlinked_text:*", "similar_files:*"]
    assert config.exclude == ["similar_files:*"]


def test_workers_fall_back_to_environment(monkeypatch):
    monkeypatch.setenv("VAULTLINT_WORKERS", "6")

    assert load_config(None).workers == 6

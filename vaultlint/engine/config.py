"""Configuration helpers for the lint engine."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "vaultlint.yml"


def _default_workers() -> int:
    value = os.getenv("VAULTLINT_WORKERS", "1")
    try:
        return max(1, int(value))
    except ValueError:
        return 1


DEFAULTS: Dict[str, Any] = {
    "directories": ["."],
    "ngram_size": 2,
    "boundary_pattern": r"[,./]",
    "filename_spacing_pattern": r"___|__|-|_|\s",
    "filename_match_threshold": 95,
    "filename_to_alias": [["___", "/"]],
    "alias_to_filename": [["/", "___"]],
    "ignore_word_pairs": [],
    "exclude": [],
    "wikilink_pattern": r"\[\[([^\]|#]+)(?:[|#][^\]]*)?\]\]",
    "workers": None,
}


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def directories(self) -> List[str]:
        return [str(item) for item in _as_list(self.raw.get("directories"), "directories")]

    @property
    def ngram_size(self) -> int:
        value = _as_int(self.raw.get("ngram_size"), "ngram_size")
        if value < 1:
            raise ConfigError(f"ngram_size must be at least 1, got {value}")
        return value

    @property
    def filename_match_threshold(self) -> int:
        return _as_int(self.raw.get("filename_match_threshold"), "filename_match_threshold")

    @property
    def workers(self) -> int:
        value = self.raw.get("workers")
        if value is None:
            return _default_workers()
        return max(1, _as_int(value, "workers"))

    @property
    def exclude(self) -> List[str]:
        return [str(item) for item in _as_list(self.raw.get("exclude"), "exclude")]

    @property
    def ignore_word_pairs(self) -> List[Tuple[str, str]]:
        return _as_pairs(self.raw.get("ignore_word_pairs"), "ignore_word_pairs")

    @property
    def filename_to_alias(self) -> List[Tuple[str, str]]:
        return _as_pairs(self.raw.get("filename_to_alias"), "filename_to_alias")

    @property
    def alias_to_filename(self) -> List[Tuple[str, str]]:
        return _as_pairs(self.raw.get("alias_to_filename"), "alias_to_filename")

    def pattern(self, key: str) -> re.Pattern[str]:
        """Compile the regular expression stored under ``key``."""

        source = self.raw.get(key)
        if not isinstance(source, str):
            raise ConfigError(f"{key} must be a string pattern, got {source!r}")
        return compile_pattern(source, key)

    def validate(self) -> "EngineConfig":
        """Check every option eagerly so bad values fail before any page is read."""

        for key in self.raw:
            if key not in DEFAULTS:
                logger.warning("Ignoring unknown configuration key %r", key)
        # Property access performs the type checks.
        for key in ("directories", "ngram_size", "filename_match_threshold", "workers", "exclude", "ignore_word_pairs"):
            getattr(self, key)
        for key in ("boundary_pattern", "filename_spacing_pattern", "wikilink_pattern"):
            self.pattern(key)
        for key in ("filename_to_alias", "alias_to_filename"):
            for source, _ in getattr(self, key):
                compile_pattern(source, key)
        if self.pattern("wikilink_pattern").groups != 1:
            raise ConfigError("wikilink_pattern must contain exactly one capture group")
        return self


def compile_pattern(source: str, key: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as exc:
        raise ConfigError(f"{key} is not a valid pattern ({source!r}): {exc}") from exc


def load_config(path: str | Path | None = None, *, required: bool = False) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = {key: _copy(value) for key, value in DEFAULTS.items()}

    if path is not None:
        config_path = Path(path)
        if config_path.exists():
            try:
                with config_path.open("r", encoding="utf-8") as stream:
                    user = yaml.safe_load(stream) or {}
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigError(f"Failed to read {config_path}: {exc}") from exc
            if not isinstance(user, dict):
                raise ConfigError(f"{config_path.name} must contain a mapping at the root")
            logger.debug("Loaded configuration from %s", config_path)
            merge_into(data, user)
        elif required:
            raise ConfigError(f"Config file does not exist: {config_path}")

    return EngineConfig(data)


def with_overrides(config: EngineConfig, overrides: Dict[str, Any]) -> EngineConfig:
    """Return a copy of ``config`` with non-empty overrides applied.

    List values extend the configured lists instead of replacing them.
    """

    data = {key: _copy(value) for key, value in config.raw.items()}
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, list):
            if not value:
                continue
            existing = data.get(key)
            data[key] = value + list(existing) if isinstance(existing, list) else list(value)
            continue
        data[key] = value
    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value


def _copy(value: Any) -> Any:
    if isinstance(value, list):
        return [_copy(item) for item in value]
    if isinstance(value, dict):
        return {key: _copy(item) for key, item in value.items()}
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _as_list(value: Any, key: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ConfigError(f"{key} must be a list, got {value!r}")


def _as_pairs(value: Any, key: str) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for item in _as_list(value, key):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ConfigError(f"{key} entries must be [from, to] pairs, got {item!r}")
        pairs.append((str(item[0]), str(item[1])))
    return pairs

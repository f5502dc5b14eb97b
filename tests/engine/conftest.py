"""Shared fixtures for engine tests."""

from __future__ import annotations

import re
from typing import Iterable, Sequence

import pytest

from vaultlint.corpus import extract_references
from vaultlint.engine.config import DEFAULTS, load_config
from vaultlint.engine.types import Page, Reference

WIKILINK = re.compile(DEFAULTS["wikilink_pattern"])


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


def make_page(
    title: str,
    body: str = "",
    *,
    aliases: Iterable[str] = (),
    references: Sequence[Reference] | None = None,
) -> Page:
    if references is None:
        references = extract_references(body, WIKILINK)
    return Page(
        title=title,
        path=f"{title}.md",
        body=body,
        aliases=tuple(aliases),
        references=tuple(references),
    )

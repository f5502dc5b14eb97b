"""Loading markdown notes from disk into engine pages.

This module is the thin parsing layer in front of the engine: it walks
the configured directories for ``*.md`` files, splits off frontmatter
(YAML between ``---`` fences, or leading Logseq ``key:: value``
properties), reads the declared aliases and extracts wikilink and tag
references with UTF-8 byte spans relative to the remaining body.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import yaml

from .engine.config import EngineConfig
from .engine.errors import CorpusError
from .engine.text import ByteOffsets
from .engine.types import Page, Reference

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
PROPERTY_RE = re.compile(r"[ \t]*(?:-[ \t]+)?([A-Za-z][\w-]*)::[ \t]*(.*)")
TAG_RE = re.compile(r"(?<![\w#/&])#([^\W\d][\w/-]*)")
FENCE_RE = re.compile(r"^(```|~~~).*?^\1[ \t]*$", re.DOTALL | re.MULTILINE)

ALIAS_KEYS = ("alias", "aliases")


def discover_files(directories: Iterable[str | Path]) -> List[Path]:
    """Return every markdown file under ``directories``, skipping hidden folders."""

    files: List[Path] = []
    for directory in directories:
        root = Path(directory).expanduser()
        if root.is_file():
            files.append(root)
            continue
        if not root.is_dir():
            raise CorpusError(f"Not a directory: {root}")
        for path in sorted(root.rglob("*.md")):
            relative = path.relative_to(root)
            if any(part.startswith(".") for part in relative.parts[:-1]):
                continue
            if path.is_file():
                files.append(path)
    return files


def split_frontmatter(text: str) -> Tuple[List[str], str, int]:
    """Return ``(aliases, body, line_offset)`` for a note's text."""

    match = FRONTMATTER_RE.match(text)
    if match:
        try:
            data = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as exc:
            raise CorpusError(f"Invalid YAML frontmatter: {exc}") from exc
        aliases = _aliases_from_mapping(data) if isinstance(data, dict) else []
        head = text[: match.end()]
        return aliases, text[match.end():], head.count("\n")

    properties: Dict[str, str] = {}
    consumed = 0
    lines = text.splitlines(keepends=True)
    for line in lines:
        prop = PROPERTY_RE.fullmatch(line.rstrip("\r\n"))
        if not prop:
            break
        properties.setdefault(prop.group(1).lower(), prop.group(2))
        consumed += 1
    if not consumed:
        return [], text, 0
    head_length = sum(len(line) for line in lines[:consumed])
    return _aliases_from_mapping(properties), text[head_length:], consumed


def _aliases_from_mapping(data: Dict[str, Any]) -> List[str]:
    aliases: List[str] = []
    for key in ALIAS_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            items = value.split(",")
        elif isinstance(value, (list, tuple)):
            items = [str(item) for item in value if item is not None]
        else:
            items = [str(value)]
        for item in items:
            alias = item.strip().strip("[]").strip()
            if alias and alias not in aliases:
                aliases.append(alias)
    return aliases


def extract_references(body: str, wikilink: re.Pattern[str]) -> List[Reference]:
    """Return wikilink and tag references in ``body`` ordered by position."""

    offsets = ByteOffsets(body)
    fenced = [match.span() for match in FENCE_RE.finditer(body)]

    def in_code(start: int) -> bool:
        return any(fence_start <= start < fence_end for fence_start, fence_end in fenced)

    found: List[Tuple[int, int, str]] = []
    for match in wikilink.finditer(body):
        if in_code(match.start()):
            continue
        target = match.group(1).strip()
        if target:
            found.append((match.start(), match.end(), target))
    for match in TAG_RE.finditer(body):
        if in_code(match.start()):
            continue
        found.append((match.start(), match.end(), match.group(1)))

    found.sort()
    return [
        Reference(raw_target=target, start=offsets.to_byte(start), end=offsets.to_byte(end))
        for start, end, target in found
    ]


def load_page(path: Path, wikilink: re.Pattern[str]) -> Page:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusError(f"Could not read {path}: {exc}") from exc
    try:
        aliases, body, line_offset = split_frontmatter(text)
    except CorpusError as exc:
        raise CorpusError(f"{path}: {exc}") from exc
    return Page(
        title=path.stem,
        path=str(path),
        body=body,
        aliases=tuple(aliases),
        references=tuple(extract_references(body, wikilink)),
        line_offset=line_offset,
    )


def load_pages(directories: Sequence[str | Path], config: EngineConfig) -> List[Page]:
    """Load every note under ``directories`` as a :class:`Page`."""

    wikilink = config.pattern("wikilink_pattern")
    pages: List[Page] = []
    seen: Dict[str, Path] = {}
    for path in discover_files(directories):
        if path.stem in seen:
            raise CorpusError(f"Two notes share the title '{path.stem}': {seen[path.stem]} and {path}")
        seen[path.stem] = path
        page = load_page(path, wikilink)
        logger.debug("Loaded %s with %d aliases and %d references", path, len(page.aliases), len(page.references))
        pages.append(page)
    logger.info("Loaded %d notes", len(pages))
    return pages


def location(page: Page, offset: int) -> Tuple[int, int]:
    """Return the 1-based ``(line, column)`` in the note file of a body byte offset."""

    index = ByteOffsets(page.body).to_char(offset)
    before = page.body[:index]
    line = before.count("\n") + 1 + page.line_offset
    column = index - (before.rfind("\n") + 1) + 1
    return line, column

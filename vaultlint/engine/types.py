"""Typed data structures used by the lint engine pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union


@dataclass(frozen=True)
class Reference:
    """A wikilink or tag occurrence inside a page body.

    ``start`` and ``end`` are UTF-8 byte offsets into the owning page's body.
    """

    raw_target: str
    start: int
    end: int


@dataclass(frozen=True)
class Page:
    """Parsed note handed to the engine by the corpus loader."""

    title: str
    path: str
    body: str
    aliases: Tuple[str, ...] = ()
    references: Tuple[Reference, ...] = ()
    line_offset: int = 0


@dataclass(frozen=True)
class NGram:
    """One occurrence of an n-gram drawn from a page title or alias."""

    text: str
    page: str
    source: str
    complete: bool


class FindingKind(Enum):
    """Closed set of finding kinds, in report order."""

    SIMILAR_FILES = "similar_files"
    DUPLICATE_ALIAS = "duplicate_alias"
    BROKEN_WIKILINK = "broken_wikilink"
    UNLINKED_TEXT = "unlinked_text"

    @property
    def order(self) -> int:
        return _KIND_ORDER[self]


_KIND_ORDER = {kind: position for position, kind in enumerate(FindingKind)}


@dataclass(frozen=True)
class SimilarFiles:
    """Two pages whose titles or aliases are near-duplicates."""

    kind: ClassVar[FindingKind] = FindingKind.SIMILAR_FILES

    page_a: str
    page_b: str
    variant_a: str
    variant_b: str
    score: int

    @property
    def page(self) -> str:
        return self.page_a

    @property
    def offset(self) -> int:
        return 0

    @property
    def identifier(self) -> str:
        return f"{self.kind.value}:{self.page_a}:{self.page_b}".lower()

    @property
    def message(self) -> str:
        return (
            f"'{self.page_a}' and '{self.page_b}' look alike "
            f"('{self.variant_a}' ~ '{self.variant_b}', score {self.score}); "
            "maybe combine them into a single page?"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "id": self.identifier,
            "pages": [self.page_a, self.page_b],
            "variants": [self.variant_a, self.variant_b],
            "score": self.score,
        }


@dataclass(frozen=True)
class DuplicateAlias:
    """An alias claimed by more than one page."""

    kind: ClassVar[FindingKind] = FindingKind.DUPLICATE_ALIAS

    alias: str
    owners: Tuple[str, ...]

    @property
    def page(self) -> str:
        return self.owners[0] if self.owners else ""

    @property
    def offset(self) -> int:
        return 0

    @property
    def identifier(self) -> str:
        return f"{self.kind.value}:{self.alias}".lower()

    @property
    def message(self) -> str:
        owners = ", ".join(f"'{owner}'" for owner in self.owners)
        return f"alias '{self.alias}' is claimed by {owners}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "id": self.identifier,
            "alias": self.alias,
            "pages": list(self.owners),
        }


@dataclass(frozen=True)
class BrokenWikilink:
    """A reference whose target resolves to no page or alias."""

    kind: ClassVar[FindingKind] = FindingKind.BROKEN_WIKILINK

    source_page: str
    raw_target: str
    start: int
    end: int

    @property
    def page(self) -> str:
        return self.source_page

    @property
    def offset(self) -> int:
        return self.start

    @property
    def identifier(self) -> str:
        return f"{self.kind.value}:{self.source_page}:{self.raw_target}".lower()

    @property
    def message(self) -> str:
        return f"no page or alias named '{self.raw_target}' (case insensitive)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "id": self.identifier,
            "page": self.source_page,
            "target": self.raw_target,
            "span": [self.start, self.end],
        }


@dataclass(frozen=True)
class UnlinkedText:
    """Body text that mentions another page without linking it."""

    kind: ClassVar[FindingKind] = FindingKind.UNLINKED_TEXT

    source_page: str
    target_page: str
    alias: str
    start: int
    end: int
    score: int
    exact: bool = True

    @property
    def page(self) -> str:
        return self.source_page

    @property
    def offset(self) -> int:
        return self.start

    @property
    def identifier(self) -> str:
        return f"{self.kind.value}:{self.source_page}:{self.alias}".lower()

    @property
    def message(self) -> str:
        if self.exact:
            return f"mentions '{self.target_page}' without linking it, like: [[{self.alias}]]"
        return (
            f"probably mentions '{self.target_page}' (score {self.score}) "
            f"without linking it, like: [[{self.alias}]]"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "id": self.identifier,
            "page": self.source_page,
            "target": self.target_page,
            "alias": self.alias,
            "span": [self.start, self.end],
            "score": self.score,
            "exact": self.exact,
        }


Finding = Union[SimilarFiles, DuplicateAlias, BrokenWikilink, UnlinkedText]

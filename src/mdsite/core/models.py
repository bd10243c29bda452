"""Content records held by the registry: pages, sections and their metadata"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from mdsite.core.types import PageKey, SectionKey


class SortBy(str, Enum):
    """How a section orders its pages, which also decides the sibling links"""
    none = "none"
    date = "date"
    weight = "weight"


class Header(BaseModel):
    """A table-of-contents entry; children hold the nested headings."""
    model_config = ConfigDict(frozen=True)

    level: int
    id: str
    title: str
    permalink: str
    children: list["Header"] = []


class PageMeta(BaseModel):
    """Front-matter values of a page, as produced by the upstream parser."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None                              # as written in the front matter
    datetime_tuple: Optional[tuple[int, int, int]] = None   # (year, month, day)
    taxonomies: dict[str, list[str]] = {}
    extra: dict[str, Any] = {}
    weight: Optional[int] = None
    draft: bool = False


class SectionMeta(BaseModel):
    """Front-matter values of a section (`_index.md`)."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    extra: dict[str, Any] = {}
    sort_by: SortBy = SortBy.none
    weight: int = 0


class Page(BaseModel):
    """A content leaf. Relations to other records are registry keys, never records."""
    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str = ""
    permalink: str = ""
    slug: str = ""
    path: str = ""
    components: list[str] = []
    meta: PageMeta = PageMeta()
    summary: Optional[str] = None
    word_count: Optional[int] = None
    reading_time: Optional[int] = None
    toc: list[Header] = []
    assets: list[str] = []
    ancestors: list[SectionKey] = []        # root first, immediate parent last
    lighter: Optional[PageKey] = None
    heavier: Optional[PageKey] = None
    earlier: Optional[PageKey] = None
    later: Optional[PageKey] = None

    @property
    def is_draft(self) -> bool:
        return self.meta.draft


class Section(BaseModel):
    """A content branch: child pages and subsections referenced by key."""
    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str = ""
    permalink: str = ""
    path: str = ""
    components: list[str] = []
    meta: SectionMeta = SectionMeta()
    word_count: Optional[int] = None
    reading_time: Optional[int] = None
    toc: list[Header] = []
    assets: list[str] = []
    ancestors: list[SectionKey] = []
    pages: list[PageKey] = []
    subsections: list[SectionKey] = []

"""Renderer-facing views of pages and sections.

A view is a detached snapshot of a record with its key references resolved
through the Registry. Relation expansion is capped at one hop by the
projection depth chosen at each embedding site:

- full: a page embeds its siblings, a section embeds its child pages.
- basic: no relation is expanded; ancestors are resolved only when a
  registry is supplied.

Siblings are always embedded as basic views and subsections only as paths,
so projecting any record terminates however densely the graph is linked.
"""

import copy
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from mdsite.core.models import Header, Page, Section
from mdsite.core.registry import Registry
from mdsite.core.types import PageKey, SectionKey


class ProjectionDepth(str, Enum):
    """How far a projection expands the relations of a record"""
    full = "full"
    basic = "basic"


class PageView(BaseModel):
    """Template context for a page. None means the value is absent."""
    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str
    permalink: str
    slug: str
    ancestors: list[str]
    title: Optional[str]
    description: Optional[str]
    date: Optional[str]
    year: Optional[int]
    month: Optional[int]
    day: Optional[int]
    taxonomies: dict[str, list[str]]
    extra: dict[str, Any]
    path: str
    components: list[str]
    summary: Optional[str]
    word_count: Optional[int]
    reading_time: Optional[int]
    toc: list[Header]
    assets: list[str]
    draft: bool
    lighter: Optional["PageView"] = None
    heavier: Optional["PageView"] = None
    earlier: Optional["PageView"] = None
    later: Optional["PageView"] = None


class SectionView(BaseModel):
    """Template context for a section; subsections are listed by path only."""
    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str
    permalink: str
    ancestors: list[str]
    title: Optional[str]
    description: Optional[str]
    extra: dict[str, Any]
    path: str
    components: list[str]
    word_count: Optional[int]
    reading_time: Optional[int]
    toc: list[Header]
    assets: list[str]
    pages: list[PageView] = []
    subsections: list[str] = []


def _ancestor_paths(keys: list[SectionKey], registry: Optional[Registry], referrer: str) -> list[str]:
    """Resolve ancestor keys to section paths, root first; [] without a registry."""
    if registry is None:
        return []
    return [registry.section_path(k, referrer) for k in keys]


def _toc(headers: list[Header]) -> list[Header]:
    return [h.model_copy(deep=True) for h in headers]


def _page_fields(page: Page, registry: Optional[Registry]) -> dict[str, Any]:
    """Fields shared by the full and basic page projections."""
    year = month = day = None
    if page.meta.datetime_tuple is not None:
        year, month, day = page.meta.datetime_tuple
    return {
        "relative_path": page.relative_path,
        "content": page.content,
        "permalink": page.permalink,
        "slug": page.slug,
        "ancestors": _ancestor_paths(page.ancestors, registry, page.relative_path),
        "title": page.meta.title,
        "description": page.meta.description,
        "date": page.meta.date,
        "year": year,
        "month": month,
        "day": day,
        "taxonomies": copy.deepcopy(page.meta.taxonomies),
        "extra": copy.deepcopy(page.meta.extra),
        "path": page.path,
        "components": list(page.components),
        "summary": page.summary,
        "word_count": page.word_count,
        "reading_time": page.reading_time,
        "toc": _toc(page.toc),
        "assets": list(page.assets),
        "draft": page.is_draft,
    }


def _section_fields(section: Section, registry: Optional[Registry]) -> dict[str, Any]:
    return {
        "relative_path": section.relative_path,
        "content": section.content,
        "permalink": section.permalink,
        "ancestors": _ancestor_paths(section.ancestors, registry, section.relative_path),
        "title": section.meta.title,
        "description": section.meta.description,
        "extra": copy.deepcopy(section.meta.extra),
        "path": section.path,
        "components": list(section.components),
        "word_count": section.word_count,
        "reading_time": section.reading_time,
        "toc": _toc(section.toc),
        "assets": list(section.assets),
    }


def page_view(page: Page, registry: Registry) -> PageView:
    """Project a page with its lighter/heavier/earlier/later siblings embedded.

    Siblings are projected in basic mode so their own siblings stay absent,
    even when two pages point at each other.
    """
    def sibling(key: Optional[PageKey]) -> Optional[PageView]:
        if key is None:
            return None
        return project_page(registry.page(key, page.relative_path), registry, ProjectionDepth.basic)

    return PageView(
        **_page_fields(page, registry),
        lighter=sibling(page.lighter),
        heavier=sibling(page.heavier),
        earlier=sibling(page.earlier),
        later=sibling(page.later),
    )


def page_view_basic(page: Page, registry: Optional[Registry] = None) -> PageView:
    """Project a page without siblings; ancestors need a registry."""
    return PageView(**_page_fields(page, registry))


def section_view(section: Section, registry: Registry) -> SectionView:
    """Project a section with its child pages (full views) and subsection paths."""
    pages = [
        project_page(registry.page(k, section.relative_path), registry, ProjectionDepth.full)
        for k in section.pages
    ]
    subsections = [registry.section_path(k, section.relative_path) for k in section.subsections]
    return SectionView(**_section_fields(section, registry), pages=pages, subsections=subsections)


def section_view_basic(section: Section, registry: Optional[Registry] = None) -> SectionView:
    """Project a section with no pages and no subsections; ancestors need a registry."""
    return SectionView(**_section_fields(section, registry))


def project_page(page: Page, registry: Optional[Registry], depth: ProjectionDepth = ProjectionDepth.full) -> PageView:
    if depth == ProjectionDepth.full:
        if registry is None:
            raise ValueError("A full page projection needs a registry")
        return page_view(page, registry)
    return page_view_basic(page, registry)


def project_section(
    section: Section,
    registry: Optional[Registry],
    depth: ProjectionDepth = ProjectionDepth.full,
    ) -> SectionView:
    if depth == ProjectionDepth.full:
        if registry is None:
            raise ValueError("A full section projection needs a registry")
        return section_view(section, registry)
    return section_view_basic(section, registry)


def to_context(view: Union[PageView, SectionView]) -> dict[str, Any]:
    """Plain dict for a template engine. Absent values stay as None."""
    return view.model_dump()

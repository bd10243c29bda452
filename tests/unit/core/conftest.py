"""Shared fixtures for core unit tests"""

import pytest

from mdsite.core.models import Page, PageMeta, Section, SectionMeta, SortBy
from mdsite.core.registry import Registry, RegistryBuilder
from mdsite.core.types import PageKey


@pytest.fixture(name="chain")
def chain_fixture():
    """Root section A1 -> child section A2 -> page P; returns (registry, P)."""
    builder = RegistryBuilder()
    a1 = builder.add_section(Section(relative_path="_index.md", meta=SectionMeta(title="Home")))
    a2 = builder.add_section(Section(relative_path="docs/_index.md", meta=SectionMeta(title="Docs")), parent=a1)
    key = builder.add_page(Page(relative_path="docs/p.md", slug="p", meta=PageMeta(title="P")), section=a2)
    registry = builder.build()
    return registry, registry.page(key)


@pytest.fixture(name="mutual")
def mutual_fixture():
    """Pages P and Q that are each other's lighter and later sibling."""
    p = Page(relative_path="p.md", slug="p", lighter=PageKey(1), later=PageKey(1))
    q = Page(relative_path="q.md", slug="q", lighter=PageKey(0), later=PageKey(0))
    return Registry({PageKey(0): p, PageKey(1): q}, {})


@pytest.fixture(name="dated_section")
def dated_section_fixture():
    """A date-sorted section with three dated pages and one undated page."""
    builder = RegistryBuilder()
    blog = builder.add_section(Section(relative_path="blog/_index.md", meta=SectionMeta(sort_by=SortBy.date)))
    keys = {}
    for name, date in [("a", (2020, 1, 1)), ("b", (2021, 6, 1)), ("c", (2019, 2, 3)), ("d", None)]:
        meta = PageMeta(
            date=None if date is None else "%04d-%02d-%02d" % date,
            datetime_tuple=date,
        )
        keys[name] = builder.add_page(Page(relative_path=f"blog/{name}.md", slug=name, meta=meta), section=blog)
    return builder.build(), blog, keys

"""Content registry: the key-addressed arena holding every page and section.

Pages and sections never contain each other. Every relation (ancestors,
children, siblings) is a key resolved through the Registry, which lets the
content graph link pages both ways without ownership cycles.
"""

import logging
from typing import Optional

from mdsite.core.models import Page, Section, SortBy
from mdsite.core.types import PageKey, SectionKey


logger = logging.getLogger(__name__)


class InvariantViolation(RuntimeError):
    """A record references a key the registry does not hold.

    The content graph is assumed closed once built; hitting this means the
    graph was assembled incorrectly and the build should abort.
    """


class Registry:
    """Read-only store of pages and sections addressed by stable keys.

    Lookups by key are O(1). Path lookups use an index built once at
    construction.
    """

    __slots__ = ("_page_index", "_pages", "_section_index", "_sections")

    def __init__(self, pages: dict[PageKey, Page], sections: dict[SectionKey, Section]) -> None:
        self._pages = dict(pages)
        self._sections = dict(sections)
        self._page_index = _path_index("page", self._pages)
        self._section_index = _path_index("section", self._sections)

    def page(self, key: PageKey, referrer: Optional[str] = None) -> Page:
        """Resolve a page key.

        Args:
            key: Page key to resolve
            referrer: Relative path of the record holding the key, for diagnostics

        Raises:
            InvariantViolation: if the key is dangling
        """
        try:
            return self._pages[key]
        except KeyError:
            raise InvariantViolation(_dangling("page", key, referrer)) from None

    def section(self, key: SectionKey, referrer: Optional[str] = None) -> Section:
        """Resolve a section key; same contract as page()."""
        try:
            return self._sections[key]
        except KeyError:
            raise InvariantViolation(_dangling("section", key, referrer)) from None

    def section_path(self, key: SectionKey, referrer: Optional[str] = None) -> str:
        """Relative path of a section, without building anything from it."""
        return self.section(key, referrer).relative_path

    def pages(self) -> list[Page]:
        """Every page, in key order."""
        return [self._pages[k] for k in sorted(self._pages)]

    def sections(self) -> list[Section]:
        """Every section, in key order."""
        return [self._sections[k] for k in sorted(self._sections)]

    def find_page(self, relative_path: str) -> Optional[Page]:
        """Page stored under relative_path, or None."""
        key = self._page_index.get(relative_path)
        return None if key is None else self._pages[key]

    def find_section(self, relative_path: str) -> Optional[Section]:
        """Section stored under relative_path, or None."""
        key = self._section_index.get(relative_path)
        return None if key is None else self._sections[key]

    def __len__(self) -> int:
        return len(self._pages) + len(self._sections)


def _path_index(kind: str, records: dict) -> dict[str, int]:
    """Map relative paths to keys; on duplicates the lowest key wins."""
    index: dict[str, int] = {}
    for key in sorted(records):
        path = records[key].relative_path
        if path in index:
            logger.warning("Duplicate %s path %r (keys %d and %d); find_%s returns key %d",
                           kind, path, index[path], key, kind, index[path])
            continue
        index[path] = key
    return index


def _dangling(kind: str, key: int, referrer: Optional[str]) -> str:
    msg = f"Dangling {kind} key {key}"
    if referrer is not None:
        msg += f" referenced by {referrer!r}"
    return msg


class RegistryBuilder:
    """Builder for constructing Registry instances.

    Records are added with their parent; build() derives ancestor chains,
    child lists, page ordering and sibling links, then freezes the result.
    Subsections are ordered by their weight, ties keeping insertion order.
    Whatever relation keys the added records already carry are replaced.
    """

    def __init__(self) -> None:
        self._pages: list[Page] = []
        self._page_parents: list[Optional[SectionKey]] = []
        self._sections: list[Section] = []
        self._section_parents: list[Optional[SectionKey]] = []

    def add_section(self, section: Section, parent: Optional[SectionKey] = None) -> SectionKey:
        """Add a section under parent (None for a root section) and return its key."""
        self._check_parent(parent)
        key = SectionKey(len(self._sections))
        self._sections.append(section)
        self._section_parents.append(parent)
        return key

    def add_page(self, page: Page, section: Optional[SectionKey] = None) -> PageKey:
        """Add a page to section (None for an orphan page) and return its key."""
        self._check_parent(section)
        key = PageKey(len(self._pages))
        self._pages.append(page)
        self._page_parents.append(section)
        return key

    def _check_parent(self, parent: Optional[SectionKey]) -> None:
        if parent is not None and not 0 <= parent < len(self._sections):
            raise ValueError(f"Unknown parent section key {parent}")

    def _ancestors(self, parent: Optional[SectionKey]) -> list[SectionKey]:
        """Walk up the parent chain from parent; returns root-first keys."""
        chain: list[SectionKey] = []
        current = parent
        while current is not None:
            chain.append(current)
            current = self._section_parents[current]
        chain.reverse()
        return chain

    def build(self) -> Registry:
        """Derive relations and build the Registry."""
        subsections: dict[SectionKey, list[SectionKey]] = {SectionKey(i): [] for i in range(len(self._sections))}
        children: dict[SectionKey, list[PageKey]] = {SectionKey(i): [] for i in range(len(self._sections))}
        for i, parent in enumerate(self._section_parents):
            if parent is not None:
                subsections[parent].append(SectionKey(i))
        for i, parent in enumerate(self._page_parents):
            if parent is not None:
                children[parent].append(PageKey(i))

        pages: dict[PageKey, Page] = {
            PageKey(i): page.model_copy(update={
                "ancestors": self._ancestors(self._page_parents[i]),
                "lighter": None, "heavier": None, "earlier": None, "later": None,
            })
            for i, page in enumerate(self._pages)
        }

        sections: dict[SectionKey, Section] = {}
        for i, section in enumerate(self._sections):
            key = SectionKey(i)
            ordered = _order_pages(pages, children[key], section.meta.sort_by)
            sections[key] = section.model_copy(update={
                "ancestors": self._ancestors(self._section_parents[key]),
                "pages": ordered,
                "subsections": sorted(subsections[key], key=lambda k: self._sections[k].meta.weight),
            })
        logger.debug("Built registry with %d page(s) and %d section(s)", len(pages), len(sections))
        return Registry(pages, sections)


def _order_pages(pages: dict[PageKey, Page], keys: list[PageKey], sort_by: SortBy) -> list[PageKey]:
    """Sort keys per sort_by and link siblings in pages (updated in place).

    By date: newest first, `earlier` points to the next (older) page and
    `later` to the previous one. By weight: lightest first, `lighter` points
    to the previous page and `heavier` to the next one. Pages lacking the
    attribute are appended unsorted and get no siblings.
    """
    if sort_by == SortBy.none:
        return list(keys)

    if sort_by == SortBy.date:
        sortable = [k for k in keys if pages[k].meta.datetime_tuple is not None]
        sortable.sort(key=lambda k: (pages[k].meta.datetime_tuple, pages[k].meta.date or ""), reverse=True)
        prev_field, next_field = "later", "earlier"
    else:
        sortable = [k for k in keys if pages[k].meta.weight is not None]
        sortable.sort(key=lambda k: pages[k].meta.weight)
        prev_field, next_field = "lighter", "heavier"

    for i, k in enumerate(sortable):
        pages[k] = pages[k].model_copy(update={
            prev_field: sortable[i - 1] if i > 0 else None,
            next_field: sortable[i + 1] if i + 1 < len(sortable) else None,
        })
    linked = set(sortable)
    ignored = [k for k in keys if k not in linked]
    return sortable + ignored

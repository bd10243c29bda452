"""Site manifest loading: YAML description of pages and sections -> Registry.

Stands in for the upstream parsing stage. The manifest already carries the
derived fields (rendered content, toc, word counts); this module only fills
defaults for URL fields and wires parents through a RegistryBuilder.
`path` is the source file; `url_path`, `permalink` and `components` override
the defaults derived from it.

    sections:
      - path: blog/_index.md
        parent: _index.md
        title: Blog
        sort_by: date
    pages:
      - path: blog/hello.md
        section: blog/_index.md
        title: Hello
        date: 2018-05-01
"""

import datetime
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Optional

import yaml

from mdsite.core.models import Header, Page, PageMeta, Section, SectionMeta
from mdsite.core.registry import Registry, RegistryBuilder
from mdsite.core.types import SectionKey
from mdsite.core.utils.slug import slugify


logger = logging.getLogger(__name__)

PAGE_META_KEYS = {'title', 'description', 'taxonomies', 'extra', 'weight', 'draft'}
SECTION_META_KEYS = {'title', 'description', 'extra', 'sort_by', 'weight'}
RECORD_KEYS = {'content', 'summary', 'word_count', 'reading_time', 'assets'}


def _parse_date(value: Any) -> tuple[Optional[str], Optional[tuple[int, int, int]]]:
    """Return (date_string, (year, month, day)) for a YAML date, datetime or ISO string."""
    if value is None:
        return None, None
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat(), (value.year, value.month, value.day)
    text = str(value)
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid date {text!r}: {e}") from e
    return text, (parsed.year, parsed.month, parsed.day)


def _url_fields(components: list[str], base_url: str) -> dict[str, Any]:
    path = "/".join(components) + "/" if components else ""
    return {
        "components": components,
        "path": path,
        "permalink": f"{base_url.rstrip('/')}/{path}",
    }


def _url_overrides(entry: dict) -> dict[str, Any]:
    """Explicit permalink/components/url_path from the manifest; `path` is the source file."""
    fields = {k: entry[k] for k in ('permalink', 'components') if k in entry}
    if 'url_path' in entry:
        fields['path'] = entry['url_path']
    return fields


def _headers(entries: list[dict]) -> list[Header]:
    return [Header(**e) for e in entries or []]


def _build_section(entry: dict, base_url: str) -> Section:
    rel = PurePosixPath(entry['path'])
    fields = _url_fields(list(rel.parent.parts), base_url)
    fields.update(_url_overrides(entry))
    return Section(
        relative_path=str(rel),
        meta=SectionMeta(**{k: v for k, v in entry.items() if k in SECTION_META_KEYS}),
        toc=_headers(entry.get('toc')),
        **{k: v for k, v in entry.items() if k in RECORD_KEYS - {'summary'}},
        **fields,
    )


def _build_page(entry: dict, base_url: str) -> Page:
    rel = PurePosixPath(entry['path'])
    slug = entry.get('slug') or slugify(rel.stem)
    fields = _url_fields([*rel.parent.parts, slug], base_url)
    fields.update(_url_overrides(entry))
    date, datetime_tuple = _parse_date(entry.get('date'))
    meta = PageMeta(
        date=date,
        datetime_tuple=datetime_tuple,
        **{k: v for k, v in entry.items() if k in PAGE_META_KEYS},
    )
    return Page(
        relative_path=str(rel),
        slug=slug,
        meta=meta,
        toc=_headers(entry.get('toc')),
        **{k: v for k, v in entry.items() if k in RECORD_KEYS},
        **fields,
    )


def _entries(data: dict, name: str) -> list[dict]:
    entries = data.get(name) or []
    if not isinstance(entries, list):
        raise ValueError(f"Invalid manifest: '{name}' must be a list")
    for e in entries:
        if not isinstance(e, dict) or not e.get('path'):
            raise ValueError(f"Invalid manifest: every entry in '{name}' needs a 'path'")
        rel = PurePosixPath(e['path'])
        if rel.is_absolute() or '..' in rel.parts:
            raise ValueError(f"Invalid manifest: path {e['path']!r} must stay inside the content root")
    return entries


def build_registry(data: dict, base_url: str = "/") -> Registry:
    """Build a Registry from a parsed manifest mapping.

    Sections may be listed in any order; each is added after its parent.
    """
    sections = _entries(data, 'sections')
    pages = _entries(data, 'pages')

    by_path = {}
    for e in sections:
        if e['path'] in by_path:
            raise ValueError(f"Invalid manifest: duplicate section {e['path']!r}")
        by_path[e['path']] = e
    for e in sections:
        parent = e.get('parent')
        if parent is not None and parent not in by_path:
            raise ValueError(f"Invalid manifest: section {e['path']!r} has unknown parent {parent!r}")

    builder = RegistryBuilder()
    keys: dict[str, SectionKey] = {}

    def add(entry: dict, visiting: tuple[str, ...] = ()) -> SectionKey:
        path = entry['path']
        if path in keys:
            return keys[path]
        if path in visiting:
            raise ValueError(f"Invalid manifest: section parents form a cycle at {path!r}")
        parent = entry.get('parent')
        parent_key = add(by_path[parent], visiting + (path,)) if parent is not None else None
        keys[path] = builder.add_section(_build_section(entry, base_url), parent_key)
        return keys[path]

    for e in sections:
        add(e)

    seen: set[str] = set()
    for e in pages:
        if e['path'] in seen:
            raise ValueError(f"Invalid manifest: duplicate page {e['path']!r}")
        seen.add(e['path'])
        if e['path'] in by_path:
            raise ValueError(f"Invalid manifest: {e['path']!r} is both a page and a section")
        section = e.get('section')
        if section is not None and section not in keys:
            raise ValueError(f"Invalid manifest: page {e['path']!r} has unknown section {section!r}")
        builder.add_page(_build_page(e, base_url), keys.get(section))

    registry = builder.build()
    logger.info("Loaded %d section(s) and %d page(s)", len(sections), len(pages))
    return registry


def load_site(path: Path, base_url: str = "/") -> Registry:
    """Read a YAML manifest file and build its Registry."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML manifest {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML manifest {path}: expected a mapping, got {type(data).__name__}")
    return build_registry(data, base_url)

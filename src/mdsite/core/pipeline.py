"""Pipeline step functions: load, project and export orchestration"""

import logging
from pathlib import Path
from typing import Union

from mdsite.core.export import write_view
from mdsite.core.load import load_site
from mdsite.core.registry import Registry
from mdsite.core.views import (
    PageView,
    ProjectionDepth,
    SectionView,
    project_page,
    project_section,
)


logger = logging.getLogger(__name__)


def project_all(registry: Registry) -> list[Union[PageView, SectionView]]:
    """Full views of every section, then every page."""
    views: list[Union[PageView, SectionView]] = [
        project_section(s, registry, ProjectionDepth.full) for s in registry.sections()
    ]
    views.extend(project_page(p, registry, ProjectionDepth.full) for p in registry.pages())
    return views


def project_path(
    registry: Registry,
    relative_path: str,
    depth: ProjectionDepth = ProjectionDepth.full,
    detached: bool = False,
    ) -> Union[PageView, SectionView]:
    """Project the page or section stored under relative_path.

    detached drops the registry for basic projections, leaving ancestors empty.
    Raises KeyError for unknown paths.
    """
    if detached and depth == ProjectionDepth.full:
        raise ValueError("Only basic projections can be detached from the registry")
    lookup = None if detached else registry
    if (page := registry.find_page(relative_path)) is not None:
        return project_page(page, lookup, depth)
    if (section := registry.find_section(relative_path)) is not None:
        return project_section(section, lookup, depth)
    raise KeyError(relative_path)


def run_build(
    content_file: Path,
    output_dir: Path,
    base_url: str = "/",
    indent: int = 2,
    ) -> list[tuple[str, Path]]:
    """Load content_file, project every record in full and write JSON to output_dir.

    Returns (relative_path, json_path) pairs. A dangling key aborts the build
    with InvariantViolation before anything is written.
    """
    registry = load_site(content_file, base_url)
    views = project_all(registry)
    results = [(v.relative_path, write_view(v, output_dir, indent)) for v in views]
    logger.info("Wrote %d view(s) to %s", len(results), output_dir)
    return results

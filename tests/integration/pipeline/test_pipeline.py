"""Integration tests for the load -> project -> export pipeline"""

import json

import pytest

from mdsite.core.load import load_site
from mdsite.core.pipeline import project_all, project_path, run_build
from mdsite.core.views import PageView, ProjectionDepth, SectionView


def _read(out_dir, rel):
    return json.loads((out_dir / rel).read_text())


def test_run_build_writes_every_record(site_file, tmp_path):
    """One JSON file per section and per page, mirroring source paths."""
    out = tmp_path / "dist"
    results = run_build(site_file, out)
    assert len(results) == 9
    assert (out / "_index.json").exists()
    assert (out / "blog" / "archive" / "_index.json").exists()
    assert (out / "docs" / "usage.json").exists()


def test_blog_section_view(site_file, tmp_path):
    """The blog section embeds its pages newest first, subsections by path."""
    out = tmp_path / "dist"
    run_build(site_file, out)
    blog = _read(out, "blog/_index.json")
    assert blog["ancestors"] == ["_index.md"]
    assert blog["content"] == "<p>All posts</p>"
    assert [p["relative_path"] for p in blog["pages"]] == [
        "blog/second.md", "blog/first.md", "blog/undated.md",
    ]
    assert blog["subsections"] == ["blog/archive/_index.md"]

    second = blog["pages"][0]
    assert second["earlier"]["relative_path"] == "blog/first.md"
    assert second["earlier"]["earlier"] is None
    assert second["earlier"]["later"] is None
    assert second["later"] is None


def test_page_views_on_disk(site_file, tmp_path):
    """Page files carry ancestors, dates, siblings and absent markers."""
    out = tmp_path / "dist"
    run_build(site_file, out, base_url="https://example.org")
    first = _read(out, "blog/first.json")
    assert first["ancestors"] == ["_index.md", "blog/_index.md"]
    assert (first["year"], first["month"], first["day"]) == (2018, 1, 10)
    assert first["permalink"] == "https://example.org/blog/first/"
    assert first["taxonomies"] == {"tags": ["intro"]}
    assert first["later"]["relative_path"] == "blog/second.md"
    assert first["later"]["ancestors"] == ["_index.md", "blog/_index.md"]

    undated = _read(out, "blog/undated.json")
    assert undated["title"] == ""
    assert undated["year"] is None
    assert undated["earlier"] is None and undated["later"] is None

    install = _read(out, "docs/install.json")
    assert install["heavier"]["relative_path"] == "docs/usage.md"
    assert install["heavier"]["draft"] is True
    assert install["toc"][0]["id"] == "setup"


def test_project_all_order(site_file):
    """Sections come first, then pages."""
    views = project_all(load_site(site_file))
    assert all(isinstance(v, SectionView) for v in views[:4])
    assert all(isinstance(v, PageView) for v in views[4:])


def test_project_path(site_file):
    """Single records can be projected by relative path in either depth."""
    registry = load_site(site_file)
    full = project_path(registry, "blog/first.md")
    assert full.later is not None
    basic = project_path(registry, "blog/first.md", ProjectionDepth.basic)
    assert basic.later is None
    assert basic.ancestors == ["_index.md", "blog/_index.md"]
    detached = project_path(registry, "blog/first.md", ProjectionDepth.basic, detached=True)
    assert detached.ancestors == []
    docs = project_path(registry, "docs/_index.md", ProjectionDepth.basic)
    assert docs.pages == []


def test_project_path_errors(site_file):
    registry = load_site(site_file)
    with pytest.raises(KeyError):
        project_path(registry, "missing.md")
    with pytest.raises(ValueError):
        project_path(registry, "blog/first.md", ProjectionDepth.full, detached=True)


def test_run_build_rejects_escaping_paths(tmp_path):
    """A manifest path climbing out of the content root writes nothing."""
    site = tmp_path / "site.yaml"
    site.write_text("pages:\n  - path: ../escape.md\n")
    with pytest.raises(ValueError, match="content root"):
        run_build(site, tmp_path / "dist")
    assert not (tmp_path / "escape.json").exists()
    assert not (tmp_path / "dist").exists()


def test_run_build_rejects_page_section_collision(tmp_path):
    """A page and a section sharing a path would overwrite each other's output."""
    site = tmp_path / "site.yaml"
    site.write_text("sections:\n  - path: blog/_index.md\npages:\n  - path: blog/_index.md\n")
    with pytest.raises(ValueError, match="both a page and a section"):
        run_build(site, tmp_path / "dist")

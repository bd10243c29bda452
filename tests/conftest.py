"""Shared fixtures: a small site manifest used by the integration and CLI tests"""

import pytest


SITE_YAML = """\
sections:
  - path: _index.md
    title: Home
  - path: blog/archive/_index.md
    parent: blog/_index.md
    title: Archive
  - path: blog/_index.md
    parent: _index.md
    title: Blog
    sort_by: date
    content: "<p>All posts</p>"
  - path: docs/_index.md
    parent: _index.md
    title: Docs
    sort_by: weight
pages:
  - path: blog/first.md
    section: blog/_index.md
    title: First post
    date: 2018-01-10
    taxonomies:
      tags: [intro]
  - path: blog/second.md
    section: blog/_index.md
    title: Second post
    date: 2018-03-02
    summary: "<p>Short</p>"
    word_count: 120
    reading_time: 1
  - path: blog/undated.md
    section: blog/_index.md
    title: ""
  - path: docs/install.md
    section: docs/_index.md
    weight: 1
    toc:
      - {level: 1, id: setup, title: Setup, permalink: /docs/install/#setup}
  - path: docs/usage.md
    section: docs/_index.md
    weight: 2
    draft: true
"""


@pytest.fixture(name="site_file")
def site_file_fixture(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text(SITE_YAML)
    return path

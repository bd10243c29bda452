"""Unit tests for core/utils/slug.py"""

import pytest

from mdsite.core.utils.slug import slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_first_post", "my-first-post"),
    ("Café au lait", "cafe-au-lait"),
    ("v1.2-notes", "v1-2-notes"),
    ("  --Odd!!  spacing--  ", "odd-spacing"),
    ("", ""),
])
def test_slugify(text, expected):
    assert slugify(text) == expected

"""Slug generation for page URLs"""

import re
import unicodedata


def slugify(text: str) -> str:
    """Convert a filename stem or title to a lowercase, hyphen-separated URL slug.

    Accented letters are folded to their ASCII base ("Café" -> "cafe"); dots
    are treated as word separators so "v1.2-notes" becomes "v1-2-notes".
    """
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[\s_.]+', '-', text.lower())
    text = re.sub(r'[^a-z0-9-]', '', text)
    return re.sub(r'-+', '-', text).strip('-')

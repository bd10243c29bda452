"""Export: write projected views as JSON template contexts"""

from pathlib import Path
from typing import Union

from mdsite.core.views import PageView, SectionView


def view_filename(relative_path: str) -> Path:
    """Output path for a record, mirroring its source path (`blog/a.md` -> `blog/a.json`)."""
    return Path(relative_path).with_suffix('.json')


def write_view(view: Union[PageView, SectionView], output_dir: Path, indent: int = 2) -> Path:
    """Write a single view under output_dir and return the written path.

    None values are written as JSON null, keeping absent fields distinct from
    empty ones. indent=0 writes compact JSON. Paths that would land outside
    output_dir raise ValueError.
    """
    out = Path(output_dir) / view_filename(view.relative_path)
    if not out.resolve().is_relative_to(Path(output_dir).resolve()):
        raise ValueError(f"Refusing to write {view.relative_path!r} outside {output_dir}")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(view.model_dump_json(indent=indent or None), encoding='utf-8')
    return out

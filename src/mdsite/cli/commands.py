"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.load import load_site
from mdsite.core.pipeline import project_path, run_build
from mdsite.core.registry import Registry
from mdsite.core.views import ProjectionDepth


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and set up logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _content_file(settings: Settings) -> Path:
    content_file = Path(settings.content_file)
    if not content_file.exists():
        _fail(f"Content file not found: {content_file}")
    return content_file


def _registry(settings: Settings) -> Registry:
    try:
        return load_site(_content_file(settings), settings.base_url)
    except ValueError as e:
        _fail(str(e))


def build_cmd(
    content: Annotated[Optional[str], typer.Argument(help="Site manifest (YAML)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="Permalink prefix")] = None,
    indent: Annotated[Optional[int], typer.Option("--indent", help="JSON indent; 0 = compact")] = None,
    ):
    """Project every section and page in full and write them as JSON."""
    settings = _settings(overrides={
        "content_file": content, "output_dir": out, "base_url": base_url, "indent": indent,
    })
    content_file = _content_file(settings)
    output_dir = Path(settings.output_dir)

    try:
        results = run_build(content_file, output_dir, settings.base_url, settings.indent)
    except ValueError as e:
        _fail(str(e))
    except RuntimeError as e:
        _fail("Build aborted", e)
    for rel, json_path in results:
        typer.echo(f"  {rel} -> {json_path}")
    typer.echo(f"Projected {len(results)} view(s) to {output_dir}/")


def show_cmd(
    path: Annotated[str, typer.Argument(help="Relative path of a page or section")],
    content: Annotated[Optional[str], typer.Option("--content", help="Site manifest (YAML)")] = None,
    basic: Annotated[bool, typer.Option("--basic", help="Do not expand siblings or child pages")] = False,
    detached: Annotated[bool, typer.Option("--detached", help="With --basic, skip ancestor resolution")] = False,
    ):
    """Print the view of one page or section as JSON."""
    settings = _settings(overrides={"content_file": content})
    if detached and not basic:
        _fail("--detached requires --basic")
    registry = _registry(settings)
    depth = ProjectionDepth.basic if basic else ProjectionDepth.full

    try:
        view = project_path(registry, path, depth, detached)
    except KeyError:
        _fail(f"No page or section at {path!r}")
    except RuntimeError as e:
        _fail("Projection failed", e)
    typer.echo(view.model_dump_json(indent=settings.indent or None))


def list_cmd(
    content: Annotated[Optional[str], typer.Option("--content", help="Site manifest (YAML)")] = None,
    ):
    """List sections with their child counts, then pages."""
    settings = _settings(overrides={"content_file": content})
    registry = _registry(settings)
    if not len(registry):
        typer.echo("No content found.")
        raise typer.Exit(1)

    for s in registry.sections():
        typer.echo(f"section {s.relative_path} ({len(s.pages)} page(s), {len(s.subsections)} subsection(s))")
    for p in registry.pages():
        flag = " [draft]" if p.is_draft else ""
        typer.echo(f"page    {p.relative_path}{flag}")

"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, list_cmd, show_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Project site content into template views")

app.command(name="build")(build_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)

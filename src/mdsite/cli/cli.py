"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, init_cmd, list_cmd, render_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Render a directory of markdown posts into a static site")

app.command(name="build")(build_cmd)
app.command(name="render")(render_cmd)
app.command(name="list")(list_cmd)
app.command(name="init")(init_cmd)

"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdnotion.cli.commands import check_cmd, clear_cmd, ship_cmd


app = typer.Typer(name="mdnotion", no_args_is_help=True, help="Publish a markdown directory tree to Notion")

app.command(name="ship")(ship_cmd)
app.command(name="clear")(clear_cmd)
app.command(name="check")(check_cmd)

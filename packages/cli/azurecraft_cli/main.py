import logging

import typer

from azurecraft_cli import __version__
from azurecraft_cli.commands.cost import cost
from azurecraft_cli.commands.layout_cmd import layout
from azurecraft_cli.commands.lint_cmd import lint
from azurecraft_cli.commands.price import fields, price
from azurecraft_cli.commands.route_cmd import route


def _version_callback(value: bool) -> None:
    if value:
        print(f"azurecraft {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="azurecraft",
    help="Layout, routing, pricing and review for Azure architecture diagrams",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


app.command()(layout)
app.command()(route)
app.command()(cost)
app.command()(price)
app.command()(fields)
app.command()(lint)

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from astools.cli.dump import dump
from astools.cli.listing import list_app
from astools.cli.resolve import resolve

app = typer.Typer(
    name="astools",
    help="astools CLI — extract Go declarations and resolve types across packages.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("dump")(dump)
app.command("resolve")(resolve)
app.add_typer(list_app, name="list")


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log scanning and resolution steps.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def main() -> None:
    app()

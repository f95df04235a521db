from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from astools.cli.common import load_file
from astools.core.sources import write_temp_go_file

console = Console()


def dump(
    path: Annotated[str | None, typer.Argument(help="Path to a .go file.")] = None,
    code: Annotated[str | None, typer.Option(help="Go source string to dump instead of a file path.")] = None,
    indent: Annotated[int, typer.Option(help="JSON indentation.")] = 2,
) -> None:
    """Dump the extracted model of a Go file as JSON."""
    if path is None and code is None:
        raise typer.BadParameter("Provide a file path or --code.")

    temp_path: Path | None = None
    if code is not None:
        temp_path = write_temp_go_file(code)
    try:
        go_file = load_file(str(temp_path) if temp_path is not None else str(path))
        console.print_json(data=go_file.model_dump(mode="json", by_alias=True), indent=indent)
    finally:
        if temp_path:
            temp_path.unlink(missing_ok=True)

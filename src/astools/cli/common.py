from pathlib import Path

import typer
from rich.console import Console

from astools.core.errors import AstoolsError
from astools.core.scan import scan
from astools.models import GoFile

err_console = Console(stderr=True)


def load_file(path: str) -> GoFile:
    try:
        return scan(Path(path))
    except (AstoolsError, OSError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

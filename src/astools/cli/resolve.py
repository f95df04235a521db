from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from astools.cli.common import err_console, load_file
from astools.core.config import SearchPaths
from astools.core.errors import AstoolsError
from astools.core.resolver import ResolutionSession

console = Console()


def resolve(
    path: Annotated[str, typer.Argument(help="Path to the .go file the type is referenced from.")],
    type_name: Annotated[str, typer.Argument(help="Type name, optionally qualified (e.g. decimal.Decimal).")],
    gopath: Annotated[Path | None, typer.Option(help="Dependency root; defaults to $GOPATH/src.")] = None,
    goroot: Annotated[Path | None, typer.Option(help="Standard library root; defaults to $GOROOT/src.")] = None,
    no_vendor: Annotated[bool, typer.Option("--no-vendor", help="Do not search vendor directories.")] = False,
) -> None:
    """Resolve a type reference to its struct declaration."""
    defaults = SearchPaths.from_env()
    search_paths = SearchPaths(
        dependency_root=gopath if gopath is not None else defaults.dependency_root,
        stdlib_root=goroot if goroot is not None else defaults.stdlib_root,
        use_vendor=not no_vendor,
    )
    go_file = load_file(path)
    session = ResolutionSession(search_paths)
    try:
        struct = session.extract_type(go_file, type_name)
    except AstoolsError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    owner = struct.file
    location = owner.location if owner is not None else None
    import_path = owner.import_path if owner is not None else None
    console.print(f"[green]Resolved[/green] {type_name} -> {session.qualify(go_file, type_name)}")
    console.print(f"  declared in {location}")
    if import_path:
        console.print(f"  import path {import_path}")
    console.print(struct.golang(), markup=False, highlight=False)

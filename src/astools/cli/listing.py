from collections.abc import Sequence
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from astools.cli.common import load_file

list_app = typer.Typer(help="List declarations of a Go file.")
console = Console()


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def _first_line(comment: str) -> str:
    return comment.splitlines()[0] if comment else ""


@list_app.command("structs")
def structs(
    path: Annotated[str, typer.Argument(help="Path to a .go file.")],
    fields: Annotated[bool, typer.Option(help="List every field instead of one row per struct.")] = False,
) -> None:
    """List struct declarations."""
    go_file = load_file(path)
    if fields:
        rows = [
            (s.name, f.name, f.golang_type, f.tag, _first_line(f.comment)) for s in go_file.structs for f in s.fields
        ]
        _render_table(["struct", "field", "type", "tag", "comment"], rows)
        return
    _render_table(
        ["name", "fields", "comment"],
        [(s.name, len(s.fields), _first_line(s.comment)) for s in go_file.structs],
    )


@list_app.command("interfaces")
def interfaces(
    path: Annotated[str, typer.Argument(help="Path to a .go file.")],
) -> None:
    """List interface methods with their signatures."""
    go_file = load_file(path)
    rows = []
    for iface in go_file.interfaces:
        for m in iface.methods:
            inputs = ", ".join(f"{a.name} {a.golang_type}" for a in m.inputs)
            outputs = ", ".join(a.golang_type for a in m.outputs)
            rows.append((iface.name, m.name, inputs, outputs))
    _render_table(["interface", "method", "in", "out"], rows)


@list_app.command("values")
def values(
    path: Annotated[str, typer.Argument(help="Path to a .go file.")],
) -> None:
    """List package-level constants and variables."""
    go_file = load_file(path)
    _render_table(
        ["name", "type", "value", "comment"],
        [(v.name, v.golang_type, v.golang_value, _first_line(v.comment)) for v in go_file.values],
    )

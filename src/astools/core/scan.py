import logging
from pathlib import Path

from tree_sitter import Node, Tree
from tree_sitter_language_pack import get_parser

from astools.core.errors import GoParseError
from astools.core.extract import extract_declarations, extract_imports, package_clause, package_name
from astools.core.printer import Printer
from astools.models import GoFile, Interface, Struct

logger = logging.getLogger(__name__)


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def parse_source(source_bytes: bytes, location: str | Path = "<source>") -> Tree:
    parser = get_parser("go")
    tree = parser.parse(source_bytes)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        if bad is None:
            raise GoParseError(location)
        row, column = bad.start_point
        raise GoParseError(location, f"syntax error at {row + 1}:{column + 1}")
    if package_clause(root) is None:
        raise GoParseError(location, "missing package clause")
    return tree


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None


def scan_source(source_bytes: bytes, location: str | Path | None = None) -> GoFile:
    tree = parse_source(source_bytes, location if location is not None else "<source>")
    root = tree.root_node
    printer = Printer(source_bytes, root)
    declarations = extract_declarations(printer, root.named_children)

    return GoFile(
        printer,
        location,
        package=package_name(root),
        comment=printer.comment_text(package_clause(root)),
        imports=extract_imports(root),
        values=declarations.values,
        interfaces=declarations.interfaces,
        structs=declarations.structs,
    )


def scan(path: str | Path) -> GoFile:
    """Parse one Go file in isolation and build its model."""
    file_path = Path(path)
    go_file = scan_source(_read(file_path), file_path)
    logger.debug(
        "Scanned %s: package %s, %d struct(s), %d interface(s), %d value(s)",
        file_path,
        go_file.package,
        len(go_file.structs),
        len(go_file.interfaces),
        len(go_file.values),
    )
    return go_file


def structs_file(path: str | Path) -> tuple[list[Struct], Printer]:
    go_file = scan(path)
    assert go_file.printer is not None
    return go_file.structs, go_file.printer


def interfaces_file(path: str | Path) -> tuple[list[Interface], Printer]:
    go_file = scan(path)
    assert go_file.printer is not None
    return go_file.interfaces, go_file.printer

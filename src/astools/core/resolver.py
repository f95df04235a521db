import logging
import re
from pathlib import Path

from astools.core.config import SearchPaths
from astools.core.errors import CyclicReferenceError, TypeNotFoundError
from astools.core.ports.indexer import SymbolIndexer
from astools.core.scan import scan
from astools.core.sources import TEST_SUFFIX, list_go_sources
from astools.core.types import type_name
from astools.models import Arg, GoFile, Struct, TypeExpr

logger = logging.getLogger(__name__)

LOCAL = "_"
DOT_IMPORT = "."
BLANK_IMPORT = "_"

_VERSION_SEGMENT = re.compile(r"v\d+")
_VERSION_SUFFIX = re.compile(r"\.v\d+$")


def default_package_name(import_path: str) -> str:
    """Guess the name a package is referred to by when imported without an alias."""
    parts = import_path.strip("/").split("/")
    last = parts[-1]
    if _VERSION_SEGMENT.fullmatch(last) and len(parts) > 1:
        last = parts[-2]
    last = _VERSION_SUFFIX.sub("", last)
    last = last.removeprefix("go-").removesuffix("-go")
    return last


def split_type_name(type_ref: str) -> tuple[str, str]:
    """Split ``*pkg.Name[T]`` into ``("pkg", "Name")``; unqualified names get the local alias."""
    text = type_ref.strip().lstrip("*").strip()
    if "[" in text and not text.startswith("["):
        text = text[: text.index("[")]
    alias, _, name = text.rpartition(".")
    return (alias or LOCAL), name


class ResolutionSession:
    """One logical type-resolution run.

    The session memoizes scanned files by absolute path, so a file is parsed at
    most once per session, and tracks the (directory, package, type) triples
    being resolved so that packages referring to each other fail with
    :class:`CyclicReferenceError` instead of recursing forever. Directories,
    files and imports are always visited in sorted order.
    """

    def __init__(self, search_paths: SearchPaths | None = None, indexer: SymbolIndexer | None = None) -> None:
        self.search_paths = search_paths if search_paths is not None else SearchPaths.from_env()
        self.indexer = indexer
        self._files: dict[Path, GoFile] = {}
        self._in_progress: set[tuple[Path, str, str]] = set()

    @property
    def scanned_files(self) -> list[Path]:
        return sorted(self._files)

    def scan(self, path: str | Path) -> GoFile:
        key = Path(path).resolve()
        go_file = self._files.get(key)
        if go_file is None:
            go_file = scan(key)
            self._files[key] = go_file
        return go_file

    def adopt(self, go_file: GoFile) -> None:
        """Register a file scanned outside the session so that sibling lookups reuse it."""
        if go_file.location is not None:
            self._files.setdefault(go_file.location.resolve(), go_file)

    def extract_type(self, go_file: GoFile, type_ref: str | Arg | TypeExpr) -> Struct:
        """Locate the struct declaration a type reference in ``go_file`` points to."""
        requested, alias, name = self._normalize(go_file, type_ref)
        self.adopt(go_file)
        struct = self._resolve(go_file, alias, name)
        if struct is None:
            raise TypeNotFoundError(requested)
        return struct

    def qualify(self, go_file: GoFile, type_ref: str | Arg | TypeExpr) -> str:
        """Return the fully-qualified name of a type reference, asking the indexer first when one is set."""
        requested, alias, name = self._normalize(go_file, type_ref)
        if self.indexer is not None:
            found = self.indexer(requested, go_file)
            if found:
                return found
        if alias == LOCAL:
            prefix = go_file.import_path or go_file.package
            return f"{prefix}.{name}" if prefix else name
        for import_path, explicit in self._import_candidates(go_file, alias):
            if explicit or default_package_name(import_path) == alias:
                return f"{import_path}.{name}"
        return f"{alias}.{name}"

    def _normalize(self, go_file: GoFile, type_ref: str | Arg | TypeExpr) -> tuple[str, str, str]:
        if isinstance(type_ref, str):
            alias, name = split_type_name(type_ref)
            return type_ref, alias, name
        expr = type_ref.type if isinstance(type_ref, Arg) else type_ref
        printer = type_ref.printer if isinstance(type_ref, Arg) else go_file.printer
        requested = printer.render(expr) if printer is not None else ""
        alias, name = type_name(expr)
        return requested, (alias or LOCAL), name

    def _resolve(self, go_file: GoFile, alias: str, name: str) -> Struct | None:
        if not name:
            return None
        directory = go_file.directory.resolve() if go_file.directory is not None else Path.cwd()
        guard = (directory, go_file.package, f"{alias}.{name}")
        if guard in self._in_progress:
            raise CyclicReferenceError(directory, f"{alias}.{name}" if alias != LOCAL else name)
        self._in_progress.add(guard)
        try:
            if alias == LOCAL:
                return self._resolve_local(go_file, name)
            return self._resolve_imported(go_file, directory, alias, name)
        finally:
            self._in_progress.discard(guard)

    def _resolve_local(self, go_file: GoFile, name: str) -> Struct | None:
        struct = go_file.struct(name)
        if struct is not None:
            return struct

        for sibling in self._siblings(go_file):
            struct = sibling.struct(name)
            if struct is not None:
                logger.debug("Resolved %s in sibling %s", name, sibling.location)
                return struct

        directory = go_file.directory or Path.cwd()
        for import_path in sorted(p for p, a in go_file.imports.items() if a == DOT_IMPORT):
            struct = self._search_package(directory, import_path, name, package=None)
            if struct is not None:
                return struct
        return None

    def _resolve_imported(self, go_file: GoFile, directory: Path, alias: str, name: str) -> Struct | None:
        for import_path, explicit in self._import_candidates(go_file, alias):
            struct = self._search_package(directory, import_path, name, package=None if explicit else alias)
            if struct is not None:
                logger.debug("Resolved %s.%s via import %s", alias, name, import_path)
                return struct
        return None

    def _search_package(self, directory: Path, import_path: str, name: str, package: str | None) -> Struct | None:
        package_dir = self.search_paths.package_dir(directory, import_path)
        if package_dir is None:
            logger.debug("Import %s not found under any search root", import_path)
            return None

        for source in list_go_sources(package_dir, include_tests=False):
            candidate = self.scan(source)
            if package is not None and candidate.package != package:
                continue
            if candidate.import_path is None:
                candidate.import_path = import_path
            struct = self._resolve(candidate, LOCAL, name)
            if struct is not None:
                return struct
        return None

    def _siblings(self, go_file: GoFile) -> list[GoFile]:
        if go_file.siblings is not None:
            return go_file.siblings
        if go_file.directory is None:
            go_file.set_siblings([])
            return []

        own = go_file.location.resolve() if go_file.location is not None else None
        # test declarations are only visible to other test files
        include_tests = own is not None and own.name.endswith(TEST_SUFFIX)
        siblings: list[GoFile] = []
        for source in list_go_sources(go_file.directory, include_tests=include_tests):
            if source.resolve() == own:
                continue
            sibling = self.scan(source)
            if sibling.package != go_file.package:
                continue
            if sibling.import_path is None:
                sibling.import_path = go_file.import_path
            siblings.append(sibling)
        go_file.set_siblings(siblings)
        logger.debug("Scanned %d sibling(s) of %s", len(siblings), go_file.location)
        return siblings

    def _import_candidates(self, go_file: GoFile, alias: str) -> list[tuple[str, bool]]:
        """Imports that may bind ``alias``: explicit aliases first, then default imports, best guesses first."""
        explicit = sorted(p for p, a in go_file.imports.items() if a == alias and a not in (BLANK_IMPORT, DOT_IMPORT))
        defaults = [p for p, a in go_file.imports.items() if a == ""]
        derived = sorted(p for p in defaults if default_package_name(p) == alias)
        others = sorted(p for p in defaults if default_package_name(p) != alias)
        return [(p, True) for p in explicit] + [(p, False) for p in derived + others]


def extract_type(
    go_file: GoFile,
    type_ref: str | Arg | TypeExpr,
    search_paths: SearchPaths | None = None,
) -> Struct:
    return ResolutionSession(search_paths).extract_type(go_file, type_ref)

"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from astools.core.config import SearchPaths

_REPO_ROOT = Path(__file__).parent.parent
_FIXTURES = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the Go fixture tree."""
    return _FIXTURES


@pytest.fixture
def sample_path(fixtures_dir: Path) -> Path:
    """Return the path to the sample Go file with rockets and interfaces."""
    return fixtures_dir / "sample" / "sample.go"


@pytest.fixture
def fixture_search_paths(fixtures_dir: Path) -> SearchPaths:
    """Search roots pointing at the fixture GOPATH and GOROOT, without vendor lookup."""
    return SearchPaths(
        dependency_root=fixtures_dir / "gopath" / "src",
        stdlib_root=fixtures_dir / "goroot" / "src",
        use_vendor=False,
    )


@pytest.fixture
def go_parser() -> Parser:
    """Return a tree-sitter parser for Go."""
    return get_parser("go")


@pytest.fixture
def write_go(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a Go source file below ``tmp_path`` and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write

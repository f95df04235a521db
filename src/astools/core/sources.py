import tempfile
from pathlib import Path

GO_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"


def is_go_source(path: Path, include_tests: bool = True) -> bool:
    if path.suffix != GO_SUFFIX:
        return False
    return include_tests or not path.name.endswith(TEST_SUFFIX)


def list_go_sources(directory: Path, include_tests: bool = True) -> list[Path]:
    """Return the regular Go files of ``directory`` in lexicographic order."""
    return sorted(
        entry
        for entry in directory.iterdir()
        if entry.is_file() and is_go_source(entry, include_tests=include_tests)
    )


def write_temp_go_file(source: str) -> Path:
    with tempfile.NamedTemporaryFile(delete=False, suffix=GO_SUFFIX) as temp_file:
        temp_file.write(source.encode("utf-8"))
        temp_file.flush()
        return Path(temp_file.name)

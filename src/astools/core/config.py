import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

VENDOR_DIR = "vendor"


def find_vendor_dir(directory: str | Path) -> Path | None:
    """Walk upward from ``directory`` and return the first ``vendor`` directory found."""
    current = Path(directory).resolve()
    while True:
        candidate = current / VENDOR_DIR
        if candidate.is_dir():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


class SearchPaths(BaseModel):
    """Roots under which ``<root>/<import path>`` holds an imported package's sources.

    ``dependency_root`` is the global dependency cache (``$GOPATH/src``) and
    ``stdlib_root`` the standard library (``$GOROOT/src``). Vendor directories
    are discovered per file and never configured here.
    """

    model_config = ConfigDict(frozen=True)

    dependency_root: Path | None = None
    stdlib_root: Path | None = None
    use_vendor: bool = True

    @classmethod
    def from_env(cls) -> "SearchPaths":
        gopath = os.getenv("GOPATH") or str(Path.home() / "go")
        goroot = os.getenv("GOROOT")
        # GOPATH may list several workspaces; the first one is the cache root
        first_gopath = gopath.split(os.pathsep)[0]
        return cls(
            dependency_root=Path(first_gopath) / "src" if first_gopath else None,
            stdlib_root=Path(goroot) / "src" if goroot else None,
        )

    def candidate_roots(self, directory: str | Path, import_path: str) -> list[Path]:
        """Return the candidate source directories for ``import_path`` in priority order."""
        roots: list[Path] = []
        if self.use_vendor:
            vendor = find_vendor_dir(directory)
            if vendor is not None:
                roots.append(vendor)
        if self.dependency_root is not None:
            roots.append(self.dependency_root)
        if self.stdlib_root is not None:
            roots.append(self.stdlib_root)
        return [root / import_path for root in roots]

    def package_dir(self, directory: str | Path, import_path: str) -> Path | None:
        for candidate in self.candidate_roots(directory, import_path):
            if candidate.is_dir():
                logger.debug("Import %s located at %s", import_path, candidate)
                return candidate
        return None

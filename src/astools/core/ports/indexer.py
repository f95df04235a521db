from typing import Protocol

from astools.models import GoFile


class SymbolIndexer(Protocol):
    """Maps a type reference seen in ``go_file`` to its fully-qualified name, or None when unknown."""

    def __call__(self, type_ref: str, go_file: GoFile) -> str | None: ...

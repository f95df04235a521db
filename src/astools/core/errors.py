from pathlib import Path


class AstoolsError(Exception):
    """Base class for all extraction and resolution failures."""


class GoParseError(AstoolsError):
    def __init__(self, path: str | Path, detail: str = "syntax error") -> None:
        self.path = str(path)
        super().__init__(f"Failed to parse {self.path}: {detail}")


class ResolutionError(AstoolsError):
    pass


class TypeNotFoundError(ResolutionError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"type {name} can't be extracted")


class CyclicReferenceError(ResolutionError):
    def __init__(self, directory: str | Path, name: str) -> None:
        self.directory = str(directory)
        self.name = name
        super().__init__(f"cyclic reference while resolving {name} in {self.directory}")

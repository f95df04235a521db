from astools.core.config import SearchPaths, find_vendor_dir
from astools.core.errors import (
    AstoolsError,
    CyclicReferenceError,
    GoParseError,
    ResolutionError,
    TypeNotFoundError,
)
from astools.core.printer import CommentGroup, Printer
from astools.core.resolver import ResolutionSession, extract_type
from astools.core.scan import interfaces_file, scan, scan_source, structs_file
from astools.models import (
    Arg,
    GoFile,
    Interface,
    Method,
    PrimitiveKind,
    Span,
    Struct,
    StructField,
    TypeExpr,
    TypeKind,
    Value,
)

__all__ = [
    "Arg",
    "AstoolsError",
    "CommentGroup",
    "CyclicReferenceError",
    "GoFile",
    "GoParseError",
    "Interface",
    "Method",
    "PrimitiveKind",
    "Printer",
    "ResolutionError",
    "ResolutionSession",
    "SearchPaths",
    "Span",
    "Struct",
    "StructField",
    "TypeExpr",
    "TypeKind",
    "TypeNotFoundError",
    "Value",
    "extract_type",
    "find_vendor_dir",
    "interfaces_file",
    "scan",
    "scan_source",
    "structs_file",
]

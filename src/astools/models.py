from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field
from pydantic.alias_generators import to_pascal

from astools.core.printer import Printer

if TYPE_CHECKING:
    from astools.core.resolver import ResolutionSession


class TypeKind(str, Enum):
    NAMED = "named"
    QUALIFIED = "qualified"
    PRIMITIVE = "primitive"
    ERROR = "error"
    POINTER = "pointer"
    SLICE = "slice"
    ARRAY = "array"
    MAP = "map"
    CHANNEL = "channel"
    FUNC = "func"
    STRUCT = "struct"
    INTERFACE = "interface"
    GENERIC = "generic"
    PARENTHESIZED = "parenthesized"
    VARIADIC = "variadic"
    OTHER = "other"


class PrimitiveKind(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class Span(_Record):
    start_byte: int
    end_byte: int


class TypeExpr(Span):
    """A classified type expression; the kind describes the outermost syntactic layer only."""

    kind: TypeKind
    name: str = ""
    package: str = ""
    primitive: PrimitiveKind | None = None
    elem: "TypeExpr | None" = None
    key: "TypeExpr | None" = None


TypeExpr.model_rebuild()  # necessary for recursive types


class Arg(_Record):
    name: str
    type: TypeExpr | None = Field(default=None, exclude=True)
    comment: str = ""
    _printer: Printer | None = PrivateAttr(default=None)

    def __init__(self, printer: Printer | None = None, **data: Any) -> None:
        super().__init__(**data)
        self._printer = printer

    @property
    def printer(self) -> Printer | None:
        return self._printer

    @computed_field(alias="GolangType")  # type: ignore[prop-decorator]
    @property
    def golang_type(self) -> str:
        if self._printer is None:
            return ""
        return self._printer.render(self.type)

    @computed_field(alias="IsError")  # type: ignore[prop-decorator]
    @property
    def is_error(self) -> bool:
        return self.type_kind is TypeKind.ERROR

    @property
    def type_kind(self) -> TypeKind | None:
        return self.type.kind if self.type is not None else None

    @property
    def is_pointer(self) -> bool:
        return self.type_kind is TypeKind.POINTER

    @property
    def is_array(self) -> bool:
        """True for both fixed-size arrays and slices."""
        return self.type_kind in (TypeKind.ARRAY, TypeKind.SLICE)

    @property
    def is_slice(self) -> bool:
        return self.type_kind is TypeKind.SLICE

    @property
    def is_map(self) -> bool:
        return self.type_kind is TypeKind.MAP

    @property
    def is_simple(self) -> bool:
        return self.type_kind is TypeKind.PRIMITIVE

    def _is_primitive(self, kind: PrimitiveKind) -> bool:
        return self.type is not None and self.type.primitive is kind

    @property
    def is_integer(self) -> bool:
        return self._is_primitive(PrimitiveKind.INTEGER)

    @property
    def is_float(self) -> bool:
        return self._is_primitive(PrimitiveKind.FLOAT)

    @property
    def is_string(self) -> bool:
        return self._is_primitive(PrimitiveKind.STRING)

    @property
    def is_boolean(self) -> bool:
        return self._is_primitive(PrimitiveKind.BOOLEAN)

    def array_item(self) -> "Arg | None":
        if not self.is_array or self.type is None or self.type.elem is None:
            return None
        return Arg(self._printer, name="", type=self.type.elem)

    def go_pkg_type(self) -> tuple[str, str]:
        """Split a qualified type into (package alias, type name); unqualified types get an empty alias."""
        target = self.type
        if target is not None and target.kind is TypeKind.GENERIC and target.elem is not None:
            target = target.elem
        if target is not None and target.kind is TypeKind.QUALIFIED:
            return target.package, target.name
        return "", self.golang_type


class Value(Arg):
    value: Span | None = Field(default=None, exclude=True)

    @computed_field(alias="GolangValue")  # type: ignore[prop-decorator]
    @property
    def golang_value(self) -> str:
        if self._printer is None:
            return ""
        return self._printer.render(self.value)


class StructField(Arg):
    tag: str = ""


class Struct(_Record):
    name: str
    comment: str = ""
    fields: list[StructField] = []
    definition: TypeExpr | None = Field(default=None, exclude=True)
    _printer: Printer | None = PrivateAttr(default=None)
    _file: "GoFile | None" = PrivateAttr(default=None)

    def __init__(self, printer: Printer | None = None, **data: Any) -> None:
        super().__init__(**data)
        self._printer = printer

    @property
    def file(self) -> "GoFile | None":
        return self._file

    @property
    def printer(self) -> Printer | None:
        return self._printer

    def golang(self) -> str:
        definition = self._printer.render(self.definition) if self._printer is not None else ""
        return f"type {self.name} {definition}"

    def field(self, name: str) -> StructField | None:
        return next((f for f in self.fields if f.name == name), None)


class Method(_Record):
    name: str
    comment: str = ""
    inputs: list[Arg] = Field(default=[], alias="In")
    outputs: list[Arg] = Field(default=[], alias="Out")

    @property
    def has_input(self) -> bool:
        return len(self.inputs) > 0

    @property
    def has_output(self) -> bool:
        return len(self.outputs) > 0

    def error_outputs(self) -> list[Arg]:
        return [arg for arg in self.outputs if arg.is_error]

    def non_error_outputs(self) -> list[Arg]:
        return [arg for arg in self.outputs if not arg.is_error]


class Interface(_Record):
    name: str
    comment: str = ""
    methods: list[Method] = []
    definition: TypeExpr | None = Field(default=None, exclude=True)

    def method(self, name: str) -> Method | None:
        return next((m for m in self.methods if m.name == name), None)


class GoFile(_Record):
    """The extracted model of one Go source file.

    Everything except the sibling cache is fixed once the file is scanned.
    Files compare by identity.
    """

    package: str
    comment: str = ""
    import_path: str | None = Field(default=None, alias="Import")
    imports: dict[str, str] = {}
    values: list[Value] = []
    interfaces: list[Interface] = []
    structs: list[Struct] = []
    _printer: Printer | None = PrivateAttr(default=None)
    _location: Path | None = PrivateAttr(default=None)
    _siblings: "list[GoFile] | None" = PrivateAttr(default=None)

    def __init__(self, printer: Printer | None = None, location: str | Path | None = None, **data: Any) -> None:
        super().__init__(**data)
        self._printer = printer
        self._location = Path(location) if location is not None else None
        for struct in self.structs:
            struct._file = self

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    @property
    def printer(self) -> Printer | None:
        return self._printer

    @property
    def location(self) -> Path | None:
        return self._location

    @property
    def directory(self) -> Path | None:
        return self._location.parent if self._location is not None else None

    @property
    def siblings(self) -> "list[GoFile] | None":
        """Other files of the same directory, or None until a local lookup scanned them."""
        return self._siblings

    def set_siblings(self, siblings: "list[GoFile]") -> None:
        if self._siblings is None:
            self._siblings = list(siblings)

    def struct(self, name: str) -> Struct | None:
        return next((s for s in self.structs if s.name == name), None)

    def interface(self, name: str) -> Interface | None:
        return next((i for i in self.interfaces if i.name == name), None)

    def value(self, name: str) -> Value | None:
        return next((v for v in self.values if v.name == name), None)

    def with_imports(self, *paths: str) -> dict[str, str]:
        merged = dict(self.imports)
        for path in paths:
            merged[path.strip('"')] = ""
        return merged

    def extract_type(self, name: "str | Arg | TypeExpr", session: "ResolutionSession | None" = None) -> Struct:
        from astools.core.resolver import ResolutionSession

        active = session if session is not None else ResolutionSession()
        return active.extract_type(self, name)

from tree_sitter import Node

from astools.models import PrimitiveKind, TypeExpr, TypeKind

ERROR_IDENTIFIER = "error"

_PRIMITIVES: dict[str, PrimitiveKind] = {
    **dict.fromkeys(
        (
            "byte",
            "rune",
            "int",
            "int8",
            "int16",
            "int32",
            "int64",
            "uint",
            "uint8",
            "uint16",
            "uint32",
            "uint64",
            "uintptr",
        ),
        PrimitiveKind.INTEGER,
    ),
    "float32": PrimitiveKind.FLOAT,
    "float64": PrimitiveKind.FLOAT,
    "string": PrimitiveKind.STRING,
    "bool": PrimitiveKind.BOOLEAN,
}

_SIMPLE_KINDS = {
    "function_type": TypeKind.FUNC,
    "struct_type": TypeKind.STRUCT,
    "interface_type": TypeKind.INTERFACE,
}


def primitive_kind(name: str) -> PrimitiveKind | None:
    return _PRIMITIVES.get(name)


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _type_children(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type != "comment"]


def classify_type(node: Node) -> TypeExpr:
    """Build the classified descriptor of a type expression node and its inner layers."""
    kind = node.type
    span = {"start_byte": node.start_byte, "end_byte": node.end_byte}

    if kind == "type_identifier":
        name = _text(node)
        if name == ERROR_IDENTIFIER:
            return TypeExpr(kind=TypeKind.ERROR, name=name, **span)
        primitive = primitive_kind(name)
        if primitive is not None:
            return TypeExpr(kind=TypeKind.PRIMITIVE, name=name, primitive=primitive, **span)
        return TypeExpr(kind=TypeKind.NAMED, name=name, **span)

    if kind == "qualified_type":
        return TypeExpr(
            kind=TypeKind.QUALIFIED,
            name=_text(node.child_by_field_name("name")),
            package=_text(node.child_by_field_name("package")),
            **span,
        )

    if kind == "pointer_type":
        inner = _type_children(node)
        return TypeExpr(kind=TypeKind.POINTER, elem=classify_type(inner[0]) if inner else None, **span)

    if kind == "slice_type":
        return TypeExpr(kind=TypeKind.SLICE, elem=_classify_field(node, "element"), **span)

    if kind in ("array_type", "implicit_length_array_type"):
        return TypeExpr(kind=TypeKind.ARRAY, elem=_classify_field(node, "element"), **span)

    if kind == "map_type":
        return TypeExpr(
            kind=TypeKind.MAP,
            key=_classify_field(node, "key"),
            elem=_classify_field(node, "value"),
            **span,
        )

    if kind == "generic_type":
        base = _classify_field(node, "type")
        return TypeExpr(
            kind=TypeKind.GENERIC,
            name=base.name if base is not None else "",
            package=base.package if base is not None else "",
            elem=base,
            **span,
        )

    if kind == "parenthesized_type":
        inner = _type_children(node)
        return TypeExpr(kind=TypeKind.PARENTHESIZED, elem=classify_type(inner[0]) if inner else None, **span)

    if kind == "channel_type":
        return TypeExpr(kind=TypeKind.CHANNEL, elem=_classify_field(node, "value"), **span)

    return TypeExpr(kind=_SIMPLE_KINDS.get(kind, TypeKind.OTHER), **span)


def _classify_field(node: Node, field: str) -> TypeExpr | None:
    child = node.child_by_field_name(field)
    return classify_type(child) if child is not None else None


def pointer_to(star: Node, target: Node) -> TypeExpr:
    """Descriptor for ``*T`` written as two sibling tokens, as in embedded struct fields."""
    return TypeExpr(
        kind=TypeKind.POINTER,
        start_byte=star.start_byte,
        end_byte=target.end_byte,
        elem=classify_type(target),
    )


def variadic(ellipsis: Node, target: Node) -> TypeExpr:
    return TypeExpr(
        kind=TypeKind.VARIADIC,
        start_byte=ellipsis.start_byte,
        end_byte=target.end_byte,
        elem=classify_type(target),
    )


def type_name(expr: TypeExpr | None) -> tuple[str, str]:
    """Return (package alias, name) of a named type, looking through pointers and type arguments."""
    while expr is not None and expr.kind in (TypeKind.POINTER, TypeKind.PARENTHESIZED, TypeKind.GENERIC):
        if expr.kind is TypeKind.GENERIC and expr.elem is None:
            return expr.package, expr.name
        expr = expr.elem
    if expr is None:
        return "", ""
    return expr.package, expr.name

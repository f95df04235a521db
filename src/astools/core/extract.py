import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tree_sitter import Node

from astools.core.printer import Printer
from astools.core.types import classify_type, pointer_to, variadic
from astools.models import Arg, Interface, Method, Span, Struct, StructField, Value

logger = logging.getLogger(__name__)

_GROUP_DECLARATIONS = frozenset({"type_declaration", "const_declaration", "var_declaration"})
_SPEC_LISTS = frozenset({"type_spec_list", "const_spec_list", "var_spec_list"})
_TYPE_SPECS = frozenset({"type_spec", "type_alias"})
_VALUE_SPECS = frozenset({"const_spec", "var_spec"})
_METHOD_ELEMS = frozenset({"method_elem", "method_spec"})
_PARAMETERS = frozenset({"parameter_declaration", "variadic_parameter_declaration"})
_SPEC_NODES = _TYPE_SPECS | _VALUE_SPECS | _SPEC_LISTS


@dataclass
class Declarations:
    structs: list[Struct] = field(default_factory=list)
    interfaces: list[Interface] = field(default_factory=list)
    values: list[Value] = field(default_factory=list)


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _specs(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type in _SPEC_NODES]


def _is_grouped(declaration: Node) -> bool:
    return any(c.type == "(" or c.type in _SPEC_LISTS for c in declaration.children)


def extract_declarations(printer: Printer, declarations: Iterable[Node]) -> Declarations:
    """Collect named structs, interfaces and package-level values in source order.

    Declarations are walked with an explicit work list. A declaration group's
    comment is attached to the types and values found inside it unless a spec
    inside a parenthesized group carries its own comment.
    """
    result = Declarations()
    stack: list[tuple[Node, str, bool]] = [(decl, "", False) for decl in reversed(list(declarations))]

    while stack:
        node, last_comment, grouped = stack.pop()

        if node.type in _GROUP_DECLARATIONS:
            comment = printer.comment_text(node)
            inner_grouped = _is_grouped(node)
            stack.extend((spec, comment, inner_grouped) for spec in reversed(_specs(node)))
            continue

        if node.type in _SPEC_LISTS:
            stack.extend((spec, last_comment, True) for spec in reversed(_specs(node)))
            continue

        comment = last_comment
        if grouped:
            comment = printer.comment_text(node) or last_comment

        if node.type in _TYPE_SPECS:
            _extract_type_spec(printer, node, comment, result)
        elif node.type in _VALUE_SPECS:
            result.values.extend(_extract_values(printer, node, comment))

    return result


def _extract_type_spec(printer: Printer, spec: Node, comment: str, result: Declarations) -> None:
    name = _text(spec.child_by_field_name("name"))
    type_node = spec.child_by_field_name("type")
    if not name or type_node is None:
        logger.warning("Skipping malformed type declaration at byte %d", spec.start_byte)
        return

    if type_node.type == "struct_type":
        result.structs.append(
            Struct(
                printer,
                name=name,
                comment=comment,
                fields=struct_fields(printer, type_node),
                definition=classify_type(type_node),
            )
        )
    elif type_node.type == "interface_type":
        result.interfaces.append(
            Interface(
                name=name,
                comment=comment,
                methods=interface_methods(printer, type_node),
                definition=classify_type(type_node),
            )
        )


def struct_fields(printer: Printer, struct_node: Node) -> list[StructField]:
    body = next((c for c in struct_node.named_children if c.type == "field_declaration_list"), None)
    if body is None:
        return []

    fields: list[StructField] = []
    declarations = [c for c in body.named_children if c.type == "field_declaration"]
    for index, decl in enumerate(declarations):
        type_node = decl.child_by_field_name("type")
        if type_node is None:
            logger.warning("Skipping struct field without a type at byte %d", decl.start_byte)
            continue
        names = decl.children_by_field_name("name")
        star = next((c for c in decl.children if c.type == "*"), None)
        type_expr = pointer_to(star, type_node) if star is not None and not names else classify_type(type_node)
        comment = printer.comment_text(decl)
        tag = _text(decl.child_by_field_name("tag"))

        if names:
            for name in names:
                fields.append(StructField(printer, name=_text(name), type=type_expr, comment=comment, tag=tag))
        else:
            fields.append(StructField(printer, name=f"arg{index}", type=type_expr, comment=comment, tag=tag))
    return fields


def interface_methods(printer: Printer, interface_node: Node) -> list[Method]:
    methods: list[Method] = []
    for elem in interface_node.named_children:
        # embedded interfaces and type constraints are not flattened
        if elem.type not in _METHOD_ELEMS:
            continue
        methods.append(as_method(printer, elem))
    return methods


def as_method(printer: Printer, elem: Node) -> Method:
    params = elem.child_by_field_name("parameters")
    result = elem.child_by_field_name("result")

    outputs: list[Arg] = []
    if result is not None and result.type == "parameter_list":
        outputs = parameters(printer, result, "ret")
    elif result is not None:
        outputs = [Arg(printer, name="ret0", type=classify_type(result))]

    return Method(
        name=_text(elem.child_by_field_name("name")),
        comment=printer.comment_text(elem),
        inputs=parameters(printer, params, "arg") if params is not None else [],
        outputs=outputs,
    )


def parameters(printer: Printer, param_list: Node, prefix: str) -> list[Arg]:
    args: list[Arg] = []
    declarations = [c for c in param_list.named_children if c.type in _PARAMETERS]
    for index, decl in enumerate(declarations):
        type_node = decl.child_by_field_name("type")
        if type_node is None:
            logger.warning("Skipping parameter without a type at byte %d", decl.start_byte)
            continue
        ellipsis = next((c for c in decl.children if c.type == "..."), None)
        type_expr = variadic(ellipsis, type_node) if ellipsis is not None else classify_type(type_node)
        comment = printer.comment_text(decl)
        names = decl.children_by_field_name("name")
        if names:
            args.extend(Arg(printer, name=_text(n), type=type_expr, comment=comment) for n in names)
        else:
            args.append(Arg(printer, name=f"{prefix}{index}", type=type_expr, comment=comment))
    return args


def _extract_values(printer: Printer, spec: Node, comment: str) -> list[Value]:
    names = [n for n in spec.children_by_field_name("name") if n.type == "identifier"]
    if not names or spec.has_error:
        logger.warning("Skipping malformed value declaration at byte %d", spec.start_byte)
        return []

    type_node = spec.child_by_field_name("type")
    type_expr = classify_type(type_node) if type_node is not None else None
    value_list = spec.child_by_field_name("value")
    expressions = [c for c in value_list.named_children if c.type != "comment"] if value_list is not None else []

    values: list[Value] = []
    for index, name in enumerate(names):
        text = _text(name)
        if text == "_":
            continue
        initializer = expressions[index] if index < len(expressions) else None
        values.append(
            Value(
                printer,
                name=text,
                type=type_expr,
                comment=comment,
                value=Span(start_byte=initializer.start_byte, end_byte=initializer.end_byte)
                if initializer is not None
                else None,
            )
        )
    return values


def extract_imports(root: Node) -> dict[str, str]:
    imports: dict[str, str] = {}
    stack = [c for c in reversed(root.named_children) if c.type == "import_declaration"]
    while stack:
        node = stack.pop()
        if node.type in ("import_declaration", "import_spec_list"):
            stack.extend(c for c in reversed(node.named_children) if c.type in ("import_spec", "import_spec_list"))
            continue
        path = _text(node.child_by_field_name("path")).strip('"`')
        if not path:
            continue
        imports[path] = _text(node.child_by_field_name("name"))
    return imports


def package_clause(root: Node) -> Node | None:
    return next((c for c in root.named_children if c.type == "package_clause"), None)


def package_name(root: Node) -> str:
    clause = package_clause(root)
    if clause is None:
        return ""
    return _text(next((c for c in clause.named_children if c.type == "package_identifier"), None))

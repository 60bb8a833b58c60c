"""Lower component source (JSX/TSX/TS) into script text the browser can load as an ES module.

The transform is a single recursive re-emission of the tree-sitter syntax
tree: untouched regions are copied byte for byte, JSX nodes become
``__jsx(type, props, ...children)`` calls against the UI runtime, and
TypeScript-only syntax is erased. Import and export statements keep their
module semantics; only their specifier strings may be rewritten so the
browser's import map can resolve them.
"""

import html
import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from tree_sitter import Node

from uigen.exceptions import TransformFailure
from uigen.preview.parsing import ParsedSource, SourceParser, iter_imports

logger = logging.getLogger(__name__)

JSX_FACTORY = "__jsx"
JSX_FRAGMENT = "__Fragment"
RUNTIME_PRELUDE = (
    f'import {{ createElement as {JSX_FACTORY}, Fragment as {JSX_FRAGMENT} }} from "react";\n'
)

DROP_IMPORT = ""        # rewrite() result that removes the whole import statement

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Nodes that exist only in the type system and vanish entirely.
_ERASED = frozenset({
    "type_annotation", "type_arguments", "type_parameters", "interface_declaration",
    "type_alias_declaration", "ambient_declaration", "implements_clause",
    "accessibility_modifier", "override_modifier", "function_signature",
    "abstract_method_signature", "index_signature", "asserts_annotation",
    "type_predicate_annotation", "opting_type_annotation", "omitting_type_annotation",
})

# Wrappers whose runtime value is their first named child.
_UNWRAPPED = frozenset({"as_expression", "satisfies_expression", "non_null_expression"})

# Modifier tokens dropped inside these parents.
_MODIFIER_PARENTS = frozenset({
    "public_field_definition", "required_parameter", "optional_parameter",
    "method_definition", "class_declaration", "abstract_class_declaration",
})
_MODIFIER_TOKENS = frozenset({"readonly", "declare", "abstract", "?", "!"})


@dataclass
class TransformResult:
    path: str
    code: str
    has_jsx: bool


class SourceTransformer:
    """Turns one module's source into browser-executable ES module text.

    Usage:
        transformer = SourceTransformer()
        result = transformer.transform("/App.jsx", source, rewrite={"./Button": "@/Button.jsx"}.get)
    """

    def __init__(self, parser: Optional[SourceParser] = None):
        self.parser = parser or SourceParser()

    def transform(
        self,
        path: str,
        source: str,
        rewrite: Optional[Callable[[str], Optional[str]]] = None,
    ) -> TransformResult:
        """Transform ``source``.

        Args:
            path: Module path; selects the grammar and labels diagnostics
            source: Module text
            rewrite: Maps a specifier to its replacement; ``None`` keeps it,
                ``DROP_IMPORT`` removes the importing statement

        Raises:
            TransformFailure: if the source does not parse
        """
        parsed = self.parser.parse(path, source)
        parsed.raise_for_errors()
        emitter = _Emitter(parsed, rewrite)
        body = emitter.emit(parsed.root)
        code = RUNTIME_PRELUDE + body if emitter.has_jsx else body
        return TransformResult(path=path, code=code, has_jsx=emitter.has_jsx)


class _Emitter:
    """Re-emits a syntax tree with JSX lowered and types erased."""

    def __init__(self, parsed: ParsedSource, rewrite: Optional[Callable[[str], Optional[str]]]):
        self.parsed = parsed
        self.src = parsed.source
        self.has_jsx = False
        self._sources: dict[int, str] = {}     # string node start_byte → replacement literal
        self._dropped: set[int] = set()         # statement start_bytes to remove
        self._insertions: dict[tuple, str] = {}   # (start, end, type) of a node → text emitted right after it
        if rewrite is not None:
            for record in iter_imports(parsed):
                target = rewrite(record.specifier)
                if target is None:
                    continue
                if target == DROP_IMPORT and record.kind != "dynamic":
                    self._dropped.add(record.statement.start_byte)
                elif target != DROP_IMPORT:
                    self._sources[record.source_node.start_byte] = json.dumps(target)

    def text(self, node: Node) -> str:
        return self.src[node.start_byte:node.end_byte].decode("utf-8")

    # ── Generic re-emission ───────────────────────────────────────────────────

    def emit(self, node: Node) -> str:
        kind = node.type
        if kind in _ERASED:
            return ""
        if kind in _UNWRAPPED:
            return self.emit(node.named_children[0])
        if kind == "type_assertion":       # <T>value (plain .ts only)
            return self.emit(node.named_children[-1])
        if kind in ("jsx_element", "jsx_self_closing_element"):
            self.has_jsx = True
            return self.emit_element(node)
        if kind == "import_statement":
            return self.emit_import(node)
        if kind == "export_statement":
            return self.emit_export(node)
        if kind == "string" and node.start_byte in self._sources:
            return self._sources[node.start_byte]
        if kind == "enum_declaration":
            return self.emit_enum(node)
        if kind == "method_definition":
            self.plan_parameter_properties(node)
        if not node.children:
            return self.text(node)

        skip_modifiers = kind in _MODIFIER_PARENTS
        out = []
        cursor = node.start_byte
        for child in node.children:
            out.append(self.src[cursor:child.start_byte].decode("utf-8"))
            if skip_modifiers and not child.is_named and child.type in _MODIFIER_TOKENS:
                pass
            else:
                out.append(self.emit(child))
            out.append(self._insertions.pop((child.start_byte, child.end_byte, child.type), ""))
            cursor = child.end_byte
        out.append(self.src[cursor:node.end_byte].decode("utf-8"))
        return "".join(out)

    # ── Modules ───────────────────────────────────────────────────────────────

    def emit_import(self, node: Node) -> str:
        if node.start_byte in self._dropped or _keyword_after(node, "type", "typeof"):
            return ""
        clause = next((c for c in node.children if c.type == "import_clause"), None)
        named = None
        if clause is not None:
            named = next((c for c in clause.children if c.type == "named_imports"), None)
        if named is None or not any(_has_type_keyword(s) for s in named.named_children):
            return self._emit_children(node)

        kept = [self.text(s) for s in named.named_children
                if s.type == "import_specifier" and not _has_type_keyword(s)]
        others = [self.emit(c) for c in clause.children if c.type not in ("named_imports", ",")]
        source = node.child_by_field_name("source")
        parts = others + ([f"{{ {', '.join(kept)} }}"] if kept else [])
        if not parts:
            return f"import {self.emit(source)};"
        return f"import {', '.join(parts)} from {self.emit(source)};"

    def emit_export(self, node: Node) -> str:
        if node.start_byte in self._dropped or _keyword_after(node, "type"):
            return ""
        declaration = node.child_by_field_name("declaration")
        if declaration is not None and declaration.type in _ERASED:
            return ""
        clause = next((c for c in node.children if c.type == "export_clause"), None)
        if clause is not None and any(_has_type_keyword(s) for s in clause.named_children):
            kept = [self.text(s) for s in clause.named_children
                    if s.type == "export_specifier" and not _has_type_keyword(s)]
            source = node.child_by_field_name("source")
            tail = f" from {self.emit(source)}" if source is not None else ""
            return f"export {{ {', '.join(kept)} }}{tail};"
        return self._emit_children(node)

    def _emit_children(self, node: Node) -> str:
        out = []
        cursor = node.start_byte
        for child in node.children:
            out.append(self.src[cursor:child.start_byte].decode("utf-8"))
            out.append(self.emit(child))
            cursor = child.end_byte
        out.append(self.src[cursor:node.end_byte].decode("utf-8"))
        return "".join(out)

    def emit_enum(self, node: Node) -> str:
        """``enum Color { Red, Green = 4 }`` → frozen object with auto-numbered members."""
        name = self.text(node.child_by_field_name("name"))
        body = node.child_by_field_name("body")
        members = []
        counter = 0
        numeric = True
        for member in body.named_children:
            if member.type == "enum_assignment":
                key = self.text(member.child_by_field_name("name"))
                value_node = member.child_by_field_name("value")
                value = self.emit(value_node)
                numeric = value_node.type == "number"
                if numeric:
                    try:
                        counter = int(value, 0) + 1
                    except ValueError:
                        counter = float(value) + 1
            elif member.type in ("property_identifier", "string"):
                key = self.text(member)
                if not numeric:
                    raise TransformFailure(
                        f"Enum member {key} in {name} needs an initializer",
                        path=self.parsed.path, line=member.start_point[0] + 1,
                    )
                value = str(counter)
                counter += 1
            else:
                continue
            members.append(f"{key}: {value}")
        # an enclosing export_statement keeps its own "export " prefix
        return f"const {name} = Object.freeze({{ {', '.join(members)} }});"

    # ── Classes ───────────────────────────────────────────────────────────────

    def plan_parameter_properties(self, method: Node) -> None:
        """Schedule ``this.x = x;`` for each ``constructor(public x)`` style parameter.

        The assignments go at the top of the body, or right after a leading
        ``super(...)`` call in derived classes.
        """
        name = method.child_by_field_name("name")
        parameters = method.child_by_field_name("parameters")
        body = method.child_by_field_name("body")
        if name is None or self.text(name) != "constructor" or parameters is None or body is None:
            return

        assigned = []
        for parameter in parameters.named_children:
            if parameter.type not in ("required_parameter", "optional_parameter"):
                continue
            if not any(_is_property_modifier(c) for c in parameter.children):
                continue
            pattern = parameter.child_by_field_name("pattern")
            if pattern is None or pattern.type != "identifier":
                raise TransformFailure(
                    "Parameter properties must be plain identifiers",
                    path=self.parsed.path, line=parameter.start_point[0] + 1,
                    column=parameter.start_point[1] + 1,
                )
            assigned.append(self.text(pattern))
        if not assigned:
            return

        assignments = "".join(f" this.{n} = {n};" for n in assigned)
        first = next((c for c in body.named_children if c.type != "comment"), None)
        if first is not None and _is_super_call(first):
            separator = "" if self.text(first).rstrip().endswith(";") else ";"
            self._insertions[(first.start_byte, first.end_byte, first.type)] = separator + assignments
        else:
            brace = body.children[0]
            self._insertions[(brace.start_byte, brace.end_byte, brace.type)] = assignments

    # ── JSX ───────────────────────────────────────────────────────────────────

    def emit_element(self, node: Node) -> str:
        children: list[str] = []
        if node.type == "jsx_self_closing_element":
            opening = node
        else:
            opening = node.child_by_field_name("open_tag")
            closing = node.child_by_field_name("close_tag")
            end = closing.start_byte if closing is not None else node.end_byte
            children = self.emit_children(
                [c for c in node.children if c.start_byte >= opening.end_byte and c.end_byte <= end],
                opening.end_byte, end,
            )

        name = opening.child_by_field_name("name")
        element_type = JSX_FRAGMENT if name is None else self.element_type(name)
        props = self.emit_props(opening.children_by_field_name("attribute"))
        args = [element_type, props] + children
        return f"{JSX_FACTORY}({', '.join(args)})"

    def element_type(self, name: Node) -> str:
        raw = self.text(name)
        if name.type == "jsx_namespace_name" or "-" in raw:
            return json.dumps(raw)
        if name.type == "identifier" and raw[:1].islower():
            return json.dumps(raw)
        return raw

    def emit_props(self, attributes: list[Node]) -> str:
        parts = []
        for attribute in attributes:
            if attribute.type == "jsx_expression":
                inner = _expression_child(attribute)
                if inner is not None:
                    parts.append(self.emit(inner))          # spread_element → "...expr"
                continue
            key_node = attribute.children[0]
            key = self.text(key_node)
            key = key if _IDENTIFIER_RE.match(key) else json.dumps(key)
            value_node = attribute.children[-1] if len(attribute.children) > 1 else None
            parts.append(f"{key}: {self.attribute_value(value_node)}")
        return f"{{ {', '.join(parts)} }}" if parts else "null"

    def attribute_value(self, node: Optional[Node]) -> str:
        if node is None:
            return "true"
        if node.type == "string":
            return json.dumps(html.unescape(self.text(node)[1:-1]))
        if node.type == "jsx_expression":
            inner = _expression_child(node)
            return self.emit(inner) if inner is not None else "true"
        return self.emit(node)

    def emit_children(self, children: list[Node], start: int, end: int) -> list[str]:
        """Lower the children between ``start`` and ``end``.

        Text is taken from the raw bytes between expression and element
        children, since the grammar leaves surrounding whitespace out of
        ``jsx_text`` nodes.
        """
        out = []

        def text_run(a: int, b: int) -> None:
            if b > a:
                cleaned = clean_jsx_text(self.src[a:b].decode("utf-8"))
                if cleaned:
                    out.append(json.dumps(html.unescape(cleaned)))

        cursor = start
        for child in children:
            if child.type not in ("jsx_expression", "jsx_element", "jsx_self_closing_element"):
                continue
            text_run(cursor, child.start_byte)
            cursor = child.end_byte
            if child.type == "jsx_expression":
                inner = _expression_child(child)
                if inner is not None:
                    out.append(self.emit(inner))
            else:
                out.append(self.emit_element(child))
        text_run(cursor, end)
        return out


def clean_jsx_text(raw: str) -> str:
    """Collapse JSX text the way React compilers do.

    Lines are split, tabs become spaces, every line but the first loses its
    leading spaces and every line but the last its trailing spaces; empty
    lines are dropped and the rest are joined with single spaces.
    """
    lines = re.split(r"\r\n|\n|\r", raw)
    last_non_empty = max((i for i, line in enumerate(lines) if line.strip(" \t")), default=-1)
    out = []
    for i, line in enumerate(lines):
        trimmed = line.replace("\t", " ")
        if i != 0:
            trimmed = trimmed.lstrip(" ")
        if i != len(lines) - 1:
            trimmed = trimmed.rstrip(" ")
        if trimmed:
            if i != last_non_empty:
                trimmed += " "
            out.append(trimmed)
    return "".join(out)


def _expression_child(node: Node) -> Optional[Node]:
    """The expression inside ``{...}``, ignoring comments; None when empty."""
    return next((c for c in node.named_children if c.type != "comment"), None)


def _keyword_after(statement: Node, *keywords: str) -> bool:
    children = statement.children
    return len(children) > 1 and children[1].type in keywords


def _has_type_keyword(specifier: Node) -> bool:
    return any(not c.is_named and c.type == "type" for c in specifier.children)


def _is_property_modifier(node: Node) -> bool:
    if node.type in ("accessibility_modifier", "override_modifier"):
        return True
    return not node.is_named and node.type == "readonly"


def _is_super_call(statement: Node) -> bool:
    if statement.type != "expression_statement" or not statement.named_children:
        return False
    call = statement.named_children[0]
    function = call.child_by_field_name("function") if call.type == "call_expression" else None
    return function is not None and function.type == "super"

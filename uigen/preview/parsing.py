"""tree-sitter front end shared by the module resolver and the source transformer.

Component sources (.jsx/.tsx/.js) are parsed with the TSX grammar, plain
TypeScript (.ts) with the TypeScript grammar so ``<T>value`` assertions parse.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from uigen.exceptions import TransformFailure
from uigen.vfs.paths import split_extension

logger = logging.getLogger(__name__)

TSX_LANGUAGE = Language(tstypescript.language_tsx())
TS_LANGUAGE = Language(tstypescript.language_typescript())

SCRIPT_EXTENSIONS = (".jsx", ".tsx", ".js", ".ts")
COMPONENT_EXTENSIONS = (".jsx", ".tsx")
STYLE_EXTENSIONS = (".css",)


def is_script(path: str) -> bool:
    return split_extension(path)[1] in SCRIPT_EXTENSIONS


def is_stylesheet(path: str) -> bool:
    return split_extension(path)[1] in STYLE_EXTENSIONS


@dataclass
class ImportRecord:
    """One module specifier found in a source file."""
    specifier: str
    kind: str                   # "import" | "side_effect" | "reexport" | "dynamic"
    source_node: Node           # the string literal holding the specifier
    statement: Node             # enclosing import/export statement or call expression


@dataclass
class ParsedSource:
    path: str
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def first_error(self) -> Optional[Node]:
        """Outermost-first search for an ERROR or MISSING node."""
        if not self.root.has_error:
            return None
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node
            stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
        return self.root

    def raise_for_errors(self) -> None:
        """Raise TransformFailure pointing at the first syntax error, if any."""
        node = self.first_error()
        if node is None:
            return
        line, column = node.start_point[0] + 1, node.start_point[1] + 1
        snippet = self.text(node).split("\n", 1)[0][:40]
        what = f"missing {node.type}" if node.is_missing else f"unexpected {snippet!r}"
        raise TransformFailure(
            f"Syntax error at {line}:{column}: {what}",
            path=self.path, line=line, column=column,
        )


class SourceParser:
    """Owns one parser per grammar. Parsers are not shared across threads."""

    def __init__(self):
        self._tsx = Parser(TSX_LANGUAGE)
        self._ts = Parser(TS_LANGUAGE)

    def parse(self, path: str, source: str) -> ParsedSource:
        parser = self._ts if split_extension(path)[1] == ".ts" else self._tsx
        data = source.encode("utf-8")
        return ParsedSource(path=path, source=data, tree=parser.parse(data))


def iter_imports(parsed: ParsedSource) -> Iterator[ImportRecord]:
    """Yield every static, re-export and literal dynamic import in source order.

    Type-only imports and exports are skipped: they vanish at transform time.
    """
    stack = [parsed.root]
    while stack:
        node = stack.pop()
        if node.type == "import_statement":
            source = node.child_by_field_name("source")
            if source is not None and not _is_type_only(node):
                has_clause = any(c.type == "import_clause" for c in node.children)
                yield ImportRecord(
                    specifier=_string_value(parsed, source),
                    kind="import" if has_clause else "side_effect",
                    source_node=source,
                    statement=node,
                )
            continue
        if node.type == "export_statement":
            source = node.child_by_field_name("source")
            if source is not None and not _is_type_only(node):
                yield ImportRecord(
                    specifier=_string_value(parsed, source),
                    kind="reexport",
                    source_node=source,
                    statement=node,
                )
                continue
        if node.type == "call_expression":
            function = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            if function is not None and function.type == "import" and arguments is not None:
                literal = next((a for a in arguments.named_children if a.type == "string"), None)
                if literal is not None:
                    yield ImportRecord(
                        specifier=_string_value(parsed, literal),
                        kind="dynamic",
                        source_node=literal,
                        statement=node,
                    )
        stack.extend(reversed(node.children))


def _string_value(parsed: ParsedSource, node: Node) -> str:
    return parsed.text(node)[1:-1]


def _is_type_only(statement: Node) -> bool:
    """``import type ...`` / ``export type ...`` (the keyword directly follows)."""
    children = statement.children
    return len(children) > 1 and children[1].type in ("type", "typeof")

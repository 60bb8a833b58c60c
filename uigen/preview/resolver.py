"""Module graph resolution over a VFS snapshot.

Starting from the entry module, every reachable import is resolved to a file
path: alias prefix substitution, then relative resolution against the
importing file, then extension and ``index`` probing. Anything that does not
resolve becomes a GraphError on the graph; the walk never aborts.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Mapping, Optional

from uigen.config import config as _default_config
from uigen.preview.parsing import SourceParser, is_script, is_stylesheet, iter_imports
from uigen.types import GraphError, GraphErrorKind
from uigen.vfs.paths import join_path, normalize_path, parent_path

logger = logging.getLogger(__name__)

PROBE_EXTENSIONS = (".jsx", ".tsx", ".js", ".ts")
_URL_PREFIXES = ("http://", "https://", "data:", "blob:")


@dataclass
class ModuleGraph:
    """Reachable modules of one preview build plus what went wrong finding them."""
    entry: str
    modules: list[str] = field(default_factory=list)          # script paths, discovery order
    stylesheets: list[str] = field(default_factory=list)      # stylesheet paths, discovery order
    edges: dict[str, dict[str, str]] = field(default_factory=dict)  # importer → {specifier: path}
    packages: list[str] = field(default_factory=list)         # bare runtime specifiers, first-use order
    alias_forms: dict[str, set[str]] = field(default_factory=dict)  # path → alias specifiers used
    errors: list[GraphError] = field(default_factory=list)

    def imports_of(self, path: str) -> dict[str, str]:
        return self.edges.get(path, {})


class ModuleResolver:
    """Computes the transitive module graph of a file snapshot.

    Args:
        files: ``{path: content}`` snapshot; never mutated
        alias: Specifier prefix that maps to the project root
    """

    def __init__(
        self,
        files: Mapping[str, str],
        alias: Optional[str] = None,
        parser: Optional[SourceParser] = None,
    ):
        self.files = files
        self.alias = alias or _default_config.preview_alias
        self.parser = parser or SourceParser()

    def is_bare(self, specifier: str) -> bool:
        return not specifier.startswith((".", "/", self.alias))

    def resolve_specifier(self, specifier: str, importer: str) -> Optional[str]:
        """Resolve one specifier as written in ``importer``; None if no file matches."""
        if specifier.startswith(self.alias):
            base = "/" + specifier[len(self.alias):]
        elif specifier.startswith("/"):
            base = specifier
        else:
            base = join_path(parent_path(importer) or "/", specifier)
        base = normalize_path(base)

        if base in self.files:
            return base
        for ext in PROBE_EXTENSIONS:
            if base + ext in self.files:
                return base + ext
        for ext in PROBE_EXTENSIONS:
            index = f"{base.rstrip('/')}/index{ext}"
            if index in self.files:
                return index
        return None

    def resolve(self, entry: str) -> ModuleGraph:
        graph = ModuleGraph(entry=entry)
        if entry not in self.files:
            graph.errors.append(GraphError(
                kind=GraphErrorKind.UNRESOLVED_IMPORT, path=entry, specifier=entry,
                message=f"Entry module '{entry}' does not exist",
            ))
            return graph

        seen = {entry}
        queue = deque([entry])
        while queue:
            path = queue.popleft()
            graph.modules.append(path)
            edges = graph.edges.setdefault(path, {})
            parsed = self.parser.parse(path, self.files[path])

            for record in iter_imports(parsed):
                specifier = record.specifier
                if specifier.startswith(_URL_PREFIXES):
                    continue
                if self.is_bare(specifier):
                    if specifier not in graph.packages:
                        graph.packages.append(specifier)
                    continue

                target = self.resolve_specifier(specifier, path)
                if target is None:
                    graph.errors.append(GraphError(
                        kind=GraphErrorKind.UNRESOLVED_IMPORT, path=path, specifier=specifier,
                        message=f"Cannot resolve import '{specifier}'",
                    ))
                    continue
                if is_stylesheet(target):
                    edges[specifier] = target
                    if target not in graph.stylesheets:
                        graph.stylesheets.append(target)
                    continue
                if not is_script(target):
                    graph.errors.append(GraphError(
                        kind=GraphErrorKind.UNRESOLVED_IMPORT, path=path, specifier=specifier,
                        message=f"Unsupported file type for import '{specifier}' ({target})",
                    ))
                    continue

                edges[specifier] = target
                if specifier.startswith(self.alias):
                    graph.alias_forms.setdefault(target, set()).add(specifier)
                if target not in seen:
                    seen.add(target)
                    queue.append(target)

        logger.debug(
            f"[Preview] Resolved {len(graph.modules)} modules from {entry} "
            f"({len(graph.errors)} unresolved)"
        )
        return graph

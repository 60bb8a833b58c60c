"""Import map synthesis: graph → transformed modules → resource handles → import map.

Every module is keyed under its absolute path, its canonical alias form
(``@/components/Button.jsx``) and each alias-qualified specifier an importer
actually wrote. Relative specifiers are rewritten to the canonical alias
form during transformation because bare-looking keys are matched verbatim by
the browser, whatever URL the importing module was loaded from.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from uigen.config import UIGenConfig, config as _default_config
from uigen.exceptions import TransformFailure
from uigen.preview.parsing import SourceParser, is_stylesheet, iter_imports
from uigen.preview.resolver import ModuleGraph, ModuleResolver
from uigen.preview.resources import ResourceHandle, ResourceRegistry
from uigen.preview.transformer import DROP_IMPORT, SourceTransformer
from uigen.types import GraphError, GraphErrorKind
from uigen.vfs.paths import join_path, normalize_path, parent_path

logger = logging.getLogger(__name__)


@dataclass
class ImportMapResult:
    import_map: dict[str, dict[str, str]]
    styles: str
    errors: list[GraphError]
    graph: ModuleGraph
    handles: list[ResourceHandle] = field(default_factory=list)


def canonical_specifier(path: str, alias: str) -> str:
    """``/components/Button.jsx`` → ``@/components/Button.jsx``."""
    return alias + path.lstrip("/")


def create_import_map(
    files: Mapping[str, str],
    entry: str,
    registry: ResourceRegistry,
    generation: int = 0,
    config: Optional[UIGenConfig] = None,
    parser: Optional[SourceParser] = None,
) -> ImportMapResult:
    """Resolve, transform and materialize every module reachable from ``entry``.

    Transform failures are isolated to their file: the module is replaced by
    one that throws a descriptive error when evaluated, and a GraphError is
    recorded. Unresolved local imports are mapped to placeholder modules so
    the rest of the tree still renders.
    """
    cfg = config or _default_config
    alias = cfg.preview_alias
    parser = parser or SourceParser()
    graph = ModuleResolver(files, alias=alias, parser=parser).resolve(entry)
    transformer = SourceTransformer(parser)

    imports: dict[str, str] = {}
    errors = list(graph.errors)
    handles: list[ResourceHandle] = []

    # Runtime libraries: the fixed pre-resolved set, then anything else used.
    imports.update(cfg.preview_runtime_urls)
    for package in graph.packages:
        if package in imports:
            continue
        if cfg.preview_allow_cdn_packages:
            imports[package] = cfg.preview_cdn_base_url.rstrip("/") + "/" + package
        else:
            errors.append(GraphError(
                kind=GraphErrorKind.UNRESOLVED_IMPORT,
                path=_first_importer(graph, package, files, parser) or entry,
                specifier=package,
                message=f"Package '{package}' is not available in the preview runtime",
            ))

    for path in graph.modules:
        edges = graph.imports_of(path)

        def rewrite(specifier: str, _edges=edges, _path=path) -> Optional[str]:
            target = _edges.get(specifier)
            if target is None:
                if specifier.startswith((".", "/")):
                    return _placeholder_key(specifier, _path, alias)
                return None
            if is_stylesheet(target):
                return DROP_IMPORT
            if specifier.startswith(alias):
                return None
            return canonical_specifier(target, alias)

        try:
            code = transformer.transform(path, files[path], rewrite=rewrite).code
        except TransformFailure as exc:
            logger.info(f"[Preview] Transform failed for {path}: {exc}")
            errors.append(GraphError(
                kind=GraphErrorKind.TRANSFORM_FAILURE, path=path, message=str(exc),
            ))
            code = f"throw new Error({json.dumps(f'Failed to compile {path}: {exc}')});\n"

        handle = registry.acquire(path, code, generation)
        handles.append(handle)
        imports[path] = handle.url
        imports[canonical_specifier(path, alias)] = handle.url
        for form in graph.alias_forms.get(path, ()):
            imports[form] = handle.url

    # Placeholders for local imports that did not resolve.
    for error in graph.errors:
        if error.kind != GraphErrorKind.UNRESOLVED_IMPORT or not error.specifier:
            continue
        if error.specifier == entry:
            continue
        if error.specifier.startswith(alias):
            key = error.specifier
        elif error.specifier.startswith((".", "/")):
            key = _placeholder_key(error.specifier, error.path, alias)
        else:
            continue
        if key in imports:
            continue
        handle = registry.acquire(key, _placeholder_module(error.specifier), generation)
        handles.append(handle)
        imports[key] = handle.url

    styles = "\n".join(
        f"/* {path} */\n{files[path]}" for path in graph.stylesheets
    )
    return ImportMapResult(
        import_map={"imports": imports},
        styles=styles,
        errors=errors,
        graph=graph,
        handles=handles,
    )


def _placeholder_key(specifier: str, importer: str, alias: str) -> str:
    base = specifier if specifier.startswith("/") else join_path(parent_path(importer) or "/", specifier)
    return canonical_specifier(normalize_path(base), alias)


def _placeholder_module(specifier: str) -> str:
    """Stand-in for a missing local module: renders a visible notice."""
    label = json.dumps(f"Missing module: {specifier}")
    return (
        'import { createElement } from "react";\n'
        "export default function MissingModule() {\n"
        f"  return createElement(\"div\", {{ \"data-missing-module\": true, style: "
        f"{{ padding: 8, border: \"1px dashed #f87171\", color: \"#b91c1c\", fontFamily: \"monospace\" }} }}, {label});\n"
        "}\n"
    )


def _first_importer(graph: ModuleGraph, package: str, files, parser) -> Optional[str]:
    for path in graph.modules:
        if any(r.specifier == package for r in iter_imports(parser.parse(path, files[path]))):
            return path
    return None

"""One-call preview build: discovery → graph → transform → import map → document."""

import logging
import time
from typing import Mapping, Optional

from uigen.config import UIGenConfig, config as _default_config
from uigen.exceptions import EmptyProject, NoEntryPoint, UnresolvedImport
from uigen.preview.assembler import PreviewAssembler, render_state_document
from uigen.preview.entry import find_entry_point
from uigen.preview.importmap import create_import_map
from uigen.preview.resources import ResourceRegistry
from uigen.types import GraphErrorKind, PreviewResult, PreviewState

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to UI Generator"
NO_FILES_MESSAGE = "No files to preview"
NO_ENTRY_MESSAGE = "No React component found. Create an App.jsx or index.jsx file to get started."


def build_preview(
    files: Mapping[str, str],
    entry_path: Optional[str] = None,
    dark_mode: bool = False,
    registry: Optional[ResourceRegistry] = None,
    generation: int = 0,
    config: Optional[UIGenConfig] = None,
) -> PreviewResult:
    """Build a renderable preview of ``files``.

    Project content problems (missing entry, unresolved imports, syntax
    errors) never raise; they come back as the result state and as
    ``"{path}: {message}"`` diagnostics.

    Args:
        files: ``{path: content}`` snapshot of the project
        entry_path: Preferred entry module, used when it exists
        dark_mode: Theme applied to the document
        registry: Owner of the module handles; a private one is created if omitted
        generation: Build number the handles are scoped to
    """
    cfg = config or _default_config
    started = time.perf_counter()

    discovery = find_entry_point(files, preferred=entry_path, candidates=cfg.preview_entry_candidates)
    if discovery.state == PreviewState.EMPTY:
        return _state_result(PreviewState.EMPTY, NO_FILES_MESSAGE, dark_mode, generation, cfg)
    if discovery.state == PreviewState.NO_ENTRY:
        return _state_result(PreviewState.NO_ENTRY, NO_ENTRY_MESSAGE, dark_mode, generation, cfg)

    if registry is None:
        registry = ResourceRegistry(cfg.preview_module_base_url)
    entry = discovery.entry
    result = create_import_map(files, entry, registry, generation=generation, config=cfg)
    document = PreviewAssembler(cfg).assemble(
        entry, result.import_map, result.styles, result.errors, dark_mode=dark_mode,
    )

    logger.debug(
        f"[Preview] Built generation {generation} from {entry}: "
        f"{len(result.graph.modules)} modules, {len(result.errors)} errors "
        f"in {(time.perf_counter() - started) * 1000:.1f}ms"
    )
    return PreviewResult(
        state=PreviewState.READY,
        html=document,
        entry_point=entry,
        diagnostics=[error.describe() for error in result.errors],
        errors=result.errors,
        generation=generation,
    )


def _state_result(
    state: PreviewState, message: str, dark_mode: bool, generation: int, cfg: UIGenConfig,
) -> PreviewResult:
    return PreviewResult(
        state=state,
        html=render_state_document(state, message, dark_mode, config=cfg),
        message=message,
        generation=generation,
    )


def raise_for_state(result: PreviewResult, strict: bool = False) -> None:
    """Turn a non-renderable result into an exception for callers that need one.

    Raises:
        EmptyProject: the project has no files
        NoEntryPoint: no component file to mount
        UnresolvedImport: only when ``strict``, for the first unresolved import
    """
    if result.state in (PreviewState.EMPTY, PreviewState.WELCOME):
        raise EmptyProject(result.message or NO_FILES_MESSAGE)
    if result.state == PreviewState.NO_ENTRY:
        raise NoEntryPoint(result.message or NO_ENTRY_MESSAGE)
    if strict:
        for error in result.errors:
            if error.kind == GraphErrorKind.UNRESOLVED_IMPORT:
                raise UnresolvedImport(
                    error.describe(), path=error.path, specifier=error.specifier or "",
                )

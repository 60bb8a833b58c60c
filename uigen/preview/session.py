"""Preview consumer: tracks VFS and theme changes and keeps the latest build.

State machine (per session):

    WELCOME ──files──▶ NO_ENTRY ◀──▶ READY
                          │            │
                          └──▶ EMPTY ◀─┘

Only the very first empty observation is WELCOME; once the project has had
files, an empty project is reported as EMPTY. Builds are numbered; a build
that finishes after a newer one has been committed is discarded and its
module handles released.
"""

import asyncio
import logging
import threading
from typing import Optional

from uigen.callbacks.base import UIGenCallback
from uigen.config import UIGenConfig, config as _default_config
from uigen.preview.assembler import render_state_document
from uigen.preview.pipeline import WELCOME_MESSAGE, build_preview
from uigen.preview.resources import ResourceRegistry
from uigen.preview.theme import ThemeState
from uigen.types import PreviewResult, PreviewState
from uigen.vfs.filesystem import VirtualFileSystem

logger = logging.getLogger(__name__)


class PreviewSession:
    """Owns the preview of one VFS.

    Args:
        vfs: Project files; only ever read through ``snapshot()``
        theme: Shared theme flag; a private light theme is created if omitted
        registry: Handle owner; created from ``config.preview_module_base_url`` if omitted
        auto_refresh: Rebuild synchronously on every attached change notification
        callbacks: Observers awaited by ``refresh_async`` with ``on_preview_built``
    """

    def __init__(
        self,
        vfs: VirtualFileSystem,
        theme: Optional[ThemeState] = None,
        registry: Optional[ResourceRegistry] = None,
        config: Optional[UIGenConfig] = None,
        auto_refresh: bool = False,
        callbacks: Optional[list[UIGenCallback]] = None,
    ):
        self.vfs = vfs
        self.config = config or _default_config
        self.theme = theme or ThemeState()
        self.registry = registry or ResourceRegistry(self.config.preview_module_base_url)
        self.auto_refresh = auto_refresh
        self.callbacks = list(callbacks or [])

        self.preferred_entry: Optional[str] = None
        self._result: Optional[PreviewResult] = None
        self._had_files = False
        self._stale = True
        self._next_generation = 0
        self._committed_generation = -1
        self._lock = threading.Lock()
        self._unsubscribers: list = []

    # ── Observation ───────────────────────────────────────────────────

    @property
    def result(self) -> Optional[PreviewResult]:
        return self._result

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def committed_generation(self) -> int:
        return self._committed_generation

    def attach(self) -> None:
        """Start listening to VFS mutations and theme changes."""
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.vfs.subscribe(lambda _counter: self._changed()),
            self.theme.subscribe(lambda _dark: self._changed()),
        ]

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _changed(self) -> None:
        self._stale = True
        if self.auto_refresh:
            self.refresh()

    # ── Building ──────────────────────────────────────────────────────

    def begin(self) -> int:
        """Reserve the next generation number."""
        with self._lock:
            generation = self._next_generation
            self._next_generation += 1
        return generation

    def build(self, generation: int) -> PreviewResult:
        """Run the pipeline for ``generation`` without committing it."""
        return build_preview(
            self.vfs.snapshot(),
            entry_path=self.preferred_entry,
            dark_mode=self.theme.dark,
            registry=self.registry,
            generation=generation,
            config=self.config,
        )

    def refresh(self) -> PreviewResult:
        generation = self.begin()
        try:
            result = self.build(generation)
        except Exception as exc:
            return self._failed(generation, exc)
        return self.commit(result)

    async def refresh_async(self) -> PreviewResult:
        """Like ``refresh`` but builds in a worker thread."""
        generation = self.begin()
        try:
            result = await asyncio.to_thread(self.build, generation)
        except Exception as exc:
            failed = self._failed(generation, exc)
            for callback in self.callbacks:
                await callback.on_error(exc, {"generation": generation})
            return failed
        committed = self.commit(result)
        if committed is result:
            for callback in self.callbacks:
                await callback.on_preview_built(committed)
        return committed

    def commit(self, result: PreviewResult) -> PreviewResult:
        """Make ``result`` current unless a newer generation already is.

        Returns the result that is current afterwards.
        """
        with self._lock:
            if result.generation < self._committed_generation:
                discarded = self.registry.release_generation(result.generation)
                logger.debug(
                    f"[Preview] Discarded stale generation {result.generation} "
                    f"({discarded} handles released)"
                )
                return self._result

            result = self._apply_history(result)
            if result.state == PreviewState.READY:
                self.preferred_entry = result.entry_point
            self._result = result
            self._committed_generation = result.generation
            self._stale = False

        self.registry.release_before(result.generation)
        logger.info(f"[Preview] Generation {result.generation} committed: {result.state.value}")
        return result

    def _apply_history(self, result: PreviewResult) -> PreviewResult:
        if result.state != PreviewState.EMPTY:
            self._had_files = True
            return result
        if self._had_files:
            return result
        return result.model_copy(update={
            "state": PreviewState.WELCOME,
            "message": WELCOME_MESSAGE,
            "html": render_state_document(
                PreviewState.WELCOME, WELCOME_MESSAGE, self.theme.dark, config=self.config,
            ),
        })

    def _failed(self, generation: int, exc: Exception) -> PreviewResult:
        logger.error(f"[Preview] Build of generation {generation} failed: {exc}", exc_info=True)
        self.registry.release_generation(generation)
        with self._lock:
            previous = self._result
            if previous is not None and generation < self._committed_generation:
                return previous
            if previous is None or previous.state != PreviewState.READY:
                raise exc
            kept = previous.model_copy(update={
                "diagnostics": [*previous.diagnostics, f"{previous.entry_point}: Preview build failed: {exc}"],
            })
            self._result = kept
        return kept

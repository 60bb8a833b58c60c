"""End-to-end tests for build_preview: states, diagnostics, handles."""

import pytest

from uigen.exceptions import EmptyProject, NoEntryPoint, UnresolvedImport
from uigen.preview.pipeline import NO_ENTRY_MESSAGE, NO_FILES_MESSAGE, build_preview, raise_for_state
from uigen.preview.resources import ResourceRegistry
from uigen.types import GraphErrorKind, PreviewState


class TestBuildPreview:

    def test_ready_project(self, project_files, config):
        result = build_preview(project_files, config=config)
        assert result.state == PreviewState.READY
        assert result.entry_point == "/App.jsx"
        assert result.diagnostics == []
        assert '<script type="importmap">' in result.html
        assert "/* /styles.css */" in result.html

    def test_empty_project(self, config):
        result = build_preview({}, config=config)
        assert result.state == PreviewState.EMPTY
        assert result.message == NO_FILES_MESSAGE
        assert NO_FILES_MESSAGE in result.html

    def test_no_component(self, config):
        result = build_preview({"/util.js": "export const x = 1;"}, config=config)
        assert result.state == PreviewState.NO_ENTRY
        assert result.message == NO_ENTRY_MESSAGE

    def test_fallback_entry(self, config):
        result = build_preview(
            {"/components/Counter.jsx": "export default function Counter() { return <p>0</p>; }"},
            config=config,
        )
        assert result.entry_point == "/components/Counter.jsx"

    def test_explicit_entry(self, project_files, config):
        result = build_preview(project_files, entry_path="/components/Button.jsx", config=config)
        assert result.entry_point == "/components/Button.jsx"

    def test_unresolved_import_still_renders(self, config):
        result = build_preview({"/App.jsx": "import X from '@/components/X'"}, config=config)
        assert result.state == PreviewState.READY
        unresolved = [e for e in result.errors if e.kind == GraphErrorKind.UNRESOLVED_IMPORT]
        assert len(unresolved) == 1
        assert unresolved[0].specifier == "@/components/X"
        assert result.diagnostics == ["/App.jsx: Cannot resolve import '@/components/X'"]
        assert result.html.startswith("<!DOCTYPE html>")

    def test_syntax_error_diagnostic(self, config):
        result = build_preview({"/App.jsx": "export default () => <div>;"}, config=config)
        assert result.state == PreviewState.READY
        assert result.diagnostics[0].startswith("/App.jsx: Syntax error")

    def test_dark_mode(self, project_files, config):
        result = build_preview(project_files, dark_mode=True, config=config)
        assert '<html lang="en" class="dark">' in result.html

    def test_handles_owned_by_given_registry(self, project_files, config):
        registry = ResourceRegistry()
        build_preview(project_files, registry=registry, generation=3, config=config)
        assert registry.generations() == {3}


class TestRaiseForState:

    def test_empty(self, config):
        with pytest.raises(EmptyProject):
            raise_for_state(build_preview({}, config=config))

    def test_no_entry(self, config):
        with pytest.raises(NoEntryPoint):
            raise_for_state(build_preview({"/a.css": ""}, config=config))

    def test_strict_unresolved(self, config):
        result = build_preview({"/App.jsx": "import X from './X'"}, config=config)
        raise_for_state(result)
        with pytest.raises(UnresolvedImport) as exc_info:
            raise_for_state(result, strict=True)
        assert exc_info.value.specifier == "./X"

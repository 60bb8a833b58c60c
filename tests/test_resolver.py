"""Tests for entry discovery and module graph resolution."""

import pytest

from uigen.preview.entry import find_entry_point
from uigen.preview.parsing import SourceParser, iter_imports
from uigen.preview.resolver import ModuleResolver
from uigen.types import GraphErrorKind, PreviewState


# ── Entry discovery ───────────────────────────────────────────────────────────

class TestEntryDiscovery:

    def test_empty_project(self):
        assert find_entry_point({}).state == PreviewState.EMPTY

    def test_conventional_candidate_wins(self):
        files = {"/components/Card.jsx": "", "/index.tsx": "", "/App.jsx": ""}
        assert find_entry_point(files).entry == "/App.jsx"

    def test_candidate_order(self):
        files = {"/src/App.tsx": "", "/index.jsx": ""}
        assert find_entry_point(files).entry == "/index.jsx"

    def test_falls_back_to_first_component_file(self):
        discovery = find_entry_point({"/components/Counter.jsx": "export default () => null"})
        assert discovery.state == PreviewState.READY
        assert discovery.entry == "/components/Counter.jsx"

    def test_no_component_files(self):
        discovery = find_entry_point({"/README.md": "# hi", "/util.js": ""})
        assert discovery.state == PreviewState.NO_ENTRY
        assert discovery.entry is None

    def test_preferred_entry_is_sticky(self):
        files = {"/App.jsx": "", "/Other.jsx": ""}
        assert find_entry_point(files, preferred="/Other.jsx").entry == "/Other.jsx"
        assert find_entry_point(files, preferred="/Gone.jsx").entry == "/App.jsx"


# ── Import extraction ─────────────────────────────────────────────────────────

class TestImportExtraction:

    def test_all_import_forms(self):
        source = """
import React, { useState } from 'react';
import './styles.css';
export { Button } from './Button';
export * from "@/lib/utils";
const Lazy = () => import('./Lazy');
import type { Props } from './types';
"""
        records = list(iter_imports(SourceParser().parse("/App.tsx", source)))
        assert [(r.specifier, r.kind) for r in records] == [
            ("react", "import"),
            ("./styles.css", "side_effect"),
            ("./Button", "reexport"),
            ("@/lib/utils", "reexport"),
            ("./Lazy", "dynamic"),
        ]


# ── Module resolution ─────────────────────────────────────────────────────────

class TestModuleResolver:

    def test_relative_with_extension_probing(self, project_files):
        graph = ModuleResolver(project_files).resolve("/App.jsx")
        assert graph.modules == ["/App.jsx", "/components/Button.jsx"]
        assert graph.stylesheets == ["/styles.css"]
        assert graph.imports_of("/App.jsx")["./components/Button"] == "/components/Button.jsx"
        assert graph.errors == []

    def test_alias_and_index_probing(self):
        files = {
            "/App.jsx": "import { Card } from '@/components/ui';\nexport default () => null;",
            "/components/ui/index.ts": "export const Card = 1;",
        }
        graph = ModuleResolver(files).resolve("/App.jsx")
        assert graph.modules == ["/App.jsx", "/components/ui/index.ts"]
        assert graph.alias_forms["/components/ui/index.ts"] == {"@/components/ui"}

    def test_parent_relative_and_absolute(self):
        files = {
            "/components/Card.jsx": "import { cn } from '../lib/utils';\nimport x from '/lib/x.js';",
            "/lib/utils.js": "export const cn = () => '';",
            "/lib/x.js": "export default 1;",
        }
        graph = ModuleResolver(files).resolve("/components/Card.jsx")
        assert set(graph.modules) == {"/components/Card.jsx", "/lib/utils.js", "/lib/x.js"}

    def test_bare_packages_collected(self):
        files = {"/App.jsx": "import { motion } from 'framer-motion';\nimport React from 'react';"}
        graph = ModuleResolver(files).resolve("/App.jsx")
        assert graph.packages == ["framer-motion", "react"]
        assert graph.errors == []

    def test_unresolved_alias_import(self):
        files = {"/App.jsx": "import X from '@/components/X'"}
        graph = ModuleResolver(files).resolve("/App.jsx")
        assert len(graph.errors) == 1
        error = graph.errors[0]
        assert error.kind == GraphErrorKind.UNRESOLVED_IMPORT
        assert error.specifier == "@/components/X"
        assert error.path == "/App.jsx"

    def test_unsupported_file_type(self):
        files = {"/App.jsx": "import logo from './logo.svg';", "/logo.svg": "<svg/>"}
        graph = ModuleResolver(files).resolve("/App.jsx")
        assert graph.errors[0].specifier == "./logo.svg"
        assert "Unsupported" in graph.errors[0].message

    def test_cycles_terminate(self):
        files = {
            "/a.js": "import './b';",
            "/b.js": "import './a';",
        }
        graph = ModuleResolver(files).resolve("/a.js")
        assert graph.modules == ["/a.js", "/b.js"]

    def test_url_imports_are_left_alone(self):
        files = {"/App.jsx": "import confetti from 'https://esm.sh/canvas-confetti';"}
        graph = ModuleResolver(files).resolve("/App.jsx")
        assert graph.packages == []
        assert graph.errors == []

    def test_missing_entry(self):
        graph = ModuleResolver({}).resolve("/App.jsx")
        assert graph.modules == []
        assert graph.errors[0].specifier == "/App.jsx"

    @pytest.mark.parametrize("specifier, expected", [
        ("./Button", "/components/Button.jsx"),
        ("./Button.jsx", "/components/Button.jsx"),
        ("@/components/Button", "/components/Button.jsx"),
        ("../App", "/App.tsx"),
        ("./Missing", None),
    ])
    def test_resolve_specifier(self, specifier, expected):
        files = {"/components/Button.jsx": "", "/App.tsx": ""}
        resolver = ModuleResolver(files)
        assert resolver.resolve_specifier(specifier, "/components/Card.jsx") == expected

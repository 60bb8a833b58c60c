"""Tests for import map synthesis and resource handles."""

import base64

import pytest

from uigen.config import UIGenConfig
from uigen.preview.importmap import canonical_specifier, create_import_map
from uigen.preview.resources import ResourceRegistry
from uigen.types import GraphErrorKind


def _module_source(url: str) -> str:
    assert url.startswith("data:text/javascript;base64,")
    return base64.b64decode(url.split(",", 1)[1]).decode("utf-8")


# ── Resource handles ──────────────────────────────────────────────────────────

class TestResourceRegistry:

    def test_data_urls_by_default(self):
        handle = ResourceRegistry().acquire("/App.jsx", "export default 1;", generation=0)
        assert _module_source(handle.url) == "export default 1;"

    def test_served_urls_with_base(self):
        registry = ResourceRegistry("http://localhost:8000/v1/modules/")
        handle = registry.acquire("/App.jsx", "x", generation=0)
        assert handle.url == f"http://localhost:8000/v1/modules/{handle.id}.js"
        assert registry.get(handle.id) is handle

    def test_release_by_generation(self):
        registry = ResourceRegistry()
        old = registry.acquire("/a.js", "1", generation=1)
        new = registry.acquire("/a.js", "2", generation=2)
        assert registry.release_before(2) == 1
        assert registry.get(old.id) is None
        assert registry.get(new.id) is new
        assert registry.release_generation(2) == 1
        assert registry.live_count() == 0

    def test_generations(self):
        registry = ResourceRegistry()
        registry.acquire("/a.js", "", generation=3)
        registry.acquire("/b.js", "", generation=3)
        registry.acquire("/a.js", "", generation=4)
        assert registry.generations() == {3, 4}
        assert registry.live_count(3) == 2


# ── Import map ────────────────────────────────────────────────────────────────

class TestCreateImportMap:

    def test_every_module_is_keyed_three_ways(self, project_files, config):
        result = create_import_map(project_files, "/App.jsx", ResourceRegistry(), config=config)
        imports = result.import_map["imports"]
        for path in ("/App.jsx", "/components/Button.jsx"):
            assert imports[path] == imports[canonical_specifier(path, "@/")]
        assert len(result.handles) == 2
        assert result.errors == []

    def test_relative_specifiers_rewritten_to_canonical(self, project_files, config):
        result = create_import_map(project_files, "/App.jsx", ResourceRegistry(), config=config)
        app = _module_source(result.import_map["imports"]["/App.jsx"])
        assert '"@/components/Button.jsx"' in app
        assert "./components/Button" not in app
        assert "styles.css" not in app

    def test_alias_forms_mapped(self, config):
        files = {
            "/App.jsx": "import Card from '@/components/Card';\nexport default () => <Card />;",
            "/components/Card.jsx": "export default () => <div />;",
        }
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=config)
        imports = result.import_map["imports"]
        assert imports["@/components/Card"] == imports["/components/Card.jsx"]

    def test_runtime_packages_preresolved(self, project_files, config):
        result = create_import_map(project_files, "/App.jsx", ResourceRegistry(), config=config)
        imports = result.import_map["imports"]
        for package in ("react", "react/jsx-runtime", "react-dom", "react-dom/client"):
            assert imports[package] == config.preview_runtime_urls[package]

    def test_other_packages_through_cdn(self, config):
        files = {"/App.jsx": "import { motion } from 'framer-motion';\nexport default () => null;"}
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=config)
        assert result.import_map["imports"]["framer-motion"] == "https://esm.sh/framer-motion"
        assert result.errors == []

    def test_other_packages_unresolved_without_cdn(self):
        cfg = UIGenConfig(preview_allow_cdn_packages=False)
        files = {"/App.jsx": "import { motion } from 'framer-motion';\nexport default () => null;"}
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=cfg)
        assert "framer-motion" not in result.import_map["imports"]
        assert result.errors[0].kind == GraphErrorKind.UNRESOLVED_IMPORT
        assert result.errors[0].specifier == "framer-motion"
        assert result.errors[0].path == "/App.jsx"

    def test_styles_concatenated_with_headers(self, config):
        files = {
            "/App.jsx": "import './a.css';\nimport './b.css';\nexport default () => null;",
            "/a.css": "a {}",
            "/b.css": "b {}",
        }
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=config)
        assert result.styles == "/* /a.css */\na {}\n/* /b.css */\nb {}"

    def test_reexported_stylesheet_is_collected_and_dropped(self, config):
        files = {
            "/App.jsx": "export * from './theme.css';\nexport default () => null;",
            "/theme.css": ".card {}",
        }
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=config)
        assert result.styles == "/* /theme.css */\n.card {}"
        app = _module_source(result.import_map["imports"]["/App.jsx"])
        assert "theme.css" not in app
        assert result.errors == []

    def test_transform_failure_is_isolated(self, config):
        files = {
            "/App.jsx": "import Broken from './Broken';\nexport default () => <Broken />;",
            "/Broken.jsx": "export default function Broken() { return <div>; }",
        }
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=config)
        (error,) = result.errors
        assert error.kind == GraphErrorKind.TRANSFORM_FAILURE
        assert error.path == "/Broken.jsx"
        broken = _module_source(result.import_map["imports"]["/Broken.jsx"])
        assert broken.startswith("throw new Error(")
        assert "/Broken.jsx" in broken
        app = _module_source(result.import_map["imports"]["/App.jsx"])
        assert "__jsx(Broken, null)" in app

    def test_unresolved_local_import_gets_placeholder(self, config):
        files = {"/App.jsx": "import X from '@/components/X';\nexport default () => <X />;"}
        result = create_import_map(files, "/App.jsx", ResourceRegistry(), config=config)
        assert len(result.errors) == 1
        placeholder = _module_source(result.import_map["imports"]["@/components/X"])
        assert "Missing module: @/components/X" in placeholder

    def test_unresolved_relative_import_rewritten_to_placeholder(self, config):
        files = {"/components/Card.jsx": "import Icon from './Icon';\nexport default () => <Icon />;"}
        result = create_import_map(files, "/components/Card.jsx", ResourceRegistry(), config=config)
        card = _module_source(result.import_map["imports"]["/components/Card.jsx"])
        assert '"@/components/Icon"' in card
        assert "@/components/Icon" in result.import_map["imports"]

    def test_handles_carry_generation(self, project_files, config):
        registry = ResourceRegistry()
        result = create_import_map(project_files, "/App.jsx", registry, generation=5, config=config)
        assert {h.generation for h in result.handles} == {5}
        assert registry.live_count(5) == len(result.handles)

    @pytest.mark.parametrize("path, expected", [
        ("/App.jsx", "@/App.jsx"),
        ("/components/ui/Button.tsx", "@/components/ui/Button.tsx"),
    ])
    def test_canonical_specifier(self, path, expected):
        assert canonical_specifier(path, "@/") == expected

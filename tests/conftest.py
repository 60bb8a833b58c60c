"""Test fixtures: sample projects, VFS instances, tool registries, preview config.

All tests should use these fixtures for consistency.
"""

import pytest

from uigen.config import UIGenConfig
from uigen.tools.registry import build_tool_registry
from uigen.vfs import VirtualFileSystem


APP_JSX = """import Button from './components/Button';
import './styles.css';

export default function App() {
  return (
    <div className="p-4">
      <h1>Hello</h1>
      <Button label="Go" />
    </div>
  );
}
"""

BUTTON_JSX = """export default function Button({ label }) {
  return <button className="rounded">{label}</button>;
}
"""

STYLES_CSS = "body { margin: 0; }\n"


@pytest.fixture
def config():
    """Preview configuration with deterministic, offline-safe defaults."""
    return UIGenConfig(
        debug=True,
        preview_allow_cdn_packages=True,
        preview_module_base_url=None,
    )


@pytest.fixture
def project_files():
    """A small three-file React project as a plain snapshot."""
    return {
        "/App.jsx": APP_JSX,
        "/components/Button.jsx": BUTTON_JSX,
        "/styles.css": STYLES_CSS,
    }


@pytest.fixture
def vfs():
    """Empty virtual file system."""
    return VirtualFileSystem()


@pytest.fixture
def project_vfs(project_files):
    """VFS pre-populated with ``project_files``."""
    return VirtualFileSystem.from_files(project_files)


@pytest.fixture
def tool_registry(project_vfs):
    """Text editor + file manager bound to ``project_vfs``."""
    return build_tool_registry(project_vfs)

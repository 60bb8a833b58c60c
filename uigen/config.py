"""Application configuration. All env vars defined here with defaults."""

from pydantic_settings import BaseSettings
from typing import Optional


class UIGenConfig(BaseSettings):
    # ── App ──
    app_name: str = "uigen"
    debug: bool = False
    log_level: str = "INFO"

    # ── Server ──
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]
    max_sessions: int = 256                     # live VFS sessions held by the API

    # ── Preview: module resolution ──
    preview_alias: str = "@/"                   # maps to the project root
    preview_entry_candidates: list[str] = [
        "/App.jsx", "/App.tsx", "/index.jsx", "/index.tsx",
        "/src/App.jsx", "/src/App.tsx",
    ]

    # ── Preview: runtime libraries ──
    preview_runtime_urls: dict[str, str] = {
        "react": "https://esm.sh/react@19",
        "react/jsx-runtime": "https://esm.sh/react@19/jsx-runtime",
        "react-dom": "https://esm.sh/react-dom@19",
        "react-dom/client": "https://esm.sh/react-dom@19/client",
    }
    preview_cdn_base_url: str = "https://esm.sh/"
    preview_allow_cdn_packages: bool = True     # map other bare specifiers through the CDN
    preview_tailwind_url: str = "https://cdn.tailwindcss.com"

    # ── Preview: document ──
    preview_title: str = "Preview"
    preview_module_base_url: Optional[str] = None  # None → inline data: URLs

    model_config = {"env_prefix": "UIGEN_", "env_file": ".env", "extra": "ignore"}


config = UIGenConfig()

"""Preview document assembly.

Produces one self-contained HTML document per build: theme classes, the
Tailwind runtime, aggregated stylesheets, the import map, an error overlay
and a module bootstrap that mounts the entry component.
"""

import html
import json
from typing import Optional, Sequence

from uigen.config import UIGenConfig, config as _default_config
from uigen.types import GraphError, PreviewState

# iframe sandbox flags the host should embed the document with
PREVIEW_SANDBOX = "allow-scripts allow-same-origin allow-forms"

_OVERLAY_CSS = """
#__uigen_overlay { position: fixed; inset: 0; z-index: 2147483647; overflow: auto;
  padding: 24px; background: rgba(17, 24, 39, 0.92); color: #fecaca;
  font: 13px/1.5 ui-monospace, SFMono-Regular, Menlo, monospace; }
#__uigen_overlay[hidden] { display: none; }
#__uigen_overlay h2 { margin: 0 0 12px; color: #f87171; font-size: 15px; }
#__uigen_overlay pre { margin: 0 0 12px; white-space: pre-wrap; word-break: break-word; }
#__uigen_overlay button { position: absolute; top: 12px; right: 16px; background: none;
  border: 0; color: #fecaca; font-size: 18px; cursor: pointer; }
"""

# Classic script: runs before any module so load/link failures are caught too.
_OVERLAY_SCRIPT = """
(function () {
  var overlay = document.getElementById("__uigen_overlay");
  var list = document.getElementById("__uigen_errors");
  function report(message) {
    var pre = document.createElement("pre");
    pre.textContent = String(message);
    list.appendChild(pre);
    overlay.hidden = false;
  }
  window.__uigenReportError = function (err) {
    report(err && err.stack ? err.stack : err);
  };
  window.addEventListener("error", function (event) {
    report(event.error && event.error.stack ? event.error.stack : event.message);
  });
  window.addEventListener("unhandledrejection", function (event) {
    var reason = event.reason;
    report(reason && reason.stack ? reason.stack : reason);
  });
  overlay.querySelector("button").addEventListener("click", function () {
    overlay.hidden = true;
  });
})();
"""

_BOOTSTRAP = """
import { createElement } from "react";
import { createRoot } from "react-dom/client";

try {
  const mod = await import(__ENTRY__);
  let App = mod.default;
  if (typeof App !== "function") {
    App = Object.values(mod).find((value) => typeof value === "function");
  }
  if (!App) {
    throw new Error("No component exported from " + __ENTRY__);
  }
  createRoot(document.getElementById("root")).render(createElement(App));
} catch (err) {
  window.__uigenReportError(err);
}
"""

_STATE_CONTENT = {
    PreviewState.WELCOME: ("Welcome to UI Generator", "Start building React components with AI assistance"),
    PreviewState.EMPTY: ("No files to preview", None),
    PreviewState.NO_ENTRY: (
        "No React component found",
        "Create an App.jsx or index.jsx file to get started.",
    ),
}


def escape_script(text: str) -> str:
    """Neutralize ``</`` so embedded text cannot close its enclosing tag."""
    return text.replace("</", "<\\/")


class PreviewAssembler:
    """Builds the preview HTML document for one module graph."""

    def __init__(self, config: Optional[UIGenConfig] = None):
        self.config = config or _default_config

    def assemble(
        self,
        entry: str,
        import_map: dict,
        styles: str = "",
        errors: Sequence[GraphError] = (),
        dark_mode: bool = False,
    ) -> str:
        theme = "dark" if dark_mode else "light"
        entry_specifier = self.config.preview_alias + entry.lstrip("/")
        error_markup = "".join(
            f"<pre>{html.escape(error.describe())}</pre>" for error in errors
        )
        bootstrap = _BOOTSTRAP.replace("__ENTRY__", json.dumps(entry_specifier))

        return (
            "<!DOCTYPE html>\n"
            f'<html lang="en" class="{theme}">\n'
            "<head>\n"
            '<meta charset="utf-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
            f'<meta name="color-scheme" content="{theme}">\n'
            f"<title>{html.escape(self.config.preview_title)}</title>\n"
            f"{self._tailwind()}"
            f"<style>{_OVERLAY_CSS}</style>\n"
            f'<style id="__uigen_styles">\n{escape_script(styles)}\n</style>\n'
            f'<script type="importmap">\n{escape_script(json.dumps(import_map, indent=2))}\n</script>\n'
            "</head>\n"
            f'<body class="{theme}">\n'
            f'<div id="root" class="{theme}"></div>\n'
            f'<div id="__uigen_overlay"{"" if errors else " hidden"}>'
            '<button type="button" aria-label="Dismiss">&times;</button>'
            "<h2>Preview errors</h2>"
            f'<div id="__uigen_errors">{error_markup}</div></div>\n'
            f"<script>{_OVERLAY_SCRIPT}</script>\n"
            f'<script type="module">{escape_script(bootstrap)}</script>\n'
            "</body>\n"
            "</html>\n"
        )

    def _tailwind(self) -> str:
        if not self.config.preview_tailwind_url:
            return ""
        return (
            f'<script src="{html.escape(self.config.preview_tailwind_url)}"></script>\n'
            '<script>tailwind.config = { darkMode: "class" };</script>\n'
        )


def render_state_document(
    state: PreviewState,
    message: Optional[str] = None,
    dark_mode: bool = False,
    config: Optional[UIGenConfig] = None,
) -> str:
    """Explanatory document for the states that have nothing to mount."""
    cfg = config or _default_config
    theme = "dark" if dark_mode else "light"
    title, detail = _STATE_CONTENT.get(state, (message or "", None))
    if message and message != title:
        detail = message
    background, foreground, muted = (
        ("#111827", "#f9fafb", "#9ca3af") if dark_mode else ("#f9fafb", "#111827", "#6b7280")
    )
    detail_markup = f"<p>{html.escape(detail)}</p>" if detail else ""
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="en" class="{theme}">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f'<meta name="color-scheme" content="{theme}">\n'
        f"<title>{html.escape(cfg.preview_title)}</title>\n"
        "<style>\n"
        f"body {{ margin: 0; min-height: 100vh; display: flex; align-items: center;"
        f" justify-content: center; background: {background}; color: {foreground};"
        " font-family: system-ui, sans-serif; text-align: center; }\n"
        f"p {{ color: {muted}; }}\n"
        "</style>\n"
        "</head>\n"
        f'<body class="{theme}" data-preview-state="{state.value}">\n'
        f"<main><h1>{html.escape(title)}</h1>{detail_markup}</main>\n"
        "</body>\n"
        "</html>\n"
    )

"""Entry-point discovery: which file the preview mounts."""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from uigen.config import config as _default_config
from uigen.preview.parsing import COMPONENT_EXTENSIONS
from uigen.types import PreviewState


@dataclass
class EntryDiscovery:
    state: PreviewState             # EMPTY, NO_ENTRY or READY
    entry: Optional[str] = None


def find_entry_point(
    files: Mapping[str, str],
    preferred: Optional[str] = None,
    candidates: Optional[Sequence[str]] = None,
) -> EntryDiscovery:
    """Pick the entry module for ``files``.

    Order: ``preferred`` if it still exists, then the conventional candidates
    (``/App.jsx``, ``/App.tsx``, ...), then the first ``.jsx``/``.tsx`` file in
    iteration order. An empty mapping and a mapping without any component
    file are reported as different states.
    """
    if not files:
        return EntryDiscovery(state=PreviewState.EMPTY)
    if preferred and preferred in files:
        return EntryDiscovery(state=PreviewState.READY, entry=preferred)
    for candidate in candidates or _default_config.preview_entry_candidates:
        if candidate in files:
            return EntryDiscovery(state=PreviewState.READY, entry=candidate)
    for path in files:
        if path.endswith(COMPONENT_EXTENSIONS):
            return EntryDiscovery(state=PreviewState.READY, entry=path)
    return EntryDiscovery(state=PreviewState.NO_ENTRY)

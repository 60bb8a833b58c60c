"""Browser-loadable resource handles for transformed modules.

Each handle belongs to exactly one preview generation. By default its URL is
a self-contained ``data:`` URL; when a module base URL is configured the
handle is served over HTTP from this registry instead, and releasing the
generation makes those URLs 404.
"""

import base64
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceHandle:
    id: str
    path: str                   # module path the code came from
    url: str
    generation: int
    content: str


class ResourceRegistry:
    """Owns the live handles of every preview generation of one session."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url.rstrip("/") if base_url else None
        self._handles: dict[str, ResourceHandle] = {}
        self._lock = threading.Lock()

    def acquire(self, path: str, code: str, generation: int) -> ResourceHandle:
        handle_id = uuid.uuid4().hex
        if self.base_url:
            url = f"{self.base_url}/{handle_id}.js"
        else:
            url = "data:text/javascript;base64," + base64.b64encode(code.encode("utf-8")).decode("ascii")
        handle = ResourceHandle(id=handle_id, path=path, url=url, generation=generation, content=code)
        with self._lock:
            self._handles[handle_id] = handle
        return handle

    def get(self, handle_id: str) -> Optional[ResourceHandle]:
        return self._handles.get(handle_id)

    def release_generation(self, generation: int) -> int:
        """Drop every handle of ``generation``; returns how many were released."""
        return self._release(lambda h: h.generation == generation)

    def release_before(self, generation: int) -> int:
        """Drop every handle older than ``generation``."""
        return self._release(lambda h: h.generation < generation)

    def _release(self, predicate) -> int:
        with self._lock:
            doomed = [hid for hid, h in self._handles.items() if predicate(h)]
            for hid in doomed:
                del self._handles[hid]
        if doomed:
            logger.debug(f"[Preview] Released {len(doomed)} module handles")
        return len(doomed)

    def live_count(self, generation: Optional[int] = None) -> int:
        with self._lock:
            if generation is None:
                return len(self._handles)
            return sum(1 for h in self._handles.values() if h.generation == generation)

    def generations(self) -> set[int]:
        with self._lock:
            return {h.generation for h in self._handles.values()}

    def release_all(self) -> int:
        return self._release(lambda h: True)

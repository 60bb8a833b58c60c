"""Observable light/dark preview theme."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

ThemeListener = Callable[[bool], None]


class ThemeState:
    """Explicit dark-mode flag; listeners are called with the new value on change only."""

    def __init__(self, dark: bool = False):
        self._dark = dark
        self._listeners: list[ThemeListener] = []

    @property
    def dark(self) -> bool:
        return self._dark

    def set(self, dark: bool) -> None:
        if dark == self._dark:
            return
        self._dark = dark
        for listener in list(self._listeners):
            try:
                listener(dark)
            except Exception as exc:
                logger.warning(f"[Preview] Theme listener failed: {exc}", exc_info=True)

    def toggle(self) -> bool:
        self.set(not self._dark)
        return self._dark

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

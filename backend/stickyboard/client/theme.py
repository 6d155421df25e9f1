from __future__ import annotations

from typing import TYPE_CHECKING

from stickyboard.client.config import get_client_settings
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from stickyboard.client.storage import LocalStore

logger = get_logger(__name__)

DARK_MODE_KEY = "darkMode"
DARK_MODE_CLASS = "dark-mode"


class ThemeState:
    """Light/dark theme flag; a stored choice wins over the system preference."""

    def __init__(self, store: LocalStore, *, prefers_dark: bool | None = None) -> None:
        self._store = store
        self._subscribers: list[Callable[[bool], None]] = []

        saved = store.get_item(DARK_MODE_KEY)
        if saved is not None:
            self._dark = saved == "true"
        elif prefers_dark is not None:
            self._dark = prefers_dark
        else:
            self._dark = get_client_settings().prefers_dark

    @property
    def is_dark_mode(self) -> bool:
        return self._dark

    @property
    def body_class(self) -> str:
        return DARK_MODE_CLASS if self._dark else ""

    def subscribe(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_dark_mode(self, enabled: bool) -> None:
        self._dark = bool(enabled)
        self._store.set_item(DARK_MODE_KEY, "true" if self._dark else "false")
        logger.debug("Theme changed", extra={"dark_mode": self._dark})
        for callback in list(self._subscribers):
            callback(self._dark)

    def toggle(self) -> bool:
        self.set_dark_mode(not self._dark)
        return self._dark

"""Window data types and the host collaborator contracts used by the controller."""

from __future__ import annotations

import enum
from typing import Any, Callable, NamedTuple, Protocol


class FocusCircleError(Exception):
    """Base class for focus marker errors."""


class UnsupportedNotification(FocusCircleError):
    """The host cannot provide the requested notification or collaborator."""


class WindowType(enum.Enum):
    NORMAL = "normal"
    DESKTOP = "desktop"
    DOCK = "dock"
    DIALOG = "dialog"
    TOOLBAR = "toolbar"
    MENU = "menu"
    UTILITY = "utility"
    SPLASHSCREEN = "splashscreen"


class FrameRect(NamedTuple):
    """On-screen rectangle of a window frame, in host device pixels."""

    x: int
    y: int
    width: int
    height: int


class WindowRef(Protocol):
    """A host window. Equal refs denote the same window."""

    @property
    def is_minimized(self) -> bool: ...

    @property
    def window_type(self) -> WindowType: ...

    @property
    def frame_rect(self) -> FrameRect: ...


WindowCallback = Callable[[WindowRef], None]


class EventSource(Protocol):
    """Host windowing system notifications.

    Every on_* method returns a token for disconnect(). Methods raise
    UnsupportedNotification when the host cannot deliver that signal.
    """

    def on_focus_changed(self, callback: Callable[[], None]) -> Any: ...

    def on_scale_changed(self, callback: Callable[[], None]) -> Any: ...

    def on_monitors_changed(self, callback: Callable[[], None]) -> Any: ...

    def on_position_changed(self, window: WindowRef, callback: WindowCallback) -> Any: ...

    def on_size_changed(self, window: WindowRef, callback: WindowCallback) -> Any: ...

    def disconnect(self, token: Any) -> None: ...

    def get_focused_window(self) -> WindowRef | None: ...

    def scale_factor(self) -> float: ...


class OverlayHandle(Protocol):
    """Positionable, showable surface that draws the marker."""

    def set_size(self, width: int, height: int) -> None: ...

    def set_position(self, x: int, y: int) -> None: ...

    def show(self) -> None: ...

    def hide(self) -> None: ...

    def request_redraw(self) -> None: ...

    def destroy(self) -> None: ...


class TimerService(Protocol):
    """Single-shot delayed callbacks."""

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...

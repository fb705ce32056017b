"""Window tracking via libwnck and GDK -- focus, geometry, scale and monitor signals."""

from __future__ import annotations

from typing import Any, Callable

import gi

gi.require_version("Wnck", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gdk, Wnck  # noqa: E402

from focus_circle.core.model import (
    FocusCircleError,
    FrameRect,
    UnsupportedNotification,
    WindowType,
)
from focus_circle.core.subscriptions import first_available
from focus_circle.log import get_logger

log = get_logger(name="window_tracker")

# [(gobject, handler_id), ...]
Token = list[tuple[Any, int]]

_WNCK_TYPE_NAMES = (
    "NORMAL",
    "DESKTOP",
    "DOCK",
    "DIALOG",
    "TOOLBAR",
    "MENU",
    "UTILITY",
    "SPLASHSCREEN",
)


def _map_window_type(wnck_type: Any) -> WindowType:
    """Translate a Wnck.WindowType to WindowType (unknown types count as NORMAL)."""
    for name in _WNCK_TYPE_NAMES:
        if wnck_type == getattr(Wnck.WindowType, name, None):
            return WindowType[name]
    return WindowType.NORMAL


def _connect_all(obj: Any, signals: tuple[str, ...], handler: Callable[..., Any]) -> Token:
    """Connect handler to every signal, or to none if one is missing."""
    token: Token = []
    for signal in signals:
        try:
            token.append((obj, obj.connect(signal, handler)))
        except TypeError as exc:
            for connected, handler_id in token:
                connected.disconnect(handler_id)
            raise UnsupportedNotification(f"{type(obj).__name__} has no {signal!r}") from exc
    return token


def _default_monitor(display: Any) -> Any:
    if display is None:
        return None
    return display.get_primary_monitor() or display.get_monitor(0)


class WnckWindowRef:
    """A libwnck window, compared by X11 window id."""

    def __init__(self, window: Wnck.Window) -> None:
        self.native = window
        self.xid: int = window.get_xid()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WnckWindowRef):
            return NotImplemented
        return self.xid == other.xid

    def __hash__(self) -> int:
        return hash(self.xid)

    def __repr__(self) -> str:
        return f"WnckWindowRef(xid={self.xid:#x})"

    @property
    def is_minimized(self) -> bool:
        return bool(self.native.is_minimized())

    @property
    def window_type(self) -> WindowType:
        return _map_window_type(self.native.get_window_type())

    @property
    def frame_rect(self) -> FrameRect:
        # get_geometry() includes the frame, unlike get_client_window_geometry()
        x, y, width, height = self.native.get_geometry()
        return FrameRect(x, y, width, height)


class WnckEventSource:
    """Host notifications for the focus marker, backed by libwnck and GDK."""

    def __init__(self) -> None:
        self._screen = Wnck.Screen.get_default()
        if self._screen is None:
            raise UnsupportedNotification("libwnck has no default screen")
        self._screen.force_update()
        self._display = Gdk.Display.get_default()
        self.monitor_provider: str | None = None

    def get_focused_window(self) -> WnckWindowRef | None:
        window = self._screen.get_active_window()
        return WnckWindowRef(window) if window is not None else None

    def scale_factor(self) -> float:
        monitor = _default_monitor(display=self._display)
        return monitor.get_scale_factor() if monitor is not None else 1

    def on_focus_changed(self, callback: Callable[[], None]) -> Token:
        return _connect_all(
            self._screen, ("active-window-changed",), lambda *_args: callback()
        )

    def on_position_changed(
        self, window: WnckWindowRef, callback: Callable[[WnckWindowRef], None]
    ) -> Token:
        return self._watch_geometry(
            window=window, part=lambda r: (r.x, r.y), callback=callback
        )

    def on_size_changed(
        self, window: WnckWindowRef, callback: Callable[[WnckWindowRef], None]
    ) -> Token:
        return self._watch_geometry(
            window=window, part=lambda r: (r.width, r.height), callback=callback
        )

    def _watch_geometry(
        self,
        window: WnckWindowRef,
        part: Callable[[FrameRect], tuple[int, int]],
        callback: Callable[[WnckWindowRef], None],
    ) -> Token:
        """Split libwnck's single geometry-changed signal into origin or size changes."""
        native = getattr(window, "native", None)
        if native is None:
            raise UnsupportedNotification(f"{window!r} is not a libwnck window")
        last = [part(window.frame_rect)]

        def on_geometry_changed(*_args: Any) -> None:
            current = part(window.frame_rect)
            if current != last[0]:
                last[0] = current
                callback(window)

        return _connect_all(native, ("geometry-changed",), on_geometry_changed)

    def on_scale_changed(self, callback: Callable[[], None]) -> Token:
        """Watch the scale factor of every monitor, including ones plugged in later."""
        if self._display is None:
            raise UnsupportedNotification("no default GDK display")

        def on_scale(*_args: Any) -> None:
            callback()

        token: Token = []
        for index in range(self._display.get_n_monitors()):
            monitor = self._display.get_monitor(index)
            if monitor is not None:
                token.extend(_connect_all(monitor, ("notify::scale-factor",), on_scale))

        def on_monitor_added(_display: Any, monitor: Any) -> None:
            token.extend(_connect_all(monitor, ("notify::scale-factor",), on_scale))

        try:
            token.extend(_connect_all(self._display, ("monitor-added",), on_monitor_added))
        except UnsupportedNotification as exc:
            log.debug("Scale of hot-plugged monitors is not watched: %s", exc)
        return token

    def on_monitors_changed(self, callback: Callable[[], None]) -> Token:
        """Bind the first monitor topology signal the host provides."""

        def handler(*_args: Any) -> None:
            callback()

        def via_display() -> Token | None:
            if self._display is None:
                return None
            return _connect_all(self._display, ("monitor-added", "monitor-removed"), handler)

        def via_screen() -> Token | None:
            screen = Gdk.Screen.get_default()
            if screen is None:
                return None
            return _connect_all(screen, ("monitors-changed",), handler)

        found = first_available([("display", via_display), ("screen", via_screen)])
        if found is None:
            raise UnsupportedNotification("no monitor topology signal")
        self.monitor_provider, token = found
        log.debug("monitor changes via %s", self.monitor_provider)
        return token

    def disconnect(self, token: Token) -> None:
        """Disconnect every handler in token, then report the first failure."""
        failures: list[Exception] = []
        for obj, handler_id in token:
            try:
                obj.disconnect(handler_id)
            except Exception as exc:
                failures.append(exc)
        token.clear()
        if failures:
            raise FocusCircleError(f"{len(failures)} handler(s) failed to disconnect") from failures[0]

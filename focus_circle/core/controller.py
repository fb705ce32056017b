"""Focus marker controller -- visibility state machine driven by host notifications."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

from focus_circle.core.geometry import MarkerGeometry, compute_geometry, marker_origin
from focus_circle.core.model import UnsupportedNotification
from focus_circle.core.subscriptions import SubscriptionSet
from focus_circle.log import get_logger

log = get_logger(name="controller")

if TYPE_CHECKING:
    from focus_circle.core.config import Config
    from focus_circle.core.model import (
        EventSource,
        OverlayHandle,
        TimerService,
        WindowRef,
    )


class MarkerState(enum.Enum):
    IDLE = "idle"
    TRACKING_VISIBLE = "tracking-visible"
    TRACKING_SUPPRESSED = "tracking-suppressed"
    TERMINATED = "terminated"


# Marker state machine:
#
#   ┌──────┐  focus: suitable W  ┌──────────────────┐
#   │ IDLE │────────────────────>│ TRACKING_VISIBLE │──timeout──> (hidden)
#   └──────┘                     └──────────────────┘
#      ^                            │           ^
#      │ focus: none/unsuitable     │ moved     │ focus: other window,
#      │                            v           │ then back
#      │                   ┌─────────────────────┐
#      └───────────────────│ TRACKING_SUPPRESSED │<──focus: suppressed W
#                          └─────────────────────┘
#
# Suppression is keyed by window identity. It survives any number of
# moves and resizes of that window and is cleared only when focus handling
# runs for a different window. Resizes reposition the marker but never
# touch visibility or the auto-hide timer.


class FocusMarkerController:
    """Shows a marker at the focused window's corner and decides when to hide it."""

    def __init__(
        self,
        events: EventSource,
        overlay: OverlayHandle,
        timers: TimerService,
        config: Config,
    ) -> None:
        self._events: EventSource | None = events
        self._overlay: OverlayHandle | None = overlay
        self._timers: TimerService | None = timers
        self._config = config

        self._geometry = MarkerGeometry(diameter=0, inset=0)
        self._current_window: WindowRef | None = None
        self._suppress_for_window: WindowRef | None = None
        self._hide_timer: Any = None
        self._visible = False
        self._terminated = False

        # Host-level signals live as long as the controller, window signals
        # are replaced on every focus change.
        self._host_subscriptions = SubscriptionSet()
        self._geometry_subscriptions = SubscriptionSet()

    # --- Introspection ---

    @property
    def state(self) -> MarkerState:
        if self._terminated:
            return MarkerState.TERMINATED
        if self._current_window is None:
            return MarkerState.IDLE
        if self._suppress_for_window == self._current_window:
            return MarkerState.TRACKING_SUPPRESSED
        return MarkerState.TRACKING_VISIBLE

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def geometry(self) -> MarkerGeometry:
        return self._geometry

    @property
    def tracked_window(self) -> WindowRef | None:
        return self._current_window

    @property
    def suppressed_window(self) -> WindowRef | None:
        return self._suppress_for_window

    @property
    def hide_pending(self) -> bool:
        return self._hide_timer is not None

    # --- Lifecycle ---

    def start(self) -> None:
        """Size the overlay, subscribe to host signals and show for the current focus."""
        events = self._events
        if events is None:
            return
        self._apply_geometry()

        self._subscribe_host(events.on_focus_changed, "focus", self._on_focus_changed)
        self._subscribe_host(events.on_scale_changed, "scale", self._on_display_changed)
        self._subscribe_host(
            events.on_monitors_changed, "monitors", self._on_display_changed
        )

        self._on_focus_changed()

    def destroy(self) -> None:
        """Release every subscription, timer and the overlay. Safe to call twice."""
        if self._terminated:
            return
        self._terminated = True
        self._host_subscriptions.release_all()
        self._geometry_subscriptions.release_all()
        self._current_window = None
        self._suppress_for_window = None
        self._cancel_hide_timeout()
        if self._overlay is not None:
            self._overlay.destroy()
            self._overlay = None
        self._visible = False
        self._events = None
        self._timers = None
        log.debug("destroyed")

    def _subscribe_host(self, connect: Any, name: str, callback: Any) -> None:
        try:
            token = connect(callback)
        except UnsupportedNotification as exc:
            log.debug("No %s notifications on this host: %s", name, exc)
            return
        self._host_subscriptions.add(self._events, token)

    # --- Host signal handlers ---

    def _on_focus_changed(self, *_args: Any) -> None:
        if self._terminated or self._events is None:
            return
        win = self._events.get_focused_window()
        prev_win = self._current_window

        if not self._is_suitable(win):
            log.debug("focus: none or unsuitable window, going idle")
            self._geometry_subscriptions.release_all()
            self._current_window = None
            self._hide()
            self._cancel_hide_timeout()
            return

        if prev_win != win:
            self._suppress_for_window = None

        self._current_window = win
        self._connect_geometry_signals(win)

        if self._suppress_for_window == win:
            log.debug("focus: window %r is suppressed", win)
            self._hide()
            self._cancel_hide_timeout()
            return

        self._move_to(win)
        self._show()
        self._start_hide_timeout()

    def _on_position_changed(self, window: WindowRef) -> None:
        if self._terminated or window != self._current_window:
            return
        log.debug("position changed for %r, suppressing", window)
        self._suppress_for_window = self._current_window
        self._hide()
        self._cancel_hide_timeout()

    def _on_size_changed(self, window: WindowRef) -> None:
        if self._terminated or self._current_window is None:
            return
        if window != self._current_window:
            return
        self._move_to(self._current_window)

    def _on_display_changed(self, *_args: Any) -> None:
        if self._terminated:
            return
        self._apply_geometry()
        self._on_focus_changed()

    def _on_hide_timeout(self) -> None:
        self._hide_timer = None
        log.debug("auto-hide timeout")
        self._hide()

    # --- Helpers ---

    def _is_suitable(self, win: WindowRef | None) -> bool:
        if win is None or win.is_minimized:
            return False
        return win.window_type not in self._config.excluded_types

    def _apply_geometry(self) -> None:
        scale = self._events.scale_factor() if self._events is not None else 1
        self._geometry = compute_geometry(
            scale=scale,
            size_factor=self._config.size_factor,
            inset_factor=self._config.inset_factor,
        )
        log.debug("geometry for scale %s: %s", scale, self._geometry)
        if self._overlay is not None:
            diameter = self._geometry.diameter
            self._overlay.set_size(diameter, diameter)
            self._overlay.request_redraw()

    def _connect_geometry_signals(self, win: WindowRef) -> None:
        self._geometry_subscriptions.release_all()
        events = self._events
        if events is None:
            return
        for name, connect, callback in (
            ("position-changed", events.on_position_changed, self._on_position_changed),
            ("size-changed", events.on_size_changed, self._on_size_changed),
        ):
            try:
                token = connect(win, callback)
            except UnsupportedNotification as exc:
                log.debug("Window %r has no %s signal: %s", win, name, exc)
                continue
            self._geometry_subscriptions.add(events, token)

    def _move_to(self, win: WindowRef) -> None:
        if self._overlay is None:
            return
        x, y = marker_origin(rect=win.frame_rect, inset=self._geometry.inset)
        self._overlay.set_position(x, y)
        self._overlay.request_redraw()

    def _show(self) -> None:
        if self._overlay is not None:
            self._overlay.show()
            self._visible = True

    def _hide(self) -> None:
        if self._overlay is not None:
            self._overlay.hide()
        self._visible = False

    def _start_hide_timeout(self) -> None:
        self._cancel_hide_timeout()
        if self._timers is None:
            return
        self._hide_timer = self._timers.schedule_once(
            self._config.hide_timeout_ms, self._on_hide_timeout
        )

    def _cancel_hide_timeout(self) -> None:
        if self._hide_timer is not None and self._timers is not None:
            self._timers.cancel(self._hide_timer)
        self._hide_timer = None

"""Marker overlay -- a click-through popup window that paints a translucent circle."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import cairo

from focus_circle.log import get_logger

log = get_logger(name="overlay")

import gi

gi.require_version("Gtk", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gdk, Gtk  # noqa: E402

if TYPE_CHECKING:
    from focus_circle.core.config import Config


def draw_marker(
    cr: cairo.Context,
    width: float,
    height: float,
    fill_rgba: Sequence[float],
    border_rgba: Sequence[float],
    border_width: float,
) -> None:
    """Paint a filled circle with a faint outline on a transparent background."""
    cr.set_operator(cairo.OPERATOR_CLEAR)
    cr.paint()
    cr.set_operator(cairo.OPERATOR_OVER)

    radius = min(width, height) / 2 - 1
    if radius <= 0:
        return
    cr.set_source_rgba(*fill_rgba)
    cr.arc(width / 2, height / 2, radius, 0, 2 * math.pi)
    cr.fill_preserve()

    cr.set_source_rgba(*border_rgba)
    cr.set_line_width(border_width)
    cr.stroke()


class MarkerOverlay:
    """Popup window holding the marker.

    Positions and sizes are host device pixels; they are divided by the
    widget scale factor before reaching GTK.
    """

    def __init__(self, config: Config) -> None:
        self._config = config

        win = Gtk.Window(type=Gtk.WindowType.POPUP)
        win.set_decorated(False)
        win.set_skip_taskbar_hint(True)
        win.set_skip_pager_hint(True)
        win.set_accept_focus(False)
        win.set_keep_above(True)
        win.set_type_hint(Gdk.WindowTypeHint.TOOLTIP)
        win.set_app_paintable(True)

        screen = win.get_screen()
        visual = screen.get_rgba_visual()
        if visual:
            win.set_visual(visual)
        else:
            log.warning("No RGBA visual, marker will not be translucent")

        win.connect("draw", self._on_draw)
        win.connect("realize", self._on_realize)
        self._window: Gtk.Window | None = win

    def _logical(self, value: int) -> int:
        scale = self._window.get_scale_factor() if self._window is not None else 1
        return math.floor(value / scale) if scale > 1 else int(value)

    def _on_realize(self, widget: Gtk.Window) -> None:
        # Empty input shape: clicks fall through to the window below
        gdk_window = widget.get_window()
        if gdk_window is not None:
            gdk_window.input_shape_combine_region(cairo.Region(), 0, 0)

    def _on_draw(self, widget: Gtk.Window, cr: cairo.Context) -> bool:
        draw_marker(
            cr,
            width=widget.get_allocated_width(),
            height=widget.get_allocated_height(),
            fill_rgba=self._config.fill_rgba,
            border_rgba=self._config.border_rgba,
            border_width=self._config.border_width,
        )
        return True

    def set_size(self, width: int, height: int) -> None:
        if self._window is None:
            return
        w, h = max(1, self._logical(width)), max(1, self._logical(height))
        self._window.set_size_request(w, h)
        self._window.resize(w, h)

    def set_position(self, x: int, y: int) -> None:
        if self._window is not None:
            self._window.move(self._logical(x), self._logical(y))

    def show(self) -> None:
        if self._window is not None:
            self._window.show_all()

    def hide(self) -> None:
        if self._window is not None:
            self._window.hide()

    def request_redraw(self) -> None:
        if self._window is not None:
            self._window.queue_draw()

    def destroy(self) -> None:
        if self._window is not None:
            self._window.destroy()
            self._window = None

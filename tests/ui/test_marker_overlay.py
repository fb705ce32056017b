"""Tests for the marker overlay window and circle drawing."""

import importlib
import sys
from types import SimpleNamespace
from unittest.mock import MagicMock

import cairo

from focus_circle.core.config import Config


def _load_overlay_module(monkeypatch, *, scale=1, rgba_visual=True):
    win = MagicMock()
    win.get_scale_factor.return_value = scale
    win.get_screen.return_value.get_rgba_visual.return_value = (
        object() if rgba_visual else None
    )
    fake_gtk = SimpleNamespace(
        Window=MagicMock(return_value=win),
        WindowType=SimpleNamespace(POPUP="popup"),
    )
    fake_gdk = SimpleNamespace(WindowTypeHint=SimpleNamespace(TOOLTIP="tooltip"))
    fake_repo = SimpleNamespace(Gtk=fake_gtk, Gdk=fake_gdk)
    fake_gi = SimpleNamespace(require_version=MagicMock(), repository=fake_repo)
    monkeypatch.setitem(sys.modules, "gi", fake_gi)
    monkeypatch.setitem(sys.modules, "gi.repository", fake_repo)
    monkeypatch.delitem(sys.modules, "focus_circle.ui.overlay", raising=False)
    return importlib.import_module("focus_circle.ui.overlay"), win


def _alpha(surface, x, y):
    surface.flush()
    data = surface.get_data()
    # ARGB32 is native-endian; alpha is the high byte of each pixel word
    pixel = int.from_bytes(data[y * surface.get_stride() + x * 4 :][:4], sys.byteorder)
    return pixel >> 24


class TestDrawMarker:
    def test_centre_filled_corners_clear(self, monkeypatch):
        # Given
        mod, _win = _load_overlay_module(monkeypatch)
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 20, 20)
        cr = cairo.Context(surface)
        cr.set_source_rgba(1, 0, 0, 1)
        cr.paint()
        # When
        mod.draw_marker(cr, 20, 20, (1, 1, 0, 0.3), (1, 1, 0, 0.2), 2.0)
        # Then
        assert _alpha(surface, 10, 10) > 0
        assert _alpha(surface, 10, 10) < 255
        assert _alpha(surface, 0, 0) == 0
        assert _alpha(surface, 19, 19) == 0

    def test_tiny_surface_only_clears(self, monkeypatch):
        # Given
        mod, _win = _load_overlay_module(monkeypatch)
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 2, 2)
        cr = cairo.Context(surface)
        cr.set_source_rgba(1, 0, 0, 1)
        cr.paint()
        # When
        mod.draw_marker(cr, 2, 2, (1, 1, 0, 0.3), (1, 1, 0, 0.2), 2.0)
        # Then
        assert _alpha(surface, 1, 1) == 0


class TestMarkerOverlay:
    def test_window_setup(self, monkeypatch):
        # Given / When
        mod, win = _load_overlay_module(monkeypatch)
        mod.MarkerOverlay(Config())
        # Then
        win.set_decorated.assert_called_once_with(False)
        win.set_accept_focus.assert_called_once_with(False)
        win.set_app_paintable.assert_called_once_with(True)
        win.set_visual.assert_called_once()
        signals = [c.args[0] for c in win.connect.call_args_list]
        assert signals == ["draw", "realize"]

    def test_no_rgba_visual(self, monkeypatch):
        mod, win = _load_overlay_module(monkeypatch, rgba_visual=False)
        mod.MarkerOverlay(Config())
        win.set_visual.assert_not_called()

    def test_device_pixels_scaled_to_logical(self, monkeypatch):
        # Given
        mod, win = _load_overlay_module(monkeypatch, scale=2)
        overlay = mod.MarkerOverlay(Config())
        # When
        overlay.set_position(100, 120)
        overlay.set_size(32, 32)
        # Then
        win.move.assert_called_once_with(50, 60)
        win.set_size_request.assert_called_once_with(16, 16)
        win.resize.assert_called_once_with(16, 16)

    def test_negative_coordinates_floor_to_logical(self, monkeypatch):
        # Given: a window hanging off the top-left edge on a scale-2 display
        mod, win = _load_overlay_module(monkeypatch, scale=2)
        overlay = mod.MarkerOverlay(Config())
        # When
        overlay.set_position(-7, -1)
        # Then
        win.move.assert_called_once_with(-4, -1)

    def test_show_hide_redraw(self, monkeypatch):
        # Given
        mod, win = _load_overlay_module(monkeypatch)
        overlay = mod.MarkerOverlay(Config())
        # When
        overlay.show()
        overlay.request_redraw()
        overlay.hide()
        # Then
        win.show_all.assert_called_once_with()
        win.queue_draw.assert_called_once_with()
        win.hide.assert_called_once_with()

    def test_realize_makes_window_click_through(self, monkeypatch):
        # Given
        mod, win = _load_overlay_module(monkeypatch)
        mod.MarkerOverlay(Config())
        handlers = {c.args[0]: c.args[1] for c in win.connect.call_args_list}
        widget = MagicMock()
        # When
        handlers["realize"](widget)
        # Then
        region = widget.get_window.return_value.input_shape_combine_region.call_args.args[0]
        assert isinstance(region, cairo.Region)
        assert region.is_empty()

    def test_draw_handler_paints(self, monkeypatch):
        # Given
        mod, win = _load_overlay_module(monkeypatch)
        mod.MarkerOverlay(Config())
        handlers = {c.args[0]: c.args[1] for c in win.connect.call_args_list}
        widget = MagicMock()
        widget.get_allocated_width.return_value = 16
        widget.get_allocated_height.return_value = 16
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 16, 16)
        # When
        result = handlers["draw"](widget, cairo.Context(surface))
        # Then
        assert result is True
        assert _alpha(surface, 8, 8) > 0

    def test_destroy_is_idempotent(self, monkeypatch):
        # Given
        mod, win = _load_overlay_module(monkeypatch)
        overlay = mod.MarkerOverlay(Config())
        # When
        overlay.destroy()
        overlay.destroy()
        overlay.show()
        overlay.set_position(1, 1)
        # Then
        win.destroy.assert_called_once_with()
        win.show_all.assert_not_called()
        win.move.assert_not_called()

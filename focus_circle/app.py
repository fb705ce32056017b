"""Application entry point -- activates the focus marker and runs the GTK main loop."""

from __future__ import annotations

import faulthandler
import signal

# Print Python traceback on SIGSEGV/SIGABRT/SIGFPE to stderr.
# Also dumps on SIGUSR1 for on-demand debugging (kill -USR1 <pid>).
faulthandler.enable()
faulthandler.register(signal.SIGUSR1)

import gi

gi.require_version("Gtk", "3.0")
from gi.repository import GLib, Gtk  # noqa: E402

from focus_circle.core.config import Config
from focus_circle.extension import Collaborators, FocusCircleExtension
from focus_circle.platform.timer import GLibTimerService
from focus_circle.platform.window_tracker import WnckEventSource
from focus_circle.ui.overlay import MarkerOverlay


def build_collaborators(config: Config) -> Collaborators:
    """Wire the libwnck event source, GTK overlay and GLib timers."""
    events = WnckEventSource()
    return Collaborators(
        events=events,
        overlay=MarkerOverlay(config),
        timers=GLibTimerService(),
    )


def main() -> None:
    """Entry point for the focus-circle application."""
    config = Config.load()
    extension = FocusCircleExtension(config, build=build_collaborators)

    # Graceful shutdown on SIGINT/SIGTERM
    GLib.unix_signal_add(GLib.PRIORITY_HIGH, signal.SIGINT, _quit)
    GLib.unix_signal_add(GLib.PRIORITY_HIGH, signal.SIGTERM, _quit)

    extension.activate()
    try:
        Gtk.main()
    finally:
        extension.deactivate()


def _quit() -> bool:
    Gtk.main_quit()
    return False


if __name__ == "__main__":
    main()

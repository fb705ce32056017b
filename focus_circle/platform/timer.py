"""Single-shot timers on the GLib main loop."""

from __future__ import annotations

from typing import Callable

from focus_circle.log import get_logger

log = get_logger(name="timer")

import gi

gi.require_version("GLib", "2.0")
from gi.repository import GLib  # noqa: E402


def _source_exists(source_id: int) -> bool:
    """Return True when a GLib source id is still active."""
    if source_id <= 0:
        return False
    try:
        ctx = GLib.MainContext.default()
        return bool(ctx and ctx.find_source_by_id(source_id))
    except Exception as exc:
        log.debug("Could not query GLib source id %s: %s", source_id, exc)
        # If runtime doesn't expose the check, fall back to best effort.
        return True


class GLibTimerService:
    """Schedules callbacks once with GLib.timeout_add."""

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> int:
        def fire() -> bool:
            callback()
            return GLib.SOURCE_REMOVE

        return GLib.timeout_add(delay_ms, fire)

    def cancel(self, handle: int | None) -> None:
        """Remove a pending source; already-fired or unknown ids are ignored."""
        if handle and _source_exists(source_id=handle):
            GLib.source_remove(handle)

"""Extension lifecycle -- owns the single controller between activate and deactivate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, NamedTuple

from focus_circle.core.controller import FocusMarkerController
from focus_circle.log import get_logger

log = get_logger(name="extension")

if TYPE_CHECKING:
    from focus_circle.core.config import Config
    from focus_circle.core.model import EventSource, OverlayHandle, TimerService


class Collaborators(NamedTuple):
    events: EventSource
    overlay: OverlayHandle
    timers: TimerService


class FocusCircleExtension:
    """Host-facing activate/deactivate surface."""

    def __init__(self, config: Config, build: Callable[[Config], Collaborators]) -> None:
        self._config = config
        self._build = build
        self._controller: FocusMarkerController | None = None

    @property
    def active(self) -> bool:
        return self._controller is not None

    @property
    def controller(self) -> FocusMarkerController | None:
        return self._controller

    def activate(self) -> None:
        """Create and start the controller; no-op when already active."""
        if self._controller is not None:
            return
        controller: FocusMarkerController | None = None
        try:
            parts = self._build(self._config)
            controller = FocusMarkerController(
                events=parts.events,
                overlay=parts.overlay,
                timers=parts.timers,
                config=self._config,
            )
            controller.start()
        except Exception:
            log.exception("Failed to activate focus marker")
            if controller is not None:
                _quietly(controller.destroy)
            return
        self._controller = controller
        log.info("activated")

    def deactivate(self) -> None:
        """Release every subscription, timer and drawable; no-op when inactive."""
        if self._controller is None:
            return
        controller, self._controller = self._controller, None
        controller.destroy()
        log.info("deactivated")


def _quietly(func: Callable[[], Any]) -> None:
    try:
        func()
    except Exception:
        log.exception("Cleanup after failed activation also failed")

"""Owned signal registrations and host capability probing."""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from focus_circle.core.model import UnsupportedNotification
from focus_circle.log import get_logger

log = get_logger(name="subscriptions")

T = TypeVar("T")


class SubscriptionSet:
    """A list of (source, token) pairs released together.

    Sources only need a disconnect(token) method.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[Any, Any]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, source: Any, token: Any) -> None:
        self._entries.append((source, token))

    def release_all(self) -> None:
        """Disconnect every registration; failures are logged and skipped."""
        entries, self._entries = self._entries, []
        for source, token in entries:
            try:
                source.disconnect(token)
            except Exception as exc:
                log.debug("Ignoring disconnect failure for %r: %s", token, exc)


def first_available(
    candidates: Sequence[tuple[str, Callable[[], T | None]]],
) -> tuple[str, T] | None:
    """Return (name, provider) for the first candidate whose probe succeeds.

    A probe signals absence by returning None or raising
    UnsupportedNotification.
    """
    for name, probe in candidates:
        try:
            provider = probe()
        except UnsupportedNotification as exc:
            log.debug("Provider %s unavailable: %s", name, exc)
            continue
        if provider is not None:
            return name, provider
        log.debug("Provider %s unavailable", name)
    return None

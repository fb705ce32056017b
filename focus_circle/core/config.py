"""Configuration loading, saving, and defaults for the focus marker."""

from __future__ import annotations

import json
import math
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from focus_circle.core.geometry import DEFAULT_INSET_FACTOR, DEFAULT_SIZE_FACTOR
from focus_circle.core.model import WindowType
from focus_circle.log import get_logger

log = get_logger(name="config")

DEFAULT_CONFIG_DIR = (
    Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "focus-circle"
)
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

DEFAULT_HIDE_TIMEOUT_MS = 10000


@dataclass
class Config:
    """Marker configuration with sensible defaults."""

    # Delay in ms before the marker hides itself after a focus change
    hide_timeout_ms: int = DEFAULT_HIDE_TIMEOUT_MS
    # Marker diameter as a fraction of the title-bar anchor height
    size_factor: float = DEFAULT_SIZE_FACTOR
    # Distance from the frame's top-left corner, same unit as size_factor
    inset_factor: float = DEFAULT_INSET_FACTOR
    # Circle fill, RGBA in 0..1 (30% yellow)
    fill_rgba: list[float] = field(default_factory=lambda: [1.0, 1.0, 0.0, 0.3])
    # Circle outline, RGBA in 0..1
    border_rgba: list[float] = field(default_factory=lambda: [1.0, 1.0, 0.0, 0.2])
    border_width: float = 2.0
    # Window types that never get a marker (WindowType values)
    excluded_window_types: list[str] = field(default_factory=lambda: ["desktop"])

    @property
    def excluded_types(self) -> frozenset[WindowType]:
        """Excluded window types as enums; unknown names are skipped."""
        known = {t.value for t in WindowType}
        return frozenset(
            WindowType(name)
            for name in self.excluded_window_types
            if isinstance(name, str) and name in known
        )

    def __post_init__(self) -> None:
        self._path: Path = DEFAULT_CONFIG_FILE

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load config from JSON file, falling back to defaults for missing keys."""
        path = Path(path) if path else DEFAULT_CONFIG_FILE
        if not path.exists():
            config = cls()
            config._path = path
            config.save(path)
            return config

        with open(path) as f:
            data: dict[str, Any] = json.load(f)

        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        config = cls(**filtered)
        config._path = path
        config._validate()
        return config

    def _validate(self) -> None:
        """Replace invalid values with defaults."""
        defaults = Config()
        timeout = self.hide_timeout_ms
        if not _is_number(timeout) or not isinstance(timeout, int) or timeout <= 0:
            log.warning("Invalid hide_timeout_ms %r, using default", self.hide_timeout_ms)
            self.hide_timeout_ms = defaults.hide_timeout_ms
        for name in ("size_factor", "inset_factor", "border_width"):
            value = getattr(self, name)
            if not _is_number(value) or value < 0:
                log.warning("Invalid %s %r, using default", name, value)
                setattr(self, name, getattr(defaults, name))
        for name in ("fill_rgba", "border_rgba"):
            value = getattr(self, name)
            if (
                not isinstance(value, list)
                or len(value) != 4
                or not all(_is_number(c) and 0 <= c <= 1 for c in value)
            ):
                log.warning("Invalid %s %r, using default", name, value)
                setattr(self, name, getattr(defaults, name))

        if not isinstance(self.excluded_window_types, list):
            log.warning(
                "Invalid excluded_window_types %r, using default",
                self.excluded_window_types,
            )
            self.excluded_window_types = defaults.excluded_window_types
        known = {t.value for t in WindowType}
        kept = [n for n in self.excluded_window_types if isinstance(n, str) and n in known]
        if len(kept) != len(self.excluded_window_types):
            log.warning(
                "Ignoring unknown window types: %s",
                [n for n in self.excluded_window_types if n not in kept],
            )
        self.excluded_window_types = kept

    def save(self, path: Path | str | None = None) -> None:
        """Save config to JSON file."""
        path = Path(path) if path else self._path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)
            f.write("\n")


def _is_number(value: Any) -> bool:
    """True for finite ints and floats; bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

"""Marker geometry -- diameter and corner inset derived from the display scale."""

from __future__ import annotations

import math
from typing import NamedTuple

from focus_circle.core.model import FrameRect

# Generic title-bar height used as a sizing anchor, not a measured value
BASE_TITLE_HEIGHT = 32
DEFAULT_SIZE_FACTOR = 0.504
DEFAULT_INSET_FACTOR = 0.15


class MarkerGeometry(NamedTuple):
    diameter: int
    inset: int


def normalize_scale(scale: float | None) -> float:
    """Return scale when it is a positive finite number, otherwise 1."""
    try:
        value = float(scale)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(value) or value <= 0:
        return 1
    return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_geometry(
    scale: float | None,
    size_factor: float = DEFAULT_SIZE_FACTOR,
    inset_factor: float = DEFAULT_INSET_FACTOR,
) -> MarkerGeometry:
    """Compute marker diameter and inset for a display scale factor.

    Both values are BASE_TITLE_HEIGHT * scale * factor, rounded half up
    (so 2.5 -> 3, unlike Python's round()).
    """
    title_px = BASE_TITLE_HEIGHT * normalize_scale(scale=scale)
    return MarkerGeometry(
        diameter=_round_half_up(title_px * size_factor),
        inset=_round_half_up(title_px * inset_factor),
    )


def marker_origin(rect: FrameRect, inset: int) -> tuple[int, int]:
    """Top-left of the marker for a window frame."""
    return rect.x + inset, rect.y + inset

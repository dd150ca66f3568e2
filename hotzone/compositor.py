"""Per-pixel overlay rendering of the current selection.

Every render starts again from the original pixels, so the result depends only
on the selection passed in, never on earlier renders. The frame buffer is
allocated once and reused for every call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .color import ColorCache
from .config import HotZoneConfig
from .errors import HotZoneError
from .geometry import Rect
from .logger import get_logger

_logger = get_logger("compositor")

RGB_CHANNELS = 3
RGBA_CHANNELS = 4

BlendColor = tuple[int, int, int, float]


@dataclass(frozen=True, slots=True)
class Palette:
    """Resolved blend colors, each ``(r, g, b, alpha)`` with alpha in 0..1."""

    overlay: BlendColor
    selected: BlendColor
    line: BlendColor

    @classmethod
    def from_config(cls, config: HotZoneConfig, cache: ColorCache) -> Palette:
        return cls(
            overlay=cache.get(config.overlay_color),
            selected=cache.get(config.selected_color),
            line=cache.get(config.line_color),
        )


def as_rgba(pixels: np.ndarray) -> np.ndarray:
    """Validate an ``H x W x 3|4`` uint8 buffer and return it as RGBA.

    RGB input gets an opaque alpha channel appended.
    """
    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] not in (RGB_CHANNELS, RGBA_CHANNELS):
        raise HotZoneError(f"expected an H x W x 3|4 pixel buffer, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        raise HotZoneError(f"expected uint8 pixels, got {arr.dtype}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise HotZoneError(f"cannot attach to an empty {arr.shape[1]}x{arr.shape[0]} image")
    if arr.shape[2] == RGB_CHANNELS:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=2)
    return np.ascontiguousarray(arr)


def blend_table(color: BlendColor) -> np.ndarray:
    """Lookup table ``[value, channel] -> blended value`` for one color.

    ``new = clamp(round(orig * (1 - a) + c * a), 0, 255)`` with half-up rounding.
    """
    r, g, b, a = color
    values = np.arange(256, dtype=np.float64)[:, None]
    blended = values * (1 - a) + np.array([r, g, b], dtype=np.float64) * a
    return np.clip(np.floor(blended + 0.5), 0, 255).astype(np.uint8)


def _inclusive_span(lo: float, hi: float, size: int) -> slice:
    """Pixels ``p`` with ``lo <= p <= hi``, clipped to ``0..size-1``."""
    start = max(0, math.ceil(lo))
    stop = min(size, math.floor(hi) + 1)
    return slice(start, max(start, stop))


def _exclusive_span(lo: float, hi: float, size: int) -> slice:
    """Pixels ``p`` with ``lo < p < hi``, clipped to ``0..size-1``."""
    start = max(0, math.floor(lo) + 1)
    stop = min(size, math.ceil(hi))
    return slice(start, max(start, stop))


class Compositor:
    def __init__(self, original: np.ndarray, line_width: float, palette: Palette):
        # Private copy: the caller keeps ownership of the buffer it passed in.
        self._original = np.array(as_rgba(original))
        self._original.setflags(write=False)
        self._frame = self._original.copy()
        _logger.debug("compositor ready: %dx%d", self.width, self.height)
        self.line_width = line_width
        self.palette = palette
        self._tables: dict[BlendColor, np.ndarray] = {}
        # Reused by every render: pixel indices for np.take and its output.
        self._index = np.empty(self.width * self.height, dtype=np.intp)
        self._values = np.empty(self.width * self.height, dtype=np.uint8)

    @property
    def width(self) -> int:
        return int(self._original.shape[1])

    @property
    def height(self) -> int:
        return int(self._original.shape[0])

    @property
    def original(self) -> np.ndarray:
        """Read-only view of the pixels the widget was attached with."""
        return self._original

    @property
    def frame(self) -> np.ndarray:
        """The buffer produced by the last :meth:`render` call."""
        return self._frame

    def _table(self, color: BlendColor) -> np.ndarray:
        table = self._tables.get(color)
        if table is None:
            # Channel-major so each channel lookup reads a contiguous row.
            table = np.ascontiguousarray(blend_table(color).T)
            self._tables[color] = table
        return table

    def _paint(self, rows: slice, cols: slice, color: BlendColor) -> None:
        src = self._original[rows, cols, :RGB_CHANNELS]
        if src.size == 0:
            return
        dst = self._frame[rows, cols, :RGB_CHANNELS]
        if color[3] == 0:
            np.copyto(dst, src)
            return
        # Per channel through the scratch buffers, so no image-sized temporaries.
        table = self._table(color)
        n = src.shape[0] * src.shape[1]
        index = self._index[:n].reshape(src.shape[:2])
        values = self._values[:n].reshape(src.shape[:2])
        for c in range(RGB_CHANNELS):
            np.copyto(index, src[..., c])
            np.take(table[c], index, out=values, mode="clip")
            np.copyto(dst[..., c], values)

    def render(self, selection: Rect | None) -> np.ndarray:
        """Composite ``selection`` over the original pixels.

        Returns the internal frame buffer; it is overwritten by the next call.
        """
        np.copyto(self._frame, self._original)
        if selection is None:
            return self._frame

        h, w = self.height, self.width
        outer = selection.expanded(self.line_width)
        everything = slice(0, None)

        # Background first, then the outer box (line band) and the interior on top.
        self._paint(everything, everything, self.palette.overlay)
        outer_rows = _inclusive_span(outer.top, outer.bottom, h)
        outer_cols = _inclusive_span(outer.left, outer.right, w)
        self._paint(outer_rows, outer_cols, self.palette.line)
        inner_rows = _exclusive_span(selection.top, selection.bottom, h)
        inner_cols = _exclusive_span(selection.left, selection.right, w)
        self._paint(inner_rows, inner_cols, self.palette.selected)

        return self._frame

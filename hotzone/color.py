"""Color string parsing for the overlay compositor.

Supported forms, tried in this order:
    - ``#ARGB`` / ``#RGB``: short hex, each digit duplicated
    - ``#AARRGGBB`` / ``#RRGGBB``: long hex
    - ``rgb(r, g, b)`` / ``rgba(r, g, b, a)`` with ``a`` in 0..1

The leading ``#`` is optional. Anything else resolves to transparent black.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from hotzone.logger import get_logger

_logger = get_logger("color")

_SHORT_HEX = re.compile(r"^\s*#?([0-9A-F])?([0-9A-F])([0-9A-F])([0-9A-F])\s*$", re.IGNORECASE)
_LONG_HEX = re.compile(
    r"^\s*#?([0-9A-F]{2})?([0-9A-F]{2})([0-9A-F]{2})([0-9A-F]{2})\s*$",
    re.IGNORECASE,
)
_FUNCTIONAL = re.compile(
    r"^\s*rgba?\s*\(\s*([0-9]+)\s*,\s*([0-9]+)\s*,\s*([0-9]+)\s*(?:,\s*([0-9]*\.?[0-9]+)\s*)?\)\s*$",
    re.IGNORECASE,
)

OPAQUE = 255


def _channel(value: float) -> int:
    # Half-up rounding, then clamp to a byte.
    return min(255, max(0, math.floor(value + 0.5)))


@dataclass(frozen=True, slots=True)
class Color:
    """RGBA color with byte channels; ``a == 255`` is opaque."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    @classmethod
    def load(cls, r: float, g: float, b: float, a: float | None = None) -> Color:
        """Build a color from unchecked values, rounding and clamping each channel."""
        return cls(_channel(r), _channel(g), _channel(b), _channel(OPAQUE if a is None else a))

    def to_pixel(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def to_blend(self) -> tuple[int, int, int, float]:
        """Return ``(r, g, b, alpha)`` with alpha normalized to 0..1."""
        return (self.r, self.g, self.b, self.a / 255)


TRANSPARENT = Color()


def _parse_short_hex(text: str) -> Color | None:
    m = _SHORT_HEX.match(text)
    if m is None:
        return None
    alpha, red, green, blue = m.groups()
    return Color.load(
        int(red * 2, 16),
        int(green * 2, 16),
        int(blue * 2, 16),
        int(alpha * 2, 16) if alpha is not None else None,
    )


def _parse_long_hex(text: str) -> Color | None:
    m = _LONG_HEX.match(text)
    if m is None:
        return None
    alpha, red, green, blue = m.groups()
    return Color.load(
        int(red, 16),
        int(green, 16),
        int(blue, 16),
        int(alpha, 16) if alpha is not None else None,
    )


def _parse_functional(text: str) -> Color | None:
    m = _FUNCTIONAL.match(text)
    if m is None:
        return None
    red, green, blue, alpha = m.groups()
    return Color.load(
        int(red),
        int(green),
        int(blue),
        float(alpha) * 255 if alpha is not None else None,
    )


_PARSERS = (_parse_short_hex, _parse_long_hex, _parse_functional)


def parse_color(text: str | None) -> Color:
    """Parse ``text`` into a :class:`Color`; never raises.

    Unparseable (or empty) input yields transparent black.
    """
    if not text or not isinstance(text, str):
        return TRANSPARENT
    for parser in _PARSERS:
        color = parser(text)
        if color is not None:
            return color
    _logger.debug("unparseable color %r, using transparent black", text)
    return TRANSPARENT


class ColorCache:
    """Memoizes parsed colors by their exact input string.

    Entries are never evicted; a widget only ever sees a handful of distinct
    config colors.
    """

    def __init__(self) -> None:
        self._cache: dict[str | None, tuple[int, int, int, float]] = {}

    def get(self, text: str | None) -> tuple[int, int, int, float]:
        """Return ``(r, g, b, alpha)`` for ``text`` with alpha normalized to 0..1."""
        # Non-string config values (lists, dicts...) are unparseable and may be unhashable.
        key = text if isinstance(text, str) else None
        try:
            return self._cache[key]
        except KeyError:
            pixel = parse_color(key).to_blend()
            self._cache[key] = pixel
            return pixel

    def __contains__(self, text: object) -> bool:
        return (text is None or isinstance(text, str)) and text in self._cache

    def __len__(self) -> int:
        return len(self._cache)

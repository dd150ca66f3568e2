from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import numpy as np

from .color import ColorCache
from .compositor import Compositor, Palette
from .config import HotZoneConfig
from .controller import InteractionController
from .encoder import DEFAULT_FORMAT, DEFAULT_QUALITY, VipsImageEncoder
from .errors import HotZoneError
from .geometry import Rect, round_half_up
from .logger import get_logger
from .surface import DrawableSurface, ImageEncoder

_logger = get_logger("widget")


class HotZone:
    """A region-of-interest selector bound to one surface and one image.

    The host feeds pointer events through :meth:`pointer_down`,
    :meth:`pointer_move`, :meth:`pointer_up` and :meth:`pointer_leave`; every
    change of the selection is painted onto the surface before the call
    returns.
    """

    def __init__(
        self,
        surface: DrawableSurface,
        pixels: np.ndarray,
        config: HotZoneConfig | Mapping[str, Any] | None = None,
        *,
        encoder: ImageEncoder | None = None,
        on_selection_changed: Callable[[Rect | None], None] | None = None,
    ):
        bounds = surface.bounds()
        if bounds.width <= 0 or bounds.height <= 0:
            raise HotZoneError(f"cannot attach to a {bounds.width}x{bounds.height} surface")

        self.config = config if isinstance(config, HotZoneConfig) else HotZoneConfig(config)
        self.colors = ColorCache()
        self.surface = surface
        self.encoder: ImageEncoder = encoder if encoder is not None else VipsImageEncoder()
        self.compositor = Compositor(
            pixels,
            line_width=self.config.line_width,
            palette=Palette.from_config(self.config, self.colors),
        )
        self.controller = InteractionController(
            surface,
            self.compositor,
            grab_zone=self.config.grab_zone,
            on_change=on_selection_changed,
        )
        surface.put_pixels(self.compositor.render(None))
        _logger.info("attached to %dx%d image", self.compositor.width, self.compositor.height)

    # ---- pointer port ----
    def pointer_down(self, x: float, y: float) -> None:
        self.controller.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> None:
        self.controller.pointer_move(x, y)

    def pointer_up(self, x: float, y: float) -> None:
        self.controller.pointer_up(x, y)

    def pointer_leave(self, x: float, y: float) -> None:
        self.controller.pointer_leave(x, y)

    # ---- public API ----
    def get_selection(self) -> Rect | None:
        """Return the selected rectangle, or None if nothing is selected."""
        return self.controller.selection

    def is_active(self) -> bool:
        return self.controller.is_active

    def crop_box(self) -> tuple[int, int, int, int] | None:
        """Selection as whole pixels ``(left, top, width, height)`` inside the image.

        None when nothing (or only an empty rect) is selected.
        """
        sel = self.controller.selection
        if sel is None:
            return None
        w, h = self.compositor.width, self.compositor.height
        left = min(w, max(0, round_half_up(sel.left)))
        top = min(h, max(0, round_half_up(sel.top)))
        right = min(w, max(left, round_half_up(sel.right)))
        bottom = min(h, max(top, round_half_up(sel.bottom)))
        if right == left or bottom == top:
            return None
        return (left, top, right - left, bottom - top)

    def get_image(self, format: str = DEFAULT_FORMAT, quality: float = DEFAULT_QUALITY) -> bytes | None:
        """Encode the selected part of the original image.

        Args:
            format: MIME type or format name (png, jpeg, webp)
            quality: 0..1, used by lossy formats

        Returns:
            Encoded bytes, or None if there is no (non-empty) selection
        """
        box = self.crop_box()
        if box is None:
            return None
        left, top, width, height = box
        region = self.compositor.original[top : top + height, left : left + width]
        data = self.encoder.encode(region, format, quality)
        _logger.info("encoded selection %s as %s", box, format)
        return data

    def clear(self) -> None:
        """Drop the selection; the next drag creates a new one."""
        self.controller.clear()

    def stop(self) -> None:
        """Abort an in-progress drag without discarding the last selection."""
        self.controller.stop()


def attach(
    surface: DrawableSurface,
    pixels: np.ndarray,
    config: HotZoneConfig | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> HotZone:
    """Bind a selector to ``surface`` showing ``pixels`` and return it ready for input."""
    return HotZone(surface, pixels, config, **kwargs)

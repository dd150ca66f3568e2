"""Rectangular region-of-interest selection over raster images.

Keep this module lightweight: it does not import Qt. The PySide6 surface lives
in `hotzone.ui_hotzone`.
"""

from .color import Color, ColorCache, parse_color
from .compositor import Compositor, Palette
from .config import HotZoneConfig
from .controller import DragOrigin, InteractionController
from .errors import HotZoneError
from .geometry import EditOp, Rect, apply_edit, classify_pointer
from .surface import Bounds, DrawableSurface, ImageEncoder, PointerListener
from .widget import HotZone, attach

__all__ = [
    "Bounds",
    "Color",
    "ColorCache",
    "Compositor",
    "DragOrigin",
    "DrawableSurface",
    "EditOp",
    "HotZone",
    "HotZoneConfig",
    "HotZoneError",
    "ImageEncoder",
    "InteractionController",
    "Palette",
    "PointerListener",
    "Rect",
    "apply_edit",
    "attach",
    "classify_pointer",
    "parse_color",
]

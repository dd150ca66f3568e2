"""Image encoding using pyvips.

Pure functions over numpy buffers, no Qt dependencies.
"""

from __future__ import annotations

import contextlib
from typing import Any

import numpy as np

from .errors import HotZoneError
from .logger import get_logger

_logger = get_logger("encoder")

try:
    import pyvips  # type: ignore
except (ImportError, OSError):
    pyvips = None  # type: ignore
    _logger.warning("pyvips is not available; image encoding will raise ImportError when used")

_RGBA_DIMS = 3
_RGBA_CHANNELS = 4

DEFAULT_FORMAT = "image/png"
DEFAULT_QUALITY = 0.92

# MIME type or bare name -> pyvips saver suffix
_SUFFIXES = {
    "image/png": ".png",
    "png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "jpeg": ".jpg",
    "jpg": ".jpg",
    "image/webp": ".webp",
    "webp": ".webp",
}
# Formats whose savers take a Q option
_LOSSY = {".jpg", ".webp"}


def _get_pyvips_module() -> Any:
    """Return the pyvips module or raise ImportError if unavailable."""
    if pyvips is None:
        _logger.error("pyvips requested but not available")
        raise ImportError("pyvips is not available")
    return pyvips


def saver_suffix(format: str | None) -> str:
    """Map a MIME type or format name to the pyvips saver suffix."""
    key = (format or DEFAULT_FORMAT).strip().lower()
    try:
        return _SUFFIXES[key]
    except KeyError:
        raise HotZoneError(f"unsupported image format: {format!r}") from None


def quality_to_q(quality: float | None) -> int:
    """Map a 0..1 quality to a pyvips ``Q`` value in 1..100."""
    q = DEFAULT_QUALITY if quality is None else float(quality)
    if not 0.0 <= q <= 1.0:
        q = DEFAULT_QUALITY
    return max(1, min(100, round(q * 100)))


class VipsImageEncoder:
    """Encode RGBA numpy arrays to PNG/JPEG/WebP bytes with pyvips."""

    def encode(self, pixels: np.ndarray, format: str | None = DEFAULT_FORMAT, quality: float | None = None) -> bytes:
        if pixels.ndim != _RGBA_DIMS or pixels.shape[2] != _RGBA_CHANNELS:
            raise HotZoneError(f"expected RGBA numpy array with shape (h, w, 4), got {pixels.shape}")

        suffix = saver_suffix(format)
        vips = _get_pyvips_module()

        h, w, bands = pixels.shape
        # pyvips expects a contiguous bytes buffer in C order
        buf = np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()
        img: Any = vips.Image.new_from_memory(buf, w, h, bands, "uchar")
        with contextlib.suppress(Exception):
            img = img.copy(interpretation="srgb")
        if suffix == ".jpg":
            # JPEG has no alpha channel
            img = img.flatten(background=[0, 0, 0])

        options = f"[Q={quality_to_q(quality)}]" if suffix in _LOSSY else ""
        try:
            out = img.write_to_buffer(suffix + options)
        except Exception as e:
            _logger.error("encode to %s failed: %s", suffix, e, exc_info=True)
            raise HotZoneError(f"failed to encode {w}x{h} image as {suffix}: {e}") from e

        _logger.debug("encoded %dx%d region as %s (%d bytes)", w, h, suffix, len(out))
        # Normalize to bytes in case pyvips returns a memoryview-like object
        if isinstance(out, bytes):
            return out
        return bytes(out)

"""Collaborator interfaces the widget is wired to by its host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np


@dataclass(frozen=True, slots=True)
class Bounds:
    """Client rectangle of the surface, in the viewport coordinates pointer events use."""

    left: float
    top: float
    width: float
    height: float


@runtime_checkable
class DrawableSurface(Protocol):
    def bounds(self) -> Bounds:
        """Current position and size of the surface on the viewport."""
        ...

    def put_pixels(self, frame: np.ndarray) -> None:
        """Display an ``H x W x 4`` RGBA frame. The buffer is reused; copy it to keep it."""
        ...

    def set_cursor(self, name: str) -> None:
        """Show a CSS-style cursor hint (``default``, ``move``, ``ne-resize``...)."""
        ...


@runtime_checkable
class PointerListener(Protocol):
    """Port through which the host delivers pointer events in viewport coordinates."""

    def pointer_down(self, x: float, y: float) -> None: ...

    def pointer_move(self, x: float, y: float) -> None: ...

    def pointer_up(self, x: float, y: float) -> None: ...

    def pointer_leave(self, x: float, y: float) -> None: ...


@runtime_checkable
class ImageEncoder(Protocol):
    def encode(self, pixels: np.ndarray, format: str, quality: float | None) -> bytes:
        """Encode an ``H x W x 4`` RGBA array into image file bytes."""
        ...

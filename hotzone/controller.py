"""Pointer-driven state machine for editing the selection.

States:
    - idle without a selection: the next drag creates one
    - idle with a selection: hovering arms select / move / one of 8 resizes
    - dragging: every move re-runs the armed edit from the drag origin

A drag is active exactly while a :class:`DragOrigin` is held.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from .compositor import Compositor
from .geometry import EditOp, Rect, apply_edit, classify_pointer
from .logger import get_logger
from .surface import Bounds, DrawableSurface

_logger = get_logger("controller")


@dataclass(frozen=True, slots=True)
class DragOrigin:
    """Where a drag started, in surface coordinates, and the selection at that moment."""

    x: float
    y: float
    rect: Rect | None


class InteractionController:
    # Toggle per-move debug logs (False to reduce spam)
    _VERBOSE_DRAG_LOG = False

    def __init__(
        self,
        surface: DrawableSurface,
        compositor: Compositor,
        grab_zone: float,
        on_change: Callable[[Rect | None], None] | None = None,
    ):
        self.surface = surface
        self.compositor = compositor
        self.grab_zone = grab_zone
        self.active_op: EditOp | None = EditOp.SELECT
        self.origin: DragOrigin | None = None
        self.selection: Rect | None = None
        self._bounds: Bounds = surface.bounds()
        self._on_change = on_change

    @property
    def is_active(self) -> bool:
        """True while the user is dragging."""
        return self.origin is not None

    # ---- pointer port ----
    def pointer_down(self, x: float, y: float) -> None:
        self._bounds = self.surface.bounds()
        if self.active_op is None and self.selection is None:
            self.active_op = EditOp.SELECT

        self.origin = DragOrigin(x - self._bounds.left, y - self._bounds.top, self.selection)
        op = self.active_op
        if op is None:
            return

        _logger.debug("drag start: op=%s origin=(%s,%s)", op.value, self.origin.x, self.origin.y)
        self.set_selection(apply_edit(op, self.origin.x, self.origin.y, 0, 0, self.origin.rect))
        # Later moves are measured against the rect as it looks after the zero-delta edit.
        self.origin = replace(self.origin, rect=self.selection)

    def pointer_move(self, x: float, y: float) -> None:
        if self.origin is not None:
            if self.active_op is None:
                return
            dx = x - self._bounds.left - self.origin.x
            dy = y - self._bounds.top - self.origin.y
            rect = apply_edit(self.active_op, self.origin.x, self.origin.y, dx, dy, self.origin.rect)
            if self._VERBOSE_DRAG_LOG:
                _logger.debug("drag: op=%s d=(%s,%s) rect=%s", self.active_op.value, dx, dy, rect)
            self.set_selection(rect)
        elif self.selection is not None:
            self._arm(x, y)

    def pointer_up(self, x: float, y: float) -> None:
        self.stop()

    def pointer_leave(self, x: float, y: float) -> None:
        self.stop()

    def _arm(self, x: float, y: float) -> None:
        bounds = self.surface.bounds()
        op = classify_pointer(self.selection, x - bounds.left, y - bounds.top, self.grab_zone)
        if op is not self.active_op:
            _logger.debug("hover: op=%s", op.value)
        self.active_op = op
        self.surface.set_cursor(op.cursor)

    # ---- operations ----
    def stop(self) -> None:
        """End the current drag, keeping whatever selection it last produced."""
        if self.origin is not None:
            _logger.debug("drag end: selection=%s", self.selection)
        self.active_op = None
        self.origin = None

    def clear(self) -> None:
        self.set_selection(None)

    def set_selection(self, rect: Rect | None) -> None:
        """Replace the selection and repaint the surface.

        The rect is clamped into the image first; ``None`` drops the selection
        and arms a fresh select.
        """
        if rect is None:
            if self.selection is not None:
                _logger.debug("selection cleared")
            self.active_op = EditOp.SELECT
        else:
            rect = rect.restrict_to_boundary(0, 0, self.compositor.width, self.compositor.height)

        self.selection = rect
        self.surface.put_pixels(self.compositor.render(rect))
        if self._on_change is not None:
            self._on_change(rect)

from __future__ import annotations

import enum
import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rect:
    """Rectangle in image pixel coordinates, (left, top, width, height) form.

    Negative extents are flipped on construction: the left (top) edge moves by
    the negative width (height) and the extent becomes positive.
    """

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0:
            object.__setattr__(self, "left", self.left + self.width)
            object.__setattr__(self, "width", -self.width)
        if self.height < 0:
            object.__setattr__(self, "top", self.top + self.height)
            object.__setattr__(self, "height", -self.height)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def restrict_to_boundary(self, min_left: float, min_top: float, max_right: float, max_bottom: float) -> Rect:
        """Slide the rect back inside the boundary, keeping its size.

        A rect larger than the boundary is never shrunk; its left (top) edge
        ends up at ``max_right - width`` (``max_bottom - height``).
        """
        left = min(max_right - self.width, max(self.left, min_left))
        top = min(max_bottom - self.height, max(self.top, min_top))
        return Rect(left, top, self.width, self.height)

    def expanded(self, margin: float) -> Rect:
        return Rect(self.left - margin, self.top - margin, self.width + 2 * margin, self.height + 2 * margin)


class EditOp(enum.Enum):
    """The ten ways a drag can edit the selection."""

    SELECT = "select"
    MOVE = "move"
    RESIZE_N = "n"
    RESIZE_NW = "nw"
    RESIZE_W = "w"
    RESIZE_SW = "sw"
    RESIZE_S = "s"
    RESIZE_SE = "se"
    RESIZE_E = "e"
    RESIZE_NE = "ne"

    @property
    def cursor(self) -> str:
        """CSS-style cursor hint shown while this operation is armed."""
        if self is EditOp.SELECT:
            return "default"
        if self is EditOp.MOVE:
            return "move"
        return f"{self.value}-resize"


# Sector order of the quantized hover angle, starting right above the center
# and turning anti-clockwise.
DIRECTIONS = (
    EditOp.RESIZE_N,
    EditOp.RESIZE_NW,
    EditOp.RESIZE_W,
    EditOp.RESIZE_SW,
    EditOp.RESIZE_S,
    EditOp.RESIZE_SE,
    EditOp.RESIZE_E,
    EditOp.RESIZE_NE,
)


def resize(dl: float, dt: float, dw: float, dh: float, start: Rect) -> Rect:
    return Rect(start.left + dl, start.top + dt, start.width + dw, start.height + dh)


def select(x: float, y: float, dx: float, dy: float, start: Rect | None = None) -> Rect:
    """Span a new rect from the drag origin to the pointer; ``start`` is ignored."""
    return Rect(x, y, dx, dy)


def move(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return Rect(start.left + dx, start.top + dy, start.width, start.height)


def resize_n(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(0, dy, 0, -dy, start)


def resize_nw(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(dx, dy, -dx, -dy, start)


def resize_w(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(dx, 0, -dx, 0, start)


def resize_sw(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(dx, 0, -dx, dy, start)


def resize_s(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(0, 0, 0, dy, start)


def resize_se(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(0, 0, dx, dy, start)


def resize_e(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(0, 0, dx, 0, start)


def resize_ne(x: float, y: float, dx: float, dy: float, start: Rect) -> Rect:
    return resize(0, dy, dx, -dy, start)


def apply_edit(op: EditOp, x: float, y: float, dx: float, dy: float, start: Rect | None) -> Rect:
    """Run edit ``op`` for a drag from ``(x, y)`` displaced by ``(dx, dy)``.

    ``start`` is the selection captured when the drag began; every operation
    except SELECT requires it.
    """
    if op is not EditOp.SELECT and start is None:
        raise ValueError(f"{op.name} needs the rect captured at drag start")

    match op:
        case EditOp.SELECT:
            return select(x, y, dx, dy, start)
        case EditOp.MOVE:
            return move(x, y, dx, dy, start)
        case EditOp.RESIZE_N:
            return resize_n(x, y, dx, dy, start)
        case EditOp.RESIZE_NW:
            return resize_nw(x, y, dx, dy, start)
        case EditOp.RESIZE_W:
            return resize_w(x, y, dx, dy, start)
        case EditOp.RESIZE_SW:
            return resize_sw(x, y, dx, dy, start)
        case EditOp.RESIZE_S:
            return resize_s(x, y, dx, dy, start)
        case EditOp.RESIZE_SE:
            return resize_se(x, y, dx, dy, start)
        case EditOp.RESIZE_E:
            return resize_e(x, y, dx, dy, start)
        case EditOp.RESIZE_NE:
            return resize_ne(x, y, dx, dy, start)
    raise ValueError(f"unknown edit op: {op!r}")


def round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def direction_for_angle(angle: float) -> EditOp:
    """Quantize an angle in degrees (0 right above the center, anti-clockwise) to a resize op.

    Each sector is 45 degrees wide, shifted by 22.5; the upper bound of a
    sector is exclusive. Angles past the last boundary wrap to north.
    """
    for i, op in enumerate(DIRECTIONS):
        if angle < i * 45 + 22.5:
            return op
    return DIRECTIONS[0]


def hover_angle(rect: Rect, x: float, y: float) -> float:
    """Angle in 0..360 at which ``(x, y)`` is seen from the center of ``rect``.

    ``x`` and ``y`` are relative to the rect's top-left corner.
    """
    a = round_half_up(x - rect.width / 2)
    b = round_half_up(y - rect.height / 2)
    return math.degrees(math.atan2(a, b)) + 180


def classify_pointer(rect: Rect, px: float, py: float, grab_zone: float) -> EditOp:
    """Pick the edit a drag starting at ``(px, py)`` would perform on ``rect``.

    Outside the rect grown by ``grab_zone`` a new selection is started, inside
    the rect shrunk by ``grab_zone`` it is moved, and in the band between the
    two it is resized towards the side the pointer is on.
    """
    x = px - rect.left
    y = py - rect.top

    if x < -grab_zone or x > rect.width + grab_zone or y < -grab_zone or y > rect.height + grab_zone:
        return EditOp.SELECT

    if grab_zone < x < rect.width - grab_zone and grab_zone < y < rect.height - grab_zone:
        return EditOp.MOVE

    return direction_for_angle(hover_angle(rect, x, y))

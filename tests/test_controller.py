from __future__ import annotations

import numpy as np
import pytest

from conftest import RecordingSurface, noise_image
from hotzone.color import ColorCache
from hotzone.compositor import Compositor, Palette
from hotzone.config import HotZoneConfig
from hotzone.controller import DragOrigin, InteractionController
from hotzone.geometry import EditOp, Rect


def _controller(surface: RecordingSurface, img: np.ndarray, **config):
    cfg = HotZoneConfig(config)
    comp = Compositor(img, line_width=cfg.line_width, palette=Palette.from_config(cfg, ColorCache()))
    changes: list[Rect | None] = []
    ctrl = InteractionController(surface, comp, grab_zone=cfg.grab_zone, on_change=changes.append)
    return ctrl, changes


def _drag(ctrl, start, end):
    ctrl.pointer_down(*start)
    ctrl.pointer_move(*end)
    ctrl.pointer_up(*end)


@pytest.fixture
def ctrl(surface, image):
    return _controller(surface, image)[0]


def test_initial_state(ctrl):
    assert ctrl.selection is None
    assert ctrl.active_op is EditOp.SELECT
    assert not ctrl.is_active


def test_pointer_down_without_selection_creates_empty_rect(ctrl, surface):
    ctrl.pointer_down(10, 10)
    assert ctrl.is_active
    assert ctrl.selection == Rect(10, 10, 0, 0)
    assert ctrl.origin == DragOrigin(10, 10, Rect(10, 10, 0, 0))
    assert len(surface.frames) == 1


def test_end_to_end_select_resize_clear(surface, image):
    ctrl, changes = _controller(surface, image)

    _drag(ctrl, (10, 10), (60, 40))
    assert ctrl.selection == Rect(10, 10, 50, 30)
    assert not ctrl.is_active
    assert ctrl.active_op is None

    # Hovering the bottom-right corner arms the south-east resize.
    ctrl.pointer_move(60, 40)
    assert ctrl.active_op is EditOp.RESIZE_SE
    assert surface.cursor == "se-resize"

    _drag(ctrl, (60, 40), (80, 50))
    assert ctrl.selection == Rect(10, 10, 70, 40)

    ctrl.clear()
    assert ctrl.selection is None
    assert ctrl.active_op is EditOp.SELECT
    assert np.array_equal(surface.last_frame, image)
    assert changes[-1] is None


def test_pointer_coordinates_are_relative_to_surface_bounds(image):
    surface = RecordingSurface(100, 100, left=200, top=50)
    ctrl, _ = _controller(surface, image)
    _drag(ctrl, (210, 60), (260, 90))
    assert ctrl.selection == Rect(10, 10, 50, 30)


def test_dragging_up_left_normalizes_rect(ctrl):
    _drag(ctrl, (60, 40), (10, 10))
    assert ctrl.selection == Rect(10, 10, 50, 30)


def test_selection_is_clamped_into_image(surface, image):
    ctrl, _ = _controller(surface, image, lineGrabZone=5, lineWidth=1)
    _drag(ctrl, (10, 10), (60, 40))
    ctrl.pointer_move(35, 25)
    assert ctrl.active_op is EditOp.MOVE
    _drag(ctrl, (35, 25), (135, 125))
    assert ctrl.selection == Rect(50, 70, 50, 30)


def test_move_inside_large_selection(surface, image):
    ctrl, _ = _controller(surface, image, lineGrabZone=5, lineWidth=1)
    _drag(ctrl, (10, 10), (70, 70))
    ctrl.pointer_move(40, 40)
    assert ctrl.active_op is EditOp.MOVE
    assert surface.cursor == "move"
    _drag(ctrl, (40, 40), (30, 45))
    assert ctrl.selection == Rect(0, 15, 60, 60)


def test_hover_outside_arms_new_selection(surface, image):
    ctrl, _ = _controller(surface, image, lineGrabZone=5, lineWidth=1)
    _drag(ctrl, (10, 10), (30, 30))
    ctrl.pointer_move(90, 90)
    assert ctrl.active_op is EditOp.SELECT
    assert surface.cursor == "default"
    _drag(ctrl, (90, 90), (80, 70))
    assert ctrl.selection == Rect(80, 70, 10, 20)


def test_resize_past_opposite_edge_flips(surface, image):
    ctrl, _ = _controller(surface, image, lineGrabZone=5, lineWidth=1)
    _drag(ctrl, (20, 20), (60, 60))
    ctrl.pointer_move(60, 40)
    assert ctrl.active_op is EditOp.RESIZE_E
    _drag(ctrl, (60, 40), (5, 40))
    assert ctrl.selection == Rect(5, 20, 15, 40)


def test_hover_without_selection_changes_nothing(ctrl, surface):
    ctrl.pointer_move(50, 50)
    assert ctrl.active_op is EditOp.SELECT
    assert surface.cursors == []
    assert surface.frames == []


def test_pointer_leave_keeps_last_rect(ctrl):
    ctrl.pointer_down(10, 10)
    ctrl.pointer_move(40, 30)
    ctrl.pointer_leave(40, 30)
    assert not ctrl.is_active
    assert ctrl.selection == Rect(10, 10, 30, 20)
    # Moving after leave does not edit anything.
    ctrl.pointer_move(90, 90)
    assert ctrl.selection == Rect(10, 10, 30, 20)


def test_stop_aborts_drag_without_rollback(ctrl):
    ctrl.pointer_down(10, 10)
    ctrl.pointer_move(40, 30)
    ctrl.stop()
    assert ctrl.origin is None
    assert ctrl.active_op is None
    assert ctrl.selection == Rect(10, 10, 30, 20)


def test_down_after_stop_without_hover_does_not_edit(ctrl):
    _drag(ctrl, (10, 10), (40, 30))
    ctrl.pointer_down(70, 70)
    ctrl.pointer_move(90, 90)
    assert ctrl.selection == Rect(10, 10, 30, 20)
    ctrl.pointer_up(90, 90)


def test_stop_then_down_without_selection_still_selects(ctrl):
    ctrl.stop()
    _drag(ctrl, (5, 5), (15, 25))
    assert ctrl.selection == Rect(5, 5, 10, 20)


def test_every_render_shows_whole_rect(surface, image):
    ctrl, changes = _controller(surface, image)
    _drag(ctrl, (10, 10), (60, 40))
    assert changes == [Rect(10, 10, 0, 0), Rect(10, 10, 50, 30)]
    assert len(surface.frames) == 2

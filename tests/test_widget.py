from __future__ import annotations

import numpy as np
import pytest

from conftest import RecordingSurface, noise_image
from hotzone import DrawableSurface, HotZone, HotZoneConfig, HotZoneError, ImageEncoder, PointerListener, Rect, attach


def _drag(zone, start, end):
    zone.pointer_down(*start)
    zone.pointer_move(*end)
    zone.pointer_up(*end)


def test_attach_shows_original_image(surface, image, encoder):
    zone = attach(surface, image, encoder=encoder)
    assert isinstance(zone, HotZone)
    assert zone.get_selection() is None
    assert np.array_equal(surface.last_frame, image)


def test_attach_fills_config_defaults_without_overwriting(surface, image, encoder):
    zone = attach(surface, image, {"lineWidth": 5, "custom": "kept"}, encoder=encoder)
    assert zone.config.line_width == 5
    assert zone.config.line_grab_zone == 40
    assert zone.config.get("custom") == "kept"


def test_attach_to_zero_sized_surface_fails(image):
    with pytest.raises(HotZoneError):
        attach(RecordingSurface(0, 100), image)


def test_attach_to_empty_image_fails(surface):
    with pytest.raises(HotZoneError):
        attach(surface, np.zeros((0, 0, 4), dtype=np.uint8))


def test_bad_color_config_degrades_to_transparent(surface, image, encoder):
    zone = attach(surface, image, {"overlayColor": "bogus", "lineColor": "bogus"}, encoder=encoder)
    _drag(zone, (10, 10), (60, 40))
    # Transparent overlay and line, no tint: the frame is the original image.
    assert np.array_equal(surface.last_frame, image)


def test_get_image_without_selection_is_none(surface, image, encoder):
    zone = attach(surface, image, encoder=encoder)
    assert zone.get_image() is None
    assert encoder.calls == []


def test_get_image_encodes_original_pixels_of_selection(surface, image, encoder):
    zone = attach(surface, image, encoder=encoder)
    _drag(zone, (10, 10), (60, 40))

    assert zone.get_image("image/jpeg", 0.5) == b"encoded"
    pixels, fmt, quality = encoder.calls[-1]
    assert pixels.shape == (30, 50, 4)
    assert np.array_equal(pixels, image[10:40, 10:60])
    assert (fmt, quality) == ("image/jpeg", 0.5)


def test_get_image_defaults(surface, image, encoder):
    zone = attach(surface, image, encoder=encoder)
    _drag(zone, (0, 0), (10, 10))
    zone.get_image()
    _, fmt, quality = encoder.calls[-1]
    assert (fmt, quality) == ("image/png", 0.92)


def test_empty_selection_has_no_image(surface, image, encoder):
    zone = attach(surface, image, encoder=encoder)
    zone.pointer_down(20, 20)
    zone.pointer_up(20, 20)
    assert zone.get_selection() == Rect(20, 20, 0, 0)
    assert zone.crop_box() is None
    assert zone.get_image() is None


def test_crop_box_rounds_fractional_edges(encoder):
    surface = RecordingSurface(100, 100)
    zone = attach(surface, noise_image(100, 100), encoder=encoder)
    _drag(zone, (10.4, 10.6), (20.7, 30.2))
    assert zone.crop_box() == (10, 11, 11, 19)


def test_clear_and_stop(surface, image, encoder):
    changes = []
    zone = attach(surface, image, encoder=encoder, on_selection_changed=changes.append)
    zone.pointer_down(10, 10)
    zone.pointer_move(50, 50)
    assert zone.is_active()
    zone.stop()
    assert not zone.is_active()
    assert zone.get_selection() == Rect(10, 10, 40, 40)

    zone.clear()
    assert zone.get_selection() is None
    assert changes[-1] is None
    assert np.array_equal(surface.last_frame, image)


def test_accepts_prebuilt_config(surface, image, encoder):
    cfg = HotZoneConfig(lineWidth=1)
    zone = attach(surface, image, cfg, encoder=encoder)
    assert zone.config is cfg


@pytest.mark.parametrize("value", [["#FFF"], {"r": 255}, 12])
def test_non_string_color_config_degrades_to_transparent(surface, image, encoder, value):
    zone = attach(surface, image, {"lineColor": value, "overlayColor": value}, encoder=encoder)
    _drag(zone, (10, 10), (60, 40))
    assert zone.get_selection() == Rect(10, 10, 50, 30)
    assert np.array_equal(surface.last_frame, image)


def test_hotzone_is_a_pointer_listener(surface, image, encoder):
    zone = attach(surface, image, encoder=encoder)
    assert isinstance(zone, PointerListener)
    assert isinstance(surface, DrawableSurface)
    assert isinstance(encoder, ImageEncoder)


def test_blur_is_accepted_and_ignored(image, encoder):
    frames = []
    for blur in (0, 5):
        surface = RecordingSurface(100, 100)
        zone = attach(surface, image, {"blur": blur, "selectedColor": "rgba(0, 128, 255, 0.5)"}, encoder=encoder)
        assert zone.config.get("blur") == blur
        _drag(zone, (10, 10), (60, 40))
        frames.append(surface.last_frame)
    assert np.array_equal(frames[0], frames[1])

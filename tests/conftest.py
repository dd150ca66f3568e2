"""Pytest configuration.

The Qt view tests need a `QApplication`; we create a single one for the whole
session, in offscreen mode unless the caller picked a platform. Pure-core tests
use the recording surface below and never touch Qt.
"""

from __future__ import annotations

import os
from typing import Any

import numpy as np
import pytest

from hotzone.surface import Bounds

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QApplication exists before collecting/running tests."""

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    global _APP

    app = QApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Attempt a clean Qt shutdown to avoid lingering threads at interpreter exit."""

    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    app = QApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


class RecordingSurface:
    """DrawableSurface that keeps copies of what it was asked to show."""

    def __init__(self, width: int, height: int, left: float = 0, top: float = 0):
        self._bounds = Bounds(left, top, width, height)
        self.frames: list[np.ndarray] = []
        self.cursors: list[str] = []

    def bounds(self) -> Bounds:
        return self._bounds

    def put_pixels(self, frame: np.ndarray) -> None:
        self.frames.append(frame.copy())

    def set_cursor(self, name: str) -> None:
        self.cursors.append(name)

    @property
    def last_frame(self) -> np.ndarray:
        return self.frames[-1]

    @property
    def cursor(self) -> str | None:
        return self.cursors[-1] if self.cursors else None


class FakeEncoder:
    def __init__(self) -> None:
        self.calls: list[tuple[np.ndarray, str, float]] = []

    def encode(self, pixels: np.ndarray, format: str, quality: float) -> bytes:
        self.calls.append((pixels.copy(), format, quality))
        return b"encoded"


def solid_image(width: int, height: int, value: int = 100) -> np.ndarray:
    img = np.full((height, width, 4), value, dtype=np.uint8)
    img[..., 3] = 255
    return img


def noise_image(width: int, height: int, seed: int = 7) -> np.ndarray:
    rng = np.random.default_rng(seed)
    img = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface(100, 100)


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def image() -> np.ndarray:
    return noise_image(100, 100)

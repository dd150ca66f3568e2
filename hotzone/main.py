"""Demo window: select a region on a generated test image."""

from __future__ import annotations

import argparse
import os
import sys

import numpy as np
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QVBoxLayout, QWidget

from hotzone.config import HotZoneConfig
from hotzone.geometry import Rect
from hotzone.logger import get_logger, setup_logger
from hotzone.ui_hotzone import HotZoneView

logger = get_logger("main")


def _apply_cli_logging_options(argv: list[str]) -> list[str]:
    """Reflect --log-level/--log-cats into env vars and return the remaining args.

    Done before QApplication sees argv so Qt does not choke on unknown options.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    args, remaining = parser.parse_known_args(argv)
    if args.log_level:
        os.environ["HOTZONE_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["HOTZONE_LOG_CATS"] = args.log_cats
    return remaining


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hotzone-demo", description="Region-of-interest selection demo")
    p.add_argument("--width", type=int, default=640, help="Test image width in pixels")
    p.add_argument("--height", type=int, default=480, help="Test image height in pixels")
    p.add_argument("--line-width", type=int, default=HotZoneConfig.DEFAULTS["lineWidth"])
    p.add_argument("--grab-zone", type=int, default=HotZoneConfig.DEFAULTS["lineGrabZone"])
    p.add_argument("--line-color", default=HotZoneConfig.DEFAULTS["lineColor"])
    p.add_argument("--overlay-color", default=HotZoneConfig.DEFAULTS["overlayColor"])
    p.add_argument("--selected-color", default=HotZoneConfig.DEFAULTS["selectedColor"])
    return p


def gradient_image(width: int, height: int) -> np.ndarray:
    """RGBA test pattern: red over x, green over y, a blue checkerboard."""
    xs = np.linspace(0, 255, width, dtype=np.float64)[None, :]
    ys = np.linspace(0, 255, height, dtype=np.float64)[:, None]
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[..., 0] = np.broadcast_to(xs, (height, width)).astype(np.uint8)
    img[..., 1] = np.broadcast_to(ys, (height, width)).astype(np.uint8)
    checker = ((np.arange(width)[None, :] // 32) + (np.arange(height)[:, None] // 32)) % 2
    img[..., 2] = (checker * 160).astype(np.uint8)
    img[..., 3] = 255
    return img


class DemoWindow(QMainWindow):
    def __init__(self, pixels: np.ndarray, config: HotZoneConfig):
        super().__init__()
        self.setWindowTitle("hotzone")
        self.view = HotZoneView()
        self.view.attach(pixels, config)
        self.status = QLabel("drag to select")

        body = QWidget()
        layout = QVBoxLayout(body)
        layout.addWidget(self.view)
        layout.addWidget(self.status)
        self.setCentralWidget(body)

        self.view.selectionChanged.connect(self._on_selection)

    def _on_selection(self, rect: Rect | None) -> None:
        if rect is None:
            self.status.setText("no selection")
            return
        self.status.setText(f"left={rect.left:g} top={rect.top:g} width={rect.width:g} height={rect.height:g}")


def main(argv: list[str] | None = None) -> int:
    remaining = _apply_cli_logging_options(sys.argv[1:] if argv is None else argv)
    setup_logger()
    args = build_parser().parse_args(remaining)

    config = HotZoneConfig(
        lineWidth=args.line_width,
        lineGrabZone=args.grab_zone,
        lineColor=args.line_color,
        overlayColor=args.overlay_color,
        selectedColor=args.selected_color,
    )

    app = QApplication.instance() or QApplication([sys.argv[0]])
    window = DemoWindow(gradient_image(args.width, args.height), config)
    window.show()
    logger.info("demo started: %dx%d", args.width, args.height)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

from collections.abc import Mapping
from numbers import Real
from typing import Any

from .errors import HotZoneError
from .logger import get_logger

_logger = get_logger("config")


class HotZoneConfig:
    """Widget options with defaults filled in.

    Keys already supplied by the caller are never overwritten. Unknown keys
    are kept as-is in :attr:`data` and otherwise ignored.
    """

    DEFAULTS: dict[str, Any] = {
        # Width of the line around the selection, in pixels.
        "lineWidth": 3,
        # Distance around the line where resize handles are armed, in pixels.
        "lineGrabZone": 40,
        "lineColor": "#CFFF",
        # Dim mask painted over the unselected area.
        "overlayColor": "#D334",
        # Tint painted inside the selection; None means no tint.
        "selectedColor": None,
        # Reserved, has no effect.
        "blur": 0,
    }

    def __init__(self, values: Mapping[str, Any] | None = None, **overrides: Any):
        self._settings: dict[str, Any] = dict(values or {})
        self._settings.update(overrides)
        for key, value in self.DEFAULTS.items():
            self._settings.setdefault(key, value)
        self._validate()
        unknown = sorted(set(self._settings) - set(self.DEFAULTS))
        if unknown:
            _logger.debug("ignoring unrecognized config keys: %s", ", ".join(unknown))

    def _validate(self) -> None:
        width = self._settings["lineWidth"]
        if not isinstance(width, Real) or isinstance(width, bool) or width < 0:
            raise HotZoneError(f"lineWidth must be a non-negative number, got {width!r}")
        grab = self._settings["lineGrabZone"]
        if not isinstance(grab, Real) or isinstance(grab, bool) or grab < 0:
            raise HotZoneError(f"lineGrabZone must be a non-negative number, got {grab!r}")

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        return default

    def has(self, key: str) -> bool:
        return key in self._settings

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def line_width(self) -> float:
        return self._settings["lineWidth"]

    @property
    def line_grab_zone(self) -> float:
        return self._settings["lineGrabZone"]

    @property
    def grab_zone(self) -> float:
        """Hit-test margin around the selection edge: grab zone plus the line itself."""
        return self.line_grab_zone + self.line_width

    @property
    def line_color(self) -> str | None:
        return self._settings["lineColor"]

    @property
    def overlay_color(self) -> str | None:
        return self._settings["overlayColor"]

    @property
    def selected_color(self) -> str | None:
        return self._settings["selectedColor"]

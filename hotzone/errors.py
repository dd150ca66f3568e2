class HotZoneError(ValueError):
    """Raised when the host wires the widget up with unusable inputs."""

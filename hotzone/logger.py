import logging
import os
import sys


def setup_logger(level: int = logging.INFO, name: str = "hotzone") -> logging.Logger:
    """Create or update the project logger.

    - Respects env overrides HOTZONE_LOG_LEVEL/HOTZONE_LOG_CATS on every call
      (so late CLI parsing can still take effect).
    - Ensures there is exactly one StreamHandler on the base logger and updates
      its formatter/filters instead of bailing out early.
    """
    logger = logging.getLogger(name)

    # Resolve level from env (override default)
    env_level = (os.getenv("HOTZONE_LOG_LEVEL") or "").strip().lower()
    if env_level:
        level_map = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "critical": logging.CRITICAL,
        }
        level = level_map.get(env_level, level)
    logger.setLevel(level)

    stream_handler: logging.StreamHandler | None = None
    for h in list(logger.handlers):
        if type(h) is logging.StreamHandler:
            stream_handler = h
            break

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(stream_handler)
    elif stream_handler.stream is not sys.stderr:
        # sys.stderr may have been swapped (test capture, IDE consoles) since the last call
        stream_handler.setStream(sys.stderr)

    # Do not include the full logger name in messages to keep output concise
    fmt = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    stream_handler.setFormatter(fmt)

    # Clear previous filters and apply a new one if cats provided
    stream_handler.filters.clear()
    cats = (os.getenv("HOTZONE_LOG_CATS") or "").strip()
    if cats:
        stream_handler.addFilter(CategoryFilter(c.strip() for c in cats.split(",")))

    # Do not propagate beyond the project logger
    logger.propagate = False
    return logger


class CategoryFilter(logging.Filter):
    """Pass only records whose logger name ends with one of the allowed categories."""

    def __init__(self, allowed) -> None:
        super().__init__()
        self.allowed = {c for c in allowed if c}

    def filter(self, record: logging.LogRecord) -> bool:
        # record.name like: hotzone.controller, hotzone.compositor
        parts = (record.name or "").split(".")
        suffix = parts[-1] if parts else record.name
        return suffix in self.allowed


def get_logger(name: str | None = None) -> logging.Logger:
    base = setup_logger()
    return base if not name else base.getChild(name)

"""
Process-wide logging setup.

Stdout only: gunicorn, Railway and Render all capture it. Modules log
through `logging.getLogger(__name__)` and never add handlers themselves.
"""
import logging
import sys

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_calmwell", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._calmwell = True  # type: ignore[attr-defined]
    root.addHandler(handler)

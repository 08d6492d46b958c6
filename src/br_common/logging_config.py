"""Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)``; this only installs the
root handler once.
"""

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_br_handler", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._br_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Install a single stream handler on the root logger."""

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    if any(getattr(handler, "_smalltalk", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._smalltalk = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # engineio logs every packet at INFO when enabled
    logging.getLogger("engineio").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("socketio").setLevel(logging.DEBUG if debug else logging.WARNING)

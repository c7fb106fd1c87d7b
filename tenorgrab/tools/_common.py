from __future__ import annotations

import logging
import sys

NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(debug: bool = False, quiet: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger("tenorgrab")
    root.handlers[:] = [handler]
    if debug:
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(logging.WARNING if quiet else logging.INFO)
    root.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

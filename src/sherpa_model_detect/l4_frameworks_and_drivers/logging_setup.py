"""Stderr logging setup for the command line."""

from __future__ import annotations

import logging
import sys


def setup_logging(debug: bool = False) -> None:
    """Route the ``smd`` loggers to stderr; DEBUG level when *debug*, else ERROR."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    root = logging.getLogger('smd')
    root.setLevel(logging.DEBUG if debug else logging.ERROR)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.propagate = False
    root.debug('Debug logging started')

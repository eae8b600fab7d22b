"""Logging setup.

Standard `logging` with one line per record:
`<iso time> <LEVEL> <logger> | <message>`. Console always, file optional.
"""

from __future__ import annotations
import logging
import os
from typing import Optional

_FMT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# marks handlers we installed so repeated setup does not stack them
_HANDLER_TAG = "_mapping_service_handler"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG, False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(fmt=_FMT, datefmt=_DATEFMT)

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    setattr(ch, _HANDLER_TAG, True)
    root.addHandler(ch)

    if log_file:
        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        setattr(fh, _HANDLER_TAG, True)
        root.addHandler(fh)

"""Logger setup shared by the engine and the session store."""
from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    formatter = logging.Formatter("%(levelname)s: %(message)s")
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    calc_logger = logging.getLogger(name)
    if not calc_logger.handlers:
        calc_logger.setLevel(logging.INFO)
        calc_logger.addHandler(handler)
    return calc_logger

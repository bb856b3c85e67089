"""Logging helpers shared by the client, the agents and the CLI.

- One stream handler per named logger, unless the host already configured it.
- Level comes from XPECGEN_LOG_LEVEL (default INFO); the CLI may override it.
- Credentials are only ever logged as a length + sha256 prefix.
"""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Optional

_FORMAT = "[%(levelname)s] %(name)s:%(lineno)d - %(message)s"

def _env_level() -> str:
    return (os.environ.get("XPECGEN_LOG_LEVEL") or "INFO").strip().upper()

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # If already configured elsewhere, do not attach handlers again.
    if logger.handlers:
        return logger

    logger.setLevel(_env_level())

    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(h)

    return logger

def set_level(level: Optional[str]) -> None:
    """Re-level every xpecgen logger created so far (used by `cli.py --verbose`)."""
    lvl = (level or _env_level()).upper()
    for name, obj in logging.root.manager.loggerDict.items():
        if isinstance(obj, logging.Logger) and (name == "xpecgen" or name.startswith("xpecgen.")):
            obj.setLevel(lvl)

def log_step(logger: logging.Logger, step: str, msg: str):
    logger.info("[STEP %s] %s", step, msg)

def key_fingerprint(key: str) -> str:
    k = key or ""
    return f"len={len(k)} sha8={hashlib.sha256(k.encode('utf-8')).hexdigest()[:8]}"

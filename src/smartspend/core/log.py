"""Logging setup shared by the API server and the CLI."""

from __future__ import annotations

import logging

_FORMAT = '{"ts":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","msg":"%(message)s"}'


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stdout handler on the root logger.

    Safe to call more than once (e.g. under the Flask reloader).
    """
    if isinstance(level, str):
        level = level.upper()
    root = logging.getLogger()
    root.setLevel(level)

    if not any(getattr(h, "_smartspend", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
        handler._smartspend = True  # type: ignore[attr-defined]
        root.addHandler(handler)

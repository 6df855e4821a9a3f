from __future__ import annotations
import logging
import os


def _level_from_env(default: int) -> int:
    name = os.environ.get("LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def setup_console_logging(level: int = logging.INFO) -> None:
    """
    Call once at process start. LOG_LEVEL in the environment overrides ``level``.
    """
    level = _level_from_env(level)
    root = logging.getLogger()
    # requests/urllib3 connection chatter
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
    if root.handlers:
        # already configured (avoid duplicates)
        root.setLevel(level)
        return

    root.setLevel(level)
    h = logging.StreamHandler()
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    h.setFormatter(fmt)
    root.addHandler(h)

import logging
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Initialize the root logger with one stream handler."""
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # avoid duplicate handlers when create_app() runs more than once
    for h in list(root.handlers):
        if getattr(h, "_cardbox", False):
            root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler._cardbox = True  # type: ignore[attr-defined]
    root.addHandler(handler)

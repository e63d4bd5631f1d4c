from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d | %(message)s"

# Third-party loggers that report every request or connection at INFO/DEBUG
_CHATTY = ("httpx", "httpcore")


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging on stderr once; stdout stays free for record output.
    Level can be given explicitly or taken from the LOG_LEVEL env var (default INFO).
    The HTTP libraries only log below WARNING when the level is DEBUG.
    """
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=name, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("dawa").setLevel(name)
    for chatty in _CHATTY:
        logging.getLogger(chatty).setLevel(logging.DEBUG if name == "DEBUG" else logging.WARNING)

"""Environment-based configuration for the DAWA client."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from dawa.constants import BUFFER_SIZE, CHUNK_SIZE, DEFAULT_HOST


@dataclass
class Config:
    """Configuration values derived from environment variables."""
    # HTTP
    host: str
    request_timeout: float
    max_connections: int

    # Import streams
    buffer_size: int
    chunk_size: int
    strict_fields: bool


def load_config() -> Config:
    """Load environment variables (and a ``.env`` file) into a :class:`Config`.

    ``DAWA_STRICT_FIELDS`` only sets the default for the CLI and for
    :class:`~dawa.clients.dawa.DawaClient`; every import call may override it.
    """
    load_dotenv()

    buffer_size = int(os.getenv("DAWA_BUFFER_SIZE", str(BUFFER_SIZE)))
    if buffer_size < 1:
        buffer_size = BUFFER_SIZE

    return Config(
        host=os.getenv("DAWA_HOST", DEFAULT_HOST).rstrip("/"),
        request_timeout=float(os.getenv("DAWA_REQUEST_TIMEOUT", "30")),
        max_connections=int(os.getenv("DAWA_MAX_CONNECTIONS", "10")),
        buffer_size=buffer_size,
        chunk_size=int(os.getenv("DAWA_CHUNK_SIZE", str(CHUNK_SIZE))),
        strict_fields=bool(int(os.getenv("DAWA_STRICT_FIELDS", "0"))),
    )

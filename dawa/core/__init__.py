from __future__ import annotations

from .io import ByteReader, as_chunks, open_export
from .stream import RecordStream

__all__ = [
    "ByteReader",
    "RecordStream",
    "as_chunks",
    "open_export",
]

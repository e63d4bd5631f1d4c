from __future__ import annotations

from .dawa import DawaClient, error_from_body

__all__ = ["DawaClient", "error_from_body"]

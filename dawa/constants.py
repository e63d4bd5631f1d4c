from __future__ import annotations

# ──────────────────────────────────────────────────────────────────────────────
# Service defaults
# ──────────────────────────────────────────────────────────────────────────────
DEFAULT_HOST: str = "http://dawa.aws.dk"
HOME_ZONE_NAME: str = "Europe/Copenhagen"

# Capacity of the hand-off queue between a decoder and its consumer
BUFFER_SIZE: int = 100
CHUNK_SIZE: int = 1 << 16

# ──────────────────────────────────────────────────────────────────────────────
# Sentinel objects to terminate record streams
# ──────────────────────────────────────────────────────────────────────────────
STOP_IMPORT: object = object()

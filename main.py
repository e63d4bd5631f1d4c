"""Entry point for invoking the DAWA client via the CLI."""

from __future__ import annotations

import asyncio
import sys

from dawa.cli import main as cli_main

if __name__ == "__main__":
    sys.exit(asyncio.run(cli_main()))

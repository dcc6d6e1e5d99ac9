"""Entry point for ``python -m discord_chat`` and ``pylon discord``."""

from __future__ import annotations

from discord_chat.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

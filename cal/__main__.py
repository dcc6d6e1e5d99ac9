"""Entry point for ``python -m cal`` and ``pylon cal``."""

from __future__ import annotations

from cal.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

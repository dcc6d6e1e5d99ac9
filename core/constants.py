"""Shared constants used by the config resolver and both service clients."""

from __future__ import annotations

from . import __version__

# -----------------------------------------------------------------------------
# Config file
# -----------------------------------------------------------------------------

# Default location under the user's home directory
CONFIG_FILENAME = ".pylonrc"

# Env var pointing at an alternate config file
CONFIG_PATH_ENV = "PYLON_CONFIG"


# -----------------------------------------------------------------------------
# Service defaults
# -----------------------------------------------------------------------------

DEFAULT_CAL_URL = "http://localhost:8085"

DISCORD_API_BASE = "https://discord.com/api/v10"


# -----------------------------------------------------------------------------
# HTTP and timeouts
# -----------------------------------------------------------------------------

# Per-request timeout in seconds, applied to connect and read
DEFAULT_REQUEST_TIMEOUT = 15

USER_AGENT = f"pylon/{__version__}"

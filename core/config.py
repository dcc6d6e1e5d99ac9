"""Layered configuration for pylon.

Settings come from three layers, lowest to highest precedence:

1. built-in defaults
2. ``~/.pylonrc`` (or the file named by ``PYLON_CONFIG``)
3. ``PYLON_*`` environment variables that are set and non-empty

Example ``~/.pylonrc``::

    # pylon configuration
    [cal]
    url = https://cal.example.com

    [discord]
    webhook = https://discord.com/api/webhooks/123/abc
    bot_token = my-bot-token
    guild_id = 1234
    channel_id = 5678
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from .cli_errors import ConfigFileError
from .constants import CONFIG_FILENAME, CONFIG_PATH_ENV, DEFAULT_CAL_URL, DISCORD_API_BASE

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class PylonConfig:
    """Resolved settings for one invocation."""

    cal_url: str = DEFAULT_CAL_URL
    discord_webhook: str = ""
    discord_bot_token: str = ""
    discord_guild_id: str = ""
    discord_channel_id: str = ""
    discord_api_base: str = DISCORD_API_BASE
    path: Optional[Path] = None


# (section, key) -> PylonConfig field
FILE_KEYS: Dict[Tuple[str, str], str] = {
    ("cal", "url"): "cal_url",
    ("discord", "webhook"): "discord_webhook",
    ("discord", "bot_token"): "discord_bot_token",
    ("discord", "guild_id"): "discord_guild_id",
    ("discord", "channel_id"): "discord_channel_id",
    ("discord", "api_base"): "discord_api_base",
}

# env var -> PylonConfig field
ENV_KEYS: Dict[str, str] = {
    "PYLON_CAL_URL": "cal_url",
    "PYLON_DISCORD_WEBHOOK": "discord_webhook",
    "PYLON_DISCORD_BOT_TOKEN": "discord_bot_token",
    "PYLON_DISCORD_GUILD_ID": "discord_guild_id",
    "PYLON_DISCORD_CHANNEL_ID": "discord_channel_id",
    "PYLON_DISCORD_API_BASE": "discord_api_base",
}


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Return the config file location, or None when no home directory is known."""
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_PATH_ENV)
    if override:
        return Path(os.path.expanduser(override))
    try:
        return Path.home() / CONFIG_FILENAME
    except (RuntimeError, KeyError):
        # No HOME and no passwd entry; run on defaults + env
        return None


def _clean_lines(text: str) -> str:
    """Drop lines configparser would reject or misread.

    Keeps section headers and ``key = value`` lines, left-aligned so nothing is
    treated as a continuation. Comments, blanks, lines without ``=`` and keys
    above the first section header are dropped. Any other line starting with
    ``[`` (``[]``, ``[a] = b``) is dropped, and keys under it are skipped
    until the next valid header.
    """
    kept = []
    in_section = False
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            header = configparser.ConfigParser.SECTCRE.fullmatch(line)
            in_section = bool(header and header.group("header").strip())
            if in_section:
                kept.append(line)
            continue
        if "=" not in line or not in_section:
            continue
        if not line.split("=", 1)[0].strip():
            continue
        kept.append(line)
    return "\n".join(kept) + "\n"


def parse_config_text(text: str, base: Optional[PylonConfig] = None) -> PylonConfig:
    """Overlay the values in ``text`` (INI format) onto ``base``.

    Unknown sections and keys are ignored, as are keys with an empty value.
    """
    cfg = base or PylonConfig()
    parser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=",),
        comment_prefixes=("#",),
        inline_comment_prefixes=None,
        strict=False,
        default_section="pylon:defaults",
    )
    # keys are case-sensitive: "URL" is not "url"
    parser.optionxform = str
    try:
        parser.read_string(_clean_lines(text))
    except configparser.Error as exc:
        raise ConfigFileError(f"invalid config file: {exc}") from exc

    updates: Dict[str, str] = {}
    for (section, key), field_name in FILE_KEYS.items():
        if not parser.has_section(section):
            continue
        value = parser[section].get(key, "").strip()
        if value:
            updates[field_name] = value
    return replace(cfg, **updates) if updates else cfg


def load_file(path: Path, base: Optional[PylonConfig] = None) -> PylonConfig:
    """Overlay the config file at ``path`` onto ``base``.

    A missing file leaves ``base`` untouched; any other read failure raises
    ConfigFileError.
    """
    cfg = base or PylonConfig()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        LOG.debug("no config file at %s", path)
        return cfg
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileError(
            f"cannot read config file {path}: {exc}",
            hint=f"fix or remove {path}, or point {CONFIG_PATH_ENV} elsewhere",
        ) from exc
    LOG.debug("loaded config file %s", path)
    return replace(parse_config_text(text, cfg), path=path)


def apply_env(cfg: PylonConfig, environ: Optional[Mapping[str, str]] = None) -> PylonConfig:
    """Overlay non-empty ``PYLON_*`` environment variables onto ``cfg``."""
    env = os.environ if environ is None else environ
    updates = {field_name: env[name] for name, field_name in ENV_KEYS.items() if env.get(name)}
    return replace(cfg, **updates) if updates else cfg


def resolve(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> PylonConfig:
    """Resolve defaults, then the config file, then the environment."""
    cfg = PylonConfig()
    if path is None:
        path = default_config_path(environ)
    if path is not None:
        cfg = load_file(Path(path), cfg)
    return apply_env(cfg, environ)


def masked(value: str, keep: int = 4) -> str:
    """Mask a secret for display, keeping the last ``keep`` characters."""
    if not value:
        return ""
    if len(value) <= keep:
        return "*" * len(value)
    return "*" * (len(value) - keep) + value[-keep:]

"""Discord client: webhook sends plus bot-token reads."""

from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List, Optional

import requests

from core.cli_errors import ConfigError
from core.constants import DEFAULT_REQUEST_TIMEOUT, DISCORD_API_BASE
from core.http_client import JSONClient

from .models import Channel, Message

LOG = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 20
MAX_MESSAGE_LIMIT = 100

NO_TEXT = "(no text)"


def clamp_limit(limit: int) -> int:
    """Limits outside 1..100 (Discord's cap) fall back to the default of 20."""
    if limit <= 0 or limit > MAX_MESSAGE_LIMIT:
        return DEFAULT_MESSAGE_LIMIT
    return limit


class DiscordClient(JSONClient):
    """Sends through a webhook; reads messages and channels with a bot token."""

    service = "discord"

    def __init__(
        self,
        bot_token: str = "",
        webhook_url: str = "",
        api_base: str = DISCORD_API_BASE,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        super().__init__(session=session, timeout=timeout)
        self.bot_token = bot_token
        self.webhook_url = webhook_url
        self.api_base = api_base.rstrip("/")

    def send_message(self, text: str) -> None:
        """Post a plain text message to the configured webhook."""
        if not self.webhook_url:
            raise ConfigError(
                "webhook URL not configured",
                hint="set webhook in ~/.pylonrc [discord] or PYLON_DISCORD_WEBHOOK",
            )
        self._request("POST", self.webhook_url, json_body={"content": text}, expected=(200, 204))

    def read_messages(self, channel_id: str, limit: int = DEFAULT_MESSAGE_LIMIT) -> List[Message]:
        """Fetch the latest messages from a channel, oldest first."""
        self._require_token()
        if not channel_id:
            raise ConfigError(
                "channel ID required",
                hint="pass --channel or set channel_id in ~/.pylonrc [discord] or PYLON_DISCORD_CHANNEL_ID",
            )
        data = self._bot_get(f"/channels/{channel_id}/messages", params={"limit": clamp_limit(limit)})
        messages = Message.list_from_api(data or [])
        # API returns newest-first
        messages.reverse()
        LOG.debug("read %d messages from channel %s", len(messages), channel_id)
        return messages

    def list_channels(self, guild_id: str) -> List[Channel]:
        """Return the guild's text channels in server order."""
        self._require_token()
        if not guild_id:
            raise ConfigError(
                "guild ID required",
                hint="pass --guild or set guild_id in ~/.pylonrc [discord] or PYLON_DISCORD_GUILD_ID",
            )
        channels = Channel.list_from_api(self._bot_get(f"/guilds/{guild_id}/channels") or [])
        LOG.debug("guild %s has %d channels", guild_id, len(channels))
        return [ch for ch in channels if ch.is_text]

    def _require_token(self) -> None:
        if not self.bot_token:
            raise ConfigError(
                "bot token not configured",
                hint="set bot_token in ~/.pylonrc [discord] or PYLON_DISCORD_BOT_TOKEN",
            )

    def _bot_get(self, path: str, params: Optional[Dict[str, object]] = None):
        headers = {
            "Authorization": f"Bot {self.bot_token}",
            "Accept": "application/json",
        }
        return self._request("GET", f"{self.api_base}{path}", params=params, headers=headers)


def _ts(timestamp: str) -> str:
    return timestamp[:19] if len(timestamp) >= 19 else timestamp


def format_message(msg: Message) -> str:
    content = msg.content or NO_TEXT
    head = f"[{_ts(msg.timestamp)}] {msg.author.display_name}"
    if msg.reference is None:
        return f"{head}: {content}"
    ref = msg.reference
    # quoted and escaped so a multi-line parent stays on one line
    ref_content = json.dumps(ref.content or NO_TEXT, ensure_ascii=False)
    return f"{head} (reply to {ref.author.display_name}: {ref_content}): {content}"


def format_messages(messages: Iterable[Message]) -> str:
    """Render messages for the terminal, one line each."""
    return "".join(format_message(m) + "\n" for m in messages)

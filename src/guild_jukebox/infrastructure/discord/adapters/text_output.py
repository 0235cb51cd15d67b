"""Discord text output implementing TextOutput for a text channel."""

from __future__ import annotations

import discord

from guild_jukebox.application.interfaces.text_output import TextOutput
from guild_jukebox.domain.shared.exceptions import MessageGoneError

# Discord rejects messages longer than this
MAX_MESSAGE_LENGTH = 2000


def truncate(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


class DiscordTextOutput(TextOutput):
    def __init__(self, channel: discord.abc.Messageable) -> None:
        self._channel = channel

    @property
    def channel(self) -> discord.abc.Messageable:
        return self._channel

    async def send(self, text: str) -> discord.Message:
        return await self._channel.send(truncate(text))

    async def edit(self, handle: discord.Message, text: str) -> None:
        try:
            await handle.edit(content=truncate(text))
        except discord.NotFound as exc:
            raise MessageGoneError() from exc

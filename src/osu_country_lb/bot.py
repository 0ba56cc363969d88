import asyncio
import io

import discord

from .commands import CommandHandler, Reply
from .logging_utils import get_logger

logger = get_logger(__name__)


def build_intents() -> discord.Intents:
    intents = discord.Intents.none()
    intents.guild_messages = True
    intents.message_content = True
    return intents


class LeaderboardBot(discord.Client):
    def __init__(self, handler: CommandHandler) -> None:
        super().__init__(intents=build_intents())
        self.handler = handler

    async def on_ready(self) -> None:
        logger.info("%s is connected and running!", self.user)

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return
        # Commands block on HTTP and image work, keep them off the event loop
        reply = await asyncio.to_thread(
            self.handler.handle, message.content, message.author.id, message.author.name
        )
        if reply is None:
            return
        await self.send_reply(message, reply)

    async def send_reply(self, message: discord.Message, reply: Reply) -> None:
        try:
            if reply.image is None:
                await message.reply(reply.content)
            else:
                attachment = discord.File(io.BytesIO(reply.image), filename=reply.filename)
                await message.channel.send(content=reply.content, file=attachment, reference=message)
        except discord.HTTPException as exc:
            logger.error("Error sending message: %s", exc)

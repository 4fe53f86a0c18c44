from __future__ import annotations

import logging

import discord
from discord.ext import commands

from ..models import voice_presence
from ..utils import messages, voice
from ..utils.messages import MessageEvent
from ..utils.voice import VoiceEvent

log = logging.getLogger(__name__)


class TrackingCog(commands.Cog):
    """Turns gateway events into message and voice-time counters."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def cog_load(self):
        # Entry times stored before a restart cannot be paired with their leaves.
        cleared = voice_presence.clear_sessions()
        log.info("tracking.presence_cleared rows=%d", cleared)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if not message.guild or message.author.bot:
            return
        event = MessageEvent.at(message.guild.id, message.author.id, message.created_at)
        try:
            messages.increase_or_create_count(event)
        except Exception:
            log.exception(
                "tracking.message_failed",
                extra={"guild_id": event.guild_id, "user_id": event.user_id},
            )

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ):
        if member.bot:
            return
        if before.channel is None and after.channel is not None:
            is_leaving = False
        elif before.channel is not None and after.channel is None:
            is_leaving = True
        else:
            # Mute/deafen/stream toggles and channel moves keep the session open.
            return

        event = VoiceEvent.at(member.guild.id, member.id, is_leaving)
        try:
            voice.increase_or_create_count(event)
        except Exception:
            log.exception(
                "tracking.voice_failed",
                extra={"guild_id": event.guild_id, "user_id": event.user_id, "leaving": is_leaving},
            )


async def setup(bot: commands.Bot):
    await bot.add_cog(TrackingCog(bot))

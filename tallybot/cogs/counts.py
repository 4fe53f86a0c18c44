from __future__ import annotations

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from ..config import STATS_COOLDOWN_SECONDS
from ..strings import S
from ..ui.counts import (
    build_cooldown_embed,
    build_info_embed,
    build_notice_embed,
    build_report_file,
    require_guild,
)
from ..utils.counts import CountStats, MessageStats, StatsReport, StatsRequest, VoiceTimeStats
from ..utils.users import UserResolver

log = logging.getLogger(__name__)


def _cooldown_key(interaction: discord.Interaction):
    return (interaction.guild_id, interaction.user.id)


class CountsCog(commands.Cog):
    """Slash commands that show message and voice-time statistics."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.users = UserResolver(bot)
        self.message_stats = MessageStats(self.users)
        self.voice_stats = VoiceTimeStats(self.users)

    # ---------- commands ----------
    @app_commands.command(name="stats-messages", description=S("counts.cmd.messages"))
    @app_commands.rename(start_date="start-date", end_date="end-date")
    @app_commands.describe(
        name=S("counts.arg.name"),
        start_date=S("counts.arg.start_date"),
        end_date=S("counts.arg.end_date"),
    )
    @app_commands.checks.cooldown(1, STATS_COOLDOWN_SECONDS, key=_cooldown_key)
    async def stats_messages(
        self,
        interaction: discord.Interaction,
        name: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ):
        await self._run_stats(interaction, self.message_stats, name, start_date, end_date)

    @app_commands.command(name="stats-voices", description=S("counts.cmd.voices"))
    @app_commands.rename(start_date="start-date", end_date="end-date")
    @app_commands.describe(
        name=S("counts.arg.name"),
        start_date=S("counts.arg.start_date"),
        end_date=S("counts.arg.end_date"),
    )
    @app_commands.checks.cooldown(1, STATS_COOLDOWN_SECONDS, key=_cooldown_key)
    async def stats_voices(
        self,
        interaction: discord.Interaction,
        name: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ):
        await self._run_stats(interaction, self.voice_stats, name, start_date, end_date)

    @app_commands.command(name="info", description=S("counts.cmd.info"))
    async def info(self, interaction: discord.Interaction):
        await interaction.response.send_message(
            interaction.user.mention, embed=build_info_embed(), ephemeral=True
        )
        log.info("counts.info.sent", extra={"guild_id": interaction.guild_id})

    # ---------- internals ----------
    async def _run_stats(
        self,
        interaction: discord.Interaction,
        stats: CountStats,
        name: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> None:
        if not await require_guild(interaction):
            return
        await interaction.response.defer(ephemeral=True, thinking=True)

        guild = interaction.guild
        me = guild.me
        request = StatsRequest(
            guild_id=guild.id,
            guild_name=guild.name,
            initiator_name=interaction.user.name,
            guild_joined_at=me.joined_at if me else None,
            name=name,
            start_date=start_date,
            end_date=end_date,
        )
        report = await stats.show_stats(request)
        await self._deliver(interaction, report)
        log.info(
            "counts.stats.sent",
            extra={
                "guild_id": guild.id,
                "user_id": interaction.user.id,
                "metric": stats.metric,
                "outcome": report.outcome.value,
            },
        )

    async def _deliver(self, interaction: discord.Interaction, report: StatsReport) -> None:
        try:
            if not report.has_file:
                await interaction.followup.send(embed=build_notice_embed(report.notice or ""), ephemeral=True)
                return
            await interaction.followup.send(
                embed=build_notice_embed(S("counts.notice.started")), ephemeral=True
            )
            await interaction.followup.send(
                interaction.user.mention,
                embed=build_notice_embed(report.title or ""),
                ephemeral=True,
            )
            await interaction.followup.send(file=build_report_file(report), ephemeral=True)
        except discord.HTTPException:
            log.exception(
                "counts.delivery_failed",
                extra={"guild_id": interaction.guild_id, "outcome": report.outcome.value},
            )

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, app_commands.CommandOnCooldown):
            embed = build_cooldown_embed(STATS_COOLDOWN_SECONDS)
            content = interaction.user.mention
        else:
            log.error(
                "counts.command_failed",
                exc_info=error,
                extra={"guild_id": interaction.guild_id, "user_id": interaction.user.id},
            )
            embed = build_notice_embed(S("common.error_generic"))
            content = None
        try:
            if interaction.response.is_done():
                await interaction.followup.send(content, embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(content, embed=embed, ephemeral=True)
        except discord.HTTPException:
            log.exception("counts.error_reply_failed", extra={"guild_id": interaction.guild_id})


async def setup(bot: commands.Bot):
    await bot.add_cog(CountsCog(bot))

from __future__ import annotations

import io

import discord

from ..strings import S
from ..utils.counts import StatsReport


async def require_guild(inter: discord.Interaction) -> bool:
    if not inter.guild:
        if not inter.response.is_done():
            await inter.response.send_message(S("common.guild_only"), ephemeral=True)
        else:
            await inter.followup.send(S("common.guild_only"), ephemeral=True)
        return False
    return True


def build_notice_embed(text: str) -> discord.Embed:
    return discord.Embed(description=text, color=discord.Color.blurple())


def build_info_embed() -> discord.Embed:
    embed = discord.Embed(title=S("info.title"), color=discord.Color.blurple())
    embed.add_field(name=S("info.field.messages"), value=S("info.field.messages.value"), inline=False)
    embed.add_field(name=S("info.field.voices"), value=S("info.field.voices.value"), inline=False)
    embed.add_field(name=S("info.field.params"), value=S("info.field.params.value"), inline=False)
    return embed


def build_cooldown_embed(seconds: float) -> discord.Embed:
    embed = discord.Embed(color=discord.Color.blurple())
    embed.add_field(
        name=S("common.cooldown.title"),
        value=S("common.cooldown", seconds=f"{seconds:g}"),
        inline=False,
    )
    return embed


def build_report_file(report: StatsReport) -> discord.File:
    data = (report.content or "").encode("utf-8")
    return discord.File(io.BytesIO(data), filename=report.filename or "Stats.txt")

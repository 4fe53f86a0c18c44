from __future__ import annotations

import os
import sys
import asyncio
import logging
import signal
from contextlib import suppress
from typing import Iterable, Sequence

import discord
from discord.ext import commands

from .db import ensure_db

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger("tallybot")


# -----------------------------------------------------------------------------
# Intents
# -----------------------------------------------------------------------------
def build_intents() -> discord.Intents:
    """Privileged intents must also be enabled in the Developer Portal."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.members = True  # privileged; user-name lookups read the member cache
    intents.guild_messages = True
    intents.voice_states = True
    return intents


INTENTS = build_intents()

EXTENSIONS: Sequence[str] = (
    "tallybot.cogs.tracking",
    "tallybot.cogs.counts",
)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _sync_mode() -> str:
    """Return validated command sync mode."""
    mode = (os.getenv("COMMAND_SYNC_MODE") or "global").strip().lower()
    if mode not in {"global", "none"}:
        log.warning("Unknown COMMAND_SYNC_MODE=%r; defaulting to 'global'", mode)
        mode = "global"
    return mode


# -----------------------------------------------------------------------------
# Bot
# -----------------------------------------------------------------------------
class TallyBot(commands.Bot):
    def __init__(self) -> None:
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=INTENTS,
            activity=discord.Activity(type=discord.ActivityType.listening, name="/info"),
        )

    async def setup_hook(self) -> None:
        ensure_db()
        log.info("Database ensured/connected.")

        await self._load_extensions(EXTENSIONS)
        await self._sync_commands(_sync_mode())

    async def _load_extensions(self, names: Iterable[str]) -> None:
        for ext in names:
            await self.load_extension(ext)
            log.info("Loaded extension: %s", ext)

    async def _sync_commands(self, mode: str) -> None:
        """
        Publish commands according to mode:
          - 'global': push global commands.
          - 'none'  : skip publishing.
        """
        try:
            if mode == "none":
                log.info("Command sync skipped (mode=none).")
                return

            synced = await self.tree.sync()
            log.info("Globally synced %d commands.", len(synced))
        except discord.HTTPException:
            log.exception("Command sync failed.")

    async def on_ready(self) -> None:
        if self.user:
            log.info("Logged in as %s (%s)", self.user, self.user.id)


# -----------------------------------------------------------------------------
# Runner
# -----------------------------------------------------------------------------
async def _run_bot() -> None:
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        log.error("Set DISCORD_TOKEN env var.")
        raise SystemExit(1)

    bot = TallyBot()
    stop_event = asyncio.Event()

    def _signal_handler(signame: str) -> None:
        log.warning("Received %s, requesting shutdown", signame)
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, _signal_handler, sig.name)

    async def _start():
        try:
            await bot.start(token)
        except Exception:
            log.exception("Bot.start crashed")
        finally:
            stop_event.set()

    start_task = asyncio.create_task(_start())

    await stop_event.wait()

    if not bot.is_closed():
        await bot.close()

    with suppress(asyncio.CancelledError):
        if not start_task.done():
            start_task.cancel()
        await start_task

    log.info("Shutdown complete.")


def main() -> None:
    try:
        asyncio.run(_run_bot())
    except KeyboardInterrupt:
        log.warning("KeyboardInterrupt, exiting.")


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from typing import Dict, Optional

import discord

log = logging.getLogger(__name__)


class UserResolver:
    """
    Maps user ids to unique user names and back.

    Lookups go to the client's user cache first; names of users that are not cached
    are fetched from the API once and remembered.
    """

    def __init__(self, client: discord.Client):
        self.client = client
        self._fetched: Dict[int, str] = {}

    async def resolve_name(self, user_id: int) -> str:
        """Unique name of the user, or the id as a string when the user cannot be found."""
        user = self.client.get_user(user_id)
        if user is not None:
            return user.name
        if user_id in self._fetched:
            return self._fetched[user_id]
        try:
            user = await self.client.fetch_user(user_id)
        except discord.NotFound:
            log.debug("users.not_found user_id=%s", user_id)
            return str(user_id)
        except discord.HTTPException:
            log.warning("users.fetch_failed user_id=%s", user_id, exc_info=True)
            return str(user_id)
        self._fetched[user_id] = user.name
        return user.name

    def resolve_id(self, name: str) -> Optional[int]:
        """Id of the cached user with exactly this unique name, or None."""
        user = discord.utils.get(self.client.users, name=name)
        if user is not None:
            return user.id
        for uid, fetched_name in self._fetched.items():
            if fetched_name == name:
                return uid
        return None

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..db import connect

log = logging.getLogger(__name__)


def open_session(guild_id: int, user_id: int, entry_time: datetime) -> bool:
    """
    Record that the user entered voice in this guild.
    No-op when a session is already open for the key; returns whether a row was created.
    """
    with connect() as con:
        cur = con.execute(
            """
            INSERT INTO users_in_voices (guild_id, user_id, entry_time)
            VALUES (?, ?, ?)
            ON CONFLICT(guild_id, user_id) DO NOTHING
            """,
            (guild_id, user_id, entry_time.isoformat()),
        )
        con.commit()
        return cur.rowcount == 1


def get_entry_time(guild_id: int, user_id: int) -> Optional[datetime]:
    with connect() as con:
        row = con.execute(
            "SELECT entry_time FROM users_in_voices WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id),
        ).fetchone()
    return datetime.fromisoformat(row[0]) if row else None


def close_session(guild_id: int, user_id: int) -> Optional[datetime]:
    """
    Delete the open session of the key and return its entry time.
    Returns None when there is no session, or when a concurrent close removed it first.
    """
    with connect() as con:
        row = con.execute(
            "SELECT id, entry_time FROM users_in_voices WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id),
        ).fetchone()
        if not row:
            return None
        cur = con.execute("DELETE FROM users_in_voices WHERE id = ?", (row[0],))
        con.commit()
        if cur.rowcount != 1:
            return None
        return datetime.fromisoformat(row[1])


def clear_sessions() -> int:
    """Drop every open session. Used at startup, when stored entry times can no longer be paired."""
    with connect() as con:
        cur = con.execute("DELETE FROM users_in_voices")
        con.commit()
        return cur.rowcount

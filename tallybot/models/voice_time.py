from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..db import connect
from .common import IdCount, sum_by_user, sum_for_user

TABLE = "voice_time"
SECONDS_PER_DAY = 86400


@dataclass
class VoiceTimeRecord:
    id: int
    guild_id: int
    user_id: int
    date: date
    seconds: int


def find(guild_id: int, user_id: int, day: date) -> Optional[VoiceTimeRecord]:
    with connect() as con:
        row = con.execute(
            """
            SELECT id, guild_id, user_id, date, seconds
            FROM voice_time
            WHERE guild_id = ? AND user_id = ? AND date = ?
            """,
            (guild_id, user_id, day.isoformat()),
        ).fetchone()
    if not row:
        return None
    return VoiceTimeRecord(
        id=int(row[0]),
        guild_id=int(row[1]),
        user_id=int(row[2]),
        date=date.fromisoformat(row[3]),
        seconds=int(row[4]),
    )


def add_seconds(guild_id: int, user_id: int, day: date, seconds: int) -> None:
    """Add `seconds` to the day's counter, creating it when absent. A day never exceeds 86400 s."""
    # Durations are wall-clock differences: on a 25-hour DST day the sessions
    # can add up to more than 86400 s, so the day total is clipped at 86400.
    with connect() as con:
        con.execute(
            """
            INSERT INTO voice_time (guild_id, user_id, date, seconds)
            VALUES (?, ?, ?, MIN(?, ?))
            ON CONFLICT(guild_id, user_id, date) DO UPDATE SET
              seconds = MIN(seconds + excluded.seconds, ?)
            """,
            (guild_id, user_id, day.isoformat(), seconds, SECONDS_PER_DAY, SECONDS_PER_DAY),
        )
        con.commit()


def delete(record_id: int) -> bool:
    with connect() as con:
        cur = con.execute("DELETE FROM voice_time WHERE id = ?", (record_id,))
        con.commit()
        return cur.rowcount == 1


def sum_all(guild_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[IdCount]:
    with connect() as con:
        return sum_by_user(con, TABLE, "seconds", guild_id, start, end)


def sum_one(
    guild_id: int, user_id: int, start: Optional[date] = None, end: Optional[date] = None
) -> Optional[IdCount]:
    with connect() as con:
        return sum_for_user(con, TABLE, "seconds", guild_id, user_id, start, end)

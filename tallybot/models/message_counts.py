from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..db import connect
from .common import IdCount, sum_by_user, sum_for_user

TABLE = "message_counts"


@dataclass
class MessageCountRecord:
    id: int
    guild_id: int
    user_id: int
    date: date
    count: int


def _record(row) -> MessageCountRecord:
    return MessageCountRecord(
        id=int(row[0]),
        guild_id=int(row[1]),
        user_id=int(row[2]),
        date=date.fromisoformat(row[3]),
        count=int(row[4]),
    )


def find(guild_id: int, user_id: int, day: date) -> Optional[MessageCountRecord]:
    with connect() as con:
        row = con.execute(
            """
            SELECT id, guild_id, user_id, date, count
            FROM message_counts
            WHERE guild_id = ? AND user_id = ? AND date = ?
            """,
            (guild_id, user_id, day.isoformat()),
        ).fetchone()
    return _record(row) if row else None


def increment(guild_id: int, user_id: int, day: date, inc: int = 1) -> None:
    """Add `inc` to the counter of the key, creating it with `inc` when absent."""
    with connect() as con:
        con.execute(
            """
            INSERT INTO message_counts (guild_id, user_id, date, count)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(guild_id, user_id, date) DO UPDATE SET
              count = count + excluded.count
            """,
            (guild_id, user_id, day.isoformat(), inc),
        )
        con.commit()


def insert(guild_id: int, user_id: int, day: date, count: int) -> int:
    """Insert a new counter row. Raises sqlite3.IntegrityError if the key exists."""
    with connect() as con:
        cur = con.execute(
            "INSERT INTO message_counts (guild_id, user_id, date, count) VALUES (?, ?, ?, ?)",
            (guild_id, user_id, day.isoformat(), count),
        )
        con.commit()
        if cur.lastrowid is None:
            raise RuntimeError("Failed to get lastrowid for new message counter")
        return cur.lastrowid


def delete(record_id: int) -> bool:
    with connect() as con:
        cur = con.execute("DELETE FROM message_counts WHERE id = ?", (record_id,))
        con.commit()
        return cur.rowcount == 1


def sum_all(guild_id: int, start: Optional[date] = None, end: Optional[date] = None) -> List[IdCount]:
    with connect() as con:
        return sum_by_user(con, TABLE, "count", guild_id, start, end)


def sum_one(
    guild_id: int, user_id: int, start: Optional[date] = None, end: Optional[date] = None
) -> Optional[IdCount]:
    with connect() as con:
        return sum_for_user(con, TABLE, "count", guild_id, user_id, start, end)

from __future__ import annotations

import sqlite3
from datetime import date
from typing import List, NamedTuple, Optional


class IdCount(NamedTuple):
    """Aggregated counter value of one user."""
    user_id: int
    count: int


def _period_clause(start: Optional[date], end: Optional[date]) -> tuple[str, list]:
    if start is None or end is None:
        return "", []
    return " AND date BETWEEN ? AND ?", [start.isoformat(), end.isoformat()]


def sum_by_user(
    con: sqlite3.Connection,
    table: str,
    column: str,
    guild_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[IdCount]:
    """Per-user totals of a guild, largest first. Both period bounds are inclusive."""
    where, params = _period_clause(start, end)
    rows = con.execute(
        f"""
        SELECT user_id, SUM({column}) AS total
        FROM {table}
        WHERE guild_id = ?{where}
        GROUP BY user_id
        ORDER BY total DESC, user_id ASC
        """,
        (guild_id, *params),
    ).fetchall()
    return [IdCount(int(uid), int(total)) for uid, total in rows]


def sum_for_user(
    con: sqlite3.Connection,
    table: str,
    column: str,
    guild_id: int,
    user_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Optional[IdCount]:
    where, params = _period_clause(start, end)
    row = con.execute(
        f"""
        SELECT user_id, SUM({column}) AS total
        FROM {table}
        WHERE guild_id = ? AND user_id = ?{where}
        GROUP BY user_id
        """,
        (guild_id, user_id, *params),
    ).fetchone()
    if not row:
        return None
    return IdCount(int(row[0]), int(row[1]))

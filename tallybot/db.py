from __future__ import annotations

import os
import sqlite3
import logging

from . import config

log = logging.getLogger("tallybot.db")


# ----------------------------
# Path resolution
# ----------------------------
def _resolved_db_path() -> str:
    env = os.environ.get("BOT_DB_PATH")
    if env:
        return os.path.abspath(env)
    return os.path.abspath(config.BOT_DB_PATH)


# ----------------------------
# Schema
# ----------------------------
MESSAGE_COUNTS_SQL = """
CREATE TABLE IF NOT EXISTS message_counts (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    guild_id    INTEGER NOT NULL,
    user_id     INTEGER NOT NULL,
    date        TEXT NOT NULL,
    count       INTEGER NOT NULL DEFAULT 0 CHECK (count >= 0),
    UNIQUE (guild_id, user_id, date)
)
"""

VOICE_TIME_SQL = """
CREATE TABLE IF NOT EXISTS voice_time (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    guild_id    INTEGER NOT NULL,
    user_id     INTEGER NOT NULL,
    date        TEXT NOT NULL,
    seconds     INTEGER NOT NULL DEFAULT 0 CHECK (seconds >= 0 AND seconds <= 86400),
    UNIQUE (guild_id, user_id, date)
)
"""

USERS_IN_VOICES_SQL = """
CREATE TABLE IF NOT EXISTS users_in_voices (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    guild_id    INTEGER NOT NULL,
    user_id     INTEGER NOT NULL,
    entry_time  TEXT NOT NULL,
    UNIQUE (guild_id, user_id)
)
"""

INDEXES_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_message_counts_guild_date ON message_counts (guild_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_voice_time_guild_date ON voice_time (guild_id, date)",
)


# ----------------------------
# Public: connect() / ensure_db()
# ----------------------------
def connect() -> sqlite3.Connection:
    path = _resolved_db_path()
    con = sqlite3.connect(path, timeout=5)
    con.execute("PRAGMA journal_mode=WAL")
    con.execute("PRAGMA synchronous=NORMAL")
    con.execute("PRAGMA busy_timeout=3000")
    return con


def ensure_db() -> None:
    """
    Idempotently create the counter tables and the voice presence table.
    """
    path = _resolved_db_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with sqlite3.connect(path, timeout=5) as con:
        cur = con.cursor()
        cur.execute("PRAGMA journal_mode=WAL")
        journal = cur.execute("PRAGMA journal_mode").fetchone()[0]
        cur.execute("PRAGMA synchronous=NORMAL")
        cur.execute("PRAGMA busy_timeout=3000")

        try:
            size = os.stat(path).st_size
        except FileNotFoundError:
            size = 0
        log.info("db.open path=%s size=%d journal=%s", path, size, journal)

        cur.execute(MESSAGE_COUNTS_SQL)
        cur.execute(VOICE_TIME_SQL)
        cur.execute(USERS_IN_VOICES_SQL)
        for sql in INDEXES_SQL:
            cur.execute(sql)
        con.commit()

from __future__ import annotations
import os
from dateutil import tz

DATA_DIR = os.getenv("DATA_DIR", "./data")
os.makedirs(DATA_DIR, exist_ok=True)


TZ_NAME = os.getenv("TZ", "UTC")
TZ = tz.gettz(TZ_NAME)
LOCAL_TZ = TZ

BOT_DB_PATH = os.getenv("BOT_DB_PATH", os.path.join(DATA_DIR, "bot.sqlite3"))


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


STATS_COOLDOWN_SECONDS = _float_env("STATS_COOLDOWN_SECONDS", 10.0)

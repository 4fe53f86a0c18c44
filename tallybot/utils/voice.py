from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from ..models import voice_presence, voice_time
from .time import now_local, to_local

log = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class VoiceEvent:
    guild_id: int
    user_id: int
    time: datetime  # naive local wall-clock time, whole seconds
    is_leaving: bool

    @property
    def date(self) -> date:
        return self.time.date()

    @classmethod
    def at(
        cls, guild_id: int, user_id: int, is_leaving: bool, when: Optional[datetime] = None
    ) -> "VoiceEvent":
        return cls(guild_id, user_id, to_local(when or now_local()), is_leaving)


def split_by_days(entry_time: datetime, leave_time: datetime) -> List[Tuple[date, int]]:
    """
    Distribute the seconds between entry and leave over the calendar days they span.

    Every day gets at most 86400 seconds and the parts add up to the whole duration.
    A session that ends exactly at midnight belongs entirely to the day it started on.
    """
    entry_time = to_local(entry_time)
    leave_time = to_local(leave_time)
    total = int((leave_time - entry_time).total_seconds())
    if total <= 0:
        return []

    day = entry_time.date()
    next_midnight = datetime.combine(day + timedelta(days=1), time.min)
    until_midnight = int((next_midnight - entry_time).total_seconds())

    parts: List[Tuple[date, int]] = []
    while total > until_midnight:
        parts.append((day, until_midnight))
        day += timedelta(days=1)
        total -= until_midnight
        until_midnight = SECONDS_PER_DAY
    parts.append((day, total))
    return parts


def increase_or_create_count(event: VoiceEvent) -> None:
    """
    Open a session on join; on leave, close it and add its duration to the per-day counters.
    """
    if not event.is_leaving:
        created = voice_presence.open_session(event.guild_id, event.user_id, event.time)
        log.debug("voice.join %s created=%s", event, created)
        return

    entry_time = voice_presence.close_session(event.guild_id, event.user_id)
    if entry_time is None:
        # Joined before the bot started, or the presence table was cleared on restart.
        log.debug("voice.leave_unmatched %s: session time is not counted", event)
        return
    _record_voice_time_by_days(event, entry_time)


def _record_voice_time_by_days(event: VoiceEvent, entry_time: datetime) -> None:
    parts = split_by_days(entry_time, event.time)
    if not parts and event.time < to_local(entry_time):
        log.warning("voice.leave_before_entry %s entry=%s", event, entry_time.isoformat())
    for day, seconds in parts:
        voice_time.add_seconds(event.guild_id, event.user_id, day, seconds)
        log.debug("voice.counted guild=%s user=%s day=%s seconds=%d", event.guild_id, event.user_id, day, seconds)

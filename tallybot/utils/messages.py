from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..models import message_counts
from .time import now_local, to_local

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageEvent:
    guild_id: int
    user_id: int
    date: date

    @classmethod
    def at(cls, guild_id: int, user_id: int, when: Optional[datetime] = None) -> "MessageEvent":
        when = to_local(when or now_local())
        return cls(guild_id, user_id, when.date())


def increase_or_create_count(event: MessageEvent) -> None:
    """Count one observed message: +1 on the day's counter, created at 1 when absent."""
    message_counts.increment(event.guild_id, event.user_id, event.date, 1)
    log.debug("messages.counted %s", event)

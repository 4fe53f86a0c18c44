from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ..models import message_counts, voice_time
from ..models.common import IdCount
from ..strings import S
from .time import now_local, parse_day, to_local
from .users import UserResolver

log = logging.getLogger(__name__)

Period = Tuple[date, date]


class StatView(NamedTuple):
    """Display-ready row: user name and formatted value."""
    name: str
    value: str


class StatsOutcome(Enum):
    TABLE = "table"
    SINGLE = "single"
    NO_DATA = "no_data"
    USER_NOT_FOUND = "user_not_found"
    INVALID_DATE = "invalid_date"
    INVALID_PERIOD = "invalid_period"
    MISSING_DATE = "missing_date"


NOTICE_KEYS = {
    StatsOutcome.NO_DATA: "counts.notice.no_data",
    StatsOutcome.USER_NOT_FOUND: "counts.notice.user_not_found",
    StatsOutcome.INVALID_DATE: "counts.notice.invalid_date",
    StatsOutcome.INVALID_PERIOD: "counts.notice.invalid_period",
    StatsOutcome.MISSING_DATE: "counts.notice.missing_date",
}


@dataclass
class StatsRequest:
    guild_id: int
    guild_name: str
    initiator_name: str
    guild_joined_at: Optional[datetime] = None
    name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    formed_at: datetime = field(default_factory=now_local)


@dataclass
class StatsReport:
    outcome: StatsOutcome
    title: Optional[str] = None
    content: Optional[str] = None
    filename: Optional[str] = None

    @property
    def has_file(self) -> bool:
        return self.outcome in (StatsOutcome.TABLE, StatsOutcome.SINGLE)

    @property
    def notice(self) -> Optional[str]:
        key = NOTICE_KEYS.get(self.outcome)
        return S(key) if key else None


class StatsRejected(Exception):
    def __init__(self, outcome: StatsOutcome):
        super().__init__(outcome.value)
        self.outcome = outcome


# ---------- formatting ----------

def format_duration(seconds: int) -> str:
    """HH:MM:SS; the hour field is not wrapped at 24."""
    return "%02d:%02d:%02d" % (seconds // 3600, (seconds % 3600) // 60, seconds % 60)


def render_table(views: Sequence[StatView]) -> str:
    first_width = len(str(len(views))) + 3
    second_width = max(len(v.name) for v in views) + 2
    log.debug("counts.table widths first=%d second=%d", first_width, second_width)
    lines = []
    for i, view in enumerate(views, start=1):
        first = f"{i}. -".ljust(first_width, "-")
        second = f"{view.name} -".ljust(second_width, "-")
        lines.append(f"{first} {second} {view.value}\n")
    return "".join(lines)


def render_single(view: StatView) -> str:
    return f"{view.name} {view.value}\n"


def render_footer(request: StatsRequest, period: Optional[Period]) -> str:
    if period is not None:
        start, end = period[0].isoformat(), period[1].isoformat()
    else:
        joined = request.guild_joined_at
        start = to_local(joined).isoformat() if joined else "?"
        end = to_local(request.formed_at).isoformat()
    return (
        "\n"
        + S("counts.report.guild", guild=request.guild_name) + "\n"
        + S("counts.report.initiator", user=request.initiator_name) + "\n"
        + S("counts.report.period", start=start, end=end)
    )


def parse_period(start_date: str, end_date: str) -> Period:
    start = parse_day(start_date)
    end = parse_day(end_date)
    if start is None or end is None:
        raise StatsRejected(StatsOutcome.INVALID_DATE)
    if start > end:
        raise StatsRejected(StatsOutcome.INVALID_PERIOD)
    return start, end


# ---------- aggregation ----------

class CountStats:
    """
    Builds statistics reports for one metric.

    Subclasses supply the guild queries and the value format; the choice between a
    ranked guild table and a single user line is made here from the request's scope.
    """

    metric: str = ""

    def __init__(self, users: UserResolver):
        self.users = users

    def sum_all(self, guild_id: int, period: Optional[Period]) -> List[IdCount]:
        raise NotImplementedError

    def sum_one(self, guild_id: int, user_id: int, period: Optional[Period]) -> Optional[IdCount]:
        raise NotImplementedError

    def format_value(self, raw: int) -> str:
        return str(raw)

    async def show_stats(self, request: StatsRequest) -> StatsReport:
        try:
            if request.start_date is not None and request.end_date is not None:
                period = parse_period(request.start_date, request.end_date)
                if request.name is not None:
                    return self._stats_for_user(request, period)
                return await self._stats_for_guild(request, period)
            if request.start_date is not None or request.end_date is not None:
                raise StatsRejected(StatsOutcome.MISSING_DATE)
            if request.name is not None:
                return self._stats_for_user(request, None)
            return await self._stats_for_guild(request, None)
        except StatsRejected as e:
            log.debug("counts.rejected metric=%s outcome=%s", self.metric, e.outcome.value)
            return StatsReport(e.outcome)

    # ---------- internals ----------
    def _title(self, period: Optional[Period], user: Optional[str]) -> str:
        suffix = ""
        if user is not None:
            suffix += "_user"
        if period is not None:
            suffix += "_period"
        key = f"counts.{self.metric}.title" + (f".{suffix[1:]}" if suffix else "")
        start, end = period if period else (None, None)
        return S(key, user=user, start=start, end=end)

    def _filename(self, request: StatsRequest, period: Optional[Period], user: bool) -> str:
        file_title = self.metric + ("_user" if user else "") + ("_period" if period else "")
        stamp = to_local(request.formed_at).strftime("%Y-%m-%dT%H-%M-%S")
        return f"Stats_{file_title}_{stamp}.txt"

    async def _stats_for_guild(self, request: StatsRequest, period: Optional[Period]) -> StatsReport:
        rows = self.sum_all(request.guild_id, period)
        log.debug("counts.rows metric=%s guild=%s rows=%d", self.metric, request.guild_id, len(rows))
        if not rows:
            return StatsReport(StatsOutcome.NO_DATA)
        views = [
            StatView(await self.users.resolve_name(row.user_id), self.format_value(row.count))
            for row in rows
        ]
        return StatsReport(
            StatsOutcome.TABLE,
            title=self._title(period, None),
            content=render_table(views) + render_footer(request, period),
            filename=self._filename(request, period, user=False),
        )

    def _stats_for_user(self, request: StatsRequest, period: Optional[Period]) -> StatsReport:
        user_name = request.name or ""
        user_id = self.users.resolve_id(user_name)
        if user_id is None:
            raise StatsRejected(StatsOutcome.USER_NOT_FOUND)
        row = self.sum_one(request.guild_id, user_id, period)
        log.debug("counts.row metric=%s guild=%s found=%s", self.metric, request.guild_id, row is not None)
        if row is None:
            return StatsReport(StatsOutcome.NO_DATA)
        view = StatView(user_name, self.format_value(row.count))
        return StatsReport(
            StatsOutcome.SINGLE,
            title=self._title(period, user_name),
            content=render_single(view) + render_footer(request, period),
            filename=self._filename(request, period, user=True),
        )


class MessageStats(CountStats):
    metric = "messages"

    def sum_all(self, guild_id: int, period: Optional[Period]) -> List[IdCount]:
        start, end = period if period else (None, None)
        return message_counts.sum_all(guild_id, start, end)

    def sum_one(self, guild_id: int, user_id: int, period: Optional[Period]) -> Optional[IdCount]:
        start, end = period if period else (None, None)
        return message_counts.sum_one(guild_id, user_id, start, end)


class VoiceTimeStats(CountStats):
    metric = "voice_time"

    def sum_all(self, guild_id: int, period: Optional[Period]) -> List[IdCount]:
        start, end = period if period else (None, None)
        return voice_time.sum_all(guild_id, start, end)

    def sum_one(self, guild_id: int, user_id: int, period: Optional[Period]) -> Optional[IdCount]:
        start, end = period if period else (None, None)
        return voice_time.sum_one(guild_id, user_id, start, end)

    def format_value(self, raw: int) -> str:
        return format_duration(raw)

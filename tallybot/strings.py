from __future__ import annotations
from typing import Any


def _pick_template(key: str) -> str:
    return _STRINGS.get(key) or key


def S(key: str, /, **fmt: Any) -> str:
    """Lookup + format. Safe on format errors."""
    template = _pick_template(key)
    try:
        return template.format(**fmt) if fmt else template
    except Exception:
        return template


# ===============================================================
# String table
# ===============================================================

_STRINGS: dict[str, str] = {
    # ---------------- Common ----------------
    "common.guild_only": "This command can only be used in a server.",
    "common.error_generic": "Something went wrong. Try again or ping a moderator.",
    "common.cooldown": "Stats commands can be used at most once every {seconds} seconds.",
    "common.cooldown.title": "Warning",
    # ---------------- Info ----------------
    "info.title": "Info",
    "info.field.messages": "/stats-messages",
    "info.field.messages.value": "Number of messages sent",
    "info.field.voices": "/stats-voices",
    "info.field.voices.value": "Time spent in voice channels",
    "info.field.params": "Command parameters",
    "info.field.params.value": (
        'Fill in "name" to get the stats of a single user\n'
        'Fill in both "start-date" and "end-date" to get the stats of a period\n'
        'Date format: "2024-01-31", both boundary days are included in the period\n'
    ),
    # ---------------- Counts: notices ----------------
    "counts.notice.user_not_found": "User not found",
    "counts.notice.missing_date": "One of the dates is missing",
    "counts.notice.invalid_date": "Invalid date format. Example of a valid date: 2024-01-31",
    "counts.notice.invalid_period": "The start date must not be later than the end date",
    "counts.notice.no_data": "No data",
    "counts.notice.started": "Statistics generation has started",
    # ---------------- Counts: titles ----------------
    "counts.messages.title": "Message count statistics",
    "counts.messages.title.user": "Message count statistics for {user}",
    "counts.messages.title.period": "Message count statistics for the period {start} - {end}",
    "counts.messages.title.user_period": "Message count statistics for {user} for the period {start} - {end}",
    "counts.voice_time.title": "Voice channel time statistics",
    "counts.voice_time.title.user": "Voice channel time statistics for {user}",
    "counts.voice_time.title.period": "Voice channel time statistics for the period {start} - {end}",
    "counts.voice_time.title.user_period": "Voice channel time statistics for {user} for the period {start} - {end}",
    # ---------------- Counts: report footer ----------------
    "counts.report.guild": "Guild: {guild}",
    "counts.report.initiator": "Initiator: {user}",
    "counts.report.period": "Period: {start} - {end}",
    # ---------------- Commands ----------------
    "counts.cmd.messages": "Show statistics on the number of messages sent.",
    "counts.cmd.voices": "Show statistics on time spent in voice channels.",
    "counts.cmd.info": "Show how to use the statistics commands.",
    "counts.arg.name": "Unique user name to show stats for",
    "counts.arg.start_date": "First day of the period, e.g. 2024-01-31",
    "counts.arg.end_date": "Last day of the period, e.g. 2024-02-29",
}
